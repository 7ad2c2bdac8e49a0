# app/routes/quiz.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from app.config import TG_BOT_TOKEN, QUIZ_KEY, QUIZ_MAX_ATTEMPTS, QUIZ_REWARD_URL
from app.deps import get_quiz_store
from app.db.quiz import QuizStore
from app.errors import StoreError
from app.models import QuizAttemptIn
from app.services.quiz import QuizProgressTracker
from app.util.telegram import verify_init_data, extract_user_id

router = APIRouter(prefix="/api/quiz", tags=["quiz"])

log = logging.getLogger("quiz")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[QUIZ] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)

INIT_DATA_HEADER = "x-telegram-init-data"


def _telegram_user(init_data: Optional[str]) -> int:
  ver = verify_init_data(init_data, TG_BOT_TOKEN)
  if not ver["ok"]:
    raise HTTPException(401, {"error": "Unauthorized", "reason": ver["reason"]})
  user_id = extract_user_id(init_data)
  if user_id is None:
    raise HTTPException(400, {"error": "Bad Request", "reason": "no_user_id"})
  return user_id


def _tracker(store: QuizStore) -> QuizProgressTracker:
  return QuizProgressTracker(store, quiz_key=QUIZ_KEY, max_attempts=QUIZ_MAX_ATTEMPTS)


@router.get("/status")
async def quiz_status(
    init_data: Optional[str] = Header(None, alias=INIT_DATA_HEADER),
    store: QuizStore = Depends(get_quiz_store),
):
  user_id = _telegram_user(init_data)
  try:
    return await _tracker(store).status(user_id)
  except StoreError:
    log.exception("status failed, user=%s", user_id)
    raise HTTPException(500, "Internal Server Error")


@router.post("/attempt")
async def quiz_attempt(
    body: QuizAttemptIn,
    init_data: Optional[str] = Header(None, alias=INIT_DATA_HEADER),
    store: QuizStore = Depends(get_quiz_store),
):
  user_id = _telegram_user(init_data)
  try:
    out = await _tracker(store).attempt(user_id, body.correct, body.total, body.percent)
  except StoreError:
    log.exception("attempt failed, user=%s", user_id)
    raise HTTPException(500, "Internal Server Error")
  if not out["recorded"]:
    log.info("attempt ignored, user=%s already at %s/%s", user_id, out["attempts"], out["maxAttempts"])
  return out


@router.get("/reward")
async def quiz_reward(
    init_data: Optional[str] = Header(None, alias=INIT_DATA_HEADER),
    store: QuizStore = Depends(get_quiz_store),
):
  user_id = _telegram_user(init_data)
  try:
    out = await _tracker(store).reward(user_id, QUIZ_REWARD_URL or None)
  except StoreError:
    log.exception("reward failed, user=%s", user_id)
    raise HTTPException(500, "Internal Server Error")
  if out["allowed"] and not out["url"]:
    log.error("QUIZ_REWARD_URL is not configured")
    raise HTTPException(500, "Missing QUIZ_REWARD_URL")
  return out
