# app/services/quiz.py
from typing import Any, Dict, Optional

REASON_ATTEMPTS_LIMIT = "ATTEMPTS_LIMIT"
REASON_NOT_100_PERCENT = "NOT_100_PERCENT"


def safe_int(v: Any) -> Optional[int]:
  """Numbers (or numeric strings) -> int; anything else -> None."""
  if v is None or isinstance(v, bool):
    return None
  try:
    n = float(v)
  except (TypeError, ValueError):
    return None
  if n != n or n in (float("inf"), float("-inf")):
    return None
  return int(n)


def reward_eligibility(attempts: int, last_percent: Optional[int], limit: int) -> Dict[str, Any]:
  """
  The limit-th attempt still qualifies when perfect; only attempts strictly
  above the limit are disqualified.
  """
  if last_percent == 100 and attempts <= limit:
    return {"allowed": True, "reason": None}
  if attempts > limit:
    return {"allowed": False, "reason": REASON_ATTEMPTS_LIMIT}
  return {"allowed": False, "reason": REASON_NOT_100_PERCENT}


class QuizProgressTracker:
  """Per-user attempt counter for one quiz, backed by a QuizStore."""

  def __init__(self, store, quiz_key: str = "lol_quiz", max_attempts: int = 3):
    self.store = store
    self.quiz_key = quiz_key
    self.max_attempts = max_attempts

  def _blocked(self, attempts: int) -> bool:
    return attempts >= self.max_attempts

  async def status(self, user_id: int) -> Dict[str, Any]:
    row = await self.store.get(user_id, self.quiz_key) or {}
    attempts = row.get("attempts", 0)
    return {
      "userId": user_id,
      "quizKey": self.quiz_key,
      "attempts": attempts,
      "maxAttempts": self.max_attempts,
      "blocked": self._blocked(attempts),
      "last": {
        "percent": row.get("lastPercent"),
        "correct": row.get("lastCorrect"),
        "total": row.get("lastTotal"),
      },
    }

  async def attempt(self, user_id: int, correct: Any, total: Any, percent: Any) -> Dict[str, Any]:
    """Record one attempt; a blocked user gets the current state back unchanged."""
    saved_values = {
      "percent": safe_int(percent),
      "correct": safe_int(correct),
      "total": safe_int(total),
    }
    row, saved = await self.store.record_attempt(
      user_id,
      self.quiz_key,
      self.max_attempts,
      correct=saved_values["correct"],
      total=saved_values["total"],
      percent=saved_values["percent"],
    )
    row = row or {}
    attempts = row.get("attempts", 0)
    return {
      "userId": user_id,
      "quizKey": self.quiz_key,
      "attempts": attempts,
      "maxAttempts": self.max_attempts,
      "blocked": self._blocked(attempts),
      "recorded": saved,
      "saved": saved_values if saved else {
        "percent": row.get("lastPercent"),
        "correct": row.get("lastCorrect"),
        "total": row.get("lastTotal"),
      },
    }

  async def reward(self, user_id: int, url: Optional[str]) -> Dict[str, Any]:
    row = await self.store.get(user_id, self.quiz_key) or {}
    attempts = row.get("attempts", 0)
    verdict = reward_eligibility(attempts, row.get("lastPercent"), self.max_attempts)
    return {
      "allowed": verdict["allowed"],
      "url": url if verdict["allowed"] else None,
      "reason": verdict["reason"],
      "attempts": attempts,
      "maxAttempts": self.max_attempts,
    }
