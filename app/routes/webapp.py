# app/routes/webapp.py
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_database
from app.db.database import Database
from app.db.webapp import log_webapp_open
from app.errors import StoreError
from app.models import WebappOpenIn

router = APIRouter(prefix="/api", tags=["webapp"])

log = logging.getLogger("webapp")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[WA] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)

MAX_NAME_LEN = 64


def _tg_id(v: Any) -> Optional[int]:
  if isinstance(v, bool):
    return None
  if isinstance(v, float) and v.is_integer():
    v = int(v)
  if isinstance(v, str) and v.strip().isdigit():
    v = int(v.strip())
  return v if isinstance(v, int) and v > 0 else None


def _short(v: Any) -> Optional[str]:
  return v if isinstance(v, str) and len(v) <= MAX_NAME_LEN else None


@router.post("/webapp-open")
async def webapp_open(body: WebappOpenIn, db: Database = Depends(get_database)):
  tg_id = _tg_id(body.tgId)
  if tg_id is None:
    raise HTTPException(400, "Invalid tgId")
  try:
    await log_webapp_open(
      db,
      tg_id,
      username=_short(body.username),
      first_name=_short(body.firstName),
      last_name=_short(body.lastName),
    )
  except StoreError:
    log.exception("webapp-open failed, tgId=%s", tg_id)
    raise HTTPException(500, "Internal Server Error")
  return {"ok": True}
