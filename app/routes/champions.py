# app/routes/champions.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.config import DEFAULT_LANG, FALLBACK_LANG
from app.deps import get_stats_store
from app.db.stats import StatsStore
from app.errors import StoreError
from app.models import ChampionOut

router = APIRouter(prefix="/api", tags=["champions"])

log = logging.getLogger("champions")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[CH] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


def _localized(loc: dict, lang: str, default=None):
  v = loc.get(lang)
  if v is None:
    v = loc.get(FALLBACK_LANG)
  return default if v is None else v


def champion_out(ch: dict, lang: str) -> dict:
  names = ch.get("nameLocalizations") or {}
  return {
    "slug": ch["slug"],
    "name": _localized(names, lang),
    "nameLocalizations": names,
    "roles": ch.get("roles") or [],
    "rolesLocalized": _localized(ch.get("rolesLocalizations") or {}, lang, []),
    "difficulty": ch.get("difficulty"),
    "difficultyLocalized": _localized(ch.get("difficultyLocalizations") or {}, lang),
    "icon": ch.get("icon") or None,
    "ids": {"slug": ch["slug"], "cnHeroId": ch.get("cnHeroId")},
  }


@router.get("/champions", response_model=List[ChampionOut])
async def champions(lang: Optional[str] = None, store: StatsStore = Depends(get_stats_store)):
  language = lang.strip() if lang and lang.strip() else DEFAULT_LANG
  try:
    rows = await store.list_champions()
  except StoreError:
    log.exception("champions failed")
    raise HTTPException(500, "Internal Server Error")
  return [champion_out(ch, language) for ch in rows]
