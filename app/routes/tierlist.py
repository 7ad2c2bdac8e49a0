# app/routes/tierlist.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import DEFAULT_LANG, DEFAULT_RANK, DEFAULT_LANE, MAX_LIST_ITEMS
from app.deps import get_stats_store
from app.db.stats import StatsStore
from app.errors import FilterValidationError, StoreError
from app.models import TierListResponse, BulkTierListResponse
from app.services.filters import StatsFilter, resolve_filters
from app.services.latest import apply_latest
from app.services.tiers import TIERS_ORDER, compute_tiers, compute_tiers_by_rank_lane

router = APIRouter(prefix="/api", tags=["tierlist"])

log = logging.getLogger("tierlist")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[TL] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


def _lang(lang: Optional[str]) -> str:
  return lang.strip() if lang and lang.strip() else DEFAULT_LANG


def _day_filter(rank, lane, date) -> StatsFilter:
  """A tier list is always one day: the given `date`, else the latest of the slice."""
  try:
    return resolve_filters(
      {"rank": rank, "lane": lane, "date": date, "latest": "1"},
      max_list_items=MAX_LIST_ITEMS,
    )
  except FilterValidationError as e:
    raise HTTPException(400, str(e))


async def _rows_for_day(store: StatsStore, flt: StatsFilter):
  """(day, rows, catalog); day is None when the slice has no data."""
  resolved = await apply_latest(store, flt)
  if resolved is None:
    return None, [], []
  day = resolved.date_from
  rows = await store.rows_for_day(day, ranks=resolved.ranks, lanes=resolved.lanes)
  catalog = await store.list_champions() if rows else []
  return day, rows, catalog


@router.get("/tierlist", response_model=TierListResponse)
async def tierlist(
    rank: Optional[str] = Query(None, description=f"single rank, default {DEFAULT_RANK}"),
    lane: Optional[str] = Query(None, description=f"single lane, default {DEFAULT_LANE}"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD; latest available when omitted"),
    lang: Optional[str] = None,
    store: StatsStore = Depends(get_stats_store),
):
  """
  Example:
    /api/tierlist?rank=masterPlus&lane=jungle&lang=en_us
  """
  rank_key = rank.strip() if rank and rank.strip() else DEFAULT_RANK
  lane_key = lane.strip() if lane and lane.strip() else DEFAULT_LANE
  if "," in rank_key or "," in lane_key:
    raise HTTPException(400, "tierlist takes a single rank and lane; use /api/tierlist-bulk for several")
  language = _lang(lang)

  flt = _day_filter(rank_key, lane_key, date)
  try:
    day, rows, catalog = await _rows_for_day(store, flt)
  except StoreError:
    log.exception("tierlist failed, rank=%s lane=%s date=%s", rank_key, lane_key, date)
    raise HTTPException(500, "Internal Server Error")

  return {
    "filters": {
      "rank": rank_key,
      "lane": lane_key,
      "date": day.isoformat() if day else None,
      "lang": language,
    },
    "tiersOrder": TIERS_ORDER,
    "tiers": compute_tiers(rows, catalog, language),
  }


@router.get("/tierlist-bulk", response_model=BulkTierListResponse)
async def tierlist_bulk(
    rank: Optional[str] = Query(None, description="comma-separated, at most 10; all when omitted"),
    lane: Optional[str] = Query(None, description="comma-separated, at most 10; all when omitted"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD; latest available when omitted"),
    lang: Optional[str] = None,
    store: StatsStore = Depends(get_stats_store),
):
  """
  Every rank|lane bucket for one day.
  Example:
    /api/tierlist-bulk?lang=en_us
  """
  language = _lang(lang)
  flt = _day_filter(rank, lane, date)
  try:
    day, rows, catalog = await _rows_for_day(store, flt)
  except StoreError:
    log.exception("tierlist-bulk failed, filters=%s", flt.echo())
    raise HTTPException(500, "Internal Server Error")

  return {
    "filters": {
      "rank": flt.ranks,
      "lane": flt.lanes,
      "date": day.isoformat() if day else None,
      "lang": language,
    },
    "tiersOrder": TIERS_ORDER,
    "tiersByRankLane": compute_tiers_by_rank_lane(rows, catalog, language),
  }


@router.get("/updated-at")
async def updated_at(store: StatsStore = Depends(get_stats_store)):
  try:
    last = await store.max_date()
  except StoreError:
    log.exception("updated-at failed")
    raise HTTPException(500, "Internal Server Error")
  return {"updatedAt": last.isoformat() if last else None}
