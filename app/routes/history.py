# app/routes/history.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import MAX_SLUG_LEN, MAX_LIST_ITEMS
from app.deps import get_stats_store
from app.db.stats import StatsStore
from app.errors import FilterValidationError, StoreError
from app.models import HistoryResponse
from app.services.filters import resolve_filters
from app.services.latest import apply_latest

router = APIRouter(prefix="/api", tags=["history"])

log = logging.getLogger("history")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[HIST] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


@router.get("/champion-history", response_model=HistoryResponse)
async def champion_history(
    slug: Optional[str] = None,
    rank: Optional[str] = Query(None, description="comma-separated, at most 10"),
    lane: Optional[str] = Query(None, description="comma-separated, at most 10"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, overrides from/to"),
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    latest: Optional[str] = Query(None, description="'1' or 'true': latest date of the slice"),
    store: StatsStore = Depends(get_stats_store),
):
  """
  Example:
    /api/champion-history?slug=ahri&rank=diamondPlus,masterPlus&lane=mid&latest=1
  """
  try:
    flt = resolve_filters(
      {"slug": slug, "rank": rank, "lane": lane, "date": date, "from": from_, "to": to, "latest": latest},
      max_slug_len=MAX_SLUG_LEN,
      max_list_items=MAX_LIST_ITEMS,
    )
  except FilterValidationError as e:
    raise HTTPException(400, str(e))

  try:
    resolved = await apply_latest(store, flt)
    items = []
    if resolved is not None:
      items = await store.query_history(
        slug=resolved.slug,
        ranks=resolved.ranks,
        lanes=resolved.lanes,
        date_from=resolved.date_from,
        date_to=resolved.date_to,
      )
  except StoreError:
    log.exception("champion-history failed, filters=%s", flt.echo())
    raise HTTPException(500, "Internal Server Error")

  return {
    "filters": (resolved or flt).echo(),
    "count": len(items),
    "items": items,
  }
