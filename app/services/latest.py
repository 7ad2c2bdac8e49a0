# app/services/latest.py
from datetime import date
from typing import Optional

from app.services.filters import StatsFilter


async def resolve_latest(store, flt: StatsFilter) -> Optional[date]:
  """
  Most recent date present for the slug/rank/lane slice of `flt`.
  Date bounds are ignored; None when the slice is empty.
  """
  return await store.max_date(slug=flt.slug, ranks=flt.ranks, lanes=flt.lanes)


def wants_latest(flt: StatsFilter) -> bool:
  # explicit dates always win over "latest"
  return flt.want_latest and not flt.has_dates


async def apply_latest(store, flt: StatsFilter) -> Optional[StatsFilter]:
  """
  Filter to query with. Returns `flt` untouched unless latest resolution
  applies; then the slice pinned to its latest day, or None if nothing matches.
  """
  if not wants_latest(flt):
    return flt
  day = await resolve_latest(store, flt)
  if day is None:
    return None
  return flt.pinned(day)
