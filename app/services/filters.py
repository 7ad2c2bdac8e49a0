# app/services/filters.py
import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from app.config import MAX_LIST_ITEMS, MAX_SLUG_LEN
from app.errors import FilterValidationError

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TRUTHY = ("1", "true")


class StatsFilter(BaseModel):
  slug: Optional[str] = None
  ranks: Optional[List[str]] = None
  lanes: Optional[List[str]] = None
  date_from: Optional[date] = None
  date_to: Optional[date] = None
  want_latest: bool = False

  @property
  def has_dates(self) -> bool:
    return self.date_from is not None or self.date_to is not None

  def pinned(self, day: date) -> "StatsFilter":
    """Same slice collapsed to a single day."""
    return self.model_copy(update={"date_from": day, "date_to": day})

  def echo(self) -> Dict[str, Any]:
    frm = self.date_from.isoformat() if self.date_from else None
    to = self.date_to.isoformat() if self.date_to else None
    return {
      "slug": self.slug,
      "rank": self.ranks,
      "lane": self.lanes,
      "from": frm,
      # a lone lower bound is echoed as a single day
      "to": to or frm,
      "latest": self.want_latest,
    }


def _text(v: Any) -> str:
  if v is None:
    return ""
  return v.strip() if isinstance(v, str) else str(v).strip()


def parse_date(param: str, value: Any) -> Optional[date]:
  """Strict YYYY-MM-DD; blank means absent."""
  s = _text(value)
  if not s:
    return None
  if not _DATE_RE.fullmatch(s):
    raise FilterValidationError(param, f"expected YYYY-MM-DD, got {s!r}")
  try:
    return date.fromisoformat(s)
  except ValueError:
    raise FilterValidationError(param, f"not a calendar date: {s!r}")


def parse_list(param: str, value: Any, max_items: int = MAX_LIST_ITEMS) -> Optional[List[str]]:
  items = [p.strip() for p in _text(value).split(",")]
  items = [p for p in items if p]
  if len(items) > max_items:
    raise FilterValidationError(param, f"at most {max_items} comma-separated values allowed, got {len(items)}")
  return items or None


def parse_slug(value: Any, max_len: int = MAX_SLUG_LEN) -> Optional[str]:
  s = _text(value)
  if len(s) > max_len:
    raise FilterValidationError("slug", f"must be at most {max_len} characters")
  return s or None


def parse_flag(value: Any) -> bool:
  return _text(value) in _TRUTHY


def resolve_filters(
    params: Mapping[str, Any],
    *,
    max_slug_len: int = MAX_SLUG_LEN,
    max_list_items: int = MAX_LIST_ITEMS,
) -> StatsFilter:
  """
  Validate raw query params into a StatsFilter.

  `date` wins over `from`/`to` entirely. Nothing here touches the store, so a
  FilterValidationError always means no query was issued.
  """
  slug = parse_slug(params.get("slug"), max_slug_len)
  ranks = parse_list("rank", params.get("rank"), max_list_items)
  lanes = parse_list("lane", params.get("lane"), max_list_items)

  day = parse_date("date", params.get("date"))
  if day is not None:
    date_from = date_to = day
  else:
    date_from = parse_date("from", params.get("from"))
    date_to = parse_date("to", params.get("to"))

  return StatsFilter(
    slug=slug,
    ranks=ranks,
    lanes=lanes,
    date_from=date_from,
    date_to=date_to,
    want_latest=parse_flag(params.get("latest")),
  )
