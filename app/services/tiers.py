# app/services/tiers.py
"""
Tier list computation.

Pure functions over plain dict rows (the shape `StatsStore` returns) and the
champion catalog. No I/O here: same inputs, same output.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.config import FALLBACK_LANG

TIERS_ORDER = ["S+", "S", "A", "B", "C", "D"]

# lower strength level = stronger
STRENGTH_TO_TIER = {0: "S+", 1: "S", 2: "A", 3: "B", 4: "C", 5: "D"}
DEFAULT_TIER = "C"


def strength_to_tier(level: Any) -> str:
  # bool is an int subclass; True/False are not strength levels
  if isinstance(level, bool) or not isinstance(level, (int, float)):
    return DEFAULT_TIER
  if isinstance(level, float):
    if not level.is_integer():
      return DEFAULT_TIER
    level = int(level)
  return STRENGTH_TO_TIER.get(level, DEFAULT_TIER)


def empty_tiers() -> Dict[str, List[dict]]:
  return {t: [] for t in TIERS_ORDER}


def display_name(champ: Optional[Mapping[str, Any]], slug: str, lang: str) -> str:
  if not champ:
    return slug
  loc = champ.get("nameLocalizations") or {}
  return loc.get(lang) or loc.get(FALLBACK_LANG) or champ.get("name") or slug


def index_catalog(catalog: Iterable[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
  out = {}
  for ch in catalog or []:
    if ch and ch.get("slug"):
      out[ch["slug"]] = ch
  return out


def _entry(row: Mapping[str, Any], champ: Optional[Mapping[str, Any]], lang: str) -> dict:
  slug = row["slug"]
  return {
    "slug": slug,
    "cnHeroId": row.get("cnHeroId"),
    "displayName": display_name(champ, slug, lang),
    "icon": (champ or {}).get("icon") or None,
    "rank": row["rank"],
    "lane": row["lane"],
    "date": row.get("date"),
    "position": row.get("position"),
    "winRate": row.get("winRate"),
    "pickRate": row.get("pickRate"),
    "banRate": row.get("banRate"),
    "strengthLevel": row.get("strengthLevel"),
  }


def _rate(v: Any) -> float:
  # null and non-numeric rates sort as 0
  if isinstance(v, bool) or not isinstance(v, (int, float)) or v != v:
    return 0
  return v


def _sort_key(e: dict):
  return (-_rate(e.get("winRate")), -_rate(e.get("pickRate")))


def _sorted(tiers: Dict[str, List[dict]]) -> Dict[str, List[dict]]:
  # sorted() is stable: full ties keep encounter order
  return {t: sorted(tiers[t], key=_sort_key) for t in TIERS_ORDER}


def _valid(row: Any) -> bool:
  if not isinstance(row, Mapping):
    return False
  return bool(row.get("slug")) and bool(row.get("rank")) and bool(row.get("lane"))


def compute_tiers(
    rows: Iterable[Mapping[str, Any]],
    catalog: Iterable[Mapping[str, Any]],
    lang: str,
) -> Dict[str, List[dict]]:
  """Single bucket: tier label -> ordered leaderboard entries."""
  by_slug = index_catalog(catalog)
  tiers = empty_tiers()
  for row in rows or []:
    if not _valid(row):
      continue
    tier = strength_to_tier(row.get("strengthLevel"))
    tiers[tier].append(_entry(row, by_slug.get(row["slug"]), lang))
  return _sorted(tiers)


def bucket_key(rank: str, lane: str) -> str:
  return f"{rank}|{lane}"


def compute_tiers_by_rank_lane(
    rows: Iterable[Mapping[str, Any]],
    catalog: Iterable[Mapping[str, Any]],
    lang: str,
) -> Dict[str, dict]:
  """Bulk view: "rank|lane" -> {rank, lane, tiers}."""
  by_slug = index_catalog(catalog)
  buckets: Dict[str, dict] = {}
  for row in rows or []:
    if not _valid(row):
      continue
    key = bucket_key(row["rank"], row["lane"])
    bucket = buckets.get(key)
    if bucket is None:
      bucket = buckets[key] = {"rank": row["rank"], "lane": row["lane"], "tiers": empty_tiers()}
    tier = strength_to_tier(row.get("strengthLevel"))
    bucket["tiers"][tier].append(_entry(row, by_slug.get(row["slug"]), lang))

  for bucket in buckets.values():
    bucket["tiers"] = _sorted(bucket["tiers"])
  return buckets
