# app/db/stats.py
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from app.db.database import Database
from app.db.models import Champion, ChampionStatsHistory
from app.errors import StoreError

# camelCase wire name -> column attribute
_STATS_FIELDS = {
  "position": "position",
  "winRate": "win_rate",
  "pickRate": "pick_rate",
  "banRate": "ban_rate",
  "strengthLevel": "strength_level",
}

_CHAMPION_FIELDS = {
  "cnHeroId": "cn_hero_id",
  "name": "name",
  "nameLocalizations": "name_localizations",
  "roles": "roles",
  "rolesLocalizations": "roles_localizations",
  "difficulty": "difficulty",
  "difficultyLocalizations": "difficulty_localizations",
  "icon": "icon",
}


@asynccontextmanager
async def store_errors(op: str):
  try:
    yield
  except SQLAlchemyError as e:
    raise StoreError(f"{op} failed") from e


def _as_date(v: Any) -> date:
  return v if isinstance(v, date) else date.fromisoformat(str(v))


def _hero_id(v: Any) -> Optional[str]:
  # numeric ids from YAML/JSON are stored as text; blank means unknown
  if v is None or str(v).strip() == "":
    return None
  return str(v).strip()


def _slice(query, slug: Optional[str], ranks: Optional[List[str]], lanes: Optional[List[str]]):
  if slug:
    query = query.where(ChampionStatsHistory.slug == slug)
  if ranks:
    query = query.where(ChampionStatsHistory.rank.in_(ranks))
  if lanes:
    query = query.where(ChampionStatsHistory.lane.in_(lanes))
  return query


class StatsStore:
  def __init__(self, db: Database):
    self.db = db

  async def query_history(
      self,
      *,
      slug: Optional[str] = None,
      ranks: Optional[List[str]] = None,
      lanes: Optional[List[str]] = None,
      date_from: Optional[date] = None,
      date_to: Optional[date] = None,
  ) -> List[dict]:
    """Rows of the slice within [date_from, date_to], ordered by date, slug, rank, lane."""
    q = _slice(select(ChampionStatsHistory), slug, ranks, lanes)
    if date_from is not None:
      q = q.where(ChampionStatsHistory.date >= date_from)
    if date_to is not None:
      q = q.where(ChampionStatsHistory.date <= date_to)
    q = q.order_by(
      ChampionStatsHistory.date,
      ChampionStatsHistory.slug,
      ChampionStatsHistory.rank,
      ChampionStatsHistory.lane,
    )
    async with store_errors("query_history"):
      async with self.db.get_session() as session:
        result = await session.execute(q)
        return [r.to_dict() for r in result.scalars().all()]

  async def max_date(
      self,
      *,
      slug: Optional[str] = None,
      ranks: Optional[List[str]] = None,
      lanes: Optional[List[str]] = None,
  ) -> Optional[date]:
    q = _slice(select(func.max(ChampionStatsHistory.date)), slug, ranks, lanes)
    async with store_errors("max_date"):
      async with self.db.get_session() as session:
        value = (await session.execute(q)).scalar()
    if value is None:
      return None
    return _as_date(value)

  async def rows_for_day(
      self,
      day: date,
      *,
      ranks: Optional[List[str]] = None,
      lanes: Optional[List[str]] = None,
  ) -> List[dict]:
    q = _slice(select(ChampionStatsHistory), None, ranks, lanes)
    q = q.where(ChampionStatsHistory.date == day).order_by(
      ChampionStatsHistory.rank,
      ChampionStatsHistory.lane,
      ChampionStatsHistory.slug,
    )
    async with store_errors("rows_for_day"):
      async with self.db.get_session() as session:
        result = await session.execute(q)
        return [r.to_dict() for r in result.scalars().all()]

  async def upsert_rows(self, rows: Iterable[Dict[str, Any]]) -> int:
    """Insert or replace rows keyed by (date, slug, rank, lane)."""
    n = 0
    async with store_errors("upsert_rows"):
      async with self.db.transaction() as session:
        for row in rows:
          day = _as_date(row["date"])
          existing = (await session.execute(
            select(ChampionStatsHistory).where(
              ChampionStatsHistory.date == day,
              ChampionStatsHistory.slug == row["slug"],
              ChampionStatsHistory.rank == row["rank"],
              ChampionStatsHistory.lane == row["lane"],
            )
          )).scalar_one_or_none()
          if existing is None:
            existing = ChampionStatsHistory(date=day, slug=row["slug"], rank=row["rank"], lane=row["lane"])
            session.add(existing)
          for key, attr in _STATS_FIELDS.items():
            setattr(existing, attr, row.get(key))
          existing.cn_hero_id = _hero_id(row.get("cnHeroId"))
          n += 1
    return n

  # ---------- champion catalog ----------
  async def list_champions(self) -> List[dict]:
    async with store_errors("list_champions"):
      async with self.db.get_session() as session:
        result = await session.execute(select(Champion).order_by(Champion.slug))
        return [c.to_dict() for c in result.scalars().all()]

  async def upsert_champions(self, records: Iterable[Dict[str, Any]]) -> int:
    n = 0
    async with store_errors("upsert_champions"):
      async with self.db.transaction() as session:
        for rec in records:
          ch = await session.get(Champion, rec["slug"])
          if ch is None:
            ch = Champion(slug=rec["slug"])
            session.add(ch)
          for key, attr in _CHAMPION_FIELDS.items():
            if key in rec:
              setattr(ch, attr, rec[key])
          ch.cn_hero_id = _hero_id(ch.cn_hero_id)
          n += 1
    return n
