import asyncio

import pytest
from fastapi.testclient import TestClient

from app.db.database import Database
from app.db.stats import StatsStore
from app.deps import get_database
from app.main import app

CHAMPIONS = [
  {
    "slug": "ahri",
    "cnHeroId": "10103",
    "name": "Ahri",
    "nameLocalizations": {"en_us": "Ahri", "ru_ru": "Ари"},
    "roles": ["mage"],
    "rolesLocalizations": {"en_us": ["Mage"], "ru_ru": ["Маг"]},
    "difficulty": "medium",
    "difficultyLocalizations": {"en_us": "Medium"},
    "icon": "https://cdn.example/ahri.png",
  },
  {
    "slug": "garen",
    "cnHeroId": "10001",
    "nameLocalizations": {"en_us": "Garen"},
    "roles": ["fighter"],
    "difficulty": "easy",
  },
]


def _row(day, slug, rank, lane, level, wr, pr, cn="1"):
  return {
    "date": day, "slug": slug, "cnHeroId": cn, "rank": rank, "lane": lane,
    "position": 1, "winRate": wr, "pickRate": pr, "banRate": 1.0, "strengthLevel": level,
  }


HISTORY = [
  _row("2025-01-01", "ahri", "diamondPlus", "mid", 1, 50.0, 7.0, "10103"),
  _row("2025-01-02", "ahri", "diamondPlus", "mid", 0, 53.0, 8.0, "10103"),
  _row("2025-01-02", "zed", "diamondPlus", "mid", 0, 55.0, 4.0, "10107"),
  _row("2025-01-02", "garen", "diamondPlus", "top", 3, 51.0, 6.0, "10001"),
  _row("2025-01-03", "garen", "masterPlus", "top", None, 49.0, 2.0, "10001"),
]


def run(coro):
  return asyncio.run(coro)


@pytest.fixture
def db(tmp_path):
  database = Database(f"sqlite:///{tmp_path / 'stats.db'}")
  run(database.initialize())
  yield database
  run(database.close())


@pytest.fixture
def seeded_db(db):
  store = StatsStore(db)
  run(store.upsert_champions(CHAMPIONS))
  run(store.upsert_rows(HISTORY))
  return db


@pytest.fixture
def client(seeded_db):
  app.dependency_overrides[get_database] = lambda: seeded_db
  try:
    yield TestClient(app)
  finally:
    app.dependency_overrides.clear()
