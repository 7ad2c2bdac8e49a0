# app/seed.py
"""
Load champions and daily stats rows from a YAML file into the store.

  python -m app.seed fixtures.yaml [--database-url sqlite:///./wr_stats.db]

File layout (every key optional):

  champions:
    - slug: ahri
      cnHeroId: "10103"
      nameLocalizations: {en_us: Ahri, ru_ru: Ари}
      roles: [mage]
      icon: https://...
  history:
    - {date: 2025-01-02, slug: ahri, cnHeroId: "10103", rank: diamondPlus,
       lane: mid, position: 1, winRate: 52.1, pickRate: 8.4, banRate: 3.0,
       strengthLevel: 0}

Rows are upserted on (date, slug, rank, lane); champions on slug.
Multi-document files are merged.
"""
import argparse
import asyncio
import logging
from typing import Any, Dict

import yaml

from app.config import DATABASE_URL
from app.db.database import Database
from app.db.stats import StatsStore

log = logging.getLogger("seed")
if not log.handlers:
  logging.basicConfig(level=logging.INFO, format="[SEED] %(message)s")


def read_fixture(path: str) -> Dict[str, Any]:
  with open(path, "r", encoding="utf-8") as f:
    docs = [d for d in yaml.safe_load_all(f) if isinstance(d, dict)]
  merged: Dict[str, Any] = {"champions": [], "history": []}
  for d in docs:
    merged["champions"].extend(d.get("champions") or [])
    merged["history"].extend(d.get("history") or [])
  return merged


async def seed(db: Database, data: Dict[str, Any]) -> Dict[str, int]:
  store = StatsStore(db)
  champs = await store.upsert_champions(data.get("champions") or [])
  rows = await store.upsert_rows(data.get("history") or [])
  return {"champions": champs, "history": rows}


async def _run(path: str, url: str) -> None:
  db = Database(url)
  await db.initialize()
  try:
    counts = await seed(db, read_fixture(path))
  finally:
    await db.close()
  log.info("upserted %d champions, %d history rows", counts["champions"], counts["history"])


def main(argv=None) -> None:
  ap = argparse.ArgumentParser(description="Seed the stats store from a YAML file")
  ap.add_argument("path")
  ap.add_argument("--database-url", default=DATABASE_URL)
  args = ap.parse_args(argv)
  asyncio.run(_run(args.path, args.database_url))


if __name__ == "__main__":
  main()
