from datetime import date

from app.db.stats import StatsStore
from app.seed import read_fixture, seed

from conftest import run

FIXTURE = """
champions:
  - slug: ahri
    cnHeroId: 10103
    nameLocalizations: {en_us: Ahri, ru_ru: Ари}
history:
  - {date: 2025-01-02, slug: ahri, cnHeroId: 10103, rank: king, lane: mid, winRate: 51.5, strengthLevel: 1}
---
history:
  - {date: 2025-01-02, slug: ahri, cnHeroId: 10103, rank: king, lane: mid, winRate: 53.0, strengthLevel: 0}
  - {date: 2025-01-03, slug: ahri, rank: king, lane: mid}
"""


def test_seed_merges_documents_and_upserts(db, tmp_path):
  path = tmp_path / "fixture.yaml"
  path.write_text(FIXTURE, encoding="utf-8")

  data = read_fixture(str(path))
  assert len(data["champions"]) == 1
  assert len(data["history"]) == 3

  counts = run(seed(db, data))
  assert counts == {"champions": 1, "history": 3}

  store = StatsStore(db)
  rows = run(store.query_history(slug="ahri"))
  # same (date, slug, rank, lane) replaced in place
  assert [(r["date"], r["winRate"]) for r in rows] == [("2025-01-02", 53.0), ("2025-01-03", None)]
  assert rows[0]["cnHeroId"] == "10103"
  assert rows[1]["cnHeroId"] is None
  assert run(store.max_date(ranks=["king"])) == date(2025, 1, 3)

  champs = run(store.list_champions())
  assert champs[0]["nameLocalizations"]["ru_ru"] == "Ари"
  assert champs[0]["cnHeroId"] == "10103"


def test_reseeding_is_idempotent(db, tmp_path):
  path = tmp_path / "fixture.yaml"
  path.write_text(FIXTURE, encoding="utf-8")
  run(seed(db, read_fixture(str(path))))
  run(seed(db, read_fixture(str(path))))
  assert len(run(StatsStore(db).query_history())) == 2
