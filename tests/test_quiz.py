import asyncio

import pytest

from app.db.quiz import QuizStore
from app.services.quiz import (
  QuizProgressTracker,
  REASON_ATTEMPTS_LIMIT,
  REASON_NOT_100_PERCENT,
  reward_eligibility,
  safe_int,
)

from conftest import run

LIMIT = 3
USER = 4242


@pytest.fixture
def tracker(db):
  return QuizProgressTracker(QuizStore(db), quiz_key="lol_quiz", max_attempts=LIMIT)


def test_reward_boundaries():
  assert reward_eligibility(LIMIT, 100, LIMIT) == {"allowed": True, "reason": None}
  assert reward_eligibility(LIMIT + 1, 100, LIMIT) == {"allowed": False, "reason": REASON_ATTEMPTS_LIMIT}
  assert reward_eligibility(1, 99, LIMIT) == {"allowed": False, "reason": REASON_NOT_100_PERCENT}
  assert reward_eligibility(0, None, LIMIT)["reason"] == REASON_NOT_100_PERCENT


@pytest.mark.parametrize("raw,expected", [(5, 5), ("7", 7), (99.0, 99), ("x", None), (None, None), (True, None), (float("nan"), None)])
def test_safe_int(raw, expected):
  assert safe_int(raw) == expected


def test_status_for_new_user(tracker):
  st = run(tracker.status(USER))
  assert st["attempts"] == 0
  assert st["maxAttempts"] == LIMIT
  assert st["blocked"] is False
  assert st["last"] == {"percent": None, "correct": None, "total": None}


def test_attempts_count_and_keep_only_last_result(tracker):
  first = run(tracker.attempt(USER, 3, 10, 30))
  assert first["attempts"] == 1
  assert first["blocked"] is False
  assert first["saved"] == {"percent": 30, "correct": 3, "total": 10}

  second = run(tracker.attempt(USER, 10, 10, 100))
  assert second["attempts"] == 2

  st = run(tracker.status(USER))
  assert st["last"] == {"percent": 100, "correct": 10, "total": 10}


def test_attempt_at_limit_is_noop(tracker):
  for _ in range(LIMIT):
    run(tracker.attempt(USER, 10, 10, 100))
  st = run(tracker.status(USER))
  assert st["attempts"] == LIMIT
  assert st["blocked"] is True

  out = run(tracker.attempt(USER, 0, 10, 0))
  assert out["attempts"] == LIMIT
  assert out["blocked"] is True
  assert out["recorded"] is False
  # stored result untouched
  assert out["saved"]["percent"] == 100
  assert run(tracker.status(USER))["last"]["percent"] == 100


def test_perfect_limit_attempt_is_rewarded(tracker):
  run(tracker.attempt(USER, 1, 10, 10))
  run(tracker.attempt(USER, 5, 10, 50))
  run(tracker.attempt(USER, 10, 10, 100))
  out = run(tracker.reward(USER, "https://t.me/+secret"))
  assert out["allowed"] is True
  assert out["url"] == "https://t.me/+secret"
  assert out["reason"] is None


def test_imperfect_last_attempt_is_not_rewarded(tracker):
  run(tracker.attempt(USER, 10, 10, 100))
  run(tracker.attempt(USER, 9, 10, 90))
  out = run(tracker.reward(USER, "https://t.me/+secret"))
  assert out["allowed"] is False
  assert out["url"] is None
  assert out["reason"] == REASON_NOT_100_PERCENT


def test_no_attempts_is_not_rewarded(tracker):
  out = run(tracker.reward(USER, "https://t.me/+secret"))
  assert out == {
    "allowed": False, "url": None, "reason": REASON_NOT_100_PERCENT,
    "attempts": 0, "maxAttempts": LIMIT,
  }


def test_quizzes_and_users_are_independent(db):
  store = QuizStore(db)
  a = QuizProgressTracker(store, quiz_key="a", max_attempts=1)
  b = QuizProgressTracker(store, quiz_key="b", max_attempts=1)
  run(a.attempt(USER, 1, 1, 100))
  assert run(a.status(USER))["blocked"] is True
  assert run(b.status(USER))["attempts"] == 0
  assert run(a.status(USER + 1))["attempts"] == 0


def test_lowered_limit_reports_attempts_limit(db):
  store = QuizStore(db)
  run(QuizProgressTracker(store, max_attempts=3).attempt(USER, 10, 10, 100))
  run(QuizProgressTracker(store, max_attempts=3).attempt(USER, 10, 10, 100))
  out = run(QuizProgressTracker(store, max_attempts=1).reward(USER, "u"))
  assert out["allowed"] is False
  assert out["reason"] == REASON_ATTEMPTS_LIMIT


def test_store_never_counts_past_limit(db):
  store = QuizStore(db)
  results = [run(store.record_attempt(USER, "k", 2, correct=1, total=1, percent=100)) for _ in range(4)]
  assert [saved for _, saved in results] == [True, True, False, False]
  assert [row["attempts"] for row, _ in results] == [1, 2, 2, 2]


def _burst(tracker, user, n):
  async def go():
    return await asyncio.gather(*[tracker.attempt(user, 1, 1, 100) for _ in range(n)])
  return run(go())


def test_concurrent_first_attempts_never_pass_limit(tracker):
  results = _burst(tracker, USER, 6)
  assert sum(1 for r in results if r["recorded"]) == LIMIT
  assert all(r["attempts"] <= LIMIT for r in results)
  assert run(tracker.status(USER))["attempts"] == LIMIT


def test_concurrent_increments_on_existing_row(tracker):
  run(tracker.attempt(USER, 0, 1, 0))
  results = _burst(tracker, USER, 6)
  assert sum(1 for r in results if r["recorded"]) == LIMIT - 1
  st = run(tracker.status(USER))
  assert st["attempts"] == LIMIT
  assert st["blocked"] is True
  assert st["last"]["percent"] == 100
