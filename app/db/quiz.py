# app/db/quiz.py
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.db.database import Database
from app.db.models import QuizAttempt
from app.db.stats import store_errors
from app.errors import StoreError


def _progress(row: QuizAttempt) -> dict:
  return {
    "userId": row.telegram_user_id,
    "quizKey": row.quiz_key,
    "attempts": row.attempts or 0,
    "lastPercent": row.last_percent,
    "lastCorrect": row.last_correct,
    "lastTotal": row.last_total,
    "updatedAt": row.updated_at.isoformat() if row.updated_at else None,
  }


class QuizStore:
  def __init__(self, db: Database):
    self.db = db

  @staticmethod
  def _row_query(user_id: int, quiz_key: str):
    return select(QuizAttempt).where(
      QuizAttempt.telegram_user_id == user_id,
      QuizAttempt.quiz_key == quiz_key,
    )

  async def get(self, user_id: int, quiz_key: str) -> Optional[dict]:
    async with store_errors("quiz.get"):
      async with self.db.get_session() as session:
        row = (await session.execute(self._row_query(user_id, quiz_key))).scalar_one_or_none()
        return _progress(row) if row else None

  async def record_attempt(
      self,
      user_id: int,
      quiz_key: str,
      limit: int,
      *,
      correct: Optional[int],
      total: Optional[int],
      percent: Optional[int],
  ) -> Tuple[Optional[dict], bool]:
    """
    Count one attempt unless the user already reached `limit`.

    The increment is a single conditional UPDATE (attempts < limit), so two
    concurrent submissions can never both read the same counter. The first
    attempt is an INSERT; losing that insert race to another request trips
    the unique constraint and the conditional update runs again.

    Returns (progress, saved). `progress` is None only when there is no row
    and nothing was recorded.
    """
    # one retry: only for the first-attempt insert race
    for _ in range(2):
      try:
        return await self._record_once(user_id, quiz_key, limit, correct, total, percent)
      except IntegrityError:
        continue
      except SQLAlchemyError as e:
        raise StoreError("quiz.record_attempt failed") from e
    raise StoreError("quiz.record_attempt: could not settle concurrent first attempt")

  async def _record_once(self, user_id, quiz_key, limit, correct, total, percent):
    now = datetime.now(timezone.utc)
    async with self.db.transaction() as session:
      res = await session.execute(
        update(QuizAttempt)
        .where(
          QuizAttempt.telegram_user_id == user_id,
          QuizAttempt.quiz_key == quiz_key,
          QuizAttempt.attempts < limit,
        )
        .values(
          attempts=QuizAttempt.attempts + 1,
          last_percent=percent,
          last_correct=correct,
          last_total=total,
          updated_at=now,
        )
        .execution_options(synchronize_session=False)
      )
      saved = res.rowcount == 1

      if not saved:
        existing = (await session.execute(self._row_query(user_id, quiz_key))).scalar_one_or_none()
        if existing is None:
          if limit < 1:
            return None, False
          session.add(QuizAttempt(
            telegram_user_id=user_id,
            quiz_key=quiz_key,
            attempts=1,
            last_percent=percent,
            last_correct=correct,
            last_total=total,
            created_at=now,
            updated_at=now,
          ))
          await session.flush()
          saved = True

      row = (await session.execute(
        self._row_query(user_id, quiz_key).execution_options(populate_existing=True)
      )).scalar_one()
      return _progress(row), saved
