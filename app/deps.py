# app/deps.py
from fastapi import Depends, Request

from app.db.database import Database
from app.db.quiz import QuizStore
from app.db.stats import StatsStore


def get_database(request: Request) -> Database:
  return request.app.state.db


def get_stats_store(db: Database = Depends(get_database)) -> StatsStore:
  return StatsStore(db)


def get_quiz_store(db: Database = Depends(get_database)) -> QuizStore:
  return QuizStore(db)
