# app/db/models.py
from sqlalchemy import (
  Column, Integer, BigInteger, String, Text, Date, DateTime, Float, JSON,
  UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Champion(Base):
  __tablename__ = "champions"

  slug = Column(Text, primary_key=True)
  cn_hero_id = Column(Text, nullable=True)
  name = Column(Text, nullable=True)
  name_localizations = Column(JSON, nullable=True)
  roles = Column(JSON, nullable=True)
  roles_localizations = Column(JSON, nullable=True)
  difficulty = Column(Text, nullable=True)
  difficulty_localizations = Column(JSON, nullable=True)
  icon = Column(Text, nullable=True)

  def to_dict(self) -> dict:
    return {
      "slug": self.slug,
      "cnHeroId": self.cn_hero_id,
      "name": self.name,
      "nameLocalizations": self.name_localizations or {},
      "roles": self.roles or [],
      "rolesLocalizations": self.roles_localizations or {},
      "difficulty": self.difficulty,
      "difficultyLocalizations": self.difficulty_localizations or {},
      "icon": self.icon,
    }

  def __repr__(self):
    return f"<Champion(slug='{self.slug}')>"


class ChampionStatsHistory(Base):
  __tablename__ = "champion_stats_history"
  __table_args__ = (
    UniqueConstraint("date", "slug", "rank", "lane", name="uq_stats_day_slug_rank_lane"),
  )

  id = Column(Integer, primary_key=True, autoincrement=True)
  date = Column(Date, nullable=False, index=True)
  slug = Column(Text, nullable=False, index=True)
  cn_hero_id = Column(Text, nullable=True)
  rank = Column(Text, nullable=False)   # overall / diamondPlus / masterPlus / king / peak
  lane = Column(Text, nullable=False)   # mid / top / adc / support / jungle
  position = Column(Integer, nullable=True)
  win_rate = Column(Float, nullable=True)
  pick_rate = Column(Float, nullable=True)
  ban_rate = Column(Float, nullable=True)
  strength_level = Column(Integer, nullable=True)
  created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

  def to_dict(self) -> dict:
    return {
      "date": self.date.isoformat() if self.date else None,
      "slug": self.slug,
      "cnHeroId": self.cn_hero_id,
      "rank": self.rank,
      "lane": self.lane,
      "position": self.position,
      "winRate": self.win_rate,
      "pickRate": self.pick_rate,
      "banRate": self.ban_rate,
      "strengthLevel": self.strength_level,
    }


class QuizAttempt(Base):
  """One row per (telegram user, quiz)."""
  __tablename__ = "quiz_attempts"
  __table_args__ = (
    UniqueConstraint("telegram_user_id", "quiz_key", name="uq_quiz_user_key"),
  )

  id = Column(Integer, primary_key=True, autoincrement=True)
  telegram_user_id = Column(BigInteger, nullable=False)
  quiz_key = Column(String(64), nullable=False, default="lol_quiz")
  attempts = Column(Integer, nullable=False, default=0)
  last_percent = Column(Integer, nullable=True)
  last_correct = Column(Integer, nullable=True)
  last_total = Column(Integer, nullable=True)
  created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
  updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class WebappOpen(Base):
  __tablename__ = "webapp_opens"

  id = Column(Integer, primary_key=True, autoincrement=True)
  tg_id = Column(BigInteger, nullable=False)
  username = Column(Text, nullable=True)
  first_name = Column(Text, nullable=True)
  last_name = Column(Text, nullable=True)
  opened_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
