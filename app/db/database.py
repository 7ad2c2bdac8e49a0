# app/db/database.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.db.models import Base

log = logging.getLogger("db")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[DB] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


def async_url(url: str) -> str:
  """Rewrite a sync sqlite URL to the aiosqlite driver; other URLs pass through."""
  if url.startswith("sqlite:///"):
    return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
  return url


class Database:
  def __init__(self, url: str, echo: bool = False):
    self.url = async_url(url)
    self.echo = echo
    self.engine = None
    self.async_session: Optional[async_sessionmaker] = None

  async def initialize(self):
    """Create the engine, session factory and any missing tables."""
    log.info("Initializing database (%s)", self.url.split(":", 1)[0])

    kwargs = {"echo": self.echo}
    if self.url.startswith("sqlite"):
      # one connection per session; sqlite connections are not shared across loops
      kwargs["poolclass"] = NullPool
    self.engine = create_async_engine(self.url, **kwargs)
    self.async_session = async_sessionmaker(
      self.engine,
      class_=AsyncSession,
      expire_on_commit=False,
    )

    async with self.engine.begin() as conn:
      await conn.run_sync(Base.metadata.create_all)

  @asynccontextmanager
  async def get_session(self):
    """Read session; rolls back on error."""
    async with self.async_session() as session:
      try:
        yield session
      except Exception:
        await session.rollback()
        raise

  @asynccontextmanager
  async def transaction(self):
    """
    Session committed on clean exit, rolled back when the block raises.
    Exceptions must propagate out of the block for the rollback to happen.
    """
    async with self.async_session() as session:
      try:
        yield session
        await session.commit()
      except Exception:
        await session.rollback()
        raise

  async def close(self):
    if self.engine is not None:
      await self.engine.dispose()
      self.engine = None
      log.info("Database connection closed")
