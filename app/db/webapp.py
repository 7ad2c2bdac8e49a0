# app/db/webapp.py
from typing import Optional

from app.db.database import Database
from app.db.models import WebappOpen
from app.db.stats import store_errors


async def log_webapp_open(
    db: Database,
    tg_id: int,
    username: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> None:
  async with store_errors("log_webapp_open"):
    async with db.transaction() as session:
      session.add(WebappOpen(
        tg_id=tg_id,
        username=username,
        first_name=first_name,
        last_name=last_name,
      ))
