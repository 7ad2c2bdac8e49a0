import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.config import DATABASE_URL, DB_ECHO, CORS_ORIGINS
from app.db.database import Database
from app.routes.champions import router as champions_router
from app.routes.history import router as history_router
from app.routes.tierlist import router as tierlist_router
from app.routes.quiz import router as quiz_router
from app.routes.webapp import router as webapp_router

print("[Startup] Python:", sys.executable)
print("[Startup] CORS origins:", ", ".join(CORS_ORIGINS) or "(none)")


@asynccontextmanager
async def lifespan(app: FastAPI):
  db = Database(DATABASE_URL, echo=DB_ECHO)
  await db.initialize()
  app.state.db = db
  try:
    yield
  finally:
    await db.close()


app = FastAPI(title="WR Stats API", lifespan=lifespan)

app.add_middleware(
  CORSMiddleware,
  allow_origins=CORS_ORIGINS,
  allow_methods=["GET", "POST", "OPTIONS"],
  allow_headers=["Content-Type", "Authorization", "x-telegram-init-data"],
)

#health check
@app.get("/api/health", response_class=PlainTextResponse)
async def health():
  return "ok"

#register API routes
app.include_router(champions_router)
app.include_router(history_router)
app.include_router(tierlist_router)
app.include_router(quiz_router)
app.include_router(webapp_router)
