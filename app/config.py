import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./wr_stats.db")
DB_ECHO = os.getenv("DB_ECHO", "").strip() == "1"

# Localization
DEFAULT_LANG = os.getenv("DEFAULT_LANG", "ru_ru")
FALLBACK_LANG = "en_us"

# Tier list defaults (rank: overall / diamondPlus / masterPlus / king / peak, lane: mid / top / adc / support / jungle)
DEFAULT_RANK = "diamondPlus"
DEFAULT_LANE = "top"

# Query param limits
MAX_SLUG_LEN = 64
MAX_LIST_ITEMS = 10

# Telegram WebApp / quiz
TG_BOT_TOKEN = os.getenv("TG_BOT_TOKEN", "")
QUIZ_KEY = os.getenv("QUIZ_KEY", "lol_quiz")
QUIZ_MAX_ATTEMPTS = int(os.getenv("QUIZ_MAX_ATTEMPTS", "3"))
QUIZ_REWARD_URL = os.getenv("QUIZ_REWARD_URL", "")

# CORS allowlist
_DEFAULT_ORIGINS = ",".join([
  "https://wildriftallstats.ru",
  "https://wildriftchampions-data.vercel.app",
  "http://localhost:3000",
  "https://web.telegram.org",
  "https://gektorquiz.vercel.app",
])
CORS_ORIGINS = [
  o.strip()
  for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",")
  if o.strip()
]
