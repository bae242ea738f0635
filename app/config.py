import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./pencraft.db")
SQL_ECHO = _env_bool("SQL_ECHO", "false")

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "4320"))  # 3 days

FRONTEND_ORIGINS = [
    o.strip()
    for o in os.getenv("FRONTEND_URL", "*").split(",")
    if o.strip()
] or ["*"]

RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", "true")
AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "5/minute")

SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", "true")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Fixed list served by /api/categories
CATEGORIES = [
    "Fiction",
    "Science Fiction",
    "Fantasy",
    "Mystery",
    "Poetry",
    "Essays",
    "Memoir",
]
