"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "metro")
DB_USER: str = os.getenv("DB_USER", "metro")
DB_PASS: str = os.getenv("DB_PASS", "metro")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Docker ────────────────────────────────────────────────
USE_DOCKER: bool = _env_flag("USE_DOCKER", "true")
POSTGRES_IMAGE: str = os.getenv("POSTGRES_IMAGE", "postgres:16-alpine")
CONTAINER_STARTUP_TIMEOUT_SECONDS: int = int(os.getenv("CONTAINER_STARTUP_TIMEOUT_SECONDS", "30"))

# ── Runner ────────────────────────────────────────────────
RUN_TIMEOUT_SECONDS: int = int(os.getenv("RUN_TIMEOUT_SECONDS", "60"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
