"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Backend selection ─────────────────────────────────────
# 'postgres' for the shared database, 'sqlite' for a local file.
DB_BACKEND: str = os.getenv("DB_BACKEND", "postgres").strip().lower()

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "projects")
DB_USER: str = os.getenv("DB_USER", "projects")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── SQLite ────────────────────────────────────────────────
SQLITE_PATH: str = os.getenv("SQLITE_PATH", "projects.db")

# ── Schema ────────────────────────────────────────────────
AUTO_INIT_SCHEMA: bool = os.getenv("AUTO_INIT_SCHEMA", "true").strip().lower() in ("1", "true", "yes")

# ── Export ────────────────────────────────────────────────
EXPORT_DIR: str = os.getenv("EXPORT_DIR", ".")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
