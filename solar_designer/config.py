from __future__ import annotations

import os
from pathlib import Path
from typing import Dict


def _load_dotenv(path: str = ".env") -> Dict[str, str]:
    """
    Minimal .env loader that populates os.environ without overriding values
    already present in the environment.

    Returns a mapping of parsed key/value pairs.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    parsed: Dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)
        parsed[key] = value
    return parsed


_load_dotenv()


def get_database_url() -> str:
    """
    Determine the SQLAlchemy database URL.

    ``SOLAR_DESIGNER_DSN`` wins when set (e.g. a PostgreSQL DSN); otherwise a
    SQLite file at ``SOLAR_DESIGNER_DB_PATH`` (default ``solar_designer.db``
    relative to the working directory) is used.

    Returns:
        Database connection string compatible with SQLAlchemy.
    """
    dsn = os.getenv("SOLAR_DESIGNER_DSN")
    if dsn:
        return dsn

    db_path = Path(os.getenv("SOLAR_DESIGNER_DB_PATH", "solar_designer.db")).expanduser()
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{db_path}"


def get_log_level() -> str:
    """Log level name from ``SOLAR_DESIGNER_LOG_LEVEL`` (default ``INFO``)."""
    return os.getenv("SOLAR_DESIGNER_LOG_LEVEL", "INFO").upper()


def get_results_root() -> Path:
    """Directory where exported run artifacts are written."""
    return Path(os.getenv("SOLAR_DESIGNER_RESULTS_DIR", "results")).expanduser()
