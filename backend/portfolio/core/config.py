from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel


# Load .env files without overriding variables already present in the environment.
# backend/.env wins over the repository-root .env.
_backend_env = Path(__file__).resolve().parents[2] / ".env"
_root_env = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=str(_backend_env), override=False)
load_dotenv(dotenv_path=str(_root_env), override=False)

APP_NAME = "Portfolio Media API"


def _load_version() -> str:
    """Read the semantic version from the repository VERSION file."""
    version_file = Path(__file__).resolve().parents[3] / "VERSION"
    try:
        return version_file.read_text(encoding="utf-8").strip()
    except FileNotFoundError:  # pragma: no cover - only when the VERSION file is missing
        return "0.0.0"


def _split_csv(value: str | None) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


class Settings(BaseModel):
    # Name and version come from code, not environment
    app_name: str = APP_NAME
    version: str = _load_version()

    # CORS for the Next.js front end
    cors_origins: List[str] = _split_csv(os.environ.get("CORS_ORIGINS")) or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    database_url: str = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./portfolio.db")

    # Video metadata enrichment (oEmbed / Vimeo API)
    metadata_timeout: float = _float_env("METADATA_TIMEOUT", 5.0)
    youtube_title_cache_seconds: int = _int_env("YOUTUBE_TITLE_CACHE_SECONDS", 3600)
    # METADATA_FETCH_DISABLED=1 (env only) turns off outbound calls, see utils.metadata

    # Seconds before a player that never signalled load is treated as failed
    player_load_timeout: float = _float_env("PLAYER_LOAD_TIMEOUT", 5.0)

    log_buffer_max_lines: int = _int_env("LOG_BUFFER_MAX_LINES", 200)


settings = Settings()
