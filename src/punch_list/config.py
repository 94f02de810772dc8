# src/punch_list/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (server, client and console).
- Settings are passed explicitly; get_settings() is only the default source.
- The client base URL also honours VITE_BASE_URL for parity with the web build.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

ENV_PREFIX = "PUNCH"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- HTTP server ----
    host: str
    port: int
    greeting: str
    cors_origins: List[str]

    # ---- HTTP client ----
    base_url: str
    http_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "punch-list") or "punch-list"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/punch_list"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "database.sqlite3")

        host = _env(_k("HOST"), "127.0.0.1").strip() or "127.0.0.1"
        port = _env_int(_k("PORT"), 3000)
        greeting = _env(_k("GREETING"), "Hello, Tasks.")
        cors_origins = _env_list(_k("CORS_ORIGINS"), ["*"])

        default_base_url = f"http://{host}:{port}"
        base_url = (
            _first_env(_k("BASE_URL"), "VITE_BASE_URL", default=default_base_url)
            or default_base_url
        ).strip().rstrip("/")
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            host=host,
            port=port,
            greeting=greeting,
            cors_origins=cors_origins,
            base_url=base_url,
            http_timeout_seconds=http_timeout_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
