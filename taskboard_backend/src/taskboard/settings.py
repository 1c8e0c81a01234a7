from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - MONGODB_URL: MongoDB connection string (legacy name 'mongoDbUrl' is also read)
    - MONGODB_DB_NAME: database to use when the URL does not name one. Default 'taskboard'
    - MONGODB_TIMEOUT_MS: server selection timeout for the start-up ping. Default 5000
    - HEALTH_TIMEOUT_MS: bound on the ping run by each health check. Default 1000
    - HOST / PORT: listen address. Default 0.0.0.0:4000
    - LOG_LEVEL: root log level name. Default INFO
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    mongodb_url: str
    mongodb_db_name: str
    mongodb_timeout_ms: int
    health_timeout_ms: int
    host: str
    port: int
    log_level: int
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    # getLevelName returns "Level X" strings for unknown names
    return level if isinstance(level, int) else logging.INFO


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables (and .env if present)."""
    # .env is looked up from the working directory; real env vars win
    load_dotenv(find_dotenv(usecwd=True))

    url = _get_env("MONGODB_URL", _get_env("mongoDbUrl", "mongodb://localhost:27017/taskboard")).strip()

    return Settings(
        mongodb_url=url,
        mongodb_db_name=_get_env("MONGODB_DB_NAME", "taskboard").strip(),
        mongodb_timeout_ms=_parse_int(_get_env("MONGODB_TIMEOUT_MS", "5000"), 5000),
        health_timeout_ms=_parse_int(_get_env("HEALTH_TIMEOUT_MS", "1000"), 1000),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "4000"), 4000),
        log_level=_parse_log_level(_get_env("LOG_LEVEL", "INFO")),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
