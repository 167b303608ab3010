from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from .logging_config import get_logger

logger = get_logger("settings")

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PORT: listening port (default 3000)
    - HOST: bind address (default '0.0.0.0')
    - APP_ENV: environment name; falls back to NODE_ENV, then 'development'
    - LOG_LEVEL: root log level (default 'INFO')
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    port: int
    host: str
    environment: str
    log_level: str
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_port(value: str, default: int = DEFAULT_PORT) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        logger.warning("Invalid PORT value '%s'; defaulting to %s", value, default)
        return default
    if not 0 < port < 65536:
        logger.warning("PORT %s out of range; defaulting to %s", port, default)
        return default
    return port


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """Read settings from the current environment."""
    environment = _get_env("APP_ENV", _get_env("NODE_ENV", "development")).strip().lower()

    return Settings(
        port=_parse_port(_get_env("PORT", str(DEFAULT_PORT))),
        host=_get_env("HOST", "0.0.0.0").strip(),
        environment=environment,
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )


# PUBLIC_INTERFACE
@lru_cache
def get_settings() -> Settings:
    """Return application settings, read once per process."""
    return load_settings()
