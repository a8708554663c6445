"""Environment configuration loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when configuration values are invalid."""


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Config:
    disable_colors: bool = False
    rpc_url: str = "http://seed1.neo.org:10332"
    log_level: int = logging.WARNING


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def load_config() -> Config:
    """Load configuration from environment variables (and a .env file).

    NO_COLOR (any non-empty value) also disables colors.
    Raises ConfigError if DUMPNEF_LOG_LEVEL is not a logging level name.
    """
    load_dotenv()

    raw_level = os.environ.get("DUMPNEF_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(raw_level)
    if not isinstance(level, int):
        raise ConfigError(f"Invalid DUMPNEF_LOG_LEVEL: {raw_level}")

    return Config(
        disable_colors=_env_flag("DUMPNEF_DISABLE_COLORS")
        or bool(os.environ.get("NO_COLOR")),
        rpc_url=os.environ.get("DUMPNEF_RPC_URL", "http://seed1.neo.org:10332"),
        log_level=level,
    )
