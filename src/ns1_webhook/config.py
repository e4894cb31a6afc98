"""Configuration loading and validation from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Process configuration loaded from environment variables."""

    group_name: str
    log_level: str = _DEFAULT_LOG_LEVEL


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def load_config() -> AppConfig:
    """Load and validate process configuration from environment variables."""
    group_name = _require_env("GROUP_NAME")

    log_level = os.environ.get("LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got: {log_level!r}")

    return AppConfig(group_name=group_name, log_level=log_level)
