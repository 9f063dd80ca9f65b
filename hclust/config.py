"""Configuration helpers for the hclust clustering engine."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = PROJECT_ROOT / ".env"

# Load environment variables early so downstream modules can rely on them.
load_dotenv(ENV_PATH, override=False)

DEFAULT_LINKAGE_ENV = "HCLUST_DEFAULT_LINKAGE"
ON_REUSE_ENV = "HCLUST_ON_REUSE"
LOG_DIR_ENV = "HCLUST_LOG_DIR"
LOG_LEVEL_ENV = "HCLUST_LOG_LEVEL"

DEFAULT_LINKAGE = "single"
DEFAULT_ON_REUSE = "reset"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_LEVEL = "INFO"

REUSE_POLICIES = ("reset", "reject")


@dataclass(frozen=True)
class ClusteringSettings:
    """Defaults applied when callers do not pick a linkage or reuse policy."""

    linkage: str
    on_reuse: str


@dataclass(frozen=True)
class LoggingSettings:
    """Where and how verbosely the engine logs."""

    log_dir: Path
    level: int


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def get_clustering_settings() -> ClusteringSettings:
    """Resolve clustering defaults from environment with sensible fallbacks."""

    linkage = _get_env(DEFAULT_LINKAGE_ENV, DEFAULT_LINKAGE).strip().lower()
    on_reuse = _get_env(ON_REUSE_ENV, DEFAULT_ON_REUSE).strip().lower()
    if on_reuse not in REUSE_POLICIES:
        raise RuntimeError(
            f"{ON_REUSE_ENV} must be one of {', '.join(REUSE_POLICIES)}; received '{on_reuse}'."
        )
    return ClusteringSettings(linkage=linkage, on_reuse=on_reuse)


def get_logging_settings() -> LoggingSettings:
    """Resolve log directory and level from environment."""

    raw_dir = _get_env(LOG_DIR_ENV, str(DEFAULT_LOG_DIR))
    log_dir = Path(raw_dir).expanduser().resolve()
    raw_level = _get_env(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw_level)
    if not isinstance(level, int):
        raise RuntimeError(f"{LOG_LEVEL_ENV} must be a logging level name; received '{raw_level}'.")
    return LoggingSettings(log_dir=log_dir, level=level)
