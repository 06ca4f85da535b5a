"""Environment helpers for the kline CLI."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

TRUTHY = ("true", "1", "yes")


def load_project_env(env_file: str | Path = ".env") -> None:
    """Load .env file if present (idempotent)."""

    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in TRUTHY
