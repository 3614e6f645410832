from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv


def project_root() -> Path:
    # waypoint/infra/settings.py -> waypoint/infra -> waypoint -> project root
    return Path(__file__).resolve().parents[2]


def load_env_file() -> None:
    """Load `<project root>/.env` if present; real environment variables win."""

    env_path = project_root() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def get_data_dir() -> Path:
    raw = os.environ.get("WAYPOINT_DATA_DIR", "").strip()
    return Path(raw) if raw else project_root() / "data"


def get_log_level() -> int:
    name = os.environ.get("WAYPOINT_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
