"""Configuration management for SkillSwap matching."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

# Default paths
DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_SETTINGS_PATH = DATA_DIR / "settings.yaml"
LOG_PATH = DATA_DIR / "skillswap.log"
DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'skillswap.db'}"

DATABASE_URL_ENV = "SKILLSWAP_DATABASE_URL"


class MatchSettings(BaseModel):
    """Tunable parameters of the matching pipeline."""

    min_score: int = Field(20, description="Matches scoring at or below this are discarded")
    max_matches_per_user: int = Field(
        2, ge=1, description="Most matches a single candidate may occupy"
    )
    activity_window_days: int = Field(
        30, ge=1, description="Look-back window for activity and response time"
    )
    database_url: str = Field(DEFAULT_DATABASE_URL, description="SQLAlchemy database URL")


def ensure_data_dir() -> None:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def load_settings(path: Optional[Path] = None) -> MatchSettings:
    """Load match settings from a YAML file.

    Args:
        path: Optional path to the settings file. Defaults to data/settings.yaml.

    Returns:
        MatchSettings instance. Defaults are used for a missing or empty file.
        The SKILLSWAP_DATABASE_URL environment variable overrides the
        database URL.
    """
    if path is None:
        path = DEFAULT_SETTINGS_PATH

    data = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    database_url = os.environ.get(DATABASE_URL_ENV)
    if database_url:
        data["database_url"] = database_url

    return MatchSettings.model_validate(data)


def save_settings(settings: MatchSettings, path: Optional[Path] = None) -> Path:
    """Save match settings to a YAML file.

    Args:
        settings: MatchSettings instance to save.
        path: Optional path to save to. Defaults to data/settings.yaml.

    Returns:
        Path where settings were saved.
    """
    if path is None:
        path = DEFAULT_SETTINGS_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return path
