"""Load settings and env configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobmatch.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = PROJECT_ROOT / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"

DEFAULT_SETTINGS: dict[str, Any] = {
    # Quality floor applied by the candidate-facing search.
    "min_company_rating": 3.5,
    # Window used by the "recent only" search filter.
    "recent_days": 30,
    # Thread pool size for source fetches during a sync.
    "max_workers": 4,
    "sources": [],
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings(path: Path | str | None = None) -> dict[str, Any]:
    """Return DEFAULT_SETTINGS overlaid with the YAML settings file.

    The file is looked up from *path*, then ``JOBMATCH_SETTINGS``, then
    ``config/settings.yaml``. A missing file is not an error.
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)

    if path is None:
        env_path = get_env("JOBMATCH_SETTINGS")
        path = Path(env_path) if env_path else SETTINGS_PATH
    path = Path(path)

    if not path.exists():
        log.debug("No settings file at %s — using defaults", path)
        return settings

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    settings.update(data)
    settings["sources"] = list(settings.get("sources") or [])
    log.debug("Loaded settings from %s (%d source(s))", path, len(settings["sources"]))
    return settings


def resolve_path(value: str | Path) -> Path:
    """Resolve a settings path; relative paths are anchored at the project root."""
    p = Path(value).expanduser()
    return p if p.is_absolute() else PROJECT_ROOT / p
