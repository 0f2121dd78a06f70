from typing import Any, Callable

from .base import JobSource
from .file import YamlFileSource
from .remotive import RemotiveSource

from jobmatch.config import resolve_path
from jobmatch.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSource", "YamlFileSource", "RemotiveSource", "get_sources"]


def get_sources(settings: dict[str, Any], env_getter: Callable[[str], str]) -> list[JobSource]:
    """Build the sources listed under ``sources`` in the settings."""
    sources: list[JobSource] = []
    remote_disabled = env_getter("JOBMATCH_DISABLE_REMOTE").lower() in ("1", "true", "yes")

    for entry in settings.get("sources", []):
        kind = (entry.get("type") or "").lower()
        interval = entry.get("refresh_interval_hours", 6)

        if kind == "file":
            path = resolve_path(entry["path"])
            sources.append(YamlFileSource(path, name=entry.get("name"), refresh_interval_hours=interval))
            log.info("Registered source: %s (file %s)", sources[-1].name, path.name)
        elif kind == "remotive":
            if remote_disabled:
                log.info("Skipping Remotive source — JOBMATCH_DISABLE_REMOTE is set")
                continue
            sources.append(
                RemotiveSource(
                    search=entry.get("search", ""),
                    category=entry.get("category", ""),
                    limit=entry.get("limit", 50),
                    name=entry.get("name", "remotive"),
                    refresh_interval_hours=interval,
                )
            )
            log.info("Registered source: %s (Remotive)", sources[-1].name)
        else:
            log.warning("Unknown source type %r in settings — skipped", kind)

    return sources
