"""Job postings kept in a local YAML file (a list, or a mapping with ``jobs``)."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from jobmatch.log import get_logger
from jobmatch.sources.base import JobSource

log = get_logger(__name__)


class YamlFileSource(JobSource):
    def __init__(
        self,
        path: Path | str,
        name: str | None = None,
        refresh_interval_hours: float = 6,
    ) -> None:
        self.path = Path(path)
        self.name = name or self.path.stem
        self.refresh_interval_hours = refresh_interval_hours

    def fetch(self) -> list[dict[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or []
        if isinstance(data, dict):
            data = data.get("jobs", [])
        if not isinstance(data, list):
            raise ValueError(f"{self.path.name}: expected a list of job records")

        records = [dict(r, source=r.get("source", self.name)) for r in data if isinstance(r, dict)]
        skipped = len(data) - len(records)
        if skipped:
            log.warning("%s: skipped %d non-mapping record(s)", self.path.name, skipped)
        log.debug("%s: read %d job record(s)", self.path.name, len(records))
        return records
