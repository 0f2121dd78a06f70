"""Remotive — free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

from typing import Any

import requests

from jobmatch.log import get_logger
from jobmatch.sources.base import JobSource

log = get_logger(__name__)

API_URL = "https://remotive.com/api/remote-jobs"

# Remotive category slug -> catalog category label.
_CATEGORY_LABELS: dict[str, str] = {
    "data": "Data Science",
    "software-dev": "Software Development",
    "devops": "DevOps",
    "product": "Product",
    "qa": "QA",
}


class RemotiveSource(JobSource):
    def __init__(
        self,
        search: str = "",
        category: str = "",
        limit: int = 50,
        name: str = "remotive",
        refresh_interval_hours: float = 12,
        timeout: float = 15,
    ) -> None:
        self.search = search
        self.category = category
        self.limit = limit
        self.name = name
        self.refresh_interval_hours = refresh_interval_hours
        self.timeout = timeout

    def fetch(self) -> list[dict[str, Any]]:
        # One request per sync; the aggregator retries on the next cycle.
        params: dict[str, Any] = {"limit": self.limit}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category

        r = requests.get(API_URL, params=params, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()

        records = [self._to_record(hit) for hit in data.get("jobs", [])]
        log.debug("Remotive search=%r returned %d jobs", self.search, len(records))
        return records

    def _to_record(self, hit: dict[str, Any]) -> dict[str, Any]:
        category = hit.get("category") or ""
        return {
            "id": str(hit.get("id", "")),
            "title": hit.get("title", ""),
            "company": hit.get("company_name", ""),
            "location": hit.get("candidate_required_location") or "Remote",
            "category": _CATEGORY_LABELS.get(self.category, category),
            "skills": list(hit.get("tags") or []),
            "postedDate": hit.get("publication_date"),
            "isRemote": True,
            "description": hit.get("description", ""),
            "url": hit.get("url", ""),
            "source": self.name,
        }
