"""Pull postings from registered sources into one deduplicated catalog.

Postings are identified by (title, company, location), case-insensitive.
Within one fetched batch the first posting per key wins; against the catalog
an incoming posting is shallow-merged over the existing entry for its key.
"""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, Sequence, TypeVar

from jobmatch.errors import InvalidSourceError, SyncInProgressError
from jobmatch.log import get_logger
from jobmatch.models import (
    JobPosting,
    SourceRegistration,
    identity_key,
    posting_fields,
)

log = get_logger(__name__)

R = TypeVar("R", Mapping[str, Any], JobPosting)
Key = tuple[str, str, str]


def remove_duplicates(postings: Iterable[R]) -> list[R]:
    """Keep the first posting per identity key, preserving order."""
    seen: set[Key] = set()
    unique: list[R] = []
    for p in postings:
        key = identity_key(p)
        if key not in seen:
            seen.add(key)
            unique.append(p)
    return unique


class JobCatalog:
    """Insertion-ordered store with at most one posting per identity key."""

    def __init__(self) -> None:
        self._entries: dict[Key, JobPosting] = {}

    def upsert(self, fields: Mapping[str, Any]) -> bool:
        """Merge *fields* into the entry for their key. Returns True if new."""
        incoming = JobPosting(**fields)
        key = incoming.identity_key
        existing = self._entries.get(key)
        if existing is None:
            self._entries[key] = incoming
            return True
        self._entries[key] = existing.merged(fields)
        return False

    def get(self, title: str, company: str, location: str) -> JobPosting | None:
        return self._entries.get(identity_key({"title": title, "company": company, "location": location}))

    def __contains__(self, posting: object) -> bool:
        if not isinstance(posting, (JobPosting, Mapping)):
            return False
        return identity_key(posting) in self._entries

    def __iter__(self) -> Iterator[JobPosting]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


def _attr(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _call_fetch(reg: SourceRegistration) -> list[Any]:
    result = reg.fetch()
    if inspect.isawaitable(result):
        # Worker threads have no running loop, so each gets its own.
        result = asyncio.run(_await(result))
    return list(result or [])


async def _await(awaitable: Any) -> Any:
    return await awaitable


class JobAggregator:
    def __init__(self, max_workers: int | None = None) -> None:
        self._catalog = JobCatalog()
        self._sources: list[SourceRegistration] = []
        self._max_workers = max_workers
        self._lock = threading.Lock()

    # ── Registration ────────────────────────────────────────────────────

    def register(self, source: Any) -> SourceRegistration:
        """Register a JobSource, or any object/mapping with name, fetch, refresh_interval_hours."""
        name = _attr(source, "name")
        fetch = _attr(source, "fetch")
        interval = _attr(source, "refresh_interval_hours")

        if not name or fetch is None or interval is None:
            raise InvalidSourceError("Invalid source configuration: name, fetch and refresh_interval_hours are required")
        if not callable(fetch):
            raise InvalidSourceError(f"Source {name!r}: fetch must be callable")
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
            raise InvalidSourceError(f"Source {name!r}: refresh_interval_hours must be a positive number")

        with self._lock:
            if any(s.name == name for s in self._sources):
                raise InvalidSourceError(f"Source {name!r} is already registered")
            reg = SourceRegistration(name=name, fetch=fetch, refresh_interval_hours=interval)
            self._sources.append(reg)
        log.info("Registered source: %s (every %sh)", name, interval)
        return dataclasses.replace(reg)

    # ── Sync ────────────────────────────────────────────────────────────

    def sync(self, only_due: bool = False, now: datetime | None = None) -> list[JobPosting]:
        """Fetch every (or every due) source and merge the results into the catalog.

        A failing source is logged and skipped; its last_sync_at stays as it was.
        """
        if not self._lock.acquire(blocking=False):
            raise SyncInProgressError("A sync is already running on this aggregator")
        try:
            now = now or datetime.now(timezone.utc)
            targets = [s for s in self._sources if not only_due or s.is_due(now)]
            if not targets:
                log.info("No sources due for sync")
                return list(self._catalog)

            log.info("Syncing %d source(s)...", len(targets))
            workers = self._max_workers or len(targets)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [(reg, pool.submit(_call_fetch, reg)) for reg in targets]

                # Merge in registration order regardless of completion order.
                batch: list[Mapping[str, Any] | JobPosting] = []
                for reg, future in futures:
                    try:
                        fetched = future.result()
                    except Exception as exc:
                        reg.last_error = f"{type(exc).__name__}: {exc}"
                        log.error("[%s] sync FAILED: %s", reg.name, exc)
                        continue
                    reg.last_sync_at = now
                    reg.total_jobs_last_sync = len(fetched)
                    reg.last_error = None
                    log.info("[%s] returned %d jobs", reg.name, len(fetched))
                    batch.extend(fetched)

            added, updated = self._store(batch)
            log.info(
                "Sync complete — fetched=%d, new=%d, updated=%d, catalog=%d",
                len(batch), added, updated, len(self._catalog),
            )
            return list(self._catalog)
        finally:
            self._lock.release()

    def _store(self, batch: Sequence[Mapping[str, Any] | JobPosting]) -> tuple[int, int]:
        added = updated = 0
        for raw in remove_duplicates(batch):
            if self._catalog.upsert(posting_fields(raw)):
                added += 1
            else:
                updated += 1
        return added, updated

    # ── Read access ─────────────────────────────────────────────────────

    def jobs(self) -> list[JobPosting]:
        return list(self._catalog)

    def sources(self) -> list[SourceRegistration]:
        return [dataclasses.replace(s) for s in self._sources]

    def due_sources(self, now: datetime | None = None) -> list[str]:
        return [s.name for s in self._sources if s.is_due(now)]

    def source_stats(self) -> list[dict[str, Any]]:
        return [
            {
                "name": s.name,
                "last_sync_at": s.last_sync_at,
                "total_jobs": s.total_jobs_last_sync,
                "refresh_interval_hours": s.refresh_interval_hours,
                "last_error": s.last_error,
            }
            for s in self._sources
        ]

    def __len__(self) -> int:
        return len(self._catalog)
