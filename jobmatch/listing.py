"""Filter and sort the job catalog for display, with freshness badges."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence

from jobmatch.log import get_logger
from jobmatch.models import FreshnessIndicator, JobPosting, ListingMetadata, ListingResult

log = get_logger(__name__)

NEW_WINDOW = timedelta(hours=24)
FRESH_WINDOW = timedelta(hours=48)

NEW_BADGE = FreshnessIndicator(badge="new", label="New", color="green")
FRESH_BADGE = FreshnessIndicator(badge="fresh", label="Fresh", color="blue")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class ListingFilters:
    """All optional; set filters are AND-combined."""

    location: str | None = None
    category: str | None = None
    skills: Sequence[str] = field(default_factory=tuple)
    remote: bool | None = None


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def freshness_indicator(
    posted_date: datetime | None, now: datetime | None = None
) -> FreshnessIndicator | None:
    if posted_date is None:
        return None
    elapsed = _now(now) - posted_date
    if elapsed < NEW_WINDOW:
        return NEW_BADGE
    if elapsed < FRESH_WINDOW:
        return FRESH_BADGE
    return None


def _plural(n: int, unit: str) -> str:
    return f"Posted {n} {unit}{'s' if n > 1 else ''} ago"


def job_age(posted_date: datetime | None, now: datetime | None = None) -> str | None:
    """Human-readable age, e.g. ``Posted 3 hours ago``."""
    if posted_date is None:
        return None
    hours = int((_now(now) - posted_date).total_seconds() // 3600)
    days = hours // 24
    if hours < 1:
        return "Posted less than an hour ago"
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    return _plural(days // 30, "month")


def _is_within(job: JobPosting, window: timedelta, now: datetime) -> bool:
    return job.posted_date is not None and job.posted_date >= now - window


def _matches(job: JobPosting, filters: ListingFilters) -> bool:
    if filters.location and filters.location.lower() not in (job.location or "").lower():
        return False
    if filters.category and job.category != filters.category:
        return False
    if filters.skills:
        job_skills = [s.lower() for s in job.skills]
        wanted = [s.lower() for s in filters.skills]
        if not any(w in js for w in wanted for js in job_skills):
            return False
    if filters.remote is not None and job.is_remote != filters.remote:
        return False
    return True


def sort_by_recency(jobs: Iterable[JobPosting]) -> list[JobPosting]:
    """Most recent first; undated postings last; ties keep input order."""
    return sorted(jobs, key=lambda j: j.posted_date or _OLDEST, reverse=True)


def rank(
    jobs: Iterable[JobPosting],
    filters: ListingFilters | None = None,
    now: datetime | None = None,
) -> ListingResult:
    filters = filters or ListingFilters()
    now = _now(now)

    selected = [j for j in jobs if _matches(j, filters)]
    ordered = [
        dataclasses.replace(j, freshness=freshness_indicator(j.posted_date, now))
        for j in sort_by_recency(selected)
    ]
    metadata = ListingMetadata(
        total_count=len(ordered),
        new_jobs_count=sum(1 for j in ordered if _is_within(j, NEW_WINDOW, now)),
        last_updated=now,
    )
    log.debug("Listing: %d job(s), %d new", metadata.total_count, metadata.new_jobs_count)
    return ListingResult(jobs=ordered, metadata=metadata)


def most_recent(
    jobs: Iterable[JobPosting], limit: int = 10, now: datetime | None = None
) -> list[JobPosting]:
    now = _now(now)
    return [
        dataclasses.replace(j, freshness=freshness_indicator(j.posted_date, now))
        for j in sort_by_recency(jobs)[:limit]
    ]


def jobs_in_time_range(
    jobs: Iterable[JobPosting], hours: float, now: datetime | None = None
) -> list[JobPosting]:
    now = _now(now)
    return [j for j in jobs if _is_within(j, timedelta(hours=hours), now)]


def new_jobs_count(jobs: Iterable[JobPosting], hours: float = 24, now: datetime | None = None) -> int:
    return len(jobs_in_time_range(jobs, hours, now))
