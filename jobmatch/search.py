"""Candidate-facing read API: search term + filters, optionally match-scored.

This is the one call the presentation layer relies on. It narrows the
catalog, hands the rest to the listing ranker for recency order and
freshness badges, then (given a profile) re-ranks by match score. The
match sort is stable, so equal scores stay in recency order.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from jobmatch import listing
from jobmatch.config import DEFAULT_SETTINGS
from jobmatch.errors import InvalidInputError
from jobmatch.log import get_logger
from jobmatch.models import CandidateProfile, JobPosting, ListingResult
from jobmatch.scorer import rank_jobs

log = get_logger(__name__)

# Experience bucket label -> descriptor keywords that place a job in it.
EXPERIENCE_BUCKETS: dict[str, tuple[str, ...]] = {
    "0-2 years": ("1-3", "0-2", "fresher"),
    "2-4 years": ("2-4", "1-3"),
    "4-7 years": ("4-7", "3-6", "5-8"),
    "7+ years": ("7+", "8+", "senior", "lead"),
}


@dataclass(frozen=True)
class SearchFilters:
    term: str | None = None
    location: str | None = None
    category: str | None = None
    experience: str | None = None
    min_rating: float | None = None
    remote_only: bool = False
    recent_only: bool = False


def _matches_term(job: JobPosting, term: str) -> bool:
    t = term.lower()
    return (
        t in job.title.lower()
        or t in job.company.lower()
        or t in (job.description or "").lower()
        or any(t in s.lower() for s in job.skills)
    )


def _in_bucket(job: JobPosting, keywords: tuple[str, ...]) -> bool:
    descriptor = (job.experience or "").lower()
    return any(k in descriptor for k in keywords)


def _rating_at_least(job: JobPosting, floor: float) -> bool:
    return job.company_rating is not None and job.company_rating >= floor


def search(
    jobs: Iterable[JobPosting],
    filters: SearchFilters | None = None,
    profile: CandidateProfile | None = None,
    settings: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> ListingResult:
    filters = filters or SearchFilters()
    settings = settings or DEFAULT_SETTINGS
    now = now or datetime.now(timezone.utc)

    checks: list[Callable[[JobPosting], bool]] = []

    # The floor screens rated companies only; unrated postings pass it.
    quality_floor = settings.get("min_company_rating")
    if quality_floor is not None:
        checks.append(lambda j: j.company_rating is None or j.company_rating >= quality_floor)

    if filters.recent_only:
        cutoff = now - timedelta(days=settings.get("recent_days", 30))
        checks.append(lambda j: j.posted_date is not None and j.posted_date >= cutoff)

    if filters.term:
        checks.append(lambda j: _matches_term(j, filters.term))

    if filters.experience:
        keywords = EXPERIENCE_BUCKETS.get(filters.experience)
        if keywords is None:
            raise InvalidInputError(
                f"Unknown experience bucket {filters.experience!r}; "
                f"expected one of {', '.join(EXPERIENCE_BUCKETS)}"
            )
        checks.append(lambda j: _in_bucket(j, keywords))

    if filters.min_rating is not None:
        checks.append(lambda j: _rating_at_least(j, filters.min_rating))

    candidates = [j for j in jobs if all(check(j) for check in checks)]

    result = listing.rank(
        candidates,
        listing.ListingFilters(
            location=filters.location,
            category=filters.category,
            remote=True if filters.remote_only else None,
        ),
        now=now,
    )

    if profile is not None:
        result.jobs = rank_jobs(profile, result.jobs)

    log.info(
        "Search term=%r → %d job(s)%s",
        filters.term, result.metadata.total_count, " (match-ranked)" if profile else "",
    )
    return result
