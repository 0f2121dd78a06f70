"""Score jobs against a candidate profile with explainable sub-signals.

Composite score (0-100)::

    skills      x 0.6   share of job skills the candidate covers
    experience  x 0.3   perfect 100 / over 80 / under 60 / unknown 50
    location    + 10    flat bonus, not scaled

The weights are fixed policy, not learned.
"""
from __future__ import annotations

import dataclasses
import math
import re
from typing import Iterable, Sequence

from jobmatch.errors import MissingInputError
from jobmatch.log import get_logger
from jobmatch.models import CandidateProfile, ExperienceAlignment, JobPosting, MatchResult

log = get_logger(__name__)

SKILL_WEIGHT = 0.6
EXPERIENCE_WEIGHT = 0.3
LOCATION_BONUS = 10

EXPERIENCE_SCORES: dict[ExperienceAlignment, int] = {
    ExperienceAlignment.PERFECT: 100,
    ExperienceAlignment.OVER: 80,
    ExperienceAlignment.UNDER: 60,
    ExperienceAlignment.UNKNOWN: 50,
}

_RANGE_RE = re.compile(r"(\d+)\s*[-–]\s*(\d+)")
_PLUS_RE = re.compile(r"(\d+)\s*\+")
_SINGLE_RE = re.compile(r"(\d+)")


def _normalize(s: str | None) -> str:
    return (s or "").lower()


# ── Skills ───────────────────────────────────────────────────────────────


def _satisfied(job_skill: str, candidate_skills: Sequence[str]) -> bool:
    # Containment either way; "java" also satisfies "javascript".
    js = _normalize(job_skill)
    return any(cs in js or js in cs for cs in candidate_skills)


def split_skills(
    candidate_skills: Iterable[str] | None, job_skills: Iterable[str] | None
) -> tuple[list[str], list[str]]:
    """Partition job skills into (matched, missing), job order and casing kept."""
    job = list(job_skills or [])
    cand = [_normalize(s) for s in candidate_skills or [] if s]
    matched: list[str] = []
    missing: list[str] = []
    for skill in job:
        (matched if cand and _satisfied(skill, cand) else missing).append(skill)
    return matched, missing


def calculate_skill_match(
    candidate_skills: Iterable[str] | None, job_skills: Iterable[str] | None
) -> float:
    """Percentage of job skills satisfied by the candidate; 0 if either side is empty."""
    cand = list(candidate_skills or [])
    job = list(job_skills or [])
    if not cand or not job:
        return 0.0
    matched, _ = split_skills(cand, job)
    return len(matched) / len(job) * 100


# ── Experience ───────────────────────────────────────────────────────────


def parse_experience_range(descriptor: str | None) -> tuple[int, int | None] | None:
    """``"4-7 years"`` -> (4, 7); ``"5+ years"`` -> (5, None); ``"3 years"`` -> (3, 5)."""
    if not descriptor:
        return None
    text = descriptor.lower()

    m = _RANGE_RE.search(text)
    if m:
        return int(m.group(1)), int(m.group(2))

    m = _PLUS_RE.search(text)
    if m:
        return int(m.group(1)), None

    m = _SINGLE_RE.search(text)
    if m:
        years = int(m.group(1))
        return years, years + 2

    return None


def experience_alignment(years: int | None, descriptor: str | None) -> ExperienceAlignment:
    if not isinstance(years, int) or isinstance(years, bool):
        return ExperienceAlignment.UNKNOWN
    bounds = parse_experience_range(descriptor)
    if bounds is None:
        return ExperienceAlignment.UNKNOWN

    low, high = bounds
    if years < low:
        return ExperienceAlignment.UNDER
    if high is not None and years > high:
        return ExperienceAlignment.OVER
    return ExperienceAlignment.PERFECT


def experience_score(alignment: ExperienceAlignment) -> int:
    return EXPERIENCE_SCORES[alignment]


# ── Location ─────────────────────────────────────────────────────────────


def location_match(candidate_location: str | None, job_location: str | None) -> bool:
    if not candidate_location or not job_location:
        return False
    cand = candidate_location.lower()
    job = job_location.lower()
    return cand in job or job in cand


# ── Composite ────────────────────────────────────────────────────────────


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def score(profile: CandidateProfile | None, job: JobPosting | None) -> MatchResult:
    if profile is None or job is None:
        raise MissingInputError("User profile and job are required")

    candidate_skills = profile.skills.technical
    skill_score = calculate_skill_match(candidate_skills, job.skills)
    matched, missing = split_skills(candidate_skills, job.skills)

    alignment = experience_alignment(profile.experience.total_years, job.experience)
    has_location = location_match(profile.personal_info.location, job.location)

    composite = (
        skill_score * SKILL_WEIGHT
        + experience_score(alignment) * EXPERIENCE_WEIGHT
        + (LOCATION_BONUS if has_location else 0)
    )

    return MatchResult(
        score=min(100, max(0, _round_half_up(composite))),
        matched_skills=tuple(matched),
        missing_skills=tuple(missing),
        experience_alignment=alignment,
        location_preference=has_location,
    )


def rank_jobs(profile: CandidateProfile | None, jobs: Iterable[JobPosting]) -> list[JobPosting]:
    """Return copies of *jobs* with ``match`` set, best score first (stable)."""
    if profile is None:
        raise MissingInputError("User profile is required")
    annotated = [dataclasses.replace(job, match=score(profile, job)) for job in jobs]
    annotated.sort(key=lambda j: j.match.score, reverse=True)
    log.debug("Ranked %d jobs", len(annotated))
    return annotated
