"""Data models for candidate profiles, job postings and match results."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Mapping

from jobmatch.log import get_logger

log = get_logger(__name__)


# ── Candidate profile ────────────────────────────────────────────────────


@dataclass(frozen=True)
class PersonalInfo:
    name: str | None = None
    email_masked: str | None = None
    email_raw: str | None = field(default=None, repr=False)
    phone_masked: str | None = None
    phone_raw: str | None = field(default=None, repr=False)
    location: str | None = None


@dataclass(frozen=True)
class Skills:
    technical: tuple[str, ...] = ()
    certifications: tuple[str, ...] = ()


@dataclass(frozen=True)
class Role:
    title: str


@dataclass(frozen=True)
class Experience:
    total_years: int = 0
    roles: tuple[Role, ...] = ()


@dataclass(frozen=True)
class Education:
    degree: str


@dataclass(frozen=True)
class CandidateProfile:
    personal_info: PersonalInfo
    skills: Skills
    experience: Experience
    education: tuple[Education, ...] = ()
    raw_text: str = field(default="", repr=False)

    def to_display_dict(self) -> dict[str, Any]:
        """Display-safe view: masked contact values only, no raw text."""
        info = self.personal_info
        return {
            "personal_info": {
                "name": info.name,
                "email": info.email_masked,
                "phone": info.phone_masked,
                "location": info.location,
            },
            "skills": {
                "technical": list(self.skills.technical),
                "certifications": list(self.skills.certifications),
            },
            "experience": {
                "total_years": self.experience.total_years,
                "roles": [r.title for r in self.experience.roles],
            },
            "education": [e.degree for e in self.education],
        }


# ── Matching and listing results ─────────────────────────────────────────


class ExperienceAlignment(str, Enum):
    UNDER = "under"
    PERFECT = "perfect"
    OVER = "over"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class MatchResult:
    score: int
    matched_skills: tuple[str, ...]
    missing_skills: tuple[str, ...]
    experience_alignment: ExperienceAlignment
    location_preference: bool


@dataclass(frozen=True)
class FreshnessIndicator:
    badge: str
    label: str
    color: str


# ── Job posting ──────────────────────────────────────────────────────────

# Raw record key -> JobPosting field. Sources may use either spelling.
_FIELD_ALIASES: dict[str, str] = {
    "title": "title",
    "company": "company",
    "location": "location",
    "category": "category",
    "skills": "skills",
    "experience": "experience",
    "postedDate": "posted_date",
    "posted_date": "posted_date",
    "isRemote": "is_remote",
    "is_remote": "is_remote",
    "companyRating": "company_rating",
    "company_rating": "company_rating",
    "description": "description",
    "id": "id",
    "source": "source",
}

# Annotation slots are per-view enrichment, never part of a catalog record.
_ANNOTATIONS = ("match", "freshness")


def parse_posted_date(value: Any) -> datetime | None:
    """Coerce a posted-date value to an aware UTC datetime.

    Accepts datetimes, dates, and ISO 8601 strings (a trailing ``Z`` is
    allowed). Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            log.warning("Unparseable posted date %r — treating as undated", value)
            return None
    else:
        log.warning("Unsupported posted date type %s — treating as undated", type(value).__name__)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        log.warning("Invalid company rating %r — ignoring", value)
        return None


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)


def _to_skills(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(s.strip() for s in value.split(",") if s.strip())
    return tuple(str(s) for s in value)


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "title": _to_text,
    "company": _to_text,
    "location": _to_text,
    "category": _to_optional_text,
    "skills": _to_skills,
    "experience": _to_optional_text,
    "posted_date": parse_posted_date,
    "is_remote": _to_bool,
    "company_rating": _to_float,
    "description": _to_text,
}


def normalize_key_part(value: str | None) -> str:
    return (value or "").strip().lower()


@dataclass(frozen=True)
class JobPosting:
    title: str = ""
    company: str = ""
    location: str = ""
    category: str | None = None
    skills: tuple[str, ...] = ()
    experience: str | None = None
    posted_date: datetime | None = None
    is_remote: bool = False
    company_rating: float | None = None
    description: str = ""
    id: str | None = None
    source: str = "unknown"
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    match: MatchResult | None = None
    freshness: FreshnessIndicator | None = None

    def __post_init__(self) -> None:
        # Catalog dates are always aware UTC, however the posting was built.
        if self.posted_date is not None:
            object.__setattr__(self, "posted_date", parse_posted_date(self.posted_date))

    @property
    def identity_key(self) -> tuple[str, str, str]:
        return (
            normalize_key_part(self.title),
            normalize_key_part(self.company),
            normalize_key_part(self.location),
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | JobPosting) -> JobPosting:
        if isinstance(record, JobPosting):
            return record
        return cls(**posting_fields(record))

    def merged(self, fields: Mapping[str, Any]) -> JobPosting:
        """Shallow merge: *fields* win, anything they omit is kept from self."""
        updates = dict(fields)
        if "extra" in updates:
            updates["extra"] = {**self.extra, **updates["extra"]}
        return dataclasses.replace(self, **updates)

    def age(self, now: datetime | None = None) -> timedelta | None:
        if self.posted_date is None:
            return None
        now = now or datetime.now(timezone.utc)
        return now - self.posted_date


def posting_fields(record: Mapping[str, Any] | JobPosting) -> dict[str, Any]:
    """Return the JobPosting fields present in *record*, converted.

    Keys that do not map to a field are gathered under ``extra``. A JobPosting
    counts as a full record: every field is present.
    """
    if isinstance(record, JobPosting):
        return {
            f.name: getattr(record, f.name)
            for f in dataclasses.fields(record)
            if f.name not in _ANNOTATIONS
        }

    out: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in record.items():
        name = _FIELD_ALIASES.get(key)
        if name is None:
            extra[key] = value
            continue
        convert = _CONVERTERS.get(name)
        out[name] = convert(value) if convert else value
    if "id" in out and out["id"] is not None:
        out["id"] = str(out["id"])
    if extra:
        out["extra"] = extra
    return out


def identity_key(record: Mapping[str, Any] | JobPosting) -> tuple[str, str, str]:
    """Dedup key: (title, company, location), stripped and lower-cased."""
    if isinstance(record, JobPosting):
        return record.identity_key
    return (
        normalize_key_part(_to_text(record.get("title"))),
        normalize_key_part(_to_text(record.get("company"))),
        normalize_key_part(_to_text(record.get("location"))),
    )


# ── Listing and aggregation ──────────────────────────────────────────────


@dataclass(frozen=True)
class ListingMetadata:
    total_count: int
    new_jobs_count: int
    last_updated: datetime


@dataclass
class ListingResult:
    jobs: list[JobPosting]
    metadata: ListingMetadata


@dataclass
class SourceRegistration:
    name: str
    fetch: Callable[[], Any] = field(repr=False)
    refresh_interval_hours: float
    last_sync_at: datetime | None = None
    total_jobs_last_sync: int = 0
    last_error: str | None = None

    def is_due(self, now: datetime | None = None) -> bool:
        if self.last_sync_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - self.last_sync_at >= timedelta(hours=self.refresh_interval_hours)
