"""Shared fixtures for the jobmatch test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from jobmatch.models import (
    CandidateProfile,
    Experience,
    JobPosting,
    PersonalInfo,
    Skills,
)

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

SAMPLE_RESUME = """\
Priya Sharma
Senior Data Scientist
priya.sharma@example.com | +91-9876543210
Bangalore, India

Summary
Data scientist with 6 years of experience building machine learning models.

Skills
Python, SQL, TensorFlow, Pandas, AWS, Docker

Certifications
AWS Certified Solutions Architect

Education
Master of Science in Statistics
"""


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def resume_text() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def make_profile() -> Callable[..., CandidateProfile]:
    def _make(
        skills: tuple[str, ...] = ("python", "sql"),
        years: int = 5,
        location: str | None = "Bangalore",
    ) -> CandidateProfile:
        return CandidateProfile(
            personal_info=PersonalInfo(name="Test Candidate", location=location),
            skills=Skills(technical=skills),
            experience=Experience(total_years=years),
        )

    return _make


@pytest.fixture
def make_job() -> Callable[..., JobPosting]:
    def _make(title: str = "Data Scientist", hours_old: float | None = 1, **kwargs: Any) -> JobPosting:
        fields: dict[str, Any] = {
            "title": title,
            "company": "Acme",
            "location": "Bangalore, India",
            "category": "Data Science",
            "skills": ("Python", "SQL"),
            "experience": "3-5 years",
            "company_rating": 4.0,
        }
        if hours_old is not None:
            fields["posted_date"] = NOW - timedelta(hours=hours_old)
        fields.update(kwargs)
        return JobPosting(**fields)

    return _make
