"""End-to-end test: résumé file + YAML catalog → ranked, annotated jobs."""

from __future__ import annotations

from pathlib import Path

import pytest

from jobmatch.errors import UnsupportedFormatError
from jobmatch.pipeline import run
from jobmatch.search import SearchFilters
from jobmatch.sources import remotive

CATALOG = """\
- title: Senior Data Scientist
  company: Flipkart
  location: Bangalore, India
  experience: 4-7 years
  skills: [Python, Machine Learning, SQL, TensorFlow]
  companyRating: 4.2
  category: Data Science
- title: Senior Data Scientist
  company: FLIPKART
  location: bangalore, india
  experience: 5-8 years
  companyRating: 4.2
- title: Business Analyst
  company: Paytm
  location: Noida, India
  experience: 2-4 years
  skills: [Excel, Tableau]
  companyRating: 3.8
  category: Business Intelligence
- title: Intern
  company: Shady Labs
  location: Pune
  skills: [Python]
  companyRating: 2.5
"""


@pytest.fixture
def files(tmp_path: Path, resume_text: str) -> tuple[Path, dict]:
    resume = tmp_path / "resume.txt"
    resume.write_text(resume_text, encoding="utf-8")
    jobs = tmp_path / "jobs.yaml"
    jobs.write_text(CATALOG, encoding="utf-8")
    settings = {
        "min_company_rating": 3.5,
        "recent_days": 30,
        "max_workers": 2,
        "sources": [
            {"type": "file", "name": "local", "path": str(jobs), "refresh_interval_hours": 6},
            {"type": "file", "name": "missing", "path": str(tmp_path / "gone.yaml"), "refresh_interval_hours": 6},
        ],
    }
    return resume, settings


def test_run_end_to_end(files) -> None:
    resume, settings = files
    result = run(resume, settings=settings)

    assert result["profile"]["personal_info"]["email"] == "pri***@example.com"
    assert result["jobs_found"] == 3

    ranked = result["ranked"]
    assert [j.title for j in ranked] == ["Senior Data Scientist", "Business Analyst"]
    top = ranked[0]
    # same identity key later in the batch is discarded, first-seen wins
    assert top.experience == "4-7 years"
    assert top.match.score == 100
    assert top.match.matched_skills == ("Python", "Machine Learning", "SQL", "TensorFlow")

    stats = {s["name"]: s for s in result["source_stats"]}
    assert stats["local"]["total_jobs"] == 4
    assert stats["missing"]["last_sync_at"] is None
    assert stats["missing"]["last_error"]


def test_run_with_filters(files) -> None:
    resume, settings = files
    result = run(resume, settings=settings, filters=SearchFilters(category="Business Intelligence"))
    assert [j.title for j in result["ranked"]] == ["Business Analyst"]


def test_run_with_explicit_sources(files) -> None:
    resume, settings = files
    source = {"name": "inline", "fetch": lambda: [], "refresh_interval_hours": 1}
    result = run(resume, settings=settings, sources=[source])
    assert result["jobs_found"] == 0
    assert result["ranked"] == []


def test_run_rejects_unsupported_resume(tmp_path: Path) -> None:
    path = tmp_path / "resume.docx"
    path.write_bytes(b"PK")
    with pytest.raises(UnsupportedFormatError):
        run(path, settings={"sources": []})


def test_run_with_shipped_settings(tmp_path: Path, resume_text: str, monkeypatch: pytest.MonkeyPatch) -> None:
    hit = {
        "id": 99,
        "title": "Remote ML Engineer",
        "company_name": "Remote Co",
        "candidate_required_location": "Worldwide",
        "category": "Data",
        "tags": ["python", "pytorch"],
        "publication_date": "2024-01-15T06:00:00",
        "description": "Train and ship models",
    }

    class Response:
        def raise_for_status(self) -> None:
            pass

        def json(self) -> dict:
            return {"jobs": [hit]}

    monkeypatch.delenv("JOBMATCH_SETTINGS", raising=False)
    monkeypatch.delenv("JOBMATCH_DISABLE_REMOTE", raising=False)
    monkeypatch.setattr(remotive.requests, "get", lambda *a, **kw: Response())
    resume = tmp_path / "resume.txt"
    resume.write_text(resume_text, encoding="utf-8")

    result = run(resume)

    assert result["jobs_found"] == 5
    titles = [j.title for j in result["ranked"]]
    assert len(titles) == 5
    assert "Remote ML Engineer" in titles
    assert all(s["last_error"] is None for s in result["source_stats"])
