"""Tests for the concrete job sources and the settings-driven factory.

The Remotive source is exercised against a patched ``requests.get`` so no
network calls are made.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from jobmatch.aggregator import JobAggregator
from jobmatch.models import ExperienceAlignment
from jobmatch.scorer import rank_jobs
from jobmatch.search import SearchFilters, search
from jobmatch.sources import RemotiveSource, YamlFileSource, get_sources
from jobmatch.sources import remotive

JOBS_YAML = """\
- title: Senior Data Scientist
  company: Flipkart
  location: Bangalore, India
  experience: 4-7 years
  postedDate: "2024-01-15"
  skills: [Python, Machine Learning, SQL]
  companyRating: 4.2
  isRemote: false
  category: Data Science
- title: Data Engineer
  company: Zomato
  location: Gurugram, India
  skills: [Apache Spark, Kafka]
"""


class _FakeResponse:
    def __init__(self, payload: dict, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> dict:
        return self._payload


def _write(tmp_path: Path, text: str, name: str = "jobs.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_yaml_file_source_reads_records(tmp_path: Path) -> None:
    source = YamlFileSource(_write(tmp_path, JOBS_YAML), refresh_interval_hours=3)
    records = source.fetch()

    assert source.name == "jobs"
    assert [r["title"] for r in records] == ["Senior Data Scientist", "Data Engineer"]
    assert all(r["source"] == "jobs" for r in records)


def test_yaml_file_source_accepts_jobs_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path, "jobs:\n  - {title: A, company: B, location: C}\n")
    assert YamlFileSource(path, name="local").fetch()[0]["source"] == "local"


def test_yaml_file_source_rejects_scalars(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        YamlFileSource(_write(tmp_path, "just a string\n")).fetch()


def test_yaml_records_become_postings(tmp_path: Path) -> None:
    agg = JobAggregator()
    agg.register(YamlFileSource(_write(tmp_path, JOBS_YAML)))
    first = agg.sync()[0]

    assert first.skills == ("Python", "Machine Learning", "SQL")
    assert first.company_rating == 4.2
    assert first.posted_date.year == 2024 and first.posted_date.tzinfo is not None
    assert first.is_remote is False


def test_remotive_source_maps_hits(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return _FakeResponse({
            "jobs": [{
                "id": 42,
                "title": "ML Engineer",
                "company_name": "Remote Co",
                "candidate_required_location": "",
                "category": "Software Development",
                "tags": ["python", "pytorch"],
                "publication_date": "2024-01-14T09:30:00",
                "description": "Build models",
                "url": "https://remotive.com/jobs/42",
            }]
        })

    monkeypatch.setattr(remotive.requests, "get", fake_get)
    records = RemotiveSource(search="ml", category="data", limit=5).fetch()

    assert seen["params"] == {"limit": 5, "search": "ml", "category": "data"}
    assert seen["timeout"] == 15
    rec = records[0]
    assert rec["id"] == "42"
    assert rec["location"] == "Remote"
    assert rec["category"] == "Data Science"
    assert rec["skills"] == ["python", "pytorch"]
    assert rec["isRemote"] is True
    assert rec["source"] == "remotive"


def test_remotive_http_error_is_recorded_by_sync(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(remotive.requests, "get", lambda *a, **kw: _FakeResponse({}, status=503))
    agg = JobAggregator()
    agg.register(RemotiveSource())

    assert agg.sync() == []
    assert "503" in agg.source_stats()[0]["last_error"]


def test_get_sources_from_settings(tmp_path: Path) -> None:
    settings = {
        "sources": [
            {"type": "file", "name": "local", "path": str(tmp_path / "jobs.yaml"), "refresh_interval_hours": 2},
            {"type": "remotive", "search": "data", "refresh_interval_hours": 12},
            {"type": "carrier-pigeon"},
        ]
    }
    sources = get_sources(settings, lambda key: "")

    assert [type(s) for s in sources] == [YamlFileSource, RemotiveSource]
    assert sources[0].name == "local" and sources[0].refresh_interval_hours == 2
    assert sources[1].search == "data"


def test_get_sources_can_disable_remote(tmp_path: Path) -> None:
    settings = {"sources": [{"type": "remotive"}]}
    env = {"JOBMATCH_DISABLE_REMOTE": "1"}
    assert get_sources(settings, lambda key: env.get(key, "")) == []


def test_numeric_yaml_fields_are_read_as_text(tmp_path: Path, make_profile) -> None:
    path = _write(tmp_path, """\
- title: Analyst
  company: Acme
  location: Pune
  experience: 3
  category: 7
  skills: [SQL]
  companyRating: 4.0
""")
    agg = JobAggregator()
    agg.register(YamlFileSource(path))
    jobs = agg.sync()

    assert jobs[0].experience == "3"
    assert jobs[0].category == "7"
    ranked = rank_jobs(make_profile(skills=("sql",), years=4, location=None), jobs)
    assert ranked[0].match.experience_alignment is ExperienceAlignment.PERFECT
    assert _titles(search(jobs, SearchFilters(experience="2-4 years"))) == []


def _titles(result) -> list[str]:
    return [j.title for j in result.jobs]
