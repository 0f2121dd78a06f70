"""
End-to-end matching run.

Runs: parse résumé → register sources → sync catalog → search + match-rank.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from jobmatch.aggregator import JobAggregator
from jobmatch.config import get_env, load_settings
from jobmatch.log import get_logger
from jobmatch.resume_parser import parse_resume_file
from jobmatch.search import SearchFilters, search
from jobmatch.sources import JobSource, get_sources

log = get_logger(__name__)


def run(
    resume_path: Path | str,
    *,
    settings: dict[str, Any] | None = None,
    filters: SearchFilters | None = None,
    sources: list[JobSource] | None = None,
) -> dict[str, Any]:
    settings = settings if settings is not None else load_settings()

    # 1. Candidate profile
    profile = parse_resume_file(Path(resume_path))

    # 2. Catalog
    aggregator = JobAggregator(max_workers=settings.get("max_workers"))
    for source in sources if sources is not None else get_sources(settings, get_env):
        aggregator.register(source)
    if not aggregator.sources():
        log.warning("No job sources configured — catalog will be empty")
    catalog = aggregator.sync()

    # 3. Search and rank
    result = search(catalog, filters, profile=profile, settings=settings)

    log.info(
        "Run complete — catalog=%d, listed=%d, new=%d",
        len(catalog), result.metadata.total_count, result.metadata.new_jobs_count,
    )
    return {
        "profile": profile.to_display_dict(),
        "jobs_found": len(catalog),
        "ranked": result.jobs,
        "metadata": result.metadata,
        "source_stats": aggregator.source_stats(),
    }
