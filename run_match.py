#!/usr/bin/env python3
"""Entry point: match a résumé against the configured job sources."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobmatch.errors import JobMatchError
from jobmatch.log import get_logger

log = get_logger(__name__)

TOP_N = 10


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print()
        print("  Usage: python run_match.py <resume.pdf|resume.txt>")
        print()
        sys.exit(1)

    from jobmatch.pipeline import run

    try:
        result = run(sys.argv[1])
    except (JobMatchError, OSError) as exc:
        log.error("Run failed: %s", exc)
        sys.exit(1)

    log.info("Jobs in catalog: %d", result["jobs_found"])
    for job in result["ranked"][:TOP_N]:
        m = job.match
        log.info(
            "  %3d  %s @ %s (%s) — matched=%s missing=%s experience=%s",
            m.score, job.title, job.company, job.location,
            ", ".join(m.matched_skills) or "-", ", ".join(m.missing_skills) or "-",
            m.experience_alignment.value,
        )
    for stat in result["source_stats"]:
        if stat["last_error"]:
            log.warning("Source %s failed: %s", stat["name"], stat["last_error"])
