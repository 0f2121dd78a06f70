"""Fixed keyword vocabularies used by the résumé parser.

Each vocabulary is a tagged, immutable value object. Callers only use
``find_in`` / ``first_occurrence`` so the storage behind them can change
without touching the extraction rules.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class VocabularyKind(str, Enum):
    SKILL = "skill"
    CERTIFICATION = "certification"
    ROLE = "role"
    DEGREE = "degree"
    CITY = "city"


@dataclass(frozen=True)
class Vocabulary:
    kind: VocabularyKind
    terms: tuple[str, ...]
    _pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Longest terms first so "Bengaluru" wins over a shorter prefix at the same offset.
        ordered = sorted(self.terms, key=len, reverse=True)
        pattern = re.compile("|".join(re.escape(t) for t in ordered), re.IGNORECASE)
        object.__setattr__(self, "_pattern", pattern)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, str):
            return False
        low = item.lower()
        return any(t.lower() == low for t in self.terms)

    def find_in(self, text: str) -> list[str]:
        """Terms contained in *text* (case-insensitive), vocabulary order, once each."""
        low = text.lower()
        found = [t for t in self.terms if t.lower() in low]
        return list(dict.fromkeys(found))

    def first_occurrence(self, text: str) -> str | None:
        """Verbatim text of the earliest term occurrence, or None."""
        if not self.terms:
            return None
        m = self._pattern.search(text)
        return m.group(0) if m else None


@dataclass(frozen=True)
class PatternVocabulary:
    kind: VocabularyKind
    patterns: tuple[str, ...]
    _compiled: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        compiled = tuple(re.compile(p, re.IGNORECASE) for p in self.patterns)
        object.__setattr__(self, "_compiled", compiled)

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def find_in(self, text: str) -> list[str]:
        """First matched substring of each pattern, verbatim, in pattern order."""
        hits: list[str] = []
        for rx in self._compiled:
            m = rx.search(text)
            if m:
                hits.append(m.group(0))
        return hits


TECHNICAL_SKILLS = Vocabulary(
    VocabularyKind.SKILL,
    (
        # languages
        "python", "r", "sql", "java", "scala", "javascript", "typescript",
        # ML / data science
        "machine learning", "deep learning", "tensorflow", "pytorch", "scikit-learn",
        "pandas", "numpy", "matplotlib", "seaborn", "statistics", "probability",
        "regression", "classification", "clustering", "nlp", "computer vision",
        # data engineering
        "apache spark", "kafka", "airflow", "hadoop", "hive", "elasticsearch",
        "mongodb", "cassandra", "redis", "etl",
        # cloud / devops
        "aws", "gcp", "azure", "docker", "kubernetes", "terraform", "jenkins",
        "git", "ci/cd", "mlops",
        # databases
        "mysql", "postgresql", "oracle", "snowflake", "redshift", "bigquery",
        "databricks",
        # BI
        "tableau", "power bi", "looker", "excel",
    ),
)

CERTIFICATIONS = PatternVocabulary(
    VocabularyKind.CERTIFICATION,
    (
        r"AWS Certified",
        r"Google Cloud",
        r"Azure Certified",
        r"PMP",
        r"Scrum Master",
    ),
)

ROLES = Vocabulary(
    VocabularyKind.ROLE,
    ("data scientist", "data engineer", "analyst", "engineer", "developer"),
)

DEGREES = Vocabulary(
    VocabularyKind.DEGREE,
    ("phd", "ph.d", "master", "msc", "bachelor", "bsc", "btech", "mtech", "mba"),
)

CITIES = Vocabulary(
    VocabularyKind.CITY,
    (
        "Bangalore", "Bengaluru", "Mumbai", "Delhi", "Hyderabad", "Chennai",
        "Pune", "Kolkata", "Gurugram", "Noida", "Gurgaon",
    ),
)
