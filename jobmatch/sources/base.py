from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from jobmatch.models import JobPosting


class JobSource(ABC):
    """A fetch capability the aggregator can register."""

    name: str = "source"
    refresh_interval_hours: float = 24

    @abstractmethod
    def fetch(self) -> Sequence[Mapping[str, Any] | JobPosting]:
        pass
