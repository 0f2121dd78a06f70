"""Exception taxonomy for the matching core.

All of these signal usage errors and are raised synchronously. Source fetch
failures during a sync are not part of this list: the aggregator records them
on the failing source instead of raising.
"""
from __future__ import annotations


class JobMatchError(Exception):
    """Base class for every error raised by jobmatch."""


class InvalidInputError(JobMatchError, ValueError):
    """A required argument is missing or malformed."""


class MissingInputError(InvalidInputError):
    """The scorer was called without a profile or without a job."""


class InvalidSourceError(JobMatchError, ValueError):
    """A source registration lacks a name, fetch callable or refresh interval."""


class UnsupportedFormatError(JobMatchError):
    """The text extractor was handed something other than text or PDF."""


class SyncInProgressError(JobMatchError, RuntimeError):
    """A sync was started while another sync on the same aggregator is running."""
