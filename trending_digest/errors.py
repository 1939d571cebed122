"""
Error taxonomy for the trending digest pipeline.

Only the classes below propagate to the top-level runner. Per-item failures
(missing README, summarization errors, malformed identifiers) are converted
to fallback values where they are detected and never raise.
"""

from __future__ import annotations


class TrendingDigestError(Exception):
    """Base class for errors that abort startup or a run."""


class ConfigError(TrendingDigestError):
    """Required configuration is missing or invalid."""


class SourceError(TrendingDigestError):
    """The trending feed could not be read."""


class SourceUnavailable(SourceError):
    """Transport error or non-success status from the trending feed."""


class SourceMalformed(SourceError):
    """The trending feed payload does not have the expected shape."""


class PublishError(TrendingDigestError):
    """The structured snapshot could not be persisted."""


class RunInProgress(TrendingDigestError):
    """Another run holds the single-flight lock."""
