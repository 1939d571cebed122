"""
README fetching.

This package handles HTTP lookup of repository documentation
used as summarization input.
"""

from .readme import ReadmeFetcher

__all__ = ["ReadmeFetcher"]
