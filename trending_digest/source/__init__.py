"""Trending feed source."""

from .trending import TrendingClient, parse_trending_payload

__all__ = ["TrendingClient", "parse_trending_payload"]
