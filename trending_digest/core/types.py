"""
Core data types for the trending digest.

This module defines the fundamental data structures used throughout the pipeline:
- Contributor: A contributor shown next to a trending repository
- TrendingItem: Raw repository entry parsed from the trending feed
- EnrichedItem: TrendingItem with a generated summary attached
- Snapshot: One run's enriched list plus its generation timestamp

Wire conversion (camelCase JSON keys) lives on the types themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Contributor:
    """A contributor avatar entry.

    Attributes:
        avatar: Avatar image URL
        name: Display name
        url: Profile URL
    """
    avatar: str = ""
    name: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Contributor:
        return cls(
            avatar=_str(data.get("avatar")),
            name=_str(data.get("name")),
            url=_str(data.get("url")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"avatar": self.avatar, "name": self.name, "url": self.url}


@dataclass(frozen=True)
class TrendingItem:
    """Represents a trending repository as returned by the source feed.

    Attributes:
        title: Repository identifier in ``owner/name`` form
        url: Canonical repository URL
        description: Short description from the feed
        language: Primary language name, if known
        language_color: Language display color as a hex string, if known
        stars: Star count (display string)
        forks: Fork count (display string)
        add_stars: Star delta over the trending window (display string)
        contributors: Ordered contributor list
    """
    title: str
    url: str = ""
    description: str = ""
    language: str | None = None
    language_color: str | None = None
    stars: str = ""
    forks: str = ""
    add_stars: str = ""
    contributors: tuple[Contributor, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrendingItem:
        contributors = data.get("contributors") or []
        if not isinstance(contributors, list):
            raise ValueError("contributors must be a list")
        if not all(isinstance(c, dict) for c in contributors):
            raise ValueError("contributors must be objects")
        return cls(
            title=_str(data.get("title")),
            url=_str(data.get("url")),
            description=_str(data.get("description")),
            language=_str(data.get("language")) or None,
            language_color=_str(data.get("languageColor")) or None,
            stars=_str(data.get("stars")),
            forks=_str(data.get("forks")),
            add_stars=_str(data.get("addStars")),
            contributors=tuple(Contributor.from_dict(c) for c in contributors),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "description": self.description,
        }
        if self.language:
            payload["language"] = self.language
        if self.language_color:
            payload["languageColor"] = self.language_color
        payload.update(
            {
                "stars": self.stars,
                "forks": self.forks,
                "addStars": self.add_stars,
                "contributors": [c.to_dict() for c in self.contributors],
            }
        )
        return payload


@dataclass(frozen=True)
class EnrichedItem(TrendingItem):
    """TrendingItem with a generated summary.

    The summary is never empty; failures are represented by a placeholder.
    """
    summary: str = ""

    @classmethod
    def from_trending(cls, item: TrendingItem, summary: str) -> EnrichedItem:
        values = {f.name: getattr(item, f.name) for f in fields(TrendingItem)}
        return cls(summary=summary, **values)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrichedItem:
        return cls.from_trending(TrendingItem.from_dict(data), _str(data.get("summary")))

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        # Keep "summary" right after "description", like the published artifact.
        ordered: dict[str, Any] = {}
        for key, value in payload.items():
            ordered[key] = value
            if key == "description":
                ordered["summary"] = self.summary
        return ordered


@dataclass
class Snapshot:
    """One run's published result.

    Attributes:
        items: Enriched items in source order (most trending first)
        generated_at: UTC generation timestamp
    """
    items: list[EnrichedItem] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: utc_now())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        items = data.get("items")
        if not isinstance(items, list):
            raise ValueError("snapshot items must be a list")
        generated_at = data.get("generatedAt")
        if not isinstance(generated_at, str):
            raise ValueError("snapshot generatedAt must be a string")
        return cls(
            items=[EnrichedItem.from_dict(item) for item in items],
            generated_at=parse_timestamp(generated_at),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "generatedAt": format_timestamp(self.generated_at),
        }


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as RFC 3339 in UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
