"""
Snapshot publishers.

JSON snapshot, RSS feed, static HTML page and Discord notifications.
"""

from .discord import DiscordNotifier, build_messages, language_to_color
from .feed import build_feed, write_feed
from .page import render_html, write_html
from .json_writer import deserialize_snapshot, load_snapshot, serialize_snapshot, write_json

__all__ = [
    "DiscordNotifier",
    "build_messages",
    "language_to_color",
    "build_feed",
    "write_feed",
    "render_html",
    "write_html",
    "serialize_snapshot",
    "deserialize_snapshot",
    "load_snapshot",
    "write_json",
]
