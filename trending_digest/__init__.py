"""
Trending Digest - daily GitHub trending with Japanese summaries.

This package fetches the daily GitHub trending list, summarizes each
repository's README with a pluggable text-generation backend, and
publishes the result as JSON, RSS, a static HTML page and optional
Discord notifications.

Main entry point is the CLI via `trending-digest run` command.

Example:
    $ OLLAMA_MODEL=gemma3 trending-digest run -o public/
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
