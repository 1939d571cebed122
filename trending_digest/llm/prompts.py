"""Prompt loading and rendering helpers for text-generation backends."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: object) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_summary_prompt(content: str, max_summary_chars: int) -> str:
    """Render the Japanese README summary instruction.

    ``content`` must already be truncated by the caller.
    """
    return _render_template("summary_ja", max_summary_chars=max_summary_chars, content=content)


def template_overhead(max_summary_chars: int) -> int:
    """Length of the rendered template without any content."""
    return len(build_summary_prompt("", max_summary_chars))
