"""Tests for the enrichment orchestrator."""

from __future__ import annotations

import asyncio

import pytest

from trending_digest.core.types import TrendingItem
from trending_digest.enrich import Enricher, split_identifier
from trending_digest.summarize import SUMMARY_FAILED


class _AbsentReadme:
    def __init__(self):
        self.calls = []

    async def fetch(self, owner, name):
        self.calls.append((owner, name))
        return None


class _FixedSummarizer:
    def __init__(self, summary="要約"):
        self.summary = summary
        self.inputs = []

    async def summarize(self, text):
        self.inputs.append(text)
        return self.summary


def _item(title, description="", stars="0", add_stars="0", forks="0"):
    return TrendingItem(
        title=title,
        url=f"https://github.com/{title}",
        description=description,
        stars=stars,
        add_stars=add_stars,
        forks=forks,
    )


def _enrich(enricher, items):
    return asyncio.run(enricher.enrich(items))


@pytest.mark.parametrize(
    "title, expected",
    [
        ("a/b", ("a", "b")),
        ("bad", None),
        ("a/b/c", None),
        ("/b", None),
        ("a/", None),
    ],
)
def test_split_identifier(title, expected):
    assert split_identifier(title) == expected


def test_malformed_identifier_is_omitted():
    items = [
        _item("a/b", description="foo", stars="10", add_stars="2", forks="1"),
        _item("bad", description="x", stars="5", add_stars="0", forks="0"),
    ]
    summarizer = _FixedSummarizer("要約")

    result = _enrich(Enricher(_AbsentReadme(), summarizer), items)

    assert len(result) == 1
    assert result[0].title == "a/b"
    assert result[0].summary == "要約"
    assert result[0].stars == "10"
    assert result[0].add_stars == "2"
    assert result[0].forks == "1"


def test_description_is_used_when_readme_is_absent():
    summarizer = _FixedSummarizer()

    _enrich(Enricher(_AbsentReadme(), summarizer), [_item("a/b", description="foo")])

    assert summarizer.inputs == ["foo"]


def test_readme_text_is_preferred_over_description():
    class _Readme:
        async def fetch(self, owner, name):
            return f"# {owner}/{name}"

    summarizer = _FixedSummarizer()

    _enrich(Enricher(_Readme(), summarizer), [_item("a/b", description="foo")])

    assert summarizer.inputs == ["# a/b"]


def test_empty_description_and_no_readme_passes_empty_text():
    summarizer = _FixedSummarizer()

    _enrich(Enricher(_AbsentReadme(), summarizer), [_item("a/b", description="")])

    assert summarizer.inputs == [""]


def test_output_order_matches_input_despite_completion_order():
    delays = {"a/slow": 0.05, "b/medium": 0.02, "c/fast": 0.0}

    class _SlowReadme:
        async def fetch(self, owner, name):
            await asyncio.sleep(delays[f"{owner}/{name}"])
            return f"{owner}/{name}"

    class _EchoSummarizer:
        async def summarize(self, text):
            return f"summary of {text}"

    items = [_item("a/slow"), _item("b/medium"), _item("c/fast")]

    result = _enrich(Enricher(_SlowReadme(), _EchoSummarizer(), concurrency=3), items)

    assert [r.title for r in result] == ["a/slow", "b/medium", "c/fast"]
    assert [r.summary for r in result] == [
        "summary of a/slow",
        "summary of b/medium",
        "summary of c/fast",
    ]


def test_concurrency_is_bounded():
    in_flight = 0
    peak = 0

    class _TrackingReadme:
        async def fetch(self, owner, name):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return None

    items = [_item(f"o/r{i}") for i in range(8)]

    _enrich(Enricher(_TrackingReadme(), _FixedSummarizer(), concurrency=2), items)

    assert peak == 2


def test_failure_in_one_item_does_not_affect_others():
    class _FlakyReadme:
        async def fetch(self, owner, name):
            if name == "broken":
                raise RuntimeError("unexpected")
            return "readme"

    items = [_item("a/ok"), _item("a/broken"), _item("a/fine")]

    result = _enrich(Enricher(_FlakyReadme(), _FixedSummarizer("ok")), items)

    assert [r.summary for r in result] == ["ok", SUMMARY_FAILED, "ok"]


def test_summary_is_never_empty():
    result = _enrich(Enricher(_AbsentReadme(), _FixedSummarizer("")), [_item("a/b")])

    assert result[0].summary == SUMMARY_FAILED


def test_enrich_is_deterministic_for_identical_input():
    items = [_item("a/b", description="foo"), _item("bad"), _item("c/d", description="bar")]
    enricher = Enricher(_AbsentReadme(), _FixedSummarizer("要約"), concurrency=4)

    assert _enrich(enricher, items) == _enrich(enricher, items)


def test_progress_callback_runs_once_per_item():
    ticks = []
    items = [_item("a/b"), _item("bad"), _item("c/d")]
    enricher = Enricher(_AbsentReadme(), _FixedSummarizer())

    asyncio.run(enricher.enrich(items, on_item_done=lambda: ticks.append(1)))

    assert len(ticks) == 3
