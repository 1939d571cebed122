"""End-to-end pipeline tests with a mocked network."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import json
import logging

import httpx
import pytest

from trending_digest import runner
from trending_digest.config import AppConfig
from trending_digest.errors import ConfigError, PublishError, SourceMalformed, SourceUnavailable
from trending_digest.output.json_writer import load_snapshot
from trending_digest.store import MemorySnapshotStore, SnapshotStore


GENERATED_AT = datetime(2026, 10, 17, 0, 0, 0, tzinfo=timezone.utc)

TRENDING = {
    "items": [
        {"title": "a/b", "url": "https://github.com/a/b", "description": "foo",
         "language": "Rust", "languageColor": "#dea584",
         "stars": "10", "forks": "1", "addStars": "2", "contributors": []},
        {"title": "bad", "url": "https://github.com/bad", "description": "x",
         "stars": "5", "forks": "0", "addStars": "0", "contributors": []},
        {"title": "c/d", "url": "https://github.com/c/d", "description": "",
         "stars": "7", "forks": "3", "addStars": "1", "contributors": []},
    ]
}


def _cfg(**notify):
    cfg = AppConfig()
    cfg.provider.model = "gemma3"
    cfg.source.url = "https://feed.example.com/all.json"
    cfg.readme.host = "https://raw.example.com"
    cfg.notify.delay_seconds = 0
    cfg.notify.discord_webhook_url = notify.get("webhook")
    return cfg


class _Network:
    """Routes requests by host and records them."""

    def __init__(self, trending=None, readmes=None, summary="要約", feed_status=200):
        self.trending = TRENDING if trending is None else trending
        self.readmes = readmes or {}
        self.summary = summary
        self.feed_status = feed_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == "feed.example.com":
            return httpx.Response(self.feed_status, json=self.trending)
        if host == "raw.example.com":
            text = self.readmes.get(request.url.path)
            return httpx.Response(200, text=text) if text else httpx.Response(404)
        if host == "localhost":
            prompt = json.loads(request.content)["prompt"]
            return httpx.Response(200, json={"response": f" {self.summary}:{prompt[-3:]} "})
        if host == "discord.example.com":
            return httpx.Response(204)
        raise AssertionError(f"unexpected request {request.url}")

    def count(self, host):
        return sum(1 for r in self.requests if r.url.host == host)


def _run(cfg, store, network):
    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(network)) as client:
            return await runner.run_once(
                cfg,
                store,
                client=client,
                logger=logging.getLogger("test_runner"),
                clock=lambda: GENERATED_AT,
            )

    return asyncio.run(_go())


def test_run_publishes_snapshot_feed_and_page():
    store = MemorySnapshotStore()
    network = _Network(readmes={"/a/b/master/README.md": "# a/b readme"})

    result = _run(_cfg(), store, network)

    snapshot = load_snapshot(store, "data.json")
    assert snapshot == result.snapshot
    assert [i.title for i in snapshot.items] == ["a/b", "c/d"]
    assert snapshot.items[0].summary == "要約:dme"
    assert snapshot.items[1].summary == "説明なし"
    assert snapshot.generated_at == GENERATED_AT
    assert result.source_count == 3
    assert result.feed_written is True
    assert result.html_written is True
    assert result.notified == 0
    assert store.get("feed.xml").count("<item>") == 2
    assert "a/b" in store.get("index.html")


def test_run_sends_one_notification_per_item():
    network = _Network()

    result = _run(_cfg(webhook="https://discord.example.com/hook"), MemorySnapshotStore(), network)

    assert result.notified == 2
    assert network.count("discord.example.com") == 2


def test_source_failure_keeps_previous_snapshot():
    store = MemorySnapshotStore({"data.json": '{"items": [], "generatedAt": "2026-10-16T00:00:00Z"}'})

    with pytest.raises(SourceUnavailable):
        _run(_cfg(), store, _Network(feed_status=500))

    assert load_snapshot(store, "data.json").generated_at.day == 16


def test_malformed_source_aborts_run():
    store = MemorySnapshotStore()

    with pytest.raises(SourceMalformed):
        _run(_cfg(), store, _Network(trending={"data": []}))

    assert store.get("data.json") is None


def test_missing_model_aborts_before_network():
    cfg = _cfg()
    cfg.provider.model = ""
    network = _Network()

    with pytest.raises(ConfigError):
        _run(cfg, MemorySnapshotStore(), network)

    assert network.requests == []


def test_json_write_failure_is_fatal():
    class _ReadOnlyStore(SnapshotStore):
        def get(self, key):
            return None

        def put(self, key, value):
            raise PermissionError("read-only")

    with pytest.raises(PublishError):
        _run(_cfg(), _ReadOnlyStore(), _Network())


def test_feed_failure_does_not_roll_back_snapshot(monkeypatch):
    def broken_feed(snapshot, cfg):
        raise RuntimeError("feed broke")

    monkeypatch.setattr("trending_digest.output.feed.build_feed", broken_feed)
    store = MemorySnapshotStore()

    result = _run(_cfg(), store, _Network())

    assert result.feed_written is False
    assert store.get("feed.xml") is None
    assert len(load_snapshot(store, "data.json").items) == 2


def test_run_pipeline_writes_files_and_releases_lock(tmp_path, monkeypatch):
    cfg = _cfg()
    cfg.output.dir = str(tmp_path / "public")
    cfg.logging.console = False
    network = _Network()

    real_client = httpx.AsyncClient

    def fake_build_client(_cfg):
        return real_client(transport=httpx.MockTransport(network))

    monkeypatch.setattr(runner, "_build_client", fake_build_client)

    result = runner.run_pipeline(cfg, show_progress=False)

    public = tmp_path / "public"
    assert len(result.snapshot.items) == 2
    assert json.loads((public / "data.json").read_text(encoding="utf-8"))["items"][0]["title"] == "a/b"
    assert (public / "feed.xml").exists()
    assert (public / "index.html").exists()
    assert not (public / ".run.lock").exists()
