"""
README lookup across conventional default branches.

Absence of a README is an expected outcome, so every failure mode
(transport error, non-200 status) falls through to the next candidate
and finally to ``None``.
"""

from __future__ import annotations

import logging

import httpx

from ..config import ReadmeConfig
from ..logging_utils import get_logger, log_event


class ReadmeFetcher:
    """Retrieves a repository's README text from the raw content host."""

    def __init__(
        self,
        cfg: ReadmeConfig,
        client: httpx.AsyncClient,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.client = client
        self.logger = logger or get_logger("readme")

    def candidate_urls(self, owner: str, name: str) -> list[str]:
        host = self.cfg.host.rstrip("/")
        return [
            f"{host}/{owner}/{name}/{branch}/{self.cfg.filename}"
            for branch in self.cfg.branches
        ]

    async def fetch(self, owner: str, name: str) -> str | None:
        """Return the first README found, or None when every candidate fails."""
        for url in self.candidate_urls(owner, name):
            try:
                resp = await self.client.get(url, timeout=self.cfg.timeout_seconds)
            except httpx.HTTPError as exc:
                log_event(
                    self.logger,
                    "README candidate failed",
                    level=logging.DEBUG,
                    event="readme_candidate_failed",
                    url=url,
                    error=f"{type(exc).__name__}: {exc}",
                )
                continue
            if resp.status_code == 200:
                return resp.text
            log_event(
                self.logger,
                "README candidate missing",
                level=logging.DEBUG,
                event="readme_candidate_missing",
                url=url,
                status_code=resp.status_code,
            )
        return None
