"""
Configuration management using YAML files, environment variables and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Trending feed location
- ReadmeConfig: README lookup settings
- ProviderConfig: Text-generation backend settings
- SummaryConfig: Summarization limits
- EnrichConfig: Per-item fan-out settings
- OutputConfig: Published artifact settings
- NotifyConfig: Discord webhook settings
- LoggingConfig: Logging behavior
- RunConfig: Single-flight guard settings
- AppConfig: Root configuration container

Environment variables are applied on top of the YAML values by ``apply_env``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any, Mapping

import yaml

from .errors import ConfigError


DEFAULT_TRENDING_URL = (
    "https://raw.githubusercontent.com/isboyjc/github-trending-api/main/data/daily/all.json"
)


@dataclass
class SourceConfig:
    """Configuration for the trending feed.

    Attributes:
        url: JSON resource returning ``{"items": [...]}``
        timeout_seconds: HTTP request timeout
    """

    url: str = DEFAULT_TRENDING_URL
    timeout_seconds: float = 300.0


@dataclass
class ReadmeConfig:
    """Configuration for README lookup.

    Attributes:
        host: Raw content host
        branches: Branch names tried in order
        filename: README file name
        timeout_seconds: HTTP request timeout per candidate
    """

    host: str = "https://raw.githubusercontent.com"
    branches: list[str] = field(default_factory=lambda: ["main", "master"])
    filename: str = "README.md"
    timeout_seconds: float = 300.0


@dataclass
class ProviderConfig:
    """Configuration for the text-generation backend.

    Attributes:
        name: Provider name ("ollama" or "gemini")
        model: Model identifier (required)
        base_url: Base URL for the provider API (empty uses the provider default)
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
        timeout_seconds: Generation request timeout
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "ollama"
    model: str = ""
    base_url: str = ""
    api_key_env: str = "GOOGLE_API_KEY"
    api_key: str | None = None
    timeout_seconds: float = 1800.0
    trust_env: bool = True


@dataclass
class SummaryConfig:
    """Configuration for summarization.

    Attributes:
        max_chars: Maximum characters of README text sent to the backend
        max_summary_chars: Character budget stated in the prompt
    """

    max_chars: int = 10000
    max_summary_chars: int = 100


@dataclass
class EnrichConfig:
    """Configuration for per-item enrichment.

    Attributes:
        concurrency: Number of items enriched at once (1 is sequential)
    """

    concurrency: int = 4


@dataclass
class OutputConfig:
    """Configuration for published artifacts.

    Attributes:
        dir: Output directory for all artifacts
        json_filename: Structured snapshot file name
        feed_filename: RSS feed file name
        html_filename: Static page file name
        html_enabled: Whether to render the static page
        site_url: Public site URL used as the feed link
        feed_title: RSS channel title
        feed_description: RSS channel description
    """

    dir: str = "public"
    json_filename: str = "data.json"
    feed_filename: str = "feed.xml"
    html_filename: str = "index.html"
    html_enabled: bool = True
    site_url: str = "https://github-trending-ja.yashikota.com"
    feed_title: str = "GitHub Trending 日本語まとめ"
    feed_description: str = "1日のGitHub Trendingを日本語で紹介"


@dataclass
class NotifyConfig:
    """Configuration for Discord notifications.

    Attributes:
        discord_webhook_url: Webhook URL; None disables notifications
        delay_seconds: Pause between consecutive sends
        timeout_seconds: HTTP request timeout per send
    """

    discord_webhook_url: str | None = None
    delay_seconds: float = 0.5
    timeout_seconds: float = 300.0


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file inside the output directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class RunConfig:
    """Configuration for the single-flight run guard.

    Attributes:
        lock_filename: Lock file name inside the output directory
        lock_stale_seconds: Age after which an existing lock is replaced
    """

    lock_filename: str = ".run.lock"
    lock_stale_seconds: int = 21600


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    readme: ReadmeConfig = field(default_factory=ReadmeConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    run: RunConfig = field(default_factory=RunConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return _merge_config(AppConfig(), raw)


def apply_env(cfg: AppConfig, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Apply environment overrides to a loaded configuration."""
    env = os.environ if environ is None else environ

    provider = env.get("TRENDING_PROVIDER")
    if provider:
        cfg.provider.name = provider
    model = env.get("TRENDING_MODEL") or env.get("OLLAMA_MODEL")
    if model:
        cfg.provider.model = model
    ollama_host = env.get("OLLAMA_HOST")
    if ollama_host and cfg.provider.name.lower() == "ollama":
        cfg.provider.base_url = ollama_host
    webhook = env.get("DISCORD_WEBHOOK_URL")
    if webhook:
        cfg.notify.discord_webhook_url = webhook
    output_dir = env.get("TRENDING_OUTPUT_DIR")
    if output_dir:
        cfg.output.dir = output_dir
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Fail fast on configuration that would make every run useless."""
    if not cfg.provider.model.strip():
        raise ConfigError("Model is not set. Set OLLAMA_MODEL / TRENDING_MODEL or provider.model.")
    if cfg.enrich.concurrency < 1:
        raise ConfigError("enrich.concurrency must be at least 1")
    if not cfg.readme.branches:
        raise ConfigError("readme.branches must list at least one branch")


def get_api_key(cfg: ProviderConfig, environ: Mapping[str, str] | None = None) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    env = os.environ if environ is None else environ
    return env.get(cfg.api_key_env)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            source=SourceConfig(**data["source"]),
            readme=ReadmeConfig(**data["readme"]),
            provider=ProviderConfig(**data["provider"]),
            summary=SummaryConfig(**data["summary"]),
            enrich=EnrichConfig(**data["enrich"]),
            output=OutputConfig(**data["output"]),
            notify=NotifyConfig(**data["notify"]),
            logging=LoggingConfig(**data["logging"]),
            run=RunConfig(**data["run"]),
        )
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
