"""
Command-line interface for the trending digest.

Uses Typer to provide a CLI with options for the main configuration
settings. Loads .env files so model, host and webhook settings can be
provided through the environment.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
import typer

from .config import AppConfig, apply_env, load_config
from .errors import TrendingDigestError
from .logging_utils import get_logger
from .runner import run_pipeline
from .store import FileSnapshotStore

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None) -> AppConfig:
    load_dotenv()
    return apply_env(load_config(str(config) if config else None))


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory."),
    provider: str | None = typer.Option(None, "--provider", help="Backend: ollama or gemini."),
    model: str | None = typer.Option(None, "--model", "-m", help="Model identifier."),
    concurrency: int | None = typer.Option(
        None, "--concurrency", help="Repositories summarized at once (1 is sequential)."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    html: bool | None = typer.Option(None, "--html/--no-html", help="Render index.html."),
    notify: bool = typer.Option(
        True, "--notify/--no-notify", help="Send Discord notifications when configured."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Run the trending digest pipeline once.

    Fetches the trending list, summarizes each README, and writes
    data.json, feed.xml and index.html to the output directory.
    """
    cfg = _load(config)

    if output is not None:
        cfg.output.dir = str(output)
    if provider:
        cfg.provider.name = provider
    if model:
        cfg.provider.model = model
    if concurrency is not None:
        cfg.enrich.concurrency = concurrency
    if html is not None:
        cfg.output.html_enabled = html
    if not notify:
        cfg.notify.discord_webhook_url = None
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    try:
        result = run_pipeline(cfg, show_progress=progress, console=console)
    except TrendingDigestError as exc:
        get_logger().error("Run failed: %s", exc, extra={"event": "pipeline_failed"})
        console.print(f"[bold red]error[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"Published {len(result.snapshot.items)}/{result.source_count} repositories "
        f"to {cfg.output.dir}"
    )


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output", "-o", help="Directory holding data.json."),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Serve the last published snapshot over HTTP."""
    import uvicorn

    from .server import create_app

    cfg = _load(config)
    if output is not None:
        cfg.output.dir = str(output)
    uvicorn.run(create_app(FileSnapshotStore(Path(cfg.output.dir)), cfg), host=host, port=port)


if __name__ == "__main__":
    app()
