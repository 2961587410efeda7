"""Typer CLI entrypoint for headline-crawler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import typer
from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, FeedSource, GlobalConfig, apply_environment
from .engine import Fetcher, PublishedStore
from .errors import ConfigError, DeliveryError
from .infra import SQLiteManager
from .logging_conf import available_logs, configure_logging, tail_log
from .notify import BaseNotifier, EmailNotifier, FileNotifier, TelegramNotifier
from .orchestrator import Orchestrator
from .runner import Runner, RunSummary
from .scheduler import APSchedulerAdapter

app = typer.Typer(help="headline-crawler command line", no_args_is_help=True, rich_markup_mode=None)
feeds_app = typer.Typer(name="feeds", help="Inspect configured feeds", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Inspect log files", no_args_is_help=True)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    global_config: GlobalConfig
    storage: SQLiteManager
    verbose: bool = False

    def open_store(self) -> PublishedStore:
        root = self.repository.locator.project_root
        return PublishedStore(self.storage, self.global_config.resolved_history_path(root))

    def build_notifier(self) -> BaseNotifier:
        if self.global_config.delivery.target == "email":
            return EmailNotifier(self.global_config.mail)
        if self.global_config.delivery.target == "telegram":
            return TelegramNotifier(self.global_config.telegram)
        root = self.repository.locator.project_root
        return FileNotifier(
            self.global_config.resolved_outputs_dir(root),
            fmt=self.global_config.delivery.file_format,
        )

    def build_runner(self) -> Runner:
        feeds = self.repository.load_feeds()
        logger = configure_logging(self.verbose)
        fetcher = Fetcher(self.global_config, logger=logger)
        return Runner(
            global_config=self.global_config,
            feeds=feeds,
            store=self.open_store(),
            notifier=self.build_notifier(),
            orchestrator=Orchestrator(self.global_config, logger, fetcher=fetcher),
            logger=logger,
        )


def build_state(verbose: bool) -> AppState:
    load_dotenv()
    configure_logging(verbose=verbose)
    repository = ConfigRepository()
    global_config = apply_environment(repository.load_global_config())
    return AppState(
        repository=repository,
        global_config=global_config,
        storage=SQLiteManager(),
        verbose=verbose,
    )


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _render_feeds_table(feeds: Sequence[FeedSource]) -> Table:
    table = Table(title=f"Feeds · {len(feeds)} configured", box=box.SIMPLE_HEAD)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Header", style="cyan", no_wrap=True)
    table.add_column("Format", style="magenta")
    table.add_column("Agent", style="yellow")
    table.add_column("URL", style="green", overflow="fold")
    for index, feed in enumerate(feeds, start=1):
        agent = feed.agent or "bot"
        if feed.enhanced_headers:
            agent += " +nav"
        table.add_row(str(index), feed.header or "-", feed.format.value, agent, feed.url)
    return table


def _render_summary(summary: RunSummary) -> Table:
    table = Table(title="Run summary", box=box.MINIMAL_DOUBLE_HEAD, show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="cyan")
    table.add_row("Feeds", str(summary.feeds))
    table.add_row("Failed feeds", str(summary.failed_feeds))
    table.add_row("New articles", str(summary.new_articles))
    table.add_row("Delivered", "yes" if summary.delivered else "no")
    if summary.subject:
        table.add_row("Subject", summary.subject)
    if summary.skipped_reason:
        table.add_row("Skipped", summary.skipped_reason)
    return table


def _load_runner(state: AppState) -> Runner:
    try:
        return state.build_runner()
    except (FileNotFoundError, ConfigError, DeliveryError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging")
) -> None:
    ctx.obj = build_state(verbose)


@app.command("run", help="Ingest every feed once and deliver the new headlines.")
def run(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Skip delivery and do not mark articles published"),
    respect_schedule: bool = typer.Option(
        False, "--respect-schedule", help="Skip the run outside the configured hours for gated targets"
    ),
) -> None:
    state = _get_state(ctx)
    runner = _load_runner(state)
    try:
        summary = runner.run_once(dry_run=dry_run, respect_schedule=respect_schedule)
    except DeliveryError as exc:
        console.print(f"Delivery failed: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    finally:
        runner.close()
    console.print(_render_summary(summary))


@app.command("serve", help="Run on a cron schedule at the configured hours.")
def serve(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    runner = _load_runner(state)
    adapter = APSchedulerAdapter(state.global_config.schedule, blocking=True)
    adapter.schedule_run(runner.run_once)
    hours = ", ".join(f"{hour:02d}:00" for hour in state.global_config.schedule.hours)
    console.print(f"Scheduled at {hours} ({state.global_config.schedule.timezone}); Ctrl+C to stop.")
    try:
        adapter.start()
    except (KeyboardInterrupt, SystemExit):
        adapter.shutdown()
    finally:
        runner.close()


@feeds_app.command("list", help="Show configured feeds in declaration order.")
def feeds_list(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    try:
        feeds = state.repository.load_feeds()
    except (FileNotFoundError, ConfigError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1) from exc
    console.print(_render_feeds_table(feeds))


@app.command("history", help="Show recently published articles.")
def history(ctx: typer.Context, limit: int = typer.Option(20, "--limit", min=1)) -> None:
    state = _get_state(ctx)
    rows = state.open_store().recent(limit)
    if not rows:
        console.print("No published articles yet.", style="yellow")
        return
    table = Table(title="Published", box=box.SIMPLE_HEAD)
    table.add_column("GUID", style="cyan", overflow="fold")
    table.add_column("Title")
    table.add_column("Published at", style="green")
    for guid, title, published_at in rows:
        table.add_row(guid, title or "", published_at or "")
    console.print(table)


@app.command("reset", help="Forget every published article.")
def reset(
    ctx: typer.Context, yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")
) -> None:
    state = _get_state(ctx)
    if not yes and not typer.confirm("Clear the published history?"):
        raise typer.Exit(code=1)
    state.open_store().reset()
    console.print("Published history cleared.", style="green")


@log_app.command("list", help="List available log files.")
def log_list() -> None:
    logs = list(available_logs())
    if not logs:
        console.print("No log files yet.", style="yellow")
        return
    for path in logs:
        console.print(f"- {path}")


@log_app.command("show", help="Print the tail of a log file.")
def log_show(
    name: Optional[str] = typer.Argument(None, help="Log file name; defaults to crawler.log"),
    lines: int = typer.Option(50, "--lines", "-n", min=1),
) -> None:
    wanted = name or "crawler.log"
    match = next((path for path in available_logs() if path.name == wanted), None)
    if match is None:
        console.print(f"Log not found: {wanted}", style="red")
        raise typer.Exit(code=1)
    for line in tail_log(match, lines):
        console.print(line.rstrip("\n"), markup=False, highlight=False)


app.add_typer(feeds_app, name="feeds")
app.add_typer(log_app, name="log")


def run_cli() -> None:  # pragma: no cover
    app()


__all__ = ["app", "build_state", "AppState", "run_cli"]
