"""Typer CLI entrypoint for Liqo."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.live import Live
from rich.table import Table

from .config import ConfigRepository, GlobalConfig, resolve_endpoint
from .dashboard import Dashboard
from .engine import ExportError, ExportService, IndexerClient, TableState
from .engine.exporter import EmailCaptureStore
from .infra import SQLiteManager
from .limits import PAGE_SIZE_OPTIONS, clamp_limit
from .logging_conf import available_log_files, configure_logging, log_path, tail_log
from .scheduler import APSchedulerAdapter
from .ui import render_dashboard, render_leaderboard, render_stats

app = typer.Typer(
    help="Liqo: cross-chain lending liquidations from the command line",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(name="config", help="Configuration commands", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Log inspection commands", no_args_is_help=True)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: GlobalConfig
    endpoint: str
    client: IndexerClient
    scheduler: APSchedulerAdapter
    export_service: ExportService
    storage: SQLiteManager


def build_state(verbose: bool, endpoint: str | None = None) -> AppState:
    configure_logging(verbose=verbose)
    repository = ConfigRepository()
    config = repository.load_global_config()
    resolved = resolve_endpoint(config, override=endpoint)
    client = IndexerClient.from_config(config, resolved)
    storage = SQLiteManager()

    capture_store = None
    capture_path = repository.capture_path()
    if capture_path is not None:
        capture_store = EmailCaptureStore(storage, capture_path)

    export_service = ExportService(client, config.export, capture_store=capture_store)
    return AppState(
        repository=repository,
        config=config,
        endpoint=resolved,
        client=client,
        scheduler=APSchedulerAdapter(),
        export_service=export_service,
        storage=storage,
    )


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _build_table_state(
    config: GlobalConfig,
    search: str,
    protocols: Optional[list[str]],
    chains: Optional[list[int]],
    sort: Optional[str],
    ascending: bool,
    page_size: Optional[int],
    page: int,
) -> TableState:
    size = page_size if page_size is not None else config.table.page_size
    if size not in PAGE_SIZE_OPTIONS:
        raise typer.BadParameter(
            f"--page-size must be one of {', '.join(str(o) for o in PAGE_SIZE_OPTIONS)}"
        )
    if page < 1:
        raise typer.BadParameter("--page must be >= 1")
    try:
        return TableState(
            search=search,
            protocols=frozenset(protocols or ()),
            chains=frozenset(chains or ()),
            sort_key=sort or config.table.sort_key,
            descending=not ascending if sort or ascending else config.table.descending,
            page_size=size,
            page_index=page - 1,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="Indexer GraphQL URL (overrides env and config)."
    ),
) -> None:
    ctx.obj = build_state(verbose, endpoint)


@app.command("watch", help="Poll recent liquidations and render a live table.")
def watch(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", help="Records requested per poll (1-100)."),
    interval_ms: Optional[int] = typer.Option(None, "--interval-ms", help="Poll period in milliseconds."),
    search: str = typer.Option("", "--search", "-q", help="Case-insensitive text filter."),
    protocol: Optional[list[str]] = typer.Option(None, "--protocol", help="Protocol filter (repeatable)."),
    chain: Optional[list[int]] = typer.Option(None, "--chain", help="Chain id filter (repeatable)."),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort column, e.g. timestamp or chainId."),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending instead of descending."),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Rows per page."),
    page: int = typer.Option(1, "--page", help="Page number (1-based)."),
    once: bool = typer.Option(False, "--once", help="Fetch once, render and exit."),
) -> None:
    state = _get_state(ctx)
    table_state = _build_table_state(
        state.config, search, protocol, chain, sort, ascending, page_size, page
    )
    if interval_ms is not None and interval_ms <= 0:
        raise typer.BadParameter("--interval-ms must be > 0")
    dashboard = Dashboard(
        state.config,
        state.client,
        scheduler=state.scheduler,
        limit=limit,
        interval_ms=interval_ms,
    )
    if once:
        dashboard.bootstrap()
        console.print(render_dashboard(dashboard.view(table_state)))
        return

    dashboard.start()
    try:
        with Live(render_dashboard(dashboard.view(table_state)), console=console, refresh_per_second=4) as live:
            rendered_version = dashboard.store.version
            while True:
                if dashboard.store.version != rendered_version:
                    rendered_version = dashboard.store.version
                    live.update(render_dashboard(dashboard.view(table_state)))
                time.sleep(0.25)
    except KeyboardInterrupt:
        console.print("Stopped.", style="dim")
    finally:
        dashboard.stop()
        state.scheduler.shutdown()
        state.client.close()


@app.command("export", help="Download the most recent liquidations as CSV.")
def export(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", help="Email address (required when the gate is on)."),
    limit: Optional[str] = typer.Option(None, "--limit", help="Number of records (1-10000, default 1000)."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Directory for the CSV file."),
) -> None:
    state = _get_state(ctx)
    try:
        result = state.export_service.export(email, limit)
    except ExportError as exc:
        console.print(f"Failed to generate CSV: {exc.message} ({exc.status_code})", style="red")
        raise typer.Exit(code=1)
    finally:
        state.client.close()
    directory = output_dir or state.repository.outputs_dir()
    path = state.export_service.save(result, directory)
    console.print(f"Saved {result.count} rows to {path}", style="green")


@app.command("leaderboard", help="Top liquidators ranked by total liquidations.")
def leaderboard(
    ctx: typer.Context,
    limit: Optional[str] = typer.Option(None, "--limit", help="Number of rows (1-100, default 50)."),
) -> None:
    state = _get_state(ctx)
    effective = clamp_limit(
        limit,
        default=state.config.leaderboard.default_limit,
        upper=state.config.leaderboard.max_limit,
    )
    rows = state.client.fetch_leaderboard(effective)
    state.client.close()
    console.print(render_leaderboard(rows))


@app.command("stats", help="Aggregate liquidation counters.")
def stats(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    current = state.client.fetch_stats()
    state.client.close()
    console.print(render_stats(current))


@app.command("serve", help="Run the HTTP service (export, proxy, listing).")
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    no_poll: bool = typer.Option(False, "--no-poll", help="Do not poll the indexer in the background."),
) -> None:
    import uvicorn

    from .server import create_app

    state = _get_state(ctx)
    config = state.config
    if no_poll:
        config = config.model_copy(update={"server": config.server.model_copy(update={"poll": False})})
    dashboard = Dashboard(config, state.client, scheduler=state.scheduler)
    application = create_app(config, state.client, state.export_service, dashboard=dashboard)
    console.print(f"Proxying indexer at {state.endpoint}", style="dim")
    try:
        uvicorn.run(application, host=host or config.server.host, port=port or config.server.port)
    finally:
        state.scheduler.shutdown()


@config_app.command("show", help="Print the effective configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    payload = json.loads(state.config.model_dump_json())
    console.print(f"# {state.repository.locator.global_config_path()}", style="dim")
    console.print(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), markup=False)
    console.print(f"# resolved endpoint: {state.endpoint}", style="dim")


@log_app.command("list", help="List available log files.")
def log_list() -> None:
    files = list(available_log_files())
    if not files:
        console.print("No log files yet.", style="dim")
        return
    table = Table(box=box.SIMPLE)
    table.add_column("Log", style="cyan")
    table.add_column("Path", style="green", overflow="fold")
    for path in files:
        table.add_row(path.stem, str(path))
    console.print(table)


@log_app.command("show", help="Show the last lines of a log file.")
def log_show(
    name: str = typer.Argument("liqo", help="Log name, e.g. liqo or error."),
    tail: int = typer.Option(100, "--tail", help="Number of trailing lines."),
) -> None:
    path = log_path(name)
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries.", style="dim")
        return
    console.print(f"{path} (last {len(lines)} lines)", style="cyan")
    console.print("".join(lines), markup=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
