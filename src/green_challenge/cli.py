"""CLI entry point for green-challenge.

Commands:
- seed: Write the seed reading history
- submit: Append an admin-submitted week to the history
- report: Build the dashboard and export it as JSON
- leaderboard: Print the cumulative leaderboard
- timeline: Print the competition calendar
"""

import os
from datetime import UTC, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from green_challenge import __version__
from green_challenge.config import Config, load_config
from green_challenge.ingest.admin import (
    AuthorizationError,
    InputValidationError,
    grant_admin,
    submit_week,
)
from green_challenge.ingest.seed import SEED_UNTIL, generate_historical_data
from green_challenge.logging import setup_logging
from green_challenge.metrics.orchestrator import build_dashboard
from green_challenge.storage.history import load_history, save_history

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="green-challenge")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file (defaults apply when omitted)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Residence hall utility competition scoring.

    Ranks halls on weekly electricity, gas and water use per square foot,
    awards 3/2/1 points per resource each week and keeps a cumulative
    leaderboard.

    \b
    Quick Start:
        1. Seed the history: green-challenge seed
        2. Export the dashboard: green-challenge report
        3. Show standings: green-challenge leaderboard
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = load_config(config_path) if config_path else Config()
    setup_logging(verbose=verbose)


def _history_path(ctx: click.Context, history: Path | None) -> Path:
    if history is not None:
        return history
    cfg: Config = ctx.obj["config"]
    return cfg.storage.history_path


def _load_or_abort(path: Path) -> list:
    try:
        return load_history(path)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise click.Abort() from e


history_option = click.option(
    "--history",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="History JSON file (defaults to storage.history_path)",
)


@main.command()
@history_option
@click.option("--seed", type=int, default=None, help="Random seed for reproducible data")
@click.option(
    "--until",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=SEED_UNTIL.isoformat(),
    show_default=True,
    help="Last date a seeded week may start on",
)
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing history")
@click.pass_context
def seed(
    ctx: click.Context,
    history: Path | None,
    seed: int | None,
    until: datetime,
    force: bool,
) -> None:
    """Write the seed reading history."""
    cfg: Config = ctx.obj["config"]
    path = _history_path(ctx, history)

    if path.exists() and not force:
        console.print(f"[bold red]Error:[/bold red] History already exists at {path}")
        console.print("[yellow]Use --force to overwrite it[/yellow]")
        raise click.Abort()

    readings = generate_historical_data(
        start=cfg.competition.start_date,
        until=until.date(),
        halls=cfg.buildings.hall_order,
        seed=seed,
    )
    save_history(path, readings)

    console.print(f"[bold green]Seeded {len(readings)} weeks[/bold green] to {path}")


@main.command()
@history_option
@click.option("--values", "values_text", default=None, help="Comma-separated readings")
@click.option(
    "--values-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File containing the comma-separated readings",
)
@click.option("--token", prompt=True, hide_input=True, help="Admin token")
@click.pass_context
def submit(
    ctx: click.Context,
    history: Path | None,
    values_text: str | None,
    values_file: Path | None,
    token: str,
) -> None:
    """Append an admin-submitted week to the history.

    Values are three per hall (electricity, gas, water) in the configured
    hall order.
    """
    cfg: Config = ctx.obj["config"]
    path = _history_path(ctx, history)

    if (values_text is None) == (values_file is None):
        console.print("[bold red]Error:[/bold red] Pass exactly one of --values or --values-file")
        raise click.Abort()

    text = values_text if values_text is not None else values_file.read_text()  # type: ignore[union-attr]
    readings = _load_or_abort(path)
    now = datetime.now(UTC)

    try:
        capability = grant_admin(token, os.environ.get(cfg.admin.token_env), now)
        updated = submit_week(readings, text, capability, now, cfg.buildings.hall_order)
    except (AuthorizationError, InputValidationError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise click.Abort() from e

    save_history(path, updated)
    console.print(f"[bold green]Week {len(updated)} submitted[/bold green]")


@main.command()
@history_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (defaults to report.output_dir)",
)
@click.option("--week", type=int, default=None, help="Week to report on (defaults to latest)")
@click.pass_context
def report(ctx: click.Context, history: Path | None, output_dir: Path | None, week: int | None) -> None:
    """Build the dashboard and export it as JSON."""
    from green_challenge.report.export import export_dashboard

    cfg: Config = ctx.obj["config"]
    readings = _load_or_abort(_history_path(ctx, history))
    target = output_dir if output_dir is not None else cfg.report.output_dir

    try:
        dashboard = build_dashboard(readings, cfg, datetime.now(UTC), week=week)
        export_stats = export_dashboard(dashboard, readings, cfg, target)
    except Exception as e:
        console.print(f"\n[bold red]Report failed:[/bold red] {e}")
        if ctx.obj.get("verbose"):
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc())
        raise click.Abort() from e

    console.print(f"[bold green]Report written[/bold green] for week {dashboard['selected_week']}")
    for filepath in export_stats["files_written"]:
        console.print(f"  ✓ {filepath}")

    for warning in dashboard["warnings"]:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in dashboard["stats"]["errors"]:
        console.print(f"[red]Stage error:[/red] {error}")


@main.command()
@history_option
@click.option("--week", type=int, default=None, help="Week to rank through (defaults to latest)")
@click.option("--top", type=int, default=None, help="Only show the first N halls")
@click.pass_context
def leaderboard(ctx: click.Context, history: Path | None, week: int | None, top: int | None) -> None:
    """Print the cumulative leaderboard."""
    cfg: Config = ctx.obj["config"]
    readings = _load_or_abort(_history_path(ctx, history))

    try:
        dashboard = build_dashboard(readings, cfg, datetime.now(UTC), week=week)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise click.Abort() from e

    entries = dashboard["leaderboard"]
    if top is not None:
        entries = entries[:top]

    if not entries:
        console.print("[yellow]No weekly data yet[/yellow]")
        return

    title = f"{cfg.competition.name}: week {dashboard['selected_week']}"
    if dashboard["competition_complete"]:
        title += " (final results)"
    table = Table(title=title)
    table.add_column("Rank", justify="right")
    table.add_column("Hall")
    table.add_column("Points", justify="right")
    for rank, entry in enumerate(entries, 1):
        table.add_row(str(rank), entry.name, str(entry.points))
    console.print(table)


@main.command()
@history_option
@click.pass_context
def timeline(ctx: click.Context, history: Path | None) -> None:
    """Print the competition calendar."""
    cfg: Config = ctx.obj["config"]
    readings = _load_or_abort(_history_path(ctx, history))
    dashboard = build_dashboard(readings, cfg, datetime.now(UTC))

    for warning in dashboard["warnings"]:
        console.print(f"[bold red]Timeline Data Error:[/bold red] {warning}")

    table = Table(title=f"{cfg.competition.name} {cfg.competition.season}")
    table.add_column("Week", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")
    for event in dashboard["timeline"]:
        if event.is_current_week:
            status = "[bold]current[/bold]"
        elif event.is_future:
            status = "[dim]no data[/dim]"
        else:
            status = "scored"
        table.add_row(
            str(event.week_number),
            event.start_date.isoformat(),
            event.end_date.isoformat(),
            status,
        )
    console.print(table)


if __name__ == "__main__":
    main()
