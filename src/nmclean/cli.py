"""CLI interface for nmclean."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from nmclean import __version__
from nmclean.config import CleanerConfig, load_config
from nmclean.display import console, show_scan_report
from nmclean.errors import ConfigError
from nmclean.logs import setup_logging
from nmclean.models import TargetFound
from nmclean.scanner import scan_events

# Create Typer app
app = typer.Typer(
    name="nmclean",
    help="Find node_modules (or any named) folders and delete them interactively",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nmclean version {__version__}")
        raise typer.Exit()


def _build_config(ctx: typer.Context, **overrides) -> CleanerConfig:
    """Merge config file and CLI options, exiting on bad input."""
    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not config.root.is_dir():
        console.print(f"[red]Not a directory: {escape(str(config.root))}[/red]")
        raise typer.Exit(1)
    return config


def _launch(
    ctx: typer.Context,
    root: Optional[Path] = None,
    target: Optional[str] = None,
    dry_run: Optional[bool] = None,
    yes: bool = False,
    workers: Optional[int] = None,
) -> None:
    config = _build_config(
        ctx,
        root=root,
        target_name=target,
        dry_run=dry_run or None,
        confirm_delete=False if yes else None,
        max_workers=workers,
    )

    # The TUI owns the terminal, so only a log file can receive records.
    obj = ctx.obj or {}
    setup_logging(verbose=obj.get("verbose", False), log_file=obj.get("log_file"))

    from nmclean.tui import run_tui

    run_tui(config)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log at DEBUG level."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Append log records to this file."),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default: ~/.nmclean/config.json)."
    ),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Folder name to look for"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate deletion without removing anything"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the confirmation before deleting"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Threads for sizing and deleting"),
) -> None:
    """nmclean - interactive cleaner for dependency folders."""
    ctx.obj = {
        "verbose": verbose,
        "log_file": log_file,
        "config_path": config,
        "target": target,
        "dry_run": dry_run,
        "yes": yes,
        "workers": workers,
    }

    # If no command specified, clean the current directory
    if ctx.invoked_subcommand is None:
        _launch(ctx, target=target, dry_run=dry_run, yes=yes, workers=workers)


@app.command()
def clean(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Directory to scan (default: current directory)"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Folder name to look for"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate deletion without removing anything"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the confirmation before deleting"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Threads for sizing and deleting"),
) -> None:
    """Browse found folders and delete the selected ones (default)."""
    # Options given before the command name apply too
    obj = ctx.obj or {}
    _launch(
        ctx,
        root=root,
        target=target or obj.get("target"),
        dry_run=dry_run or obj.get("dry_run", False),
        yes=yes or obj.get("yes", False),
        workers=workers if workers is not None else obj.get("workers"),
    )


@app.command()
def scan(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Directory to scan (default: current directory)"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Folder name to look for"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Threads for sizing"),
) -> None:
    """List found folders and their sizes without deleting anything."""
    obj = ctx.obj or {}
    config = _build_config(
        ctx,
        root=root,
        target_name=target or obj.get("target"),
        max_workers=workers if workers is not None else obj.get("workers"),
    )
    setup_logging(verbose=ctx.obj["verbose"], log_file=ctx.obj["log_file"], console=console)

    found: list[TargetFound] = []
    with console.status(f"[bold blue]Scanning {escape(str(config.root))} for {escape(config.target_name)}...[/bold blue]"):
        for event in scan_events(
            config.root,
            config.target_name,
            max_workers=config.max_workers,
            exclude=config.exclude,
        ):
            if isinstance(event, TargetFound):
                found.append(event)

    show_scan_report(found, str(config.root), config.target_name)


if __name__ == "__main__":
    app()
