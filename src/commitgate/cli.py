"""commitgate CLI — Typer application with check, validate, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from commitgate import __version__

app = typer.Typer(
    name="commitgate",
    help="Enforce repository policy on commits.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _load_configuration(conf: Optional[str]):
    from commitgate.conf.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), conf)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    commit: Path = typer.Option(..., "--commit", help="YAML file describing one or more commits"),
    conf: Optional[str] = typer.Option(None, "--conf", "-c", help="Path to configuration file"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop at the first error; earlier warnings are still reported",
    ),
    workers: int = typer.Option(1, "--workers", "-j", help="Commits checked in parallel"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Run the enabled checks over the commits in a YAML file."""
    from commitgate.checks.registry import UnknownCheckError, build_registry
    from commitgate.engine.runner import CheckError, run, run_all
    from commitgate.output import json_report, terminal
    from commitgate.vcs.loader import CommitLoadError, load_commits
    from commitgate.vcs.message import parse_message

    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    cfg = _load_configuration(conf)
    registry = build_registry()

    try:
        commits = load_commits(commit)
    except CommitLoadError as exc:
        console.print(f"[bold red]Commit error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if verbose or debug:
        console.print(f"[dim]Checks enabled: {', '.join(cfg.checks.enabled) or 'none'}[/dim]")
        console.print(f"[dim]Commits: {len(commits)}[/dim]")

    items = [(c, parse_message(c)) for c in commits]

    try:
        if fail_fast:
            registry.enabled_checks(cfg)
            reports = []
            for c, m in items:
                report = run(c, m, cfg, registry, fail_fast=True)
                reports.append(report)
                if report.blocked:
                    break
        else:
            reports = run_all(items, cfg, registry, max_workers=workers)
    except UnknownCheckError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except CheckError as exc:
        console.print(f"[bold red]Check error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    report_text: Optional[str] = None
    if format == "terminal":
        terminal.render(reports)
    else:
        report_text = json_report.render(reports)
        print(report_text)

    if output:
        Path(output).write_text(report_text or json_report.render(reports), encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    if any(r.blocked for r in reports):
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── validate ──────────────────────────────────────────────────────────────────


@app.command()
def validate(
    conf: Optional[str] = typer.Option(None, "--conf", "-c", help="Path to configuration file"),
) -> None:
    """Parse the configuration and show what it enables."""
    from commitgate.checks.registry import UnknownCheckError, build_registry

    cfg = _load_configuration(conf)
    try:
        build_registry().enabled_checks(cfg)
    except UnknownCheckError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.general.project:
        console.print(f"[bold]Project:[/bold] {cfg.general.project}")
    for name in cfg.checks.enabled:
        console.print(f"  [cyan]{name}[/cyan]  severity=[yellow]{cfg.checks.severity_of(name).value}[/yellow]")
    if not cfg.checks.enabled:
        console.print("[dim]No checks enabled.[/dim]")

    if cfg.checks.binary.limits:
        table = Table(title="Binary file limits", title_style="bold", border_style="dim")
        table.add_column("#", justify="right")
        table.add_column("Pattern", style="magenta")
        table.add_column("Limit (bytes)", justify="right", style="green")
        for i, (pattern, limit) in enumerate(cfg.checks.binary.limits, 1):
            table.add_row(str(i), pattern.pattern, str(limit))
        console.print(table)

    console.print("[green]✓[/green] Configuration is valid")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .commitgate/conf in the current directory."""
    from commitgate.conf.defaults import DEFAULT_CONF
    from commitgate.conf.loader import CONFIG_PATH

    config_path = Path.cwd() / CONFIG_PATH
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_PATH} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONF, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"commitgate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """commitgate — Enforce repository policy on commits."""
