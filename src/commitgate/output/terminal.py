"""Rich terminal reporter — colour, icons, severity pills."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from commitgate.engine.models import CheckReport

_SEVERITY_STYLE = {
    "error": "bold white on red",
    "warning": "bold black on yellow",
}

_SEVERITY_ICON = {
    "error": "🔴",
    "warning": "🟡",
}


def _severity_pill(severity: str) -> Text:
    value = getattr(severity, "value", severity)
    style = _SEVERITY_STYLE.get(value, "")
    icon = _SEVERITY_ICON.get(value, "")
    return Text(f" {icon} {value.upper()} ", style=style)


def render(
    reports: Sequence[CheckReport],
    *,
    show_summary: bool = True,
    console: Console | None = None,
) -> None:
    """Print check results to the terminal using Rich."""
    console = console or Console(stderr=True)
    issues = [i for r in reports for i in r.issues]

    if not issues:
        console.print()
        console.print("[bold green]✅ No issues found — commits comply with policy.[/bold green]")
        if show_summary:
            _print_summary(console, reports)
        return

    console.print()
    table = Table(
        title="commitgate issues",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Severity", justify="center", width=12)
    table.add_column("Commit", style="green")
    table.add_column("Check", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Issue", min_width=20)

    for issue in issues:
        table.add_row(
            _severity_pill(issue.severity),
            issue.commit.hash.abbreviate(),
            issue.check.name,
            getattr(issue, "path", "") or "-",
            issue.description,
        )

    console.print(table)

    if show_summary:
        _print_summary(console, reports)

    console.print()
    if any(r.blocked for r in reports):
        console.print("[bold red]❌ BLOCKED — policy errors found.[/bold red]")
    else:
        console.print("[bold yellow]⚠️  Warnings found, no errors. Commits allowed.[/bold yellow]")


def _print_summary(console: Console, reports: Sequence[CheckReport]) -> None:
    errors = sum(len(r.errors) for r in reports)
    warnings = sum(len(r.warnings) for r in reports)
    duration = sum(r.duration_ms for r in reports)
    console.print()
    console.print(f"[dim]Commits checked:[/dim] {len(reports)}")
    console.print(f"[dim]Errors:[/dim]          {errors}")
    console.print(f"[dim]Warnings:[/dim]        {warnings}")
    console.print(f"[dim]Duration:[/dim]        {duration:.0f}ms")
