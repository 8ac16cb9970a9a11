"""Rich rendering of the end-of-run summary."""

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modfleet.core.summary import RunSummary


def format_run_summary(summary: RunSummary) -> Panel:
    """Format the final summary box: counts, failures, cleanup status.

    Example:
        >>> panel = format_run_summary(summarize(report))
        >>> Console(stderr=True).print(panel)
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("repositories", no_wrap=True)
    table.add_column("succeeded", style="green", no_wrap=True)
    table.add_column("skipped", style="yellow", no_wrap=True)
    table.add_column("failed", style="red", no_wrap=True)
    table.add_row(
        str(summary.dep_count),
        str(summary.succeeded),
        str(summary.skipped),
        str(summary.failed),
    )

    lines: list[Text] = []
    if summary.fatal_error is not None:
        lines.append(Text(str(summary.fatal_error), style="red bold"))
    for failure in summary.failures:
        lines.append(Text(f"{failure.repository}: {failure.step} failed", style="red bold"))
        lines.append(Text(f"  {failure.cause}", style="red"))
    if summary.cleanup_failure is not None:
        lines.append(Text(str(summary.cleanup_failure), style="red"))
    if summary.aborted:
        lines.append(Text("Aborted at confirmation", style="yellow"))
    if summary.cancelled:
        lines.append(Text("Cancelled before completion", style="yellow"))
    for notice in summary.notices:
        lines.append(Text(notice, style="dim"))

    content = Group(table, *lines) if lines else Group(table)
    title = f"{summary.action.value} complete" if summary.ok else f"{summary.action.value} failed"
    return Panel(content, title=title, border_style="green" if summary.ok else "red")


def print_run_summary(summary: RunSummary, console: Console | None = None) -> None:
    if console is None:
        console = Console(stderr=True)
    console.print(format_run_summary(summary))
