"""
Verdict Display Module

Rich-formatted display for classification verdicts, the rule table and the
effective configuration.
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from ..config import ProbeConfig
from ..models.attributes import WindowAttributes
from ..models.rule import ClassificationRule, ClassificationVerdict


def _optional(value) -> str:
    """Render unknown values distinctly from empty ones."""
    if value is None:
        return "[dim](unknown)[/dim]"
    if value == "":
        return '[yellow]""[/yellow]'
    return str(value)


def display_verdicts(
    results: Iterable[tuple[WindowAttributes, ClassificationVerdict]],
    console: Optional[Console] = None,
) -> None:
    """
    Display one row per classified snapshot.

    Args:
        results: (snapshot, verdict) pairs
        console: Rich console (optional, creates new if not provided)
    """
    if console is None:
        console = Console()

    table = Table(title="Window Classification")
    table.add_column("Window", justify="right")
    table.add_column("Application")
    table.add_column("Size")
    table.add_column("Level", justify="right")
    table.add_column("Role / Subrole")
    table.add_column("Title")
    table.add_column("Verdict")
    table.add_column("Decided by", style="dim")

    for attrs, verdict in results:
        size = f"{attrs.size.width:g}×{attrs.size.height:g}" if attrs.size else None
        verdict_text = "[green]window[/green]" if verdict.is_window else "[red]not a window[/red]"
        decided_by = f"{verdict.tier.value}: {verdict.rule}" if verdict.rule else verdict.reason

        table.add_row(
            _optional(attrs.window_id),
            _optional(attrs.owner_app_id),
            _optional(size),
            _optional(attrs.level),
            f"{_optional(attrs.role)} / {_optional(attrs.subrole)}",
            _optional(attrs.title),
            verdict_text,
            decided_by,
        )

    console.print(table)


def display_rules(rules: Iterable[ClassificationRule], console: Optional[Console] = None) -> None:
    """Display the classification table in evaluation order."""
    if console is None:
        console = Console()

    table = Table(title="Classification Rules")
    table.add_column("Tier", style="cyan")
    table.add_column("Rule")
    table.add_column("Application")
    table.add_column("Symptom", style="dim")

    for rule in rules:
        table.add_row(
            rule.tier.value,
            rule.name,
            rule.app.describe() if rule.app else "[dim](any)[/dim]",
            rule.symptom,
        )

    console.print(table)


def display_config(config: ProbeConfig, console: Optional[Console] = None) -> None:
    """Display the effective configuration."""
    if console is None:
        console = Console()

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Global timeout", f"{config.global_timeout_seconds:g}s")
    table.add_row("Retry backoff", f"{config.retry_backoff_ms}ms")
    table.add_row("Messaging timeout", f"{config.messaging_timeout_seconds:g}s")

    console.print(table)
