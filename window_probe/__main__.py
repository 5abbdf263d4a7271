"""
window-probe CLI

Diagnostic commands for the window classifier.

Usage:
    window-probe classify <snapshot.json> [--json]
    window-probe rules [--json]
    window-probe config [--json]
"""

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console

from .config import get_config, setup_logging
from .displays import verdict_display
from .errors import ConfigError
from .models.attributes import WindowAttributes
from .models.rule import RuleTier
from .services.window_classifier import default_classifier

EXIT_INVALID_INPUT = 2


def _load_snapshots(path: Path) -> list[WindowAttributes]:
    """Load one snapshot object or a list of them from a JSON file."""
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError("expected a snapshot object or a list of snapshots")

    return [WindowAttributes.model_validate(entry) for entry in data]


@click.group()
@click.option('--log-level', default=None, help='Logging level (default: $LOG_LEVEL or INFO)')
def cli(log_level):
    """Window classification diagnostics."""
    setup_logging(log_level)


@cli.command()
@click.argument('snapshot_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of formatted tables')
def classify(snapshot_file: Path, output_json: bool):
    """
    Classify window attribute snapshots read from a JSON file.

    Exit codes:
      0 - Classified
      2 - Invalid snapshot file
    """
    console = Console()

    try:
        snapshots = _load_snapshots(snapshot_file)
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        console.print(f"[red]Invalid snapshot file {snapshot_file}:[/red] {e}")
        sys.exit(EXIT_INVALID_INPUT)

    classifier = default_classifier()
    results = [(attrs, classifier.classify(attrs)) for attrs in snapshots]

    if output_json:
        click.echo(json.dumps(
            [verdict.model_dump(mode="json") for _, verdict in results],
            indent=2,
        ))
    else:
        verdict_display.display_verdicts(results, console)


@cli.command()
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of formatted tables')
def rules(output_json: bool):
    """List the classification rules in evaluation order."""
    tier_order = list(RuleTier)
    ordered = sorted(default_classifier().rules, key=lambda rule: tier_order.index(rule.tier))

    if output_json:
        click.echo(json.dumps([rule.to_json() for rule in ordered], indent=2))
    else:
        verdict_display.display_rules(ordered, Console())


@cli.command()
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of formatted tables')
def config(output_json: bool):
    """Show the effective configuration."""
    console = Console()

    try:
        effective = get_config()
    except ConfigError as e:
        console.print(f"[red]{e.message}[/red]")
        if e.suggestion:
            console.print(f"[dim]{e.suggestion}[/dim]")
        sys.exit(EXIT_INVALID_INPUT)

    if output_json:
        data = effective.model_dump()
        data["messaging_timeout_seconds"] = effective.messaging_timeout_seconds
        click.echo(json.dumps(data, indent=2))
    else:
        verdict_display.display_config(effective, console)


def main():
    cli()


if __name__ == "__main__":
    main()
