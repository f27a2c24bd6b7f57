"""
resource-usage — render resource usage tables from captured contract calls.

Commands:
  report CAPTURE...   Extract, aggregate and classify every captured call
  limits              Show the effective limit table and cursor ratios

Global options:
  --log-level TEXT    Logging level (env RESOURCE_USAGE_LOG_LEVEL)
  --version           Print the version and exit

Examples:
  resource-usage limits --json
  resource-usage report calls.cbor
  resource-usage report a.json b.cbor --danger 0.7 --limit cpu_insns=100000000
  resource-usage report calls.cbor --json --fail-on-error
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import metrics
from ..capture import load_capture, process_records
from ..config import ReportConfig, load_config, summary
from ..errors import CaptureError
from ..metric import METRIC_KEYS
from ..report import build_reports, print_reports, report_to_dict
from ..statistics import aggregate
from ..version import __version__, git_describe, version_metadata

app = typer.Typer(
    name="resource-usage",
    help="Contract resource usage reports from captured calls",
    no_args_is_help=True,
    add_completion=False,
)

log = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"resource-usage {__version__} ({git_describe()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        envvar="RESOURCE_USAGE_LOG_LEVEL",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Print the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Resource usage tables for ledger contract calls."""
    _setup_logging(log_level)


def _parse_limits(items: List[str]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or key not in METRIC_KEYS:
            raise typer.BadParameter(
                f"expected KEY=N with KEY one of {', '.join(METRIC_KEYS)}, got {item!r}",
                param_hint="--limit",
            )
        try:
            out[key] = int(raw.strip(), 0)
        except ValueError:
            raise typer.BadParameter(f"limit for {key} is not an integer: {raw!r}", param_hint="--limit")
    return out


def _config(danger: Optional[float], error: Optional[float], limit: List[str]) -> ReportConfig:
    overrides: Dict[str, object] = {}
    if danger is not None:
        overrides["danger"] = danger
    if error is not None:
        overrides["error"] = error
    if limit:
        overrides["limits"] = _parse_limits(limit)
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command()
def report(
    captures: List[Path] = typer.Argument(..., help="Capture files (.cbor or .json)"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of tables"),
    danger: Optional[float] = typer.Option(None, "--danger", help="Danger ratio (default 0.8)"),
    error: Optional[float] = typer.Option(None, "--error", help="Error ratio (default 1.0)"),
    limit: List[str] = typer.Option([], "--limit", help="Override a limit, KEY=N (0 hides the row)"),
    fail_on_error: bool = typer.Option(False, "--fail-on-error", help="Exit 1 if any cell is over the error ratio"),
    width: Optional[int] = typer.Option(None, "--width", help="Table width in columns"),
) -> None:
    """Render one resource usage table per contract."""
    cfg = _config(danger, error, limit)
    log.info("effective %s", summary(cfg))

    records = []
    for path in captures:
        try:
            records.extend(load_capture(path))
        except CaptureError as e:
            typer.echo(f"Error: {e.message} ({e.data.get('path')})", err=True)
            raise typer.Exit(2)

    store = process_records(records, cfg)
    reports = build_reports(aggregate(store.drain()), cfg)
    metrics.observe_reports(len(reports))

    if json_output:
        payload = {
            "tool": version_metadata(),
            "config": cfg.to_dict(),
            "reports": [report_to_dict(r) for r in reports],
        }
        typer.echo(json.dumps(payload, indent=2))
    elif not reports:
        typer.echo("No contract calls recorded.")
    else:
        print_reports(reports, cfg.cursors, Console(width=width) if width else None)

    if fail_on_error and any(r.has_errors for r in reports):
        raise typer.Exit(1)


@app.command()
def limits(
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of a table"),
) -> None:
    """Show the effective limit table and cursor ratios."""
    cfg = _config(None, None, [])
    if json_output:
        typer.echo(json.dumps(cfg.to_dict(), indent=2))
        return

    t = Table(title="Metric Limits")
    t.add_column("Resource", style="bold cyan")
    t.add_column("Limitation", justify="right")
    for key, value in cfg.limits.items():
        t.add_row(key, str(value) if value else "hidden")
    console = Console()
    console.print(t)
    console.print(
        f"Warning: {int(cfg.cursors.danger_percent)}% - {int(cfg.cursors.error_percent)}%   "
        f"Error: Over {int(cfg.cursors.error_percent)}%"
    )


def main() -> None:
    """Entry point for the resource-usage CLI."""
    app()


if __name__ == "__main__":
    main()
