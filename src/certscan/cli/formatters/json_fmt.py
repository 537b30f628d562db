"""JSON formatter for CLI output."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console

from certscan.models import ScanReport


def format_json(console: Console, report: ScanReport) -> None:
    """Format and display scan results as JSON."""
    console.print_json(report.model_dump_json(indent=2))


def export_json(report: ScanReport, path: Path | str) -> None:
    """Export scan results to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_dict(report), f, indent=2, default=str)


def to_dict(report: ScanReport) -> dict[str, Any]:
    """Convert scan results to a dictionary."""
    return report.model_dump(mode="json")
