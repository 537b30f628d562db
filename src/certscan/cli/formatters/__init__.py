"""CLI output formatters."""

from certscan.cli.formatters.table import format_scan_result
from certscan.cli.formatters.json_fmt import export_json, format_json

__all__ = ["format_scan_result", "format_json", "export_json"]
