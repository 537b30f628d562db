"""Report generation."""

from certscan.reports.common import (
    days_text,
    report_subject,
    select_records,
    short_issuer,
)
from certscan.reports.html import HTMLReportGenerator
from certscan.reports.text import TextReportGenerator

__all__ = [
    "HTMLReportGenerator",
    "TextReportGenerator",
    "days_text",
    "report_subject",
    "select_records",
    "short_issuer",
]
