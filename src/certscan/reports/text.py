"""Plain-text report generator, the text/plain alternative of report emails."""

from certscan.models import NotificationSettings, ScanReport
from certscan.reports.common import (
    days_text,
    format_timestamp,
    select_records,
    short_issuer,
)


class TextReportGenerator:
    """Generate plain-text certificate reports."""

    def __init__(self, settings: NotificationSettings | None = None) -> None:
        self.settings = settings or NotificationSettings(
            send_only_for_expiring_certs=False
        )

    def generate_string(self, report: ScanReport) -> str:
        lines = [
            "SSL CERTIFICATE STATUS REPORT",
            "=====================================",
            "",
            f"Scan Date: {format_timestamp(report.scan_started_at)}",
            f"Scan Duration: {report.duration_seconds:.2f} seconds",
            "",
            "SUMMARY",
            "-------",
            f"Total Domains: {report.total_domains}",
            f"Valid Certificates: {report.valid_count}",
            f"Warning ({self.settings.warning_days} days): {report.warning_count}",
            f"Critical ({self.settings.critical_days} days): {report.critical_count}",
            f"Expired: {report.expired_count}",
            f"Errors: {report.error_count}",
            "",
            "CERTIFICATE DETAILS",
            "-------------------",
        ]

        for record in select_records(report, self.settings):
            lines.append(f"Domain: {record.domain}")
            lines.append(f"Status: {record.status.label}")
            lines.append(f"Days Until Expiry: {days_text(record)}")
            lines.append(f"Expires On: {format_timestamp(record.valid_to)}")
            lines.append(f"Issuer: {short_issuer(record.issuer)}")
            if record.error_message:
                lines.append(f"Error: {record.error_message}")
            lines.append("")

        return "\n".join(lines) + "\n"
