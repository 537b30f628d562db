"""HTML report generator for scan results."""

import html
from datetime import datetime, timezone
from pathlib import Path

from certscan.models import CertificateRecord, NotificationSettings, ScanReport
from certscan.reports.common import (
    days_text,
    format_timestamp,
    select_records,
    short_issuer,
)


class HTMLReportGenerator:
    """Generate HTML certificate reports, used as email bodies and files."""

    def __init__(self, settings: NotificationSettings | None = None) -> None:
        self.settings = settings or NotificationSettings(
            send_only_for_expiring_certs=False
        )

    def generate(
        self,
        report: ScanReport,
        output_path: Path | str,
        title: str | None = None,
    ) -> Path:
        """Generate HTML report and save to file."""
        output_path = Path(output_path)

        title = title or "SSL Certificate Status Report"
        html_content = self._build_html(report, title)

        output_path.write_text(html_content, encoding="utf-8")
        return output_path

    def generate_string(
        self,
        report: ScanReport,
        title: str | None = None,
    ) -> str:
        """Generate HTML report as string."""
        title = title or "SSL Certificate Status Report"
        return self._build_html(report, title)

    def _build_html(self, report: ScanReport, title: str) -> str:
        """Build complete HTML document."""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    {self._get_styles()}
</head>
<body>
    <div class="container">
        {self._build_header(report, title)}
        {self._build_summary(report)}
        {self._build_certificates_section(report)}
        {self._build_footer()}
    </div>
</body>
</html>"""

    def _get_styles(self) -> str:
        """Get embedded CSS styles.

        Mail clients ignore most layout CSS, so the styles stay simple.
        """
        return """<style>
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif;
    line-height: 1.5;
    color: #1f2937;
    margin: 20px;
}

.container {
    max-width: 1000px;
    margin: 0 auto;
}

header h1 {
    font-size: 1.5rem;
    margin-bottom: 0.5rem;
}

header .meta span {
    display: inline-block;
    margin-right: 2rem;
    color: #4b5563;
}

.summary {
    background-color: #f9fafb;
    border: 1px solid #e5e7eb;
    border-radius: 6px;
    padding: 15px;
    margin: 20px 0;
}

.summary td {
    border: none;
    padding: 4px 12px 4px 0;
}

table {
    border-collapse: collapse;
    width: 100%;
    margin: 20px 0;
}

th, td {
    border: 1px solid #e5e7eb;
    padding: 8px;
    text-align: left;
}

th {
    background-color: #f3f4f6;
}

.status-valid { color: #16a34a; font-weight: bold; }
.status-warning { color: #d97706; font-weight: bold; }
.status-critical { color: #dc2626; font-weight: bold; }
.status-expired { color: #991b1b; font-weight: bold; }
.status-invalid, .status-error { color: #7e22ce; font-weight: bold; }

.error { color: #6b7280; font-size: 0.875rem; }

.no-data {
    text-align: center;
    color: #4b5563;
}

footer {
    color: #4b5563;
    font-size: 0.875rem;
    margin-top: 2rem;
}
</style>"""

    def _build_header(self, report: ScanReport, title: str) -> str:
        """Build report header."""
        return f"""<header>
    <h1>{html.escape(title)}</h1>
    <div class="meta">
        <span><strong>Scan Date:</strong> {format_timestamp(report.scan_started_at)}</span>
        <span><strong>Scan Duration:</strong> {report.duration_seconds:.2f} seconds</span>
    </div>
</header>"""

    def _build_summary(self, report: ScanReport) -> str:
        """Build summary block."""
        rows = [
            ("Total Domains", report.total_domains),
            ("Valid Certificates", report.valid_count),
            (f"Warning ({self.settings.warning_days} days)", report.warning_count),
            (f"Critical ({self.settings.critical_days} days)", report.critical_count),
            ("Expired", report.expired_count),
            ("Errors", report.error_count),
        ]
        body = "".join(
            f"<tr><td><strong>{html.escape(label)}:</strong></td><td>{value}</td></tr>"
            for label, value in rows
        )
        return f"""<div class="summary">
    <h2>Summary</h2>
    <table>{body}</table>
</div>"""

    def _build_certificates_section(self, report: ScanReport) -> str:
        """Build certificate details table."""
        rows = [self._build_row(record) for record in select_records(report, self.settings)]

        return f"""<section>
    <h2>Certificate Details</h2>
    <table>
        <thead>
            <tr>
                <th>Domain</th>
                <th>Status</th>
                <th>Days Until Expiry</th>
                <th>Expires On</th>
                <th>Issuer</th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows) if rows else '<tr><td colspan="5" class="no-data">No certificates to report</td></tr>'}
        </tbody>
    </table>
</section>"""

    def _build_row(self, record: CertificateRecord) -> str:
        error = ""
        if record.error_message:
            error = f'<div class="error">{html.escape(record.error_message)}</div>'

        return f"""<tr>
    <td>{html.escape(record.domain)}{error}</td>
    <td><span class="status-{record.status.value}">{record.status.label}</span></td>
    <td>{days_text(record, expired_label="Expired")}</td>
    <td>{format_timestamp(record.valid_to)}</td>
    <td>{html.escape(short_issuer(record.issuer))}</td>
</tr>"""

    def _build_footer(self) -> str:
        """Build report footer."""
        gen_time = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        return f"""<footer>
    <p>Generated by certscan</p>
    <p>Report generated at {gen_time}</p>
</footer>"""
