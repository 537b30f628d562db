"""Helpers shared by the console, HTML and text renderers."""

from datetime import datetime

from certscan.models import (
    CertificateRecord,
    CertificateStatus,
    NotificationSettings,
    ScanReport,
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def short_issuer(issuer: str) -> str:
    """Common name of the issuer, or a truncated DN when it has none."""
    if not issuer:
        return "Unknown"

    for part in issuer.split(","):
        part = part.strip()
        if part.startswith("CN="):
            return part[3:].strip()

    return issuer[:47] + "..." if len(issuer) > 50 else issuer


def days_text(record: CertificateRecord, expired_label: str = "EXPIRED") -> str:
    if record.status == CertificateStatus.EXPIRED:
        return expired_label
    if record.status == CertificateStatus.ERROR:
        return "N/A"
    return f"{record.days_until_expiry} days"


def format_timestamp(value: datetime | None, fmt: str = DATE_FORMAT) -> str:
    return value.strftime(fmt) if value else "N/A"


def select_records(
    report: ScanReport, settings: NotificationSettings
) -> list[CertificateRecord]:
    """Records to include in a notification, in default report order.

    Healthy certificates are left out when only expiring certificates are
    reported, unless explicitly requested.
    """
    include_valid = (
        not settings.send_only_for_expiring_certs or settings.include_healthy_certs
    )
    return [
        record
        for record in report.sorted_records()
        if include_valid or record.status != CertificateStatus.VALID
    ]


def report_subject(report: ScanReport, base_subject: str) -> str:
    """Email subject line summarising the report."""
    if not report.has_issues:
        return f"{base_subject} - All Certificates OK"

    issues = []
    if report.expired_count:
        issues.append(f"{report.expired_count} expired")
    if report.critical_count:
        issues.append(f"{report.critical_count} critical")
    if report.warning_count:
        issues.append(f"{report.warning_count} warning")
    if report.error_count:
        issues.append(f"{report.error_count} errors")

    return f"{base_subject} - Issues Found: {', '.join(issues)}"
