"""Table formatter for CLI output."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from certscan.models import CertificateStatus, ScanReport, ThresholdSettings
from certscan.reports.common import days_text, format_timestamp, short_issuer

STATUS_STYLES = {
    CertificateStatus.VALID: "green",
    CertificateStatus.WARNING: "yellow",
    CertificateStatus.CRITICAL: "red",
    CertificateStatus.EXPIRED: "bold red",
    CertificateStatus.INVALID: "magenta",
    CertificateStatus.ERROR: "magenta",
}


def _status_markup(status: CertificateStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.label}[/{style}]"


def format_scan_result(
    console: Console,
    report: ScanReport,
    thresholds: ThresholdSettings | None = None,
) -> None:
    """Format and display scan results as tables."""
    thresholds = thresholds or ThresholdSettings()

    console.print()
    _format_summary(console, report, thresholds)

    if report.has_issues:
        _format_issue_results(console, report)
    else:
        console.print("[bold green]All certificates are valid and healthy![/bold green]")

    healthy = report.healthy_records()
    if healthy:
        _format_healthy_results(console, healthy)


def _format_summary(
    console: Console, report: ScanReport, thresholds: ThresholdSettings
) -> None:
    """Format summary section."""
    summary_parts = [
        f"Total Domains Scanned: [cyan]{report.total_domains}[/cyan]",
        f"Scan Duration: {report.duration_seconds:.2f} seconds",
        "",
        f"[green]Valid:[/green] {report.valid_count}",
        f"[yellow]Warning (<= {thresholds.warning_days} days):[/yellow] {report.warning_count}",
        f"[red]Critical (<= {thresholds.critical_days} days):[/red] {report.critical_count}",
        f"[bold red]Expired:[/bold red] {report.expired_count}",
        f"[magenta]Errors:[/magenta] {report.error_count}",
    ]

    console.print(
        Panel(
            "\n".join(summary_parts),
            title="Scan Results",
            border_style="red" if report.has_issues else "green",
        )
    )


def _format_issue_results(console: Console, report: ScanReport) -> None:
    """Format certificates requiring attention."""
    table = Table(title="Certificates Requiring Attention", show_header=True)
    table.add_column("Domain", style="cyan")
    table.add_column("Status")
    table.add_column("Days Until Expiry", justify="right")
    table.add_column("Expires")
    table.add_column("Issuer")
    table.add_column("Error", style="dim")

    for record in report.issue_records():
        table.add_row(
            record.domain,
            _status_markup(record.status),
            days_text(record),
            format_timestamp(record.valid_to),
            short_issuer(record.issuer) if record.issuer else "N/A",
            record.error_message or "",
        )

    console.print(table)


def _format_healthy_results(console: Console, healthy: list) -> None:
    """Format healthy certificates."""
    table = Table(title="Healthy Certificates", show_header=True)
    table.add_column("Domain", style="cyan")
    table.add_column("Days Until Expiry", justify="right", style="green")
    table.add_column("Expires")
    table.add_column("Issuer")

    for record in healthy:
        table.add_row(
            record.domain,
            str(record.days_until_expiry),
            format_timestamp(record.valid_to, "%Y-%m-%d"),
            short_issuer(record.issuer),
        )

    console.print(table)
