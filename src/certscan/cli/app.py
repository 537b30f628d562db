"""Main CLI application using Typer."""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from certscan.version import __version__
from certscan.core.config import get_settings
from certscan.core.exceptions import CertScanError
from certscan.core.logging import setup_logging

app = typer.Typer(
    name="certscan",
    help="certscan - SSL/TLS certificate expiry monitor",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"certscan version {__version__}")
        raise typer.Exit()


def _config_path(path: Optional[Path]) -> Path:
    return path or get_settings().config_path


@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """certscan - Know before your certificates expire."""
    setup_logging()


@app.command()
def scan(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
    format_type: Annotated[
        str,
        typer.Option("--format", help="Output format: table, json"),
    ] = "table",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path (JSON or HTML)"),
    ] = None,
    html_report: Annotated[
        Optional[Path],
        typer.Option("--html", help="Generate HTML report to specified path"),
    ] = None,
    no_email: Annotated[
        bool,
        typer.Option("--no-email", help="Do not send the email report"),
    ] = False,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Connection timeout in seconds", min=0.1),
    ] = None,
) -> None:
    """
    Scan the configured domains and report certificate status.

    Exits with status 1 when any certificate needs attention.

    Examples:
        certscan scan
        certscan scan --config prod.json --no-email
        certscan scan --output report.html
    """
    from certscan.core.app_config import load_configuration
    from certscan.orchestration.coordinator import ScanCoordinator

    try:
        app_config = load_configuration(_config_path(config_file))
    except CertScanError as e:
        console.print(f"[red]Configuration error: {e.message}[/red]")
        raise typer.Exit(1) from None

    console.print(
        Panel(
            "[bold blue]SSL Certificate Scan[/bold blue]\n"
            + "\n".join(f"  - [green]{domain}[/green]" for domain in app_config.domains),
            title=f"Scanning {len(app_config.domains)} domain(s)",
        )
    )

    coordinator = ScanCoordinator(timeout=timeout)
    thresholds = app_config.notifications.thresholds

    with console.status("[bold green]Scanning certificates...[/bold green]"):
        try:
            report = asyncio.run(coordinator.run_scan(app_config.domains, thresholds))
        except Exception as e:
            console.print(f"[red]Scan failed: {e}[/red]")
            raise typer.Exit(1) from None

    if output:
        if str(output).endswith(".html"):
            from certscan.reports import HTMLReportGenerator
            HTMLReportGenerator().generate(report, output)
            console.print(f"[green]HTML report saved to {output}[/green]")
        else:
            from certscan.cli.formatters import export_json
            export_json(report, output)
            console.print(f"[green]Results saved to {output}[/green]")

    if html_report:
        from certscan.reports import HTMLReportGenerator
        HTMLReportGenerator().generate(report, html_report)
        console.print(f"[green]HTML report saved to {html_report}[/green]")

    if not output and not html_report:
        _display_results(report, format_type, thresholds)

    if not no_email:
        _send_email(report, app_config)

    if report.has_issues:
        raise typer.Exit(1)


def _display_results(report, format_type: str, thresholds) -> None:
    """Display scan results."""
    from certscan.cli.formatters import format_json, format_scan_result

    if format_type == "json":
        format_json(console, report)
    else:
        format_scan_result(console, report, thresholds)


def _send_email(report, app_config) -> None:
    from certscan.notifications import EmailNotifier

    if not app_config.email_enabled:
        console.print("[yellow]Email notifications disabled (no recipients or SMTP host)[/yellow]")
        return

    result = asyncio.run(EmailNotifier().send_report(report, app_config))
    if result.email_sent:
        console.print(f"[green]{result.message}[/green]")
    elif result.success:
        console.print(f"[dim]Email not sent: {result.message}[/dim]")
    else:
        console.print(f"[red]Email failed: {result.message}[/red]")


@app.command()
def init(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write a default configuration file."""
    from certscan.core.app_config import create_default_configuration

    path = _config_path(config_file)
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists; use --force to overwrite[/yellow]")
        raise typer.Exit(1)

    try:
        create_default_configuration(path)
    except CertScanError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[green]Default configuration written to {path}[/green]")
    console.print("Edit it to add your domains, SMTP settings and recipients.")


@app.command()
def config(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
    show: Annotated[
        bool,
        typer.Option("--show", "-s", help="Show current configuration"),
    ] = False,
    validate: Annotated[
        bool,
        typer.Option("--validate", help="Validate configuration"),
    ] = False,
) -> None:
    """Manage configuration settings."""
    settings = get_settings()
    path = _config_path(config_file)

    if show or not validate:
        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Config File", str(path))
        table.add_row("Port", str(settings.port))
        table.add_row("Connect Timeout", f"{settings.connect_timeout:g}s")
        table.add_row("Max Concurrent Scans", str(settings.max_concurrent_scans))
        table.add_row("Connections Per Second", str(settings.connections_per_second))
        table.add_row("CA Bundle", str(settings.ca_bundle) if settings.ca_bundle else "Platform default")
        table.add_row("Log Level", settings.log_level)
        table.add_row("Log Format", settings.log_format)

        console.print(table)

    if validate:
        from certscan.core.app_config import load_configuration, validate_configuration

        if not path.exists():
            console.print(f"[red]Configuration file not found: {path}[/red]")
            raise typer.Exit(1)

        try:
            warnings = validate_configuration(load_configuration(path))
        except CertScanError as e:
            console.print("[red]Configuration errors:[/red]")
            console.print(f"  - {e.message}")
            raise typer.Exit(1) from None

        for warning in warnings:
            console.print(f"[yellow]  - {warning}[/yellow]")
        console.print("[green]Configuration is valid[/green]")


@app.command(name="test-email")
def test_email(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
) -> None:
    """Send a test email using the configured SMTP settings."""
    from certscan.core.app_config import load_configuration
    from certscan.notifications import EmailNotifier

    try:
        app_config = load_configuration(_config_path(config_file))
    except CertScanError as e:
        console.print(f"[red]Configuration error: {e.message}[/red]")
        raise typer.Exit(1) from None

    if not app_config.smtp.host.strip() or not app_config.smtp.from_email:
        console.print("[red]SMTP host and sender address must be configured[/red]")
        raise typer.Exit(1)

    with console.status("[bold green]Sending test email...[/bold green]"):
        result = asyncio.run(EmailNotifier().test_configuration(app_config.smtp))

    if not result.success:
        console.print(f"[red]Test email failed: {result.message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Test email sent to {app_config.smtp.from_email}[/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
