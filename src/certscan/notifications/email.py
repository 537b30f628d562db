"""Email delivery of scan reports over SMTP."""

import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from certscan.core.exceptions import NotificationError
from certscan.core.logging import get_logger
from certscan.models import AppConfiguration, ScanReport, SmtpSettings
from certscan.models.base import BaseSchema
from certscan.reports.common import report_subject
from certscan.reports.html import HTMLReportGenerator
from certscan.reports.text import TextReportGenerator

SMTP_TIMEOUT = 30
IMPLICIT_TLS_PORT = 465


class NotificationResult(BaseSchema):
    """Outcome of a notification attempt."""

    success: bool
    email_sent: bool = False
    message: str = ""


class EmailNotifier:
    """Sends scan reports as multipart (text + HTML) emails."""

    def __init__(self) -> None:
        self.logger = get_logger("email")

    async def send_report(
        self, report: ScanReport, config: AppConfiguration
    ) -> NotificationResult:
        """Send the report to the configured recipients.

        Nothing is sent when only expiring certificates are reported and the
        scan found no issues; that counts as a success.
        """
        if not config.email_enabled:
            self.logger.warning("email_not_configured")
            return NotificationResult(
                success=False,
                message="Email configuration incomplete",
            )

        if config.notifications.send_only_for_expiring_certs and not report.has_issues:
            self.logger.info("email_skipped", reason="no_issues")
            return NotificationResult(
                success=True,
                message="No certificate issues found",
            )

        self.logger.info("email_preparing", recipients=len(config.email_recipients))

        try:
            message = self.build_message(report, config)
            await asyncio.to_thread(self._deliver, config.smtp, message)
        except NotificationError as e:
            self.logger.error("email_failed", error=e.message)
            return NotificationResult(success=False, message=e.message)

        self.logger.info("email_sent", recipients=", ".join(config.email_recipients))
        return NotificationResult(
            success=True,
            email_sent=True,
            message=f"Report sent to {len(config.email_recipients)} recipient(s)",
        )

    async def test_configuration(self, smtp: SmtpSettings) -> NotificationResult:
        """Send a test email to the sender address."""
        self.logger.info("email_test_started", host=smtp.host, port=smtp.port)

        message = EmailMessage()
        message["From"] = formataddr((smtp.from_name, smtp.from_email))
        message["To"] = smtp.from_email
        message["Subject"] = "SSL Certificate Monitor - Test Email"
        message.set_content(
            "This is a test email from SSL Certificate Monitor. "
            "Configuration is working correctly."
        )

        try:
            await asyncio.to_thread(self._deliver, smtp, message)
        except NotificationError as e:
            self.logger.error("email_test_failed", error=e.message)
            return NotificationResult(success=False, message=e.message)

        self.logger.info("email_test_succeeded")
        return NotificationResult(success=True, email_sent=True, message="Test email sent")

    def build_message(self, report: ScanReport, config: AppConfiguration) -> EmailMessage:
        """Compose the report email with text and HTML alternatives."""
        settings = config.notifications
        subject = report_subject(report, settings.email_subject)

        message = EmailMessage()
        message["From"] = formataddr((config.smtp.from_name, config.smtp.from_email))
        message["To"] = ", ".join(config.email_recipients)
        message["Subject"] = subject
        message.set_content(TextReportGenerator(settings).generate_string(report))
        message.add_alternative(
            HTMLReportGenerator(settings).generate_string(report, title=settings.email_subject),
            subtype="html",
        )
        return message

    def _deliver(self, smtp: SmtpSettings, message: EmailMessage) -> None:
        """Blocking SMTP delivery; runs in a worker thread."""
        try:
            if smtp.enable_ssl and smtp.port == IMPLICIT_TLS_PORT:
                client: smtplib.SMTP = smtplib.SMTP_SSL(
                    smtp.host,
                    smtp.port,
                    timeout=SMTP_TIMEOUT,
                    context=ssl.create_default_context(),
                )
            else:
                client = smtplib.SMTP(smtp.host, smtp.port, timeout=SMTP_TIMEOUT)

            with client:
                if smtp.enable_ssl and smtp.port != IMPLICIT_TLS_PORT:
                    client.starttls(context=ssl.create_default_context())
                if smtp.has_credentials:
                    client.login(smtp.username, smtp.password.get_secret_value())
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(
                f"Failed to send email via {smtp.host}:{smtp.port}: {e}",
                channel="email",
            ) from e
