"""Application configuration file models."""

from pydantic import ConfigDict, Field, SecretStr, field_serializer
from pydantic.alias_generators import to_camel

from certscan.models.base import BaseSchema
from certscan.models.certificate import ThresholdSettings


class ConfigSchema(BaseSchema):
    """Base for models persisted in the camelCase JSON configuration file."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SmtpSettings(ConfigSchema):
    """SMTP server used to deliver report emails."""

    host: str = ""
    port: int = Field(default=587, ge=1, le=65535)
    enable_ssl: bool = True
    username: str = ""
    password: SecretStr = SecretStr("")
    from_email: str = ""
    from_name: str = "SSL Certificate Monitor"

    @field_serializer("password", when_used="json")
    def _dump_password(self, value: SecretStr) -> str:
        return value.get_secret_value()

    @property
    def has_credentials(self) -> bool:
        return bool(self.username.strip() and self.password.get_secret_value().strip())


class NotificationSettings(ConfigSchema):
    """Thresholds and email notification behaviour."""

    warning_days: int = 30
    critical_days: int = 7
    send_only_for_expiring_certs: bool = True
    include_healthy_certs: bool = False
    email_subject: str = "SSL Certificate Status Report"

    @property
    def thresholds(self) -> ThresholdSettings:
        return ThresholdSettings(
            warning_days=self.warning_days,
            critical_days=self.critical_days,
        )


class AppConfiguration(ConfigSchema):
    """Contents of the JSON configuration file."""

    domains: list[str] = Field(default_factory=list)
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    email_recipients: list[str] = Field(default_factory=list)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @property
    def email_enabled(self) -> bool:
        """Email needs at least one recipient and an SMTP host."""
        return bool(self.email_recipients) and bool(self.smtp.host.strip())
