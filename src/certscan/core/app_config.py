"""Loading and saving the JSON application configuration file."""

import json
from pathlib import Path

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from certscan.core.exceptions import ConfigurationError
from certscan.core.logging import get_logger
from certscan.models.config import AppConfiguration, NotificationSettings, SmtpSettings

logger = get_logger("config")


def default_configuration() -> AppConfiguration:
    """Starter configuration written when no file exists yet."""
    return AppConfiguration(
        domains=["google.com", "github.com", "stackoverflow.com"],
        smtp=SmtpSettings(
            host="smtp.gmail.com",
            port=587,
            enable_ssl=True,
            username="your-email@gmail.com",
            password=SecretStr("your-app-password"),
            from_email="your-email@gmail.com",
            from_name="SSL Certificate Monitor",
        ),
        email_recipients=["admin@company.com"],
        notifications=NotificationSettings(
            warning_days=30,
            critical_days=7,
            send_only_for_expiring_certs=True,
            include_healthy_certs=False,
            email_subject="SSL Certificate Status Report",
        ),
    )


def save_configuration(config: AppConfiguration, path: Path | str) -> None:
    """Write the configuration as indented camelCase JSON."""
    path = Path(path)
    logger.info("config_saving", path=str(path))
    try:
        path.write_text(
            json.dumps(config.model_dump(mode="json", by_alias=True), indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        logger.error("config_save_failed", path=str(path), error=str(e))
        raise ConfigurationError(f"Could not write configuration file {path}: {e}") from e


def create_default_configuration(path: Path | str) -> AppConfiguration:
    """Write and return the default configuration."""
    config = default_configuration()
    save_configuration(config, path)
    return config


def load_configuration(path: Path | str) -> AppConfiguration:
    """Load and validate the configuration file.

    A missing file is replaced by the default configuration.

    Raises:
        ConfigurationError: if the file is unreadable, is not valid JSON,
            does not match the schema, or lists no domains.
    """
    path = Path(path)

    if not path.exists():
        logger.warning("config_not_found", path=str(path), action="creating_default")
        return create_default_configuration(path)

    logger.info("config_loading", path=str(path))
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("config_invalid_json", path=str(path), error=str(e))
        raise ConfigurationError(f"Invalid JSON in configuration file: {path}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read configuration file {path}: {e}") from e

    try:
        config = AppConfiguration.model_validate(raw)
    except PydanticValidationError as e:
        logger.error("config_invalid", path=str(path), error=str(e))
        raise ConfigurationError(
            f"Invalid configuration file: {path}",
            details={"errors": e.errors(include_url=False)},
        ) from e

    validate_configuration(config)
    logger.info("config_loaded", path=str(path), domains=len(config.domains))
    return config


def validate_configuration(config: AppConfiguration) -> list[str]:
    """Check the configuration and return non-fatal warnings.

    Raises:
        ConfigurationError: if no domain is configured.
    """
    if not config.domains:
        raise ConfigurationError("Configuration must contain at least one domain to scan")

    warnings = []
    if not config.email_recipients:
        warnings.append("No email recipients configured. Email notifications will be disabled.")
    if not config.smtp.host.strip():
        warnings.append("SMTP host not configured. Email notifications will be disabled.")

    invalid_domains = [d for d in config.domains if not d.strip() or " " in d]
    if invalid_domains:
        warnings.append(f"Invalid domain names found: {', '.join(repr(d) for d in invalid_domains)}")

    for message in warnings:
        logger.warning("config_warning", message=message)
    return warnings
