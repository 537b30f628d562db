"""Core module - configuration, logging, and interfaces."""

from certscan.core.config import Settings, get_settings
from certscan.core.exceptions import (
    CertScanError,
    ConfigurationError,
    FetchError,
    FetchFailure,
    ChainValidationError,
    NotificationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "CertScanError",
    "ConfigurationError",
    "FetchError",
    "FetchFailure",
    "ChainValidationError",
    "NotificationError",
]
