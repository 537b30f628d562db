"""Custom exceptions for certscan."""

from enum import Enum


class CertScanError(Exception):
    """Base exception for all certscan errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CertScanError):
    """Raised when configuration is invalid."""

    pass


class FetchFailure(str, Enum):
    """Reason a certificate could not be retrieved."""

    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"


class FetchError(CertScanError):
    """Raised when a certificate cannot be retrieved from a server."""

    def __init__(
        self,
        message: str,
        domain: str | None = None,
        kind: FetchFailure = FetchFailure.UNREACHABLE,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.domain = domain
        self.kind = kind

    @property
    def reason(self) -> str:
        return self.message


class ChainValidationError(CertScanError):
    """Raised when the chain validation machinery itself cannot run."""

    pass


class NotificationError(CertScanError):
    """Raised when a report notification cannot be delivered."""

    def __init__(
        self,
        message: str,
        channel: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.channel = channel
