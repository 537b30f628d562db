"""Base models and enums."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class FrozenSchema(BaseSchema):
    """Immutable schema for results handed to report consumers."""

    model_config = ConfigDict(frozen=True)


class CertificateStatus(str, Enum):
    """Health classification of a scanned certificate."""

    VALID = "valid"
    WARNING = "warning"
    CRITICAL = "critical"
    EXPIRED = "expired"
    INVALID = "invalid"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Position in the default report ordering."""
        return _STATUS_RANK[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_issue(self) -> bool:
        return self is not CertificateStatus.VALID


# Report ordering, kept apart from declaration order
_STATUS_RANK: dict[CertificateStatus, int] = {
    CertificateStatus.VALID: 0,
    CertificateStatus.WARNING: 1,
    CertificateStatus.CRITICAL: 2,
    CertificateStatus.EXPIRED: 3,
    CertificateStatus.INVALID: 4,
    CertificateStatus.ERROR: 5,
}
