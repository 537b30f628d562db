"""Certificate record and threshold models."""

from datetime import datetime

from pydantic import Field

from certscan.models.base import CertificateStatus, FrozenSchema


class ThresholdSettings(FrozenSchema):
    """Day thresholds used to classify certificate expiry."""

    warning_days: int = 30
    critical_days: int = 7


class CertificateRecord(FrozenSchema):
    """Scan outcome for a single domain."""

    domain: str
    subject: str = ""
    issuer: str = ""

    # Validity
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    days_until_expiry: int = 0
    status: CertificateStatus

    # Subject Alternative Names (DNS entries only)
    subject_alternative_names: list[str] = Field(default_factory=list)

    signature_algorithm: str = ""
    serial_number: str = ""
    thumbprint: str = ""

    error_message: str | None = None

    @property
    def is_valid(self) -> bool:
        """Whether the certificate is currently usable (possibly expiring soon)."""
        return self.status in (
            CertificateStatus.VALID,
            CertificateStatus.WARNING,
            CertificateStatus.CRITICAL,
        )

    @classmethod
    def from_error(cls, domain: str, message: str) -> "CertificateRecord":
        """Build an Error record for a domain whose certificate could not be read."""
        return cls(
            domain=domain,
            status=CertificateStatus.ERROR,
            error_message=message or "Could not retrieve SSL certificate",
        )


def status_sort_key(record: CertificateRecord) -> tuple[int, int]:
    """Default report ordering: status rank, then days until expiry."""
    return record.status.rank, record.days_until_expiry
