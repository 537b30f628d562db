"""Aggregated scan report model."""

from collections import Counter
from datetime import datetime, timedelta

from pydantic import computed_field

from certscan.models.base import CertificateStatus, FrozenSchema
from certscan.models.certificate import CertificateRecord, status_sort_key


class ScanReport(FrozenSchema):
    """Immutable result of scanning a batch of domains.

    All counts are derived from ``records`` on access, so the report can
    never drift out of sync with its contents.
    """

    records: tuple[CertificateRecord, ...] = ()
    scan_started_at: datetime
    scan_duration: timedelta = timedelta(0)

    def count_by_status(self) -> Counter:
        """Number of records per status."""
        return Counter(record.status for record in self.records)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_domains(self) -> int:
        return len(self.records)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid_count(self) -> int:
        return self.count_by_status()[CertificateStatus.VALID]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        return self.count_by_status()[CertificateStatus.WARNING]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def critical_count(self) -> int:
        return self.count_by_status()[CertificateStatus.CRITICAL]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expired_count(self) -> int:
        return self.count_by_status()[CertificateStatus.EXPIRED]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        """Records that could not be scanned or failed chain validation."""
        counts = self.count_by_status()
        return counts[CertificateStatus.ERROR] + counts[CertificateStatus.INVALID]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_issues(self) -> bool:
        return (
            self.warning_count
            + self.critical_count
            + self.expired_count
            + self.error_count
        ) > 0

    @property
    def duration_seconds(self) -> float:
        return self.scan_duration.total_seconds()

    def sorted_records(self) -> list[CertificateRecord]:
        """Records in default report order."""
        return sorted(self.records, key=status_sort_key)

    def issue_records(self) -> list[CertificateRecord]:
        """Non-valid records in default report order."""
        return [r for r in self.sorted_records() if r.status.is_issue]

    def healthy_records(self) -> list[CertificateRecord]:
        """Valid records, soonest expiry first."""
        return sorted(
            (r for r in self.records if r.status == CertificateStatus.VALID),
            key=lambda r: r.days_until_expiry,
        )

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return self.model_dump(mode="json")
