"""Pydantic data models for certscan."""

from certscan.models.base import BaseSchema, FrozenSchema, CertificateStatus
from certscan.models.certificate import (
    CertificateRecord,
    ThresholdSettings,
    status_sort_key,
)
from certscan.models.report import ScanReport
from certscan.models.config import (
    AppConfiguration,
    NotificationSettings,
    SmtpSettings,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    "CertificateStatus",
    # Certificates
    "CertificateRecord",
    "ThresholdSettings",
    "status_sort_key",
    # Report
    "ScanReport",
    # Configuration file
    "AppConfiguration",
    "NotificationSettings",
    "SmtpSettings",
]
