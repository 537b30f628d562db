"""Abstract interfaces for the scan engine components."""

from abc import ABC, abstractmethod
from datetime import datetime

from cryptography import x509
from pydantic import BaseModel, ConfigDict, Field

from certscan.models.certificate import CertificateRecord, ThresholdSettings


class FetchedCertificate(BaseModel):
    """Certificates presented by a server, retrieved without trust checks."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    leaf: x509.Certificate
    # Intermediates: presented by the server or retrieved for it, leaf excluded
    chain: list[x509.Certificate] = Field(default_factory=list)
    # False when the interpreter could not expose the presented chain
    chain_observed: bool = True


class ICertificateFetcher(ABC):
    """Retrieves the certificate a server presents."""

    @abstractmethod
    async def fetch(self, domain: str, timeout: float | None = None) -> FetchedCertificate:
        """Connect to the domain and return its certificates.

        Raises:
            FetchError: on timeout, network, DNS or handshake failure.
        """
        ...


class ICertificateClassifier(ABC):
    """Turns a fetched certificate into a classified record."""

    @abstractmethod
    def classify(
        self,
        domain: str,
        fetched: FetchedCertificate,
        thresholds: ThresholdSettings,
        now: datetime | None = None,
    ) -> CertificateRecord:
        """Classify the certificate against the thresholds."""
        ...
