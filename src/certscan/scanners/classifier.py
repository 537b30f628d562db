"""Certificate classification by expiry and chain trust."""

from datetime import datetime, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.oid import ExtensionOID, ObjectIdentifier, SignatureAlgorithmOID
from cryptography.x509.verification import (
    Criticality,
    ExtensionPolicy,
    PolicyBuilder,
    Store,
    VerificationError,
)

from certscan.core.config import get_settings
from certscan.core.interfaces import FetchedCertificate, ICertificateClassifier
from certscan.core.logging import get_logger
from certscan.models.base import CertificateStatus
from certscan.models.certificate import CertificateRecord, ThresholdSettings
from certscan.scanners.trust import load_trust_store

# Trust path only: no name matching, no key-purpose or extension profile checks
LEAF_POLICY = ExtensionPolicy.permit_all()
CA_POLICY = ExtensionPolicy.permit_all().require_present(
    x509.BasicConstraints, Criticality.AGNOSTIC, None
)

SIGNATURE_ALGORITHM_NAMES: dict[ObjectIdentifier, str] = {
    oid: name.lower().replace("_", "-")
    for name, oid in vars(SignatureAlgorithmOID).items()
    if not name.startswith("_") and isinstance(oid, ObjectIdentifier)
}


def expiry_status(
    valid_to: datetime,
    days_until_expiry: int,
    thresholds: ThresholdSettings,
    now: datetime,
) -> CertificateStatus:
    """Classify by expiry date; first matching rule wins.

    Expired is decided on the timestamp itself. A certificate with less than
    a day left has ``days_until_expiry == 0`` but is still Critical.
    """
    if valid_to < now:
        return CertificateStatus.EXPIRED
    if days_until_expiry <= thresholds.critical_days:
        return CertificateStatus.CRITICAL
    if days_until_expiry <= thresholds.warning_days:
        return CertificateStatus.WARNING
    return CertificateStatus.VALID


class CertificateClassifier(ICertificateClassifier):
    """Builds a CertificateRecord from a fetched certificate."""

    def __init__(
        self,
        ca_bundle: Path | None = None,
        trust_store: Store | None = None,
    ) -> None:
        self.ca_bundle = ca_bundle if ca_bundle is not None else get_settings().ca_bundle
        self._trust_store = trust_store
        self.logger = get_logger("classifier")

    def classify(
        self,
        domain: str,
        fetched: FetchedCertificate,
        thresholds: ThresholdSettings,
        now: datetime | None = None,
    ) -> CertificateRecord:
        """Classify the leaf certificate of ``fetched``.

        The expiry status is computed first; the chain validation pass may
        only turn a Valid certificate into an Invalid one.
        """
        now = now or datetime.now(timezone.utc)
        cert = fetched.leaf

        valid_to = cert.not_valid_after_utc
        days_until_expiry = (valid_to - now).days
        status = expiry_status(valid_to, days_until_expiry, thresholds, now)

        error_message = None
        chain_error = self._validate_chain(domain, fetched, now)
        if chain_error is not None and status == CertificateStatus.VALID:
            status = CertificateStatus.INVALID
            error_message = f"Certificate chain validation failed: {chain_error}"

        record = CertificateRecord(
            domain=domain,
            subject=cert.subject.rfc4514_string(),
            issuer=cert.issuer.rfc4514_string(),
            valid_from=cert.not_valid_before_utc,
            valid_to=valid_to,
            days_until_expiry=days_until_expiry,
            status=status,
            subject_alternative_names=self._subject_alternative_names(domain, cert),
            signature_algorithm=self._signature_algorithm(cert),
            serial_number=format(cert.serial_number, "X"),
            thumbprint=cert.fingerprint(hashes.SHA1()).hex().upper(),
            error_message=error_message,
        )

        self.logger.debug(
            "certificate_classified",
            target=domain,
            status=record.status.value,
            days_until_expiry=days_until_expiry,
            expires=valid_to.isoformat(),
        )
        return record

    def _validate_chain(
        self, domain: str, fetched: FetchedCertificate, now: datetime
    ) -> str | None:
        """Return the failure reason if no trust path can be built.

        Only the path from the leaf to a trust anchor is checked; whether the
        leaf names ``domain`` is not. Failures of the validation machinery
        itself, and failures caused by a chain that could not be observed at
        all, are logged and reported as no failure.
        """
        try:
            verifier = (
                PolicyBuilder()
                .store(self._get_trust_store())
                .time(now.astimezone(timezone.utc).replace(tzinfo=None))
                .extension_policies(ca_policy=CA_POLICY, ee_policy=LEAF_POLICY)
                .build_client_verifier()
            )
            verifier.verify(fetched.leaf, fetched.chain)
        except VerificationError as e:
            if self._chain_unknown(fetched):
                self.logger.warning(
                    "chain_validation_inconclusive",
                    target=domain,
                    error=str(e),
                    reason="intermediates unavailable",
                )
                return None
            self.logger.info("chain_validation_failed", target=domain, error=str(e))
            return str(e) or "untrusted certificate chain"
        except Exception as e:
            self.logger.warning(
                "chain_validation_error",
                target=domain,
                error=str(e),
                error_type=type(e).__name__,
            )
        return None

    @staticmethod
    def _chain_unknown(fetched: FetchedCertificate) -> bool:
        """No intermediates seen or retrieved for a leaf that needs them."""
        leaf = fetched.leaf
        return not fetched.chain_observed and not fetched.chain and leaf.issuer != leaf.subject

    def _get_trust_store(self) -> Store:
        if self._trust_store is None:
            self._trust_store = load_trust_store(self.ca_bundle)
        return self._trust_store

    def _subject_alternative_names(self, domain: str, cert: x509.Certificate) -> list[str]:
        """DNS names from the SAN extension; other name types are ignored."""
        try:
            extension = cert.extensions.get_extension_for_oid(
                ExtensionOID.SUBJECT_ALTERNATIVE_NAME
            )
            return list(extension.value.get_values_for_type(x509.DNSName))
        except x509.ExtensionNotFound:
            return []
        except ValueError as e:
            self.logger.warning("san_extraction_failed", target=domain, error=str(e))
            return []

    @staticmethod
    def _signature_algorithm(cert: x509.Certificate) -> str:
        oid = cert.signature_algorithm_oid
        return SIGNATURE_ALGORITHM_NAMES.get(oid, oid.dotted_string)
