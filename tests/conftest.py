"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import NamedTuple

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import (
    AuthorityInformationAccessOID,
    ExtendedKeyUsageOID,
    NameOID,
)

from certscan.core.config import get_settings
from certscan.core.interfaces import FetchedCertificate
from certscan.models import (
    AppConfiguration,
    CertificateRecord,
    CertificateStatus,
    NotificationSettings,
    ScanReport,
    SmtpSettings,
    ThresholdSettings,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_certificate(
    not_after: datetime,
    not_before: datetime | None = None,
    common_name: str = "example.com",
    issuer_name: str | None = None,
    dns_names: list[str] | None = None,
    key: ec.EllipticCurvePrivateKey | None = None,
) -> x509.Certificate:
    """Build a self-signed certificate with the given validity window."""
    key = key or ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    issuer = x509.Name(
        [x509.NameAttribute(NameOID.COMMON_NAME, issuer_name or common_name)]
    )

    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or not_after - timedelta(days=365))
        .not_valid_after(not_after)
    )
    if dns_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in dns_names]),
            critical=False,
        )
    return builder.sign(key, hashes.SHA256())


def fetched_for(cert: x509.Certificate) -> FetchedCertificate:
    return FetchedCertificate(leaf=cert, chain=[])


def write_certificate_pair(directory, common_name: str = "localhost"):
    """Write a fresh self-signed certificate and its key as PEM files."""
    key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(timezone.utc)
    cert = make_certificate(
        not_after=now + timedelta(days=90),
        not_before=now - timedelta(days=1),
        common_name=common_name,
        dns_names=[common_name],
        key=key,
    )

    cert_path = directory / "cert.pem"
    key_path = directory / "key.pem"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return cert, cert_path, key_path


class CertificateChain(NamedTuple):
    root: x509.Certificate
    intermediate: x509.Certificate
    leaf: x509.Certificate
    leaf_key: ec.EllipticCurvePrivateKey


def _ca_certificate(subject, issuer, key, signing_key, not_before, path_length):
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + timedelta(days=3650))
        .add_extension(x509.BasicConstraints(ca=True, path_length=path_length), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=False,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(signing_key.public_key()),
            critical=False,
        )
        .sign(signing_key, hashes.SHA256())
    )


def make_chain(
    now: datetime = NOW,
    dns_names: list[str] | None = None,
    leaf_days: int = 200,
    aia_url: str | None = None,
) -> CertificateChain:
    """Build a root, an intermediate it signs, and a leaf the intermediate signs."""
    not_before = now - timedelta(days=30)
    root_key = ec.generate_private_key(ec.SECP256R1())
    root_name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Root CA")])
    root = _ca_certificate(root_name, root_name, root_key, root_key, not_before, None)

    inter_key = ec.generate_private_key(ec.SECP256R1())
    inter_name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Issuing CA")])
    intermediate = _ca_certificate(inter_name, root_name, inter_key, root_key, not_before, 0)

    leaf_key = ec.generate_private_key(ec.SECP256R1())
    dns_names = dns_names or ["example.com"]
    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, dns_names[0])]))
        .issuer_name(inter_name)
        .public_key(leaf_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(now + timedelta(days=leaf_days))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False
        )
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in dns_names]),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(inter_key.public_key()),
            critical=False,
        )
    )
    if aia_url:
        builder = builder.add_extension(
            x509.AuthorityInformationAccess(
                [
                    x509.AccessDescription(
                        AuthorityInformationAccessOID.CA_ISSUERS,
                        x509.UniformResourceIdentifier(aia_url),
                    )
                ]
            ),
            critical=False,
        )
    leaf = builder.sign(inter_key, hashes.SHA256())
    return CertificateChain(root, intermediate, leaf, leaf_key)


def write_chain_files(directory, chain: CertificateChain, include_intermediate: bool = True):
    """Write the leaf (and optionally its intermediate) as a PEM chain plus the key."""
    cert_path = directory / "chain.pem"
    key_path = directory / "chain-key.pem"
    served = [chain.leaf, chain.intermediate] if include_intermediate else [chain.leaf]
    cert_path.write_bytes(
        b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in served)
    )
    key_path.write_bytes(
        chain.leaf_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return cert_path, key_path


def record(domain: str, status: CertificateStatus, days: int = 100) -> CertificateRecord:
    """Shorthand for a classified record."""
    if status == CertificateStatus.ERROR:
        return CertificateRecord.from_error(domain, "Could not resolve domain name")
    return CertificateRecord(
        domain=domain,
        issuer="CN=Test CA,O=Test Org,C=US",
        valid_to=NOW + timedelta(days=days),
        days_until_expiry=days,
        status=status,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep the environment from leaking into settings between tests."""
    for name in (
        "CERTSCAN_CONFIG_PATH",
        "CERTSCAN_CONNECT_TIMEOUT",
        "CERTSCAN_PORT",
        "CERTSCAN_CA_BUNDLE",
        "CERTSCAN_FETCH_INTERMEDIATES",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def thresholds() -> ThresholdSettings:
    return ThresholdSettings(warning_days=30, critical_days=7)


@pytest.fixture
def mixed_report() -> ScanReport:
    """One record of each outcome, in scan order."""
    return ScanReport(
        records=[
            record("valid.example.com", CertificateStatus.VALID, 200),
            record("warning.example.com", CertificateStatus.WARNING, 20),
            record("critical.example.com", CertificateStatus.CRITICAL, 5),
            record("expired.example.com", CertificateStatus.EXPIRED, -3),
            record("broken.example.com", CertificateStatus.ERROR),
        ],
        scan_started_at=NOW,
        scan_duration=timedelta(seconds=1.5),
    )


@pytest.fixture
def healthy_report() -> ScanReport:
    return ScanReport(
        records=[
            record("a.example.com", CertificateStatus.VALID, 90),
            record("b.example.com", CertificateStatus.VALID, 300),
        ],
        scan_started_at=NOW,
    )


@pytest.fixture
def app_config() -> AppConfiguration:
    return AppConfiguration(
        domains=["example.com"],
        smtp=SmtpSettings(
            host="smtp.example.com",
            port=587,
            username="monitor",
            password="secret",
            from_email="monitor@example.com",
        ),
        email_recipients=["ops@example.com", "admin@example.com"],
        notifications=NotificationSettings(),
    )


class FakeHTTPClient:
    """Stands in for HTTPClient; answers from a URL to response mapping."""

    responses: dict = {}
    requested: list[str] = []

    def __init__(self, timeout=None):
        self.timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    async def get(self, url, **kwargs):
        FakeHTTPClient.requested.append(url)
        response = FakeHTTPClient.responses.get(url)
        if isinstance(response, Exception):
            raise response
        return response if response is not None else httpx.Response(404)


@pytest.fixture
def issuer_responses(monkeypatch):
    """Route AIA retrieval to FakeHTTPClient; returns its response mapping."""
    from certscan.scanners import aia

    FakeHTTPClient.responses = {}
    FakeHTTPClient.requested = []
    monkeypatch.setattr(aia, "HTTPClient", FakeHTTPClient)
    return FakeHTTPClient.responses
