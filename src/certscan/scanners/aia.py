"""Issuer retrieval through the Authority Information Access extension."""

import httpx
from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs7
from cryptography.x509.oid import AuthorityInformationAccessOID, ExtensionOID

from certscan.core.logging import get_logger
from certscan.infrastructure.http import HTTPClient

logger = get_logger("aia")

# Intermediates above the leaf worth following before giving up
MAX_ISSUER_DEPTH = 4


def ca_issuer_urls(cert: x509.Certificate) -> list[str]:
    """CA Issuers URLs listed in the certificate's AIA extension."""
    try:
        aia = cert.extensions.get_extension_for_oid(
            ExtensionOID.AUTHORITY_INFORMATION_ACCESS
        ).value
    except x509.ExtensionNotFound:
        return []

    return [
        desc.access_location.value
        for desc in aia
        if desc.access_method == AuthorityInformationAccessOID.CA_ISSUERS
        and isinstance(desc.access_location, x509.UniformResourceIdentifier)
    ]


def parse_certificates(data: bytes) -> list[x509.Certificate]:
    """Parse a CA Issuers response: DER, PEM or a PKCS#7 bundle.

    Raises:
        ValueError: if the data holds no certificate.
    """
    if b"-----BEGIN PKCS7-----" in data:
        return pkcs7.load_pem_pkcs7_certificates(data)
    if b"-----BEGIN CERTIFICATE-----" in data:
        return x509.load_pem_x509_certificates(data)
    try:
        return [x509.load_der_x509_certificate(data)]
    except ValueError:
        return pkcs7.load_der_pkcs7_certificates(data)


async def fetch_issuer_chain(
    leaf: x509.Certificate,
    cache: dict[str, list[x509.Certificate]] | None = None,
    timeout: float | None = None,
) -> list[x509.Certificate]:
    """Follow AIA links upwards from ``leaf`` and return the issuers found.

    Retrieval stops at a self-issued certificate, at a certificate without a
    usable CA Issuers URL, or after ``MAX_ISSUER_DEPTH`` steps. ``cache`` maps
    URLs to parsed responses and may be shared between calls.
    """
    cache = cache if cache is not None else {}
    issuers: list[x509.Certificate] = []
    current = leaf

    async with HTTPClient(timeout=timeout) as client:
        for _ in range(MAX_ISSUER_DEPTH):
            if current.issuer == current.subject:
                break
            issuer = await _fetch_issuer(client, current, cache)
            if issuer is None:
                break
            issuers.append(issuer)
            current = issuer

    return issuers


async def _fetch_issuer(
    client: HTTPClient,
    cert: x509.Certificate,
    cache: dict[str, list[x509.Certificate]],
) -> x509.Certificate | None:
    for url in ca_issuer_urls(cert):
        if url not in cache:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.warning("aia_fetch_failed", url=url, error=str(e))
                continue

            if response.status_code != 200:
                logger.warning("aia_fetch_failed", url=url, status=response.status_code)
                continue

            try:
                cache[url] = parse_certificates(response.content)
            except ValueError as e:
                logger.warning("aia_parse_failed", url=url, error=str(e))
                continue
            logger.debug("aia_fetched", url=url, certificates=len(cache[url]))

        for candidate in cache[url]:
            if candidate.subject == cert.issuer:
                return candidate

    return None
