"""Trust anchor loading for chain validation."""

import re
import ssl
from functools import lru_cache
from pathlib import Path

from cryptography import x509
from cryptography.x509.verification import Store

from certscan.core.exceptions import ChainValidationError
from certscan.core.logging import get_logger

logger = get_logger("trust")

PEM_BLOCK = re.compile(
    rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----", re.DOTALL
)


def _parse_pem_bundle(data: bytes) -> list[x509.Certificate]:
    """Parse every certificate in a PEM bundle, skipping ones that do not load."""
    certs = []
    for block in PEM_BLOCK.findall(data):
        try:
            certs.append(x509.load_pem_x509_certificate(block))
        except ValueError:
            logger.debug("trust_anchor_unparsable")
    return certs


def _platform_anchors() -> list[x509.Certificate]:
    """Trust anchors from the platform's default OpenSSL configuration."""
    context = ssl.create_default_context()
    certs = []
    for der in context.get_ca_certs(binary_form=True):
        try:
            certs.append(x509.load_der_x509_certificate(der))
        except ValueError:
            logger.debug("trust_anchor_unparsable")
    if certs:
        return certs

    # Anchors in a hashed capath are loaded lazily by OpenSSL and never
    # show up in get_ca_certs(), so read the files directly.
    paths = ssl.get_default_verify_paths()
    for cafile in (paths.cafile, paths.openssl_cafile):
        if cafile and Path(cafile).is_file():
            certs.extend(_parse_pem_bundle(Path(cafile).read_bytes()))
    if not certs:
        for capath in (paths.capath, paths.openssl_capath):
            if capath and Path(capath).is_dir():
                for entry in sorted(Path(capath).iterdir()):
                    if entry.is_file():
                        certs.extend(_parse_pem_bundle(entry.read_bytes()))
    return certs


@lru_cache(maxsize=4)
def load_trust_store(ca_bundle: Path | None = None) -> Store:
    """Build a verification store from ``ca_bundle`` or the platform defaults.

    Raises:
        ChainValidationError: when no trust anchor can be loaded.
    """
    try:
        if ca_bundle is not None:
            anchors = _parse_pem_bundle(Path(ca_bundle).read_bytes())
        else:
            anchors = _platform_anchors()
    except OSError as e:
        raise ChainValidationError(f"Could not read trust anchors: {e}") from e

    if not anchors:
        raise ChainValidationError(
            "No trust anchors available",
            details={"ca_bundle": str(ca_bundle) if ca_bundle else None},
        )

    logger.debug("trust_store_loaded", anchors=len(anchors), ca_bundle=str(ca_bundle))
    return Store(anchors)
