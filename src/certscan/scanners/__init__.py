"""Certificate fetching and classification."""

from certscan.scanners.classifier import CertificateClassifier, expiry_status
from certscan.scanners.fetcher import CertificateFetcher
from certscan.scanners.trust import load_trust_store

__all__ = [
    "CertificateClassifier",
    "CertificateFetcher",
    "expiry_status",
    "load_trust_store",
]
