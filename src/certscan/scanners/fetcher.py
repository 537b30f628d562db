"""TLS certificate fetcher."""

import asyncio
import contextlib
import socket
import ssl

from cryptography import x509

from certscan.core.config import get_settings
from certscan.core.exceptions import FetchError, FetchFailure
from certscan.core.interfaces import FetchedCertificate, ICertificateFetcher
from certscan.core.logging import get_logger
from certscan.infrastructure.ratelimit import RateLimiter
from certscan.scanners.aia import fetch_issuer_chain

# Upper bound on the TLS close_notify exchange once the certificate is in hand
CLOSE_TIMEOUT = 2.0


class CertificateFetcher(ICertificateFetcher):
    """Retrieves the certificate a server presents, whether trusted or not.

    Trust is judged later by the classifier; here verification is switched
    off so that expired and self-signed certificates are still returned.
    """

    def __init__(
        self,
        port: int | None = None,
        timeout: float | None = None,
        rate_limiter: RateLimiter | None = None,
        fetch_intermediates: bool | None = None,
    ) -> None:
        settings = get_settings()
        self.port = port or settings.port
        self.timeout = timeout or settings.connect_timeout
        self.rate_limiter = rate_limiter
        self.fetch_intermediates = (
            settings.fetch_intermediates if fetch_intermediates is None else fetch_intermediates
        )
        self._issuer_cache: dict[str, list[x509.Certificate]] = {}
        self.logger = get_logger("fetcher")

    async def fetch(self, domain: str, timeout: float | None = None) -> FetchedCertificate:
        """Connect to ``domain`` and return the presented certificates."""
        timeout = timeout or self.timeout

        if self.rate_limiter:
            await self.rate_limiter.acquire()

        self.logger.debug("fetch_started", target=domain, port=self.port, timeout=timeout)

        try:
            _reader, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    domain,
                    self.port,
                    ssl=self._create_context(),
                    server_hostname=domain,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning("fetch_timeout", target=domain, timeout=timeout)
            raise FetchError(
                f"Connection to {domain}:{self.port} timed out after {timeout:g}s",
                domain=domain,
                kind=FetchFailure.TIMEOUT,
            ) from None
        except ssl.SSLError as e:
            raise self._unreachable(domain, f"TLS handshake with {domain} failed: {e}")
        except socket.gaierror:
            raise self._unreachable(domain, f"Could not resolve domain name: {domain}")
        except ConnectionRefusedError:
            raise self._unreachable(domain, f"Connection refused by {domain}:{self.port}")
        except OSError as e:
            raise self._unreachable(
                domain, f"Network error connecting to {domain}:{self.port}: {e}"
            )

        try:
            ssl_object = writer.get_extra_info("ssl_object")
            der_cert = ssl_object.getpeercert(binary_form=True) if ssl_object else None
            if not der_cert:
                raise self._unreachable(domain, f"No certificate received from {domain}")

            try:
                leaf = x509.load_der_x509_certificate(der_cert)
            except ValueError as e:
                raise self._unreachable(
                    domain, f"Could not parse certificate presented by {domain}: {e}"
                )

            presented = self._presented_chain(domain, ssl_object)
        finally:
            writer.close()
            with contextlib.suppress(OSError, asyncio.TimeoutError):
                await asyncio.wait_for(writer.wait_closed(), timeout=CLOSE_TIMEOUT)

        chain = list(presented or [])
        if self.fetch_intermediates and self._issuer_missing(leaf, chain):
            chain.extend(await self._issuers_from_aia(domain, leaf, timeout))

        self.logger.debug(
            "fetch_completed",
            target=domain,
            chain_length=len(chain) + 1,
            chain_observed=presented is not None,
        )
        return FetchedCertificate(leaf=leaf, chain=chain, chain_observed=presented is not None)

    def _create_context(self) -> ssl.SSLContext:
        """Client context that accepts any certificate."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    def _presented_chain(
        self, domain: str, ssl_object: ssl.SSLObject
    ) -> list[x509.Certificate] | None:
        """Intermediates sent by the server, or None if the interpreter hides them.

        ``get_unverified_chain`` only exists on Python 3.13 and later.
        """
        get_chain = getattr(ssl_object, "get_unverified_chain", None)
        if get_chain is None:
            return None

        chain = []
        for der in (get_chain() or [])[1:]:
            try:
                chain.append(x509.load_der_x509_certificate(der))
            except ValueError as e:
                self.logger.debug("chain_certificate_unparsable", target=domain, error=str(e))
        return chain

    @staticmethod
    def _issuer_missing(leaf: x509.Certificate, chain: list[x509.Certificate]) -> bool:
        if leaf.issuer == leaf.subject:
            return False
        return not any(cert.subject == leaf.issuer for cert in chain)

    async def _issuers_from_aia(
        self, domain: str, leaf: x509.Certificate, timeout: float
    ) -> list[x509.Certificate]:
        try:
            issuers = await asyncio.wait_for(
                fetch_issuer_chain(leaf, self._issuer_cache, timeout), timeout=timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning("aia_timeout", target=domain, timeout=timeout)
            return []

        if issuers:
            self.logger.debug("aia_completed_chain", target=domain, retrieved=len(issuers))
        return issuers

    def _unreachable(self, domain: str, reason: str) -> FetchError:
        self.logger.warning("fetch_failed", target=domain, error=reason)
        return FetchError(reason, domain=domain, kind=FetchFailure.UNREACHABLE)
