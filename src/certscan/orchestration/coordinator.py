"""Scan coordinator for fanning out certificate checks across domains."""

import asyncio
import time
from datetime import datetime, timedelta, timezone

from certscan.core.config import get_settings
from certscan.core.exceptions import ConfigurationError, FetchError
from certscan.core.interfaces import ICertificateClassifier, ICertificateFetcher
from certscan.core.logging import get_logger
from certscan.infrastructure.ratelimit import connection_limiter
from certscan.models import CertificateRecord, ScanReport, ThresholdSettings
from certscan.scanners.classifier import CertificateClassifier
from certscan.scanners.fetcher import CertificateFetcher

# Backstop for fetchers that ignore their timeout; the connect and the issuer
# retrieval are each bounded by it
FETCH_GRACE_SECONDS = 1.0


class ScanCoordinator:
    """Scans a batch of domains concurrently and aggregates the results."""

    def __init__(
        self,
        fetcher: ICertificateFetcher | None = None,
        classifier: ICertificateClassifier | None = None,
        max_concurrent: int | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.logger = get_logger("coordinator")
        self.timeout = timeout or settings.connect_timeout
        self.max_concurrent = max_concurrent or settings.max_concurrent_scans
        self._fetcher = fetcher or CertificateFetcher(
            timeout=self.timeout,
            rate_limiter=connection_limiter(),
        )
        self._classifier = classifier or CertificateClassifier()

    async def run_scan(
        self,
        domains: list[str],
        thresholds: ThresholdSettings | None = None,
    ) -> ScanReport:
        """Scan every domain and return the aggregated report.

        Returns only once every domain has produced a record; one record is
        produced per input domain, in input order.

        Raises:
            ConfigurationError: if ``domains`` is empty.
        """
        if not domains:
            raise ConfigurationError("At least one domain is required to run a scan")

        thresholds = thresholds or ThresholdSettings()
        started_at = datetime.now(timezone.utc)
        start_time = time.monotonic()

        self.logger.info(
            "scan_started",
            domains=len(domains),
            warning_days=thresholds.warning_days,
            critical_days=thresholds.critical_days,
        )

        semaphore = asyncio.Semaphore(self.max_concurrent)
        tasks = [self._scan_domain(domain, thresholds, semaphore) for domain in domains]

        # Wait for all domains to complete
        results = await asyncio.gather(*tasks, return_exceptions=True)

        records = []
        for domain, result in zip(domains, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self.logger.error("domain_task_failed", target=domain, error=str(result))
                result = CertificateRecord.from_error(domain, str(result))
            records.append(result)

        report = ScanReport(
            records=records,
            scan_started_at=started_at,
            scan_duration=timedelta(seconds=time.monotonic() - start_time),
        )

        self.logger.info(
            "scan_completed",
            duration=round(report.duration_seconds, 3),
            valid=report.valid_count,
            warning=report.warning_count,
            critical=report.critical_count,
            expired=report.expired_count,
            errors=report.error_count,
        )

        return report

    async def _scan_domain(
        self,
        domain: str,
        thresholds: ThresholdSettings,
        semaphore: asyncio.Semaphore,
    ) -> CertificateRecord:
        """Fetch and classify one domain; failures become an Error record."""
        async with semaphore:
            try:
                fetched = await asyncio.wait_for(
                    self._fetcher.fetch(domain, self.timeout),
                    timeout=2 * self.timeout + FETCH_GRACE_SECONDS,
                )
            except asyncio.TimeoutError:
                self.logger.warning("fetch_timeout", target=domain, timeout=self.timeout)
                return CertificateRecord.from_error(
                    domain, f"Connection to {domain} timed out after {self.timeout:g}s"
                )
            except FetchError as e:
                return CertificateRecord.from_error(domain, e.reason)
            except Exception as e:
                self.logger.error(
                    "fetch_unexpected_error",
                    target=domain,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return CertificateRecord.from_error(domain, str(e) or type(e).__name__)

        try:
            return self._classifier.classify(domain, fetched, thresholds)
        except Exception as e:
            self.logger.error(
                "classification_failed",
                target=domain,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CertificateRecord.from_error(domain, str(e) or type(e).__name__)
