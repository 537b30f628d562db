"""Tests for the scan coordinator."""

import asyncio
import time
from datetime import timedelta

import pytest

from certscan.core.exceptions import ConfigurationError, FetchError, FetchFailure
from certscan.core.interfaces import ICertificateClassifier, ICertificateFetcher
from certscan.models import CertificateRecord, CertificateStatus
from certscan.orchestration.coordinator import ScanCoordinator
from certscan.scanners.classifier import expiry_status

from conftest import NOW, fetched_for, make_certificate


class FakeFetcher(ICertificateFetcher):
    """Serves canned certificates per domain and records calls."""

    def __init__(self, days_by_domain=None, delays=None, errors=None):
        self.days_by_domain = days_by_domain or {}
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls = []

    async def fetch(self, domain, timeout=None):
        self.calls.append(domain)
        if domain in self.delays:
            await asyncio.sleep(self.delays[domain])
        if domain in self.errors:
            raise self.errors[domain]
        days = self.days_by_domain.get(domain, 100)
        return fetched_for(make_certificate(not_after=NOW + timedelta(days=days)))


class ExpiryOnlyClassifier(ICertificateClassifier):
    """Classifies by expiry alone against a fixed clock."""

    def classify(self, domain, fetched, thresholds, now=None):
        valid_to = fetched.leaf.not_valid_after_utc
        days = (valid_to - NOW).days
        return CertificateRecord(
            domain=domain,
            valid_to=valid_to,
            days_until_expiry=days,
            status=expiry_status(valid_to, days, thresholds, NOW),
        )


class BrokenClassifier(ICertificateClassifier):
    def classify(self, domain, fetched, thresholds, now=None):
        raise RuntimeError("classifier exploded")


def run(coordinator, domains, thresholds=None):
    return asyncio.run(coordinator.run_scan(domains, thresholds))


class TestScanCoordinator:
    def test_one_record_per_domain_in_order(self, thresholds):
        fetcher = FakeFetcher({"a.example.com": 200, "b.example.com": 20, "c.example.com": 3})
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=1)

        report = run(coordinator, ["a.example.com", "b.example.com", "c.example.com"], thresholds)

        assert [r.domain for r in report.records] == [
            "a.example.com",
            "b.example.com",
            "c.example.com",
        ]
        assert [r.status for r in report.records] == [
            CertificateStatus.VALID,
            CertificateStatus.WARNING,
            CertificateStatus.CRITICAL,
        ]
        assert report.total_domains == 3

    def test_certificate_expiring_in_five_days(self, thresholds):
        fetcher = FakeFetcher({"soon.example.com": 5})
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=1)

        report = run(coordinator, ["soon.example.com"], thresholds)

        rec = report.records[0]
        assert rec.status == CertificateStatus.CRITICAL
        assert rec.days_until_expiry == 5
        assert report.has_issues
        assert report.error_count == 0

    def test_empty_domain_list_fails_before_fetching(self):
        fetcher = FakeFetcher()
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=1)

        with pytest.raises(ConfigurationError):
            run(coordinator, [])

        assert fetcher.calls == []

    def test_fetch_error_becomes_error_record(self):
        fetcher = FakeFetcher(
            errors={
                "down.example.com": FetchError(
                    "Could not resolve domain name: down.example.com",
                    domain="down.example.com",
                )
            }
        )
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=1)

        report = run(coordinator, ["ok.example.com", "down.example.com"])

        down = report.records[1]
        assert down.status == CertificateStatus.ERROR
        assert down.error_message == "Could not resolve domain name: down.example.com"
        assert report.records[0].status == CertificateStatus.VALID
        assert report.error_count == 1

    def test_fetcher_timeout_error(self):
        fetcher = FakeFetcher(
            errors={
                "slow.example.com": FetchError(
                    "Connection to slow.example.com:443 timed out after 0.1s",
                    domain="slow.example.com",
                    kind=FetchFailure.TIMEOUT,
                )
            }
        )
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=0.1)

        report = run(coordinator, ["slow.example.com"])

        assert report.error_count == 1
        assert report.has_issues
        assert "timed out" in report.records[0].error_message

    def test_hung_fetch_does_not_block_others(self):
        fetcher = FakeFetcher(delays={"hung.example.com": 30})
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=0.1)

        started = time.monotonic()
        report = run(coordinator, ["hung.example.com", "fast.example.com"])
        elapsed = time.monotonic() - started

        assert elapsed < 5
        hung, fast = report.records
        assert hung.status == CertificateStatus.ERROR
        assert "timed out" in hung.error_message
        assert fast.status == CertificateStatus.VALID

    def test_unexpected_fetch_exception_is_isolated(self):
        fetcher = FakeFetcher(errors={"bad.example.com": ValueError("unexpected")})
        coordinator = ScanCoordinator(fetcher, ExpiryOnlyClassifier(), timeout=1)

        report = run(coordinator, ["bad.example.com", "good.example.com"])

        assert report.records[0].status == CertificateStatus.ERROR
        assert report.records[0].error_message == "unexpected"
        assert report.records[1].status == CertificateStatus.VALID

    def test_classifier_exception_becomes_error_record(self):
        coordinator = ScanCoordinator(FakeFetcher(), BrokenClassifier(), timeout=1)

        report = run(coordinator, ["example.com"])

        assert report.records[0].status == CertificateStatus.ERROR
        assert report.records[0].error_message == "classifier exploded"

    def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        class TrackingFetcher(FakeFetcher):
            async def fetch(self, domain, timeout=None):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                try:
                    await asyncio.sleep(0.01)
                    return await super().fetch(domain, timeout)
                finally:
                    active -= 1

        domains = [f"host{i}.example.com" for i in range(10)]
        coordinator = ScanCoordinator(
            TrackingFetcher(), ExpiryOnlyClassifier(), max_concurrent=3, timeout=1
        )

        report = run(coordinator, domains)

        assert report.total_domains == 10
        assert peak <= 3

    def test_report_timing(self):
        coordinator = ScanCoordinator(FakeFetcher(), ExpiryOnlyClassifier(), timeout=1)

        report = run(coordinator, ["example.com"])

        assert report.scan_started_at.tzinfo is not None
        assert report.duration_seconds >= 0
