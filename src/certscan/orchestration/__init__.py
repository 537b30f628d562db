"""Scan orchestration."""

from certscan.orchestration.coordinator import ScanCoordinator

__all__ = ["ScanCoordinator"]
