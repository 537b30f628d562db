"""certscan - TLS certificate expiry scanner."""

from certscan.version import __version__

__all__ = ["__version__"]
