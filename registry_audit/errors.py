"""
Error taxonomy for registry auditing.

Discrepancies are not errors: they are data in the DiscrepancyReport.
Everything here aborts a run except HashComputeError, which the proposal
scan catches per message.
"""

from __future__ import annotations
from typing import Optional


class RegistryAuditError(Exception):
    """Base class for all audit failures."""


class DatasetShapeError(RegistryAuditError):
    """The registry dataset does not have the required shape."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path or '<root>'} {reason}")


class RegistryLoadError(RegistryAuditError):
    """The registry file could not be read or parsed."""


class TransportError(RegistryAuditError):
    """A fetch failed or returned a non-success status."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


class HashComputeError(RegistryAuditError):
    """A payload could not be decoded or hashed."""


class ConfigError(RegistryAuditError):
    """An environment override could not be parsed."""
