"""Domain-level error taxonomy for the reconciliation engine."""

from __future__ import annotations


class ScanAbortedError(RuntimeError):
    """Raised when a discovery pass cannot complete and must be retried as a whole."""


class BrowseSessionExpiredError(ScanAbortedError):
    """Raised when the source catalog reports that the browse session cursor expired."""


class CatalogStructureError(ScanAbortedError):
    """Raised when the source catalog listing does not have the expected shape."""


class TargetSystemError(RuntimeError):
    """Raised by target-system adapters when a call fails after all retries."""
