"""
Exception hierarchy for the record scraper.

All exceptions inherit from ScraperError to allow catching all scraper-related errors.
"No data found" conditions never raise; only host-level faults and bad
configuration do.
"""

from datetime import datetime
from typing import Any


class ScraperError(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.utcnow()


# =============================================================================
# Host Errors
# =============================================================================


class HostError(ScraperError):
    """Raised when the host tree API faults."""

    pass


class DetachedElementError(HostError):
    """Element handle does not belong to the document being queried."""

    def __init__(self, tag_name: str, operation: str):
        super().__init__(
            f"Element <{tag_name}> is detached from the document ({operation})",
            {"tag_name": tag_name, "operation": operation},
        )
        self.tag_name = tag_name
        self.operation = operation


class InvalidSelectorError(HostError):
    """Selector could not be parsed by the selector engine."""

    def __init__(self, selector: str, reason: str):
        super().__init__(
            f"Invalid selector {selector!r}: {reason}",
            {"selector": selector, "reason": reason},
        )
        self.selector = selector
        self.reason = reason


class SnapshotError(HostError):
    """Capturing a live page into a document failed."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Snapshot failed for {url}: {reason}",
            {"url": url, "reason": reason},
        )
        self.url = url
        self.reason = reason


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ScraperError):
    """Extraction parameters are malformed."""

    def __init__(self, parameter: str, reason: str):
        super().__init__(
            f"Invalid {parameter}: {reason}",
            {"parameter": parameter, "reason": reason},
        )
        self.parameter = parameter
        self.reason = reason
