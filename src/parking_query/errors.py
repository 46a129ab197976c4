"""
Error taxonomy for catalog resolution and aggregation.
"""

from typing import Optional


class ParkingQueryError(Exception):
    """Base exception for parking query errors."""
    pass


class FetchError(ParkingQueryError):
    """Raised when a source document cannot be reached or parsed."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        message = f"Failed to fetch {url}: {reason}"
        if status is not None:
            message = f"Failed to fetch {url} (HTTP {status}): {reason}"
        super().__init__(message)
        self.url = url
        self.reason = reason
        self.status = status


class NotFoundError(ParkingQueryError):
    """Raised when a dataset URL is not present in the catalog."""

    def __init__(self, dataset_url: str):
        super().__init__(f"Dataset URL not found in catalog: {dataset_url}")
        self.dataset_url = dataset_url


class MalformedRecordError(ParkingQueryError):
    """Raised when a record subject lacks a required fact or value."""

    def __init__(self, subject: str, reason: str):
        super().__init__(f"Malformed record {subject}: {reason}")
        self.subject = subject
        self.reason = reason


class EmptySourceError(ParkingQueryError):
    """Raised when a source yields no facility candidates."""

    def __init__(self, source: str):
        super().__init__(f"No facilities found in dataset: {source}")
        self.source = source


class LiteralDecodeError(ParkingQueryError, ValueError):
    """Raised when a term is not a literal encoding."""

    def __init__(self, term: str, reason: str = "not a literal"):
        super().__init__(f"Cannot decode {term!r}: {reason}")
        self.term = term
