"""Exception hierarchy for the aggregator.

Fetch and envelope errors escalate out of an adapter and trigger a retry.
Item and validation errors stay local to a single record.
"""

from typing import Optional


class IngestError(Exception):
    """Base class for all ingestion errors."""

    pass


class FetchError(IngestError):
    """Raised when a source payload could not be retrieved."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class NetworkError(FetchError):
    """Connection failure, timeout or other transport-level problem."""

    pass


class HttpStatusError(FetchError):
    """The endpoint answered with a non-2xx status code."""

    def __init__(self, message: str, status_code: int, source: Optional[str] = None):
        super().__init__(message, source=source)
        self.status_code = status_code


class ClientError(HttpStatusError):
    """4xx response."""

    pass


class RateLimited(ClientError):
    """429 Too Many Requests."""

    pass


class ServerError(HttpStatusError):
    """5xx response."""

    pass


class EnvelopeParseError(IngestError):
    """The top-level feed document or JSON root is malformed."""

    pass


class ItemParseError(IngestError):
    """A single element of an otherwise valid payload could not be mapped."""

    pass


class ValidationRejected(IngestError):
    """A well-formed record failed the semantic checks."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


__all__ = [
    "IngestError",
    "FetchError",
    "NetworkError",
    "HttpStatusError",
    "ClientError",
    "RateLimited",
    "ServerError",
    "EnvelopeParseError",
    "ItemParseError",
    "ValidationRejected",
]
