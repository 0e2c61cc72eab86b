"""Domain exceptions."""

from __future__ import annotations


class StreamScoutError(Exception):
    """Base class for all streamscout errors."""


class MissingIdentifierError(StreamScoutError):
    """Raised when a stream request carries neither ``id`` nor ``query``."""


class FetchError(StreamScoutError):
    """Raised when a page cannot be retrieved.

    Covers transport errors, timeouts, redirect loops and any final
    status outside 200..399.
    """

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")
