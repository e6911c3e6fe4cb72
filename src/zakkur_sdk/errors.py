"""Structured error raised for every failed SDK call."""

from __future__ import annotations

from typing import Any, Optional

AUTH_REQUIRED = "AUTH_REQUIRED"
TIMEOUT = "TIMEOUT"
NET_ERROR = "NET_ERROR"
UPSTREAM_ERROR = "UPSTREAM_ERROR"

DEFAULT_UPSTREAM_MESSAGE = "Upstream server error"


class ZakkurError(Exception):
    """Failure surfaced to callers.

    ``status`` is the upstream HTTP status for server responses, 408 for
    timeouts, 500 for exhausted transport retries and 400 for a missing
    credential. ``details`` carries the upstream ``errors`` payload (for
    example a list of validation problems) when the server sent one.
    """

    def __init__(self, message: str, status: Optional[int], code: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    def __repr__(self) -> str:
        return f"ZakkurError(message={self.message!r}, status={self.status!r}, code={self.code!r})"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "details": self.details,
        }


__all__ = [
    "AUTH_REQUIRED",
    "DEFAULT_UPSTREAM_MESSAGE",
    "NET_ERROR",
    "TIMEOUT",
    "UPSTREAM_ERROR",
    "ZakkurError",
]
