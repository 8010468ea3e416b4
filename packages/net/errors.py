"""
Error taxonomy for the acquisition pipeline.

Retryable kinds (RequestTimeoutError, RateLimitError, NetworkError) are
absorbed by ResilientFetcher and only escape once the attempt ceiling is
reached. Everything else is terminal on first occurrence.
"""

from __future__ import annotations


class WordhuntError(Exception):
    """Base class for every failure the pipeline reports."""


class ConfigurationError(WordhuntError):
    """Missing credential, empty input or a malformed setting."""


class RequestTimeoutError(WordhuntError):
    """A single attempt ran past its time budget."""


class NetworkError(WordhuntError):
    """Transport-level failure (DNS, refused connection, reset, ...)."""


class FatalHttpError(WordhuntError):
    """Non-success response that is not worth retrying."""

    def __init__(self, status: int, message: str = "", *, service: str = "request"):
        self.status = status
        self.message = message
        self.service = service
        text = f"{service} failed with status: {status}"
        if message:
            text += f". Message: {message}"
        super().__init__(text)


class RateLimitError(FatalHttpError):
    """Still rate limited (HTTP 429) after the last allowed attempt."""


class ParseError(WordhuntError):
    """A structured response could not be decoded into what we need."""
