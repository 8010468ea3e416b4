"""
Retrying, time-bounded request executor.

Every call runs a small state machine per attempt:

    Attempting -> Success    return parse(response)
               -> Retryable  sleep(delay); delay *= 2; next attempt
               -> Fatal      raise

  - 2xx (or the caller's success test)        -> Success
  - 429, timeout, dropped connection          -> Retryable while attempts remain
  - anything else, or the last attempt fails  -> Fatal

Each attempt gets its own CancelToken. The sender must use
`token.remaining()` as its transport timeout; a transport timeout or a
response that lands after the deadline cancels the token, and a cancelled
attempt is classified as a timeout. Nothing outlives the attempt, so one
slow request never affects the next one.
"""

from __future__ import annotations

import enum
import logging
import re
import time
from typing import Any, Callable, Optional

import requests

from .errors import FatalHttpError, NetworkError, RateLimitError, RequestTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INITIAL_DELAY = 1.0   # seconds, doubled after each retry
DEFAULT_TIMEOUT = 20.0        # seconds per attempt

# requests/urllib3 reject a timeout of 0
_MIN_TRANSPORT_TIMEOUT = 0.001

# transport errors worth another attempt; anything else from requests
# (bad URL, unsupported scheme, redirect loop) fails at once
RETRYABLE_TRANSPORT_ERRORS = (requests.ConnectionError, requests.exceptions.ChunkedEncodingError)

# query-string credentials (?key=..., &api_key=...) must not reach logs
_SECRET_QUERY_RE = re.compile(r"([?&](?:api_?)?key=)[^&\s'\"]+", re.IGNORECASE)


class CancelToken:
    """Deadline + cancellation flag scoped to one attempt."""

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self.timeout = float(timeout)
        self._clock = clock
        self.deadline = clock() + self.timeout
        self.cancelled = False
        self.reason: Optional[str] = None

    def remaining(self) -> float:
        return max(_MIN_TRANSPORT_TIMEOUT, self.deadline - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self.deadline

    def cancel(self, reason: str = "timeout") -> None:
        if not self.cancelled:
            self.cancelled = True
            self.reason = reason


class Outcome(enum.Enum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    NETWORK = "network"
    FAILED = "failed"


RETRYABLE_OUTCOMES = {Outcome.RATE_LIMITED, Outcome.TIMEOUT, Outcome.NETWORK}


def redact(text: str) -> str:
    """Mask credential values in any URL query string inside `text`."""
    return _SECRET_QUERY_RE.sub(r"\1***", text)


def is_http_success(resp: requests.Response) -> bool:
    return 200 <= resp.status_code < 300


def is_rate_limited(resp: requests.Response) -> bool:
    return resp.status_code == 429


def server_message(resp: requests.Response) -> str:
    """
    Best-effort explanation from a failed response: `error.message` of a
    JSON body (Google API style), else the HTTP reason phrase.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return getattr(resp, "reason", "") or ""


class ResilientFetcher:
    """
    Run a request with retries, exponential backoff and a per-attempt timeout.

    `send` is any callable taking a CancelToken and returning a
    requests.Response, e.g.:

        fetcher.request(lambda tok: session.get(url, timeout=tok.remaining()))
    """

    def __init__(
            self,
            *,
            name: str = "request",
            max_attempts: int = DEFAULT_MAX_ATTEMPTS,
            initial_delay: float = DEFAULT_INITIAL_DELAY,
            timeout: float = DEFAULT_TIMEOUT,
            sleep: Callable[[float], None] = time.sleep,
            clock: Callable[[], float] = time.monotonic,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1; got {max_attempts}")
        self.name = name
        self.max_attempts = int(max_attempts)
        self.initial_delay = float(initial_delay)
        self.timeout = float(timeout)
        self.sleep = sleep
        self.clock = clock

    def _attempt(self, send, token: CancelToken, is_success, rate_limited):
        """One attempt -> (Outcome, response or None, exception or None)."""
        try:
            resp = send(token)
        except requests.Timeout as e:
            token.cancel("timeout")
            return Outcome.TIMEOUT, None, e
        except RETRYABLE_TRANSPORT_ERRORS as e:
            return Outcome.NETWORK, None, e
        except requests.RequestException as e:
            return Outcome.FAILED, None, e

        if token.expired():
            token.cancel("deadline passed before the response completed")
            return Outcome.TIMEOUT, resp, None
        if is_success(resp):
            return Outcome.SUCCESS, resp, None
        if rate_limited(resp):
            return Outcome.RATE_LIMITED, resp, None
        return Outcome.FAILED, resp, None

    def _fatal(self, outcome: Outcome, resp, exc) -> Exception:
        if outcome is Outcome.TIMEOUT:
            return RequestTimeoutError(
                f"{self.name} call timed out after {self.timeout:g} seconds."
            )
        if exc is not None:
            return NetworkError(f"{self.name} request failed: {redact(str(exc))}")
        if outcome is Outcome.RATE_LIMITED:
            return RateLimitError(resp.status_code, server_message(resp), service=self.name)
        return FatalHttpError(resp.status_code, server_message(resp), service=self.name)

    def request(
            self,
            send: Callable[[CancelToken], requests.Response],
            *,
            is_success: Callable[[requests.Response], bool] = is_http_success,
            is_rate_limited: Callable[[requests.Response], bool] = is_rate_limited,
            parse: Optional[Callable[[requests.Response], Any]] = None,
    ) -> Any:
        """
        Execute `send` until it succeeds or fails for good.

        Returns:
          parse(response) if `parse` is given, else the response itself.

        Raises:
          RequestTimeoutError / NetworkError / RateLimitError when retries run out,
          NetworkError at once for a request requests refuses to send (bad URL),
          FatalHttpError for any other non-success.
        """
        delay = self.initial_delay
        for attempt in range(1, self.max_attempts + 1):
            token = CancelToken(self.timeout, clock=self.clock)
            logger.debug("%s: attempt %d/%d", self.name, attempt, self.max_attempts)

            outcome, resp, exc = self._attempt(send, token, is_success, is_rate_limited)

            if outcome is Outcome.SUCCESS:
                logger.debug("%s: status %s", self.name, resp.status_code)
                return parse(resp) if parse is not None else resp

            last = attempt == self.max_attempts
            if outcome not in RETRYABLE_OUTCOMES or last:
                err = self._fatal(outcome, resp, exc)
                if last and outcome in RETRYABLE_OUTCOMES:
                    logger.error("%s: final attempt failed: %s", self.name, err)
                raise err

            logger.warning(
                "%s: %s on attempt %d/%d. Retrying in %.1fs...",
                self.name, outcome.value, attempt, self.max_attempts, delay,
            )
            self.sleep(delay)
            delay *= 2

        # max_attempts >= 1, so the loop always returns or raises
        raise AssertionError("unreachable")
