from .errors import (
    WordhuntError,
    ConfigurationError,
    RequestTimeoutError,
    RateLimitError,
    NetworkError,
    FatalHttpError,
    ParseError,
)
from .fetcher import ResilientFetcher, CancelToken, Outcome

__all__ = [
    "WordhuntError",
    "ConfigurationError",
    "RequestTimeoutError",
    "RateLimitError",
    "NetworkError",
    "FatalHttpError",
    "ParseError",
    "ResilientFetcher",
    "CancelToken",
    "Outcome",
]
