"""
Runtime settings, read from the environment.

`.env.local` and then `.env` are loaded first (values already set in the
environment are kept), so a local key file works the same as an exported
variable:

    GEMINI_API_KEY=...          required for translation
    GEMINI_MODEL=...            optional model override
    WORDHUNT_TIMEOUT=20         seconds per attempt
    WORDHUNT_MAX_ATTEMPTS=5
    WORDHUNT_INITIAL_DELAY=1.0  seconds, doubled per retry
    WORDHUNT_PAGE_DELAY=0.1     pause between word-list pages
    WORDHUNT_VALIDATE_DELAY=0.1 pause between dictionary lookups
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv

from packages.net import ConfigurationError
from packages.net.fetcher import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT
from packages.translate import DEFAULT_MODEL
from packages.wordsource.collector import PAGE_DELAY

ENV_FILES = (".env.local", ".env")
VALIDATE_DELAY = 0.1


@dataclass
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay: float = DEFAULT_INITIAL_DELAY
    page_delay: float = PAGE_DELAY
    validate_delay: float = VALIDATE_DELAY


def _number(name: str, default, cast: Callable, minimum: float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number; got {raw!r}") from e
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}; got {value}")
    return value


def load_settings(env_dir: Path | str | None = None) -> Settings:
    """Load env files from `env_dir` (default: cwd) and build Settings."""
    base = Path(env_dir) if env_dir is not None else Path.cwd()
    for name in ENV_FILES:
        p = base / name
        if p.exists():
            load_dotenv(p, override=False)

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or None,
        model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        timeout=_number("WORDHUNT_TIMEOUT", DEFAULT_TIMEOUT, float, 0.001),
        max_attempts=_number("WORDHUNT_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS, int, 1),
        initial_delay=_number("WORDHUNT_INITIAL_DELAY", DEFAULT_INITIAL_DELAY, float, 0.0),
        page_delay=_number("WORDHUNT_PAGE_DELAY", PAGE_DELAY, float, 0.0),
        validate_delay=_number("WORDHUNT_VALIDATE_DELAY", VALIDATE_DELAY, float, 0.0),
    )
