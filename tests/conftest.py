import pytest
import requests

from fakes import FakeClock, SleepRecorder


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timeout_error():
    return requests.Timeout("read timed out")


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """No test sees the developer's real key or .env files."""
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "WORDHUNT_TIMEOUT", "WORDHUNT_MAX_ATTEMPTS",
                 "WORDHUNT_INITIAL_DELAY", "WORDHUNT_PAGE_DELAY", "WORDHUNT_VALIDATE_DELAY"):
        # setenv first so teardown also removes values load_dotenv leaks in
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
