"""Offline stand-ins for requests sessions, clocks and sleeps."""


class FakeResponse:
    """The slice of requests.Response the code under test touches."""

    def __init__(self, status_code=200, text="", json_data=None, reason=""):
        self.status_code = status_code
        self.text = text
        self._json = json_data
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """
    Scripted stand-in for requests.Session.

    `script` is either a list (answers handed out in call order) or a dict
    url -> list. An entry that is an exception instance is raised instead
    of returned. Unknown urls in dict mode answer 404.
    """

    def __init__(self, script=None):
        self.script = script if script is not None else []
        self.calls = []

    def _next(self, url):
        if isinstance(self.script, dict):
            queue = self.script.get(url)
            if not queue:
                return FakeResponse(404, reason="Not Found")
        else:
            queue = self.script
            if not queue:
                raise AssertionError(f"unexpected request to {url}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._next(url)

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next(url)

    def urls(self):
        return [c[1] for c in self.calls]


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)
