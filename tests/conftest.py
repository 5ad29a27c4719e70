"""
Pytest fixtures for Stream API client tests.

HTTP is faked with a stub session; the cache is an in-memory store with a
controllable clock.
"""

import json

import pytest

from stream_client.api import StreamAPI
from stream_client.cache import MemoryCache
from stream_client.config import Settings
from stream_client.credentials import Credentials
from stream_client.notices import CollectingNotifier

API_URL = "http://api.example.test"
SITE_ID = "site-uuid"
API_KEY = "test-master-key"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str | None = None):
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text


class FakeSession:
    """
    Stand-in for requests.Session.

    Responses are served in order; the last one repeats. An exception
    instance in the queue is raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses) or [FakeResponse(200, {})]
        self.calls: list[dict] = []
        self.closed = False

    def request(self, method, url, headers=None, data=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "data": data, "timeout": timeout}
        )
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_settings(monkeypatch):
    """Build Settings from environment variables, ignoring any .env file."""

    def _make(**env):
        defaults = {
            "STREAM_API_URL": API_URL,
            "STREAM_API_MASTER_KEY": API_KEY,
            "STREAM_SITE_UUID": SITE_ID,
        }
        defaults.update(env)
        for key in ("STREAM_API_URL", "STREAM_API_MASTER_KEY", "STREAM_SITE_UUID"):
            monkeypatch.delenv(key, raising=False)
        for key, value in defaults.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        return Settings(_env_file=None)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def make_api(settings, cache, notifier):
    """Build a StreamAPI around a FakeSession serving ``responses``."""

    def _make(*responses, credentials=None, response_filter=None):
        session = FakeSession(*responses)
        api = StreamAPI(
            credentials=credentials or Credentials(api_key=API_KEY, site_id=SITE_ID),
            cache=cache,
            session=session,
            settings=settings,
            response_filter=response_filter,
            notifier=notifier,
        )
        return api, session

    return _make
