"""Pytest configuration and shared fixtures."""

import io
import json
import urllib.error

import pytest

from pricing_core.config import ApiConfig
from pricing_core.gateway import GatewayClient

VALID_KEY = "ss_test_" + "a1B2" * 8
BASE_URL = "https://api.test.shopsavvy.local/v1"


class FakeResponse:
    """Stands in for http.client.HTTPResponse inside `with urlopen(...)`."""

    def __init__(self, status=200, body=b""):
        self.status = status
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeOpener:
    """Records every urllib Request and replays queued responses in order."""

    def __init__(self):
        self.requests = []
        self._outcomes = []

    def queue_json(self, payload, status=200):
        self._outcomes.append(FakeResponse(status, json.dumps(payload).encode("utf-8")))
        return self

    def queue_raw(self, body, status=200):
        self._outcomes.append(FakeResponse(status, body))
        return self

    def queue_http_error(self, status, payload=None, raw=None):
        body = raw if raw is not None else json.dumps(payload or {}).encode("utf-8")
        self._outcomes.append(
            urllib.error.HTTPError(
                BASE_URL, status, "error", hdrs=None, fp=io.BytesIO(body)
            )
        )
        return self

    def queue_exception(self, exc):
        self._outcomes.append(exc)
        return self

    def __call__(self, request):
        self.requests.append(request)
        if not self._outcomes:
            raise AssertionError(f"Unexpected request: {request.get_method()} {request.full_url}")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def last_request(self):
        return self.requests[-1]


@pytest.fixture
def config():
    return ApiConfig(api_key=VALID_KEY, base_url=BASE_URL)


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def client(config, opener):
    return GatewayClient(config, opener=opener)


@pytest.fixture
def meta():
    return {"credits_used": 1, "credits_remaining": 999}
