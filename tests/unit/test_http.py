from __future__ import annotations

import time

import pytest
import requests

from street_geocoder.common.http import (
    HostRateLimiter,
    HttpClient,
    HttpRequestError,
    RetryConfig,
    RetryableHttpError,
    TokenBucket,
)


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False, content: bytes = b"x"):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json
        self.content = content

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_get_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, [{"id": 1}]))
    payload = client.get_json("https://example.com/street", params={"street": "Ringweg"})

    assert payload == [{"id": 1}]


def test_http_passes_params_and_headers(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, [])

    monkeypatch.setattr(client.session, "request", fake_request)
    client.get_json("https://example.com/num", params={"street": 7})

    assert seen["method"] == "GET"
    assert seen["params"] == {"street": 7}
    assert seen["headers"]["Accept"] == "application/json"
    assert seen["timeout"] == (client.timeout.connect, client.timeout.read)


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


def test_http_client_error_status_is_not_retried(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0, max_wait=0))
    calls = []

    def fake_request(**_kwargs):
        calls.append(1)
        return FakeResponse(404)

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(HttpRequestError) as excinfo:
        client.get_json("https://example.com")

    assert not isinstance(excinfo.value, RetryableHttpError)
    assert len(calls) == 1


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0, max_wait=0))
    responses = [FakeResponse(502), FakeResponse(200, {"lat": 1.0, "lon": 2.0})]
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.get_json("https://example.com/geo") == {"lat": 1.0, "lon": 2.0}


def test_http_transport_error_is_retryable(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=2, multiplier=0, max_wait=0))
    calls = []

    def fake_request(**_kwargs):
        calls.append(1)
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")
    assert len(calls) == 2


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")


def test_http_empty_body_allowed(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True, content=b""))

    assert client.get_json("https://example.com/geo", allow_empty=True) is None


def test_token_bucket_grants_up_to_capacity_without_waiting():
    bucket = TokenBucket(rate_per_sec=100.0)
    started = time.monotonic()
    for _ in range(100):
        bucket.acquire()
    assert time.monotonic() - started < 0.5
    assert bucket.tokens <= bucket.capacity - 1


def test_host_rate_limiter_keeps_one_bucket_per_host():
    limiter = HostRateLimiter(rate_per_sec=50.0)
    limiter.acquire("a.example")
    limiter.acquire("b.example")
    limiter.acquire("a.example")

    assert set(limiter.buckets) == {"a.example", "b.example"}


def test_http_client_without_rate_limit_has_no_limiter():
    assert HttpClient().limiter is None
    assert HttpClient(rate_per_sec=5).limiter is not None
