from __future__ import annotations

import pytest

from postakod.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content


def test_http_get_text_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    body = b"\xef\xbb\xbf" + "il;ilce;semt;mahalle;pk\n".encode("utf-8")
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, body))
    text = client.get_text("https://example.com/pk.csv")

    assert text == "il;ilce;semt;mahalle;pk\n"


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503))

    with pytest.raises(RetryableHttpError):
        client.get_text("https://example.com/pk.csv")


def test_http_retries_then_succeeds(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0))
    responses = [FakeResponse(429), FakeResponse(200, b"ok")]
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.get_text("https://example.com/pk.csv") == "ok"


def test_http_client_error_is_not_retried(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0))
    calls: list[dict] = []

    def _request(**kwargs):
        calls.append(kwargs)
        return FakeResponse(404)

    monkeypatch.setattr(client.session, "request", _request)

    with pytest.raises(HttpRequestError):
        client.get_text("https://example.com/pk.csv")
    assert len(calls) == 1


def test_http_invalid_encoding_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, b"\xff\xfe\xfa"))

    with pytest.raises(HttpRequestError):
        client.get_text("https://example.com/pk.csv")
