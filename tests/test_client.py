from __future__ import annotations

import pytest
import requests

from royalreader.client import RoyalClient
from royalreader.errors import NotFoundError


class _Response:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


def test_get_joins_base_url_and_returns_text(monkeypatch) -> None:
    client = RoyalClient("https://example.test/", timeout=5)
    calls: list[tuple[str, float]] = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return _Response(200, "<html></html>")

    monkeypatch.setattr(client._session, "get", fake_get)
    assert client.get("/fiction/1") == "<html></html>"
    assert client.get("fiction/2") == "<html></html>"
    assert calls == [("https://example.test/fiction/1", 5), ("https://example.test/fiction/2", 5)]


def test_http_error_status_is_not_found(monkeypatch) -> None:
    client = RoyalClient("https://example.test")
    monkeypatch.setattr(client._session, "get", lambda url, timeout: _Response(404, "missing"))
    with pytest.raises(NotFoundError) as excinfo:
        client.get("/fiction/0")
    assert "404" in str(excinfo.value)


def test_transport_failure_is_not_found(monkeypatch) -> None:
    client = RoyalClient("https://example.test")

    def boom(url, timeout):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client._session, "get", boom)
    with pytest.raises(NotFoundError):
        client.get("/fiction/1")
