from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        return json.loads(self.text)


Reply = FakeResponse | Exception | Callable[[str, dict[str, Any]], FakeResponse]


class FakeSession:
    """Stands in for requests.Session; replies are consumed in order."""

    def __init__(self, *replies: Reply) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, dict[str, Any], float | None]] = []
        self.closed = False

    def post(self, url: str, json: dict[str, Any] | None = None, timeout: float | None = None) -> FakeResponse:
        body = json or {}
        self.calls.append((url, body, timeout))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(url, body)
        return reply

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")


@pytest.fixture(autouse=True)
def _no_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONFIABLE_API_URL", raising=False)
