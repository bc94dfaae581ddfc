from __future__ import annotations

import pytest

from explainer.config import API_URL_ENV, REQUEST_TIMEOUT_S, Mode, Settings, clean_api_url


def test_no_url_means_local_mode() -> None:
    s = Settings.load()
    assert s.api_url is None
    assert s.mode is Mode.LOCAL
    assert s.timeout_s == REQUEST_TIMEOUT_S


def test_env_url_selects_remote(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(API_URL_ENV, "  https://api.example.org/v1/ ")
    s = Settings.load()
    assert s.api_url == "https://api.example.org/v1"
    assert s.mode is Mode.REMOTE


def test_blank_env_is_treated_as_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(API_URL_ENV, "   ")
    assert Settings.load().mode is Mode.LOCAL


def test_fallback_used_only_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    assert Settings.load(fallback="http://secret.local").api_url == "http://secret.local"
    monkeypatch.setenv(API_URL_ENV, "http://env.local")
    assert Settings.load(fallback="http://secret.local").api_url == "http://env.local"


@pytest.mark.parametrize(("raw", "expected"), [(None, None), ("", None), ("/", None), ("http://a/", "http://a")])
def test_clean_api_url(raw: str | None, expected: str | None) -> None:
    assert clean_api_url(raw) == expected
