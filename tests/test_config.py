"""Tests for redweave.config settings loading."""

import pytest

from redweave.config import DEFAULT_BASE_URL, RedditSettings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.delenv("REDWEAVE_ACCESS_TOKEN", raising=False)
    settings = RedditSettings(_env_file=None)

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.max_retries == 3
    assert settings.default_page_limit == 25
    assert settings.access_token is None
    assert settings.enable_caching is False
    assert settings.pre_request_hooks == []


def test_settings_from_environment(monkeypatch):
    """Test that REDWEAVE_-prefixed environment variables are picked up."""
    monkeypatch.setenv("REDWEAVE_MAX_RETRIES", "5")
    monkeypatch.setenv("REDWEAVE_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("redweave_enable_caching", "true")

    settings = RedditSettings(_env_file=None)

    assert settings.max_retries == 5
    assert settings.access_token == "secret"
    assert settings.enable_caching is True


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_hooks_accept_callables():
    def hook(method, url, params, headers):
        headers["X-Test"] = "1"

    settings = RedditSettings(_env_file=None, pre_request_hooks=[hook])
    assert settings.pre_request_hooks == [hook]
