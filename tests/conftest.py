"""Shared fixtures: no test touches the network or the real environment."""

import json

import pytest

from yt2notes.config import Config


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, json_data=None, text=None, reason="OK"):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else (json.dumps(json_data) if json_data is not None else "")
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def raise_for_status(self):
        if not self.ok:
            raise RuntimeError(f"HTTP {self.status_code}")


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Deterministic configuration for every test."""
    monkeypatch.setattr(Config, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(Config, "NOTES_MODEL", "gpt-4o-mini")
    monkeypatch.setattr(Config, "IMAGE_MODEL", "gpt-image-1")
    monkeypatch.setattr(Config, "FAL_API_KEY", "")
    monkeypatch.setattr(Config, "SUPADATA_API_KEY", "sd-test")
    monkeypatch.setattr(Config, "PROXY_BASE_URL", "http://proxy.test")
    monkeypatch.setattr(Config, "ALT_TRANSCRIPT_API_URL", "https://alt.test/v1/transcript")
    monkeypatch.setattr(Config, "YOUTUBE_COOKIES_TXT", "")
    monkeypatch.setattr(Config, "REQUEST_TIMEOUT", 5.0)


@pytest.fixture
def fake_response():
    """Factory for fake requests responses."""
    return FakeResponse
