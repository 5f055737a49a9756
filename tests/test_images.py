"""Tests for the image generation chain."""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
import requests

from yt2notes import images
from yt2notes.config import Config
from yt2notes.errors import (
    AuthFailed,
    GenerationFailed,
    InsufficientCredits,
    InvalidInput,
    ProviderHTTPError,
    QuotaExceeded,
    RateLimited,
)

DESCRIPTION = "A flowchart with three boxes: 'Input' -> 'Process' -> 'Output'"


@pytest.fixture
def with_fal_key(monkeypatch):
    monkeypatch.setattr(Config, "FAL_API_KEY", "fal-test")


@pytest.fixture
def providers(monkeypatch):
    """Replace both providers with mocks."""
    fal = Mock(return_value="https://fal.media/image.png")
    openai_images = Mock(return_value="data:image/png;base64,AAAA")
    monkeypatch.setattr(images, "generate_via_fal", fal)
    monkeypatch.setattr(images, "generate_via_openai", openai_images)
    return SimpleNamespace(fal=fal, openai=openai_images)


class TestPrompts:
    def test_description_is_wrapped_not_altered(self):
        assert f'"{DESCRIPTION}"' in images.standard_prompt(DESCRIPTION)
        assert f'"{DESCRIPTION}"' in images.colorful_prompt(DESCRIPTION)
        assert images.standard_prompt(DESCRIPTION) != images.colorful_prompt(DESCRIPTION)
        assert "vector-style" in images.standard_prompt(DESCRIPTION)
        assert "vibrant" in images.colorful_prompt(DESCRIPTION)


class TestGenerateImage:
    def test_without_fal_key_only_openai_is_used(self, providers):
        assert images.generate_image(DESCRIPTION) == "data:image/png;base64,AAAA"
        providers.fal.assert_not_called()
        providers.openai.assert_called_once_with(images.standard_prompt(DESCRIPTION))

    def test_placeholder_fal_key_is_ignored(self, providers, monkeypatch):
        monkeypatch.setattr(Config, "FAL_API_KEY", "your_fal_api_key_here")
        images.generate_image(DESCRIPTION)
        providers.fal.assert_not_called()

    def test_fal_first_when_configured(self, providers, with_fal_key):
        assert images.generate_image(DESCRIPTION) == "https://fal.media/image.png"
        providers.openai.assert_not_called()

    def test_fal_failure_falls_back_to_openai(self, providers, with_fal_key):
        providers.fal.side_effect = ProviderHTTPError("fal.ai API", 500, "oops")
        assert images.generate_image(DESCRIPTION) == "data:image/png;base64,AAAA"
        providers.openai.assert_called_once()

    def test_resource_exhausted_is_quota_exceeded(self, providers):
        providers.openai.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED: quota for images")

        with pytest.raises(QuotaExceeded) as exc_info:
            images.generate_image(DESCRIPTION)

        assert exc_info.value.kind == "quota_exceeded"
        assert "try again tomorrow" in exc_info.value.hint

    def test_insufficient_quota_code_is_quota_exceeded(self, providers):
        error = RuntimeError("You exceeded your current plan")
        error.code = "insufficient_quota"
        providers.openai.side_effect = error

        with pytest.raises(QuotaExceeded):
            images.generate_image(DESCRIPTION)

    def test_other_secondary_failure_is_generation_failed(self, providers, with_fal_key):
        providers.fal.side_effect = ProviderHTTPError("fal.ai API", 401, "bad key")
        providers.openai.side_effect = RuntimeError("content policy violation")

        with pytest.raises(GenerationFailed):
            images.generate_image(DESCRIPTION)

    def test_regeneration_starts_from_first_provider(self, providers, with_fal_key):
        providers.fal.side_effect = [ProviderHTTPError("fal.ai API", 500, ""), "https://fal.media/2.png"]

        images.generate_image(DESCRIPTION)
        assert images.generate_image(DESCRIPTION) == "https://fal.media/2.png"
        assert providers.fal.call_count == 2
        assert providers.openai.call_count == 1

    def test_empty_description(self, providers):
        with pytest.raises(InvalidInput):
            images.generate_image("  ")
        providers.openai.assert_not_called()


class TestGenerateColorfulImage:
    def test_single_fal_attempt(self, providers, with_fal_key):
        assert images.generate_colorful_image(DESCRIPTION) == "https://fal.media/image.png"
        providers.fal.assert_called_once_with(
            images.colorful_prompt(DESCRIPTION), endpoint=images.FAL_NANO_BANANA_URL
        )
        providers.openai.assert_not_called()

    @pytest.mark.parametrize("status, expected", [
        (401, AuthFailed),
        (403, AuthFailed),
        (429, RateLimited),
        (402, InsufficientCredits),
        (500, GenerationFailed),
    ])
    def test_status_classification(self, providers, with_fal_key, status, expected):
        providers.fal.side_effect = ProviderHTTPError("fal.ai API", status, "error body")

        with pytest.raises(expected):
            images.generate_colorful_image(DESCRIPTION)

        providers.openai.assert_not_called()

    def test_message_classification_without_status(self, providers, with_fal_key):
        providers.fal.side_effect = RuntimeError("upstream returned HTTP 429 Too Many Requests")
        with pytest.raises(RateLimited):
            images.generate_colorful_image(DESCRIPTION)

    def test_numbers_outside_a_status_are_ignored(self, providers, with_fal_key):
        providers.fal.side_effect = requests.ConnectionError(
            "HTTPConnectionPool(host='fal.run', port=402): request id 4291 refused"
        )
        with pytest.raises(GenerationFailed):
            images.generate_colorful_image(DESCRIPTION)

    def test_missing_key_is_auth_failure(self, providers):
        with pytest.raises(AuthFailed):
            images.generate_colorful_image(DESCRIPTION)
        providers.fal.assert_not_called()


class TestProviders:
    def test_fal_request_shape(self, monkeypatch, with_fal_key, fake_response):
        fake_post = Mock(return_value=fake_response(json_data={"images": [{"url": "https://fal.media/x.png"}]}))
        monkeypatch.setattr(images.requests, "post", fake_post)

        assert images.generate_via_fal("prompt") == "https://fal.media/x.png"

        args, kwargs = fake_post.call_args
        assert args[0] == images.FAL_FLASH_URL
        assert kwargs["headers"]["Authorization"] == "Key fal-test"
        assert kwargs["json"] == {"prompt": "prompt", "num_images": 1, "output_format": "png", "sync_mode": True}

    def test_fal_non_2xx_raises_with_status(self, monkeypatch, with_fal_key, fake_response):
        monkeypatch.setattr(images.requests, "post", Mock(return_value=fake_response(status_code=402, text="no credits")))

        with pytest.raises(ProviderHTTPError) as exc_info:
            images.generate_via_fal("prompt")

        assert exc_info.value.status_code == 402

    def test_fal_without_images(self, monkeypatch, with_fal_key, fake_response):
        monkeypatch.setattr(images.requests, "post", Mock(return_value=fake_response(json_data={"images": []})))
        with pytest.raises(RuntimeError):
            images.generate_via_fal("prompt")

    def test_openai_returns_data_uri(self):
        client = Mock()
        client.images.generate.return_value = SimpleNamespace(data=[SimpleNamespace(b64_json="QUJD", url=None)])

        assert images.generate_via_openai("prompt", client=client) == "data:image/png;base64,QUJD"
        assert client.images.generate.call_args.kwargs["model"] == "gpt-image-1"

    def test_openai_url_answer(self):
        client = Mock()
        client.images.generate.return_value = SimpleNamespace(
            data=[SimpleNamespace(b64_json=None, url="https://openai.test/img.png")]
        )
        assert images.generate_via_openai("prompt", client=client) == "https://openai.test/img.png"
