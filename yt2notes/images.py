"""Illustration generation for note sections.

Standard style tries fal.ai first (fast, no rate limits) when a key is
configured and falls back to the OpenAI Images API, which is subject to
account quota. Colorful style only uses fal.ai.

Callers get back an opaque image reference: a remote URL from fal.ai or a
``data:`` URI from OpenAI.
"""

import re
from typing import Optional

import requests
from loguru import logger
from openai import OpenAI

from yt2notes.config import Config
from yt2notes.errors import (
    AuthFailed,
    ChainExhausted,
    GenerationFailed,
    InsufficientCredits,
    InvalidInput,
    ProviderHTTPError,
    QuotaExceeded,
    RateLimited,
)
from yt2notes.fallback import Strategy, run_chain

FAL_FLASH_URL = "https://fal.run/fal-ai/gemini-25-flash-image"
FAL_NANO_BANANA_URL = "https://fal.run/fal-ai/nano-banana"

FAL_LABEL = "fal.ai Gemini Flash"
FAL_COLORFUL_LABEL = "fal.ai Nano Banana"
OPENAI_LABEL = "OpenAI Images"

QUOTA_SIGNATURES = ("resource_exhausted", "insufficient_quota", "quota")

# "status 429", "status code: 402", "HTTP 403"
STATUS_IN_TEXT = re.compile(r"\b(?:status(?: code)?|http)\s*[:=]?\s*(\d{3})\b", re.IGNORECASE)

# Checked in order
FAL_STATUS_ERRORS = [
    ((401, 403), AuthFailed),
    ((429,), RateLimited),
    ((402,), InsufficientCredits),
]


def standard_prompt(description: str) -> str:
    return (
        f'A clear, simple, vector-style diagram or icon on a clean white background, representing '
        f'the concept: "{description}". The style should be suitable for visual note-taking, '
        f'like a sketch or a whiteboard drawing.'
    )


def colorful_prompt(description: str) -> str:
    return (
        f'Create a colorful, engaging, and vibrant visual representation of: "{description}". '
        f'Style: modern, colorful, artistic diagram with bright colors, engaging design, suitable '
        f'for visual learning and note-taking. Make it visually appealing and easy to understand.'
    )


def generate_via_fal(prompt: str, endpoint: str = FAL_FLASH_URL) -> str:
    """POST a prompt to a fal.ai model and return the first image URL."""
    response = requests.post(
        endpoint,
        headers={
            "Authorization": f"Key {Config.FAL_API_KEY}",
            "Content-Type": "application/json",
        },
        json={
            "prompt": prompt,
            "num_images": 1,
            "output_format": "png",
            "sync_mode": True,
        },
        timeout=Config.REQUEST_TIMEOUT,
    )
    if not response.ok:
        raise ProviderHTTPError("fal.ai API", response.status_code, response.text[:500])

    images = response.json().get("images") or []
    if not images or not images[0].get("url"):
        raise RuntimeError("No images returned from fal.ai API")
    return images[0]["url"]


def generate_via_openai(prompt: str, client: Optional[OpenAI] = None) -> str:
    """Generate one image with the OpenAI Images API and return a data URI or URL."""
    if client is None:
        Config.validate()
        client = OpenAI(api_key=Config.OPENAI_API_KEY, timeout=300.0)

    response = client.images.generate(
        model=Config.IMAGE_MODEL,
        prompt=prompt,
        n=1,
        size="1024x1024",
    )
    if not response.data:
        raise RuntimeError("API did not return any images.")

    image = response.data[0]
    if getattr(image, "b64_json", None):
        return f"data:image/png;base64,{image.b64_json}"
    if getattr(image, "url", None):
        return image.url
    raise RuntimeError("API did not return any images.")


def _status_code(error: Exception) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(getattr(error, "response", None), "status_code", None)
    if status is None:
        match = STATUS_IN_TEXT.search(str(error))
        if match:
            status = int(match.group(1))
    return status


def classify_fal_error(error: Exception):
    """Map a fal.ai failure to an ImageGenerationError subclass."""
    status = _status_code(error)
    for codes, error_cls in FAL_STATUS_ERRORS:
        if status in codes:
            return error_cls(str(error))
    return GenerationFailed(str(error))


def classify_openai_error(error: Exception):
    """Quota exhaustion becomes QuotaExceeded; everything else GenerationFailed."""
    code = getattr(error, "code", None)
    if code == "insufficient_quota":
        return QuotaExceeded(str(error))
    text = str(error).lower()
    if any(signature in text for signature in QUOTA_SIGNATURES):
        return QuotaExceeded(str(error))
    return GenerationFailed(str(error))


def _require_description(description: str) -> str:
    if not description or not description.strip():
        raise InvalidInput("Image description is empty.")
    return description


def generate_image(description: str) -> str:
    """
    Generate a sketch-style illustration for a description.

    Returns:
        Image reference (remote URL or data URI)

    Raises:
        QuotaExceeded: the OpenAI fallback is out of quota
        GenerationFailed: any other failure
    """
    prompt = standard_prompt(_require_description(description))

    strategies = []
    if Config.has_fal_key():
        strategies.append(Strategy(FAL_LABEL, lambda: generate_via_fal(prompt), classify_fal_error))
    strategies.append(Strategy(OPENAI_LABEL, lambda: generate_via_openai(prompt), classify_openai_error))

    try:
        return run_chain(strategies)
    except ChainExhausted as e:
        # Only the last provider's failure is surfaced
        error = e.last_error
        logger.error("Image generation failed: {}", error)
        if isinstance(error, QuotaExceeded):
            raise QuotaExceeded() from error
        raise GenerationFailed() from error


def generate_colorful_image(description: str) -> str:
    """
    Generate a vibrant illustration with fal.ai's Nano Banana model. Single attempt.

    Raises:
        AuthFailed, RateLimited, InsufficientCredits, GenerationFailed
    """
    prompt = colorful_prompt(_require_description(description))
    if not Config.has_fal_key():
        raise AuthFailed("FAL_API_KEY is not configured")

    try:
        return generate_via_fal(prompt, endpoint=FAL_NANO_BANANA_URL)
    except Exception as e:
        logger.error("Error calling {}: {}", FAL_COLORFUL_LABEL, e)
        error = classify_fal_error(e)
        raise type(error)() from e
