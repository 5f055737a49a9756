"""Transcript acquisition with ordered fallback across several sources."""

from typing import Iterable, Optional

import requests
from loguru import logger

from yt2notes.config import Config
from yt2notes.errors import ChainExhausted, InvalidInput, SourceExhausted
from yt2notes.fallback import Strategy, format_failures, run_chain
from yt2notes.models import TranscriptResult, TranscriptSegment
from yt2notes.video_id import extract_video_id, watch_url

SUPADATA_URL = "https://api.supadata.ai/v1/transcript"

SUPADATA_LABEL = "Supadata API"
PROXY_LABEL = "Backend proxy"
ALTERNATIVE_LABEL = "Alternative API"


def _seconds(value, millis: bool) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return value / 1000 if millis else value


def normalize_segments(items: Iterable[dict], millis: bool = False) -> list[TranscriptSegment]:
    """
    Convert raw caption items into TranscriptSegments, keeping their order.

    Args:
        items: Dicts with ``text`` and ``start``/``offset`` (+ optional ``duration``)
        millis: True when the source reports times in milliseconds

    Returns:
        List of TranscriptSegment with times in seconds
    """
    segments = []
    for item in items or []:
        start = item.get("start", item.get("offset", item.get("offset_ms")))
        duration = item.get("duration", item.get("duration_ms"))
        segments.append(
            TranscriptSegment(
                text=(item.get("text") or "").strip(),
                start=_seconds(start, millis) or 0.0,
                duration=_seconds(duration, millis),
            )
        )
    return segments


def join_segments(segments: Iterable[TranscriptSegment]) -> str:
    """Join segment text with single spaces."""
    return " ".join(segment.text for segment in segments)


def _get_json(url: str, **kwargs) -> dict:
    response = requests.get(url, timeout=Config.REQUEST_TIMEOUT, **kwargs)
    if not response.ok:
        raise RuntimeError(f"HTTP {response.status_code} {response.reason} - {response.text[:200]}")
    try:
        return response.json()
    except ValueError as e:
        raise RuntimeError(f"Malformed JSON response: {e}") from e


def fetch_via_supadata(url: str) -> TranscriptResult:
    """Hosted transcript API. Takes the full video URL; times come back in ms."""
    if not Config.SUPADATA_API_KEY:
        raise RuntimeError("SUPADATA_API_KEY is not configured")

    data = _get_json(
        SUPADATA_URL,
        params={"url": url},
        headers={"x-api-key": Config.SUPADATA_API_KEY, "Content-Type": "application/json"},
    )
    content = data.get("content") if isinstance(data, dict) else None
    if not isinstance(content, list):
        raise RuntimeError("No transcript content received from Supadata API")

    video_id = extract_video_id(url) or "unknown"
    segments = normalize_segments(content, millis=True)
    return TranscriptResult(
        transcript=join_segments(segments),
        segments=segments,
        video_title=data.get("title") or f"YouTube Video {video_id}",
        video_id=video_id,
        source=SUPADATA_LABEL,
    )


def fetch_via_backend_proxy(video_id: str) -> TranscriptResult:
    """Our own proxy endpoint (see yt2notes.proxy). Times are already seconds."""
    data = _get_json(f"{Config.PROXY_BASE_URL}/api/youtube-transcript/{video_id}")
    segments = normalize_segments(data.get("segments") or [])
    transcript = data.get("transcript") or join_segments(segments)
    return TranscriptResult(
        transcript=transcript,
        segments=segments,
        video_title=data.get("title") or f"YouTube Video {video_id}",
        video_id=video_id,
        source=PROXY_LABEL,
    )


def fetch_via_alternative_api(video_id: str) -> TranscriptResult:
    """Pluggable public backup API. Its contract is not guaranteed."""
    if not Config.ALT_TRANSCRIPT_API_URL:
        raise RuntimeError("ALT_TRANSCRIPT_API_URL is not configured")

    data = _get_json(Config.ALT_TRANSCRIPT_API_URL, params={"video_id": video_id})
    if not data.get("transcript"):
        raise RuntimeError("No transcript data received from alternative API")
    return TranscriptResult(
        transcript=data["transcript"],
        segments=normalize_segments(data.get("segments") or []),
        video_title=data.get("title"),
        video_id=video_id,
        source=ALTERNATIVE_LABEL,
    )


def default_strategies(url: str, video_id: str) -> list[Strategy]:
    """Transcript strategies in priority order."""
    strategies = [
        Strategy(SUPADATA_LABEL, lambda: fetch_via_supadata(url)),
        Strategy(PROXY_LABEL, lambda: fetch_via_backend_proxy(video_id)),
    ]
    if Config.ALT_TRANSCRIPT_API_URL:
        strategies.append(Strategy(ALTERNATIVE_LABEL, lambda: fetch_via_alternative_api(video_id)))
    return strategies


def _require_text(result: TranscriptResult) -> None:
    if not result.transcript or not result.transcript.strip():
        raise RuntimeError(f"Empty transcript received from {result.source}")


def build_exhausted_message(video_id: str, failures: list[str]) -> str:
    """User-facing explanation shown when every transcript source failed."""
    return (
        "Unable to fetch transcript automatically. This could be because:\n\n"
        "• The video doesn't have captions/transcripts available\n"
        "• The video is private or restricted\n"
        "• The video is age-restricted or has limited access\n"
        "• All transcript services are temporarily unavailable\n\n"
        "Please try manually copying the transcript from YouTube:\n"
        f"1. Go to the video: {watch_url(video_id)}\n"
        "2. Click the \"...\" menu below the video\n"
        "3. Select \"Show transcript\"\n"
        "4. Copy and paste the text into the manual transcript field\n\n"
        "You can also try these online tools:\n"
        "• Supadata: https://supadata.ai\n"
        "• YouTube Transcript: https://youtubetranscript.com\n\n"
        f"Technical details: {'; '.join(failures)}"
    )


def fetch_transcript(url: str, strategies: Optional[list[Strategy]] = None) -> TranscriptResult:
    """
    Fetch a transcript for a YouTube URL, trying each source in order.

    Args:
        url: YouTube URL or bare video ID
        strategies: Override the default source list (same order semantics)

    Returns:
        TranscriptResult from the first source that produced non-empty text

    Raises:
        InvalidInput: no video ID could be extracted
        SourceExhausted: every source failed
    """
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidInput("Invalid YouTube URL. Please provide a valid YouTube video link.")

    if strategies is None:
        strategies = default_strategies(url, video_id)

    try:
        result = run_chain(strategies, accept=_require_text)
    except ChainExhausted as e:
        failures = [f"{label}: {error}" for label, error in e.failures]
        logger.error("All transcript sources failed for {}: {}", video_id, format_failures(e.failures))
        raise SourceExhausted(
            build_exhausted_message(video_id, failures),
            video_id=video_id,
            failures=failures,
        ) from e

    logger.info("Transcript for {} fetched via {}", video_id, result.source)
    return result
