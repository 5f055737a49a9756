"""YouTube caption extraction with youtube-transcript-api.

yt-dlp is only used for a best-effort title lookup (no media download).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

import yt_dlp
from loguru import logger
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import (
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
)

from yt2notes.config import Config
from yt2notes.errors import CaptionError
from yt2notes.video_id import watch_url

DEFAULT_LANGUAGES = ("en", "en-US", "en-GB")


@dataclass
class CaptionTrack:
    """Caption items as ``{"text", "offset", "duration"}`` with times in milliseconds."""
    title: Optional[str] = None
    language: Optional[str] = None
    items: list[dict] = field(default_factory=list)


def _ydl_options() -> dict:
    ydl_opts = {
        'quiet': True,
        'no_warnings': True,
        'skip_download': True,
        'noplaylist': True,
    }
    cookies_path = Config.YOUTUBE_COOKIES_TXT
    if cookies_path and Path(cookies_path).exists():
        ydl_opts['cookiefile'] = cookies_path
    return ydl_opts


def to_items(snippets) -> list[dict]:
    """
    Convert transcript snippets (times in seconds) to caption items in milliseconds.

    Snippets with no text are dropped.
    """
    items = []
    for snippet in snippets:
        text = snippet.text.replace("\n", " ").strip()
        if not text:
            continue
        items.append({
            'text': text,
            'offset': round(snippet.start * 1000),
            'duration': round(snippet.duration * 1000),
        })
    return items


def fetch_title(video_id: str) -> Optional[str]:
    """Look up the video title with yt-dlp. Returns None when the lookup fails."""
    try:
        with yt_dlp.YoutubeDL(_ydl_options()) as ydl:
            info = ydl.extract_info(watch_url(video_id), download=False, process=False)
    except yt_dlp.utils.DownloadError as e:
        logger.warning("Title lookup failed for {}: {}", video_id, e)
        return None
    return (info or {}).get('title')


def fetch_captions(video_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES,
                   api: Optional[YouTubeTranscriptApi] = None) -> CaptionTrack:
    """
    Fetch captions for a video. Manually created transcripts win over
    generated ones in the same language.

    Args:
        video_id: Bare YouTube video ID
        languages: Preferred caption languages, in order
        api: Transcript API client (a default one is created)

    Returns:
        CaptionTrack with times in milliseconds

    Raises:
        CaptionError: video unavailable, captions disabled or no matching language.
            Any other failure (network, blocked requests) propagates unchanged.
    """
    api = api or YouTubeTranscriptApi()
    try:
        transcript = api.list(video_id).find_transcript(list(languages))
        fetched = transcript.fetch()
    except TranscriptsDisabled as e:
        raise CaptionError("Transcript is disabled on this video", reason="disabled") from e
    except NoTranscriptFound as e:
        raise CaptionError(
            f"No transcript found for languages {', '.join(languages)}", reason="not_found"
        ) from e
    except VideoUnavailable as e:
        raise CaptionError(f"Video unavailable: {video_id}", reason="unavailable") from e

    logger.debug("Using {} captions for {}", transcript.language_code, video_id)
    return CaptionTrack(
        title=fetch_title(video_id),
        language=transcript.language_code,
        items=to_items(fetched),
    )
