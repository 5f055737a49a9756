"""YouTube URL parsing."""

import re
from typing import Optional

# Order matters: the first pattern that matches wins
VIDEO_ID_PATTERNS = [
    re.compile(r'youtube\.com/watch\?v=([^&\n?#]+)'),
    re.compile(r'youtu\.be/([^&\n?#]+)'),
    re.compile(r'youtube\.com/embed/([^&\n?#]+)'),
    re.compile(r'youtube\.com/v/([^&\n?#]+)'),
    re.compile(r'^([a-zA-Z0-9_-]{11})$'),  # Bare video ID
]

YOUTUBE_URL_PATTERNS = [
    re.compile(r'^(https?://)?(www\.|m\.)?(youtube\.com|youtu\.be)'),
    re.compile(r'^[a-zA-Z0-9_-]{11}$'),
]


def extract_video_id(text: str) -> Optional[str]:
    """Extract video ID from the supported YouTube URL formats, or None."""
    if not text:
        return None
    text = text.strip()
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def is_youtube_url(text: str) -> bool:
    """Loose pre-check: a YouTube host URL or a bare 11-character ID."""
    if not text:
        return False
    text = text.strip()
    if any(pattern.search(text) for pattern in YOUTUBE_URL_PATTERNS):
        return True
    return extract_video_id(text) is not None


def watch_url(video_id: str) -> str:
    return f"https://youtube.com/watch?v={video_id}"
