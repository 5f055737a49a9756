"""Data models for transcripts and visual notes."""

from dataclasses import dataclass, field
from typing import Optional

VISUAL_TYPES = ("diagram", "scribble", "icon", "mindmap", "flowchart", "quote", "other")


@dataclass
class TranscriptSegment:
    """A single caption segment with timing information."""
    text: str
    start: float                      # Start time in seconds
    duration: Optional[float] = None  # Duration in seconds

    def to_dict(self) -> dict:
        return {"text": self.text, "start": self.start, "duration": self.duration}


@dataclass
class TranscriptResult:
    """Transcript produced by one source strategy."""
    transcript: str
    video_id: str
    source: str
    segments: list[TranscriptSegment] = field(default_factory=list)
    video_title: Optional[str] = None


@dataclass
class VisualElement:
    """A simple sketchable visual that illustrates a note section."""
    type: str
    description: str


@dataclass
class VisualNoteSection:
    """One topic of the visual notes."""
    title: str
    summary: str
    key_points: list[str]
    visual: VisualElement

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "visual": {"type": self.visual.type, "description": self.visual.description},
        }
