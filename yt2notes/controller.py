"""Application flow: input -> processing -> results, plus per-card image state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from yt2notes import images, notes, transcript_sources
from yt2notes.errors import ImageGenerationError, NotesError, SourceExhausted
from yt2notes.models import VisualNoteSection
from yt2notes.video_id import is_youtube_url

MANUAL_TITLE = "Manual Transcript"
DEFAULT_VIDEO_TITLE = "YouTube Video"

EMPTY_URL_ERROR = "Please enter a valid YouTube URL."
BAD_URL_ERROR = "Please enter a valid YouTube URL (e.g., https://youtube.com/watch?v=...)"
EMPTY_TRANSCRIPT_ERROR = "Please paste a transcript before generating notes."
GENERIC_ERROR = "Failed to process content."


class Step(str, Enum):
    INPUT = "input"
    PROCESSING = "processing"
    RESULTS = "results"


class InputMode(str, Enum):
    URL = "url"
    MANUAL = "manual"


class ImageStatus(str, Enum):
    UNREQUESTED = "unrequested"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class NoteCard:
    """A note section plus the state of its illustration."""
    note: VisualNoteSection
    image_prompt: str = ""
    colorful: bool = False
    status: ImageStatus = ImageStatus.UNREQUESTED
    image_ref: Optional[str] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    auto_generated: bool = False

    def __post_init__(self):
        if not self.image_prompt:
            self.image_prompt = self.note.visual.description

    @property
    def busy(self) -> bool:
        return self.status == ImageStatus.PENDING


@dataclass
class NotesSession:
    """
    Owns one processing run: the transcript, the generated notes and each
    card's image state. All user-visible error text is set here.
    """
    fetch_transcript: Callable = transcript_sources.fetch_transcript
    generate_notes: Callable = notes.generate_visual_notes
    generate_image: Callable = images.generate_image
    generate_colorful_image: Callable = images.generate_colorful_image
    auto_generate_images: bool = True

    step: Step = Step.INPUT
    stage: str = ""
    error: Optional[str] = None
    transcript: str = ""
    video_title: str = ""
    source: Optional[str] = None
    cards: list[NoteCard] = field(default_factory=list)

    @property
    def processing(self) -> bool:
        return self.step == Step.PROCESSING

    def _validate(self, mode: InputMode, value: str) -> Optional[str]:
        if mode == InputMode.URL:
            if not value.strip():
                return EMPTY_URL_ERROR
            if not is_youtube_url(value):
                return BAD_URL_ERROR
        elif not value.strip():
            return EMPTY_TRANSCRIPT_ERROR
        return None

    def process(self, mode: InputMode, value: str) -> bool:
        """
        Run one full pass from input to results.

        Args:
            mode: URL or manual transcript
            value: The URL, or the pasted transcript text

        Returns:
            True when the session reached the results step
        """
        if self.processing:
            return False
        mode = InputMode(mode)
        value = value or ""

        self.error = self._validate(mode, value)
        if self.error:
            return False

        self.step = Step.PROCESSING
        try:
            if mode == InputMode.URL:
                self.stage = "Fetching transcript from YouTube..."
                result = self.fetch_transcript(value.strip())
                self.transcript = result.transcript
                self.video_title = result.video_title or DEFAULT_VIDEO_TITLE
                self.source = result.source
            else:
                self.stage = "Processing your transcript..."
                self.transcript = value
                self.video_title = MANUAL_TITLE
                self.source = None

            self.stage = "Analyzing content and generating visual notes..."
            sections = self.generate_notes(self.transcript)
            self.cards = [NoteCard(note=section) for section in sections]
            self.step = Step.RESULTS
            return True
        except SourceExhausted as e:
            self.error = str(e)
        except NotesError as e:
            logger.error("Processing failed: {}", e)
            self.error = str(e) or GENERIC_ERROR
        except Exception:
            logger.exception("Unexpected processing failure")
            self.error = GENERIC_ERROR
        finally:
            self.stage = ""

        self.step = Step.INPUT
        return False

    def on_card_rendered(self, index: int) -> None:
        """Auto-generate a card's image the first time it is shown."""
        card = self.cards[index]
        if not self.auto_generate_images or card.auto_generated:
            return
        card.auto_generated = True
        if card.status == ImageStatus.UNREQUESTED:
            self.generate_card_image(index)

    def generate_card_image(self, index: int) -> bool:
        """
        Generate (or regenerate) one card's image. Failures stay on the card.

        Returns:
            True if an image was produced
        """
        card = self.cards[index]
        if card.busy or not card.image_prompt.strip():
            return False

        card.status = ImageStatus.PENDING
        card.image_ref = None
        card.error_kind = None
        card.error_message = None

        generate = self.generate_colorful_image if card.colorful else self.generate_image
        try:
            card.image_ref = generate(card.image_prompt)
            card.status = ImageStatus.SUCCEEDED
            return True
        except ImageGenerationError as e:
            card.error_kind = e.kind
            card.error_message = e.hint
        except Exception as e:
            logger.error("Image generation for card {} failed: {}", index, e)
            card.error_kind = ImageGenerationError.kind
            card.error_message = ImageGenerationError.hint
        card.status = ImageStatus.FAILED
        return False

    def start_over(self) -> None:
        """Discard everything from the current run."""
        self.step = Step.INPUT
        self.stage = ""
        self.error = None
        self.transcript = ""
        self.video_title = ""
        self.source = None
        self.cards = []
