"""Error types shared by the transcript, notes and image pipelines."""

from typing import Optional


class NotesError(RuntimeError):
    """Base class for every error this package raises."""


class InvalidInput(NotesError, ValueError):
    """Malformed URL, video ID or empty text. Raised before any network call."""


class ChainExhausted(NotesError):
    """Every strategy of a fallback chain failed.

    ``failures`` holds ``(label, error)`` pairs in the order the strategies ran.
    Callers convert this into a user-facing error; it is never shown as is.
    """

    def __init__(self, failures):
        self.failures = list(failures)
        labels = ", ".join(label for label, _ in self.failures) or "no strategies"
        super().__init__(f"All strategies failed ({labels})")

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.failures[-1][1] if self.failures else None


class SourceExhausted(NotesError):
    """No transcript source could provide a transcript."""

    def __init__(self, message: str, video_id: str, failures: list[str]):
        super().__init__(message)
        self.video_id = video_id
        self.failures = failures


class NoteGenerationError(NotesError):
    """The model call for visual notes failed."""

    def __init__(self, message: str = "Failed to generate visual notes from the API."):
        super().__init__(message)


class SchemaViolation(NoteGenerationError):
    """The model answered, but not with the visual notes structure."""


class ProviderHTTPError(NotesError):
    """Non-2xx answer from an HTTP collaborator."""

    def __init__(self, provider: str, status_code: int, body: str = ""):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} error: {status_code} - {body}")


class CaptionError(NotesError):
    """Caption extraction failed. ``reason`` is one of REASONS."""

    REASONS = ("disabled", "not_found", "unavailable", "empty")

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class ImageGenerationError(NotesError):
    kind = "generation_failed"
    hint = "Failed to generate image. Try refining the prompt."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.hint)


class QuotaExceeded(ImageGenerationError):
    kind = "quota_exceeded"
    hint = "Quota exceeded. Please upgrade your image API plan or try again tomorrow."


class AuthFailed(ImageGenerationError):
    kind = "auth_failed"
    hint = "Invalid fal.ai API key. Please check your credentials."


class RateLimited(ImageGenerationError):
    kind = "rate_limited"
    hint = "Rate limit exceeded. Please try again in a moment."


class InsufficientCredits(ImageGenerationError):
    kind = "insufficient_credits"
    hint = "Insufficient credits. Please add credits to your fal.ai account."


class GenerationFailed(ImageGenerationError):
    pass
