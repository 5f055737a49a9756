"""OpenAI GPT API integration for visual note generation."""

import json
from typing import Optional

from loguru import logger
from openai import OpenAI

from yt2notes.config import Config
from yt2notes.errors import InvalidInput, NoteGenerationError, SchemaViolation
from yt2notes.models import VISUAL_TYPES, VisualElement, VisualNoteSection


# Visual note-taker prompt; the transcript goes between the markers
VISUAL_NOTES_PROMPT = """You are an expert visual note-taker specializing in transforming dense information into clear, engaging, and memorable visual summaries. Your task is to process the following YouTube video transcript and generate a structured set of visual notes.

For each distinct topic or key concept in the transcript, create a note section. Each section must include:
1.  A clear and concise **title**.
2.  A brief **summary** of the topic.
3.  A list of the most important **key points** or takeaways, formatted as a list.
4.  A description of a **visual element** that could be sketched alongside the text. This visual should be simple and conceptual. Think in terms of icons, simple diagrams (flowcharts, Venn diagrams), mind maps, or symbolic scribbles. Describe what to draw, not the drawing itself.

Your entire output MUST be a JSON object that strictly adheres to the provided schema. Do not add any extra text or explanations outside of the JSON structure.

Here is the transcript:
---
{transcript}
---
"""

SECTION_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A clear and concise title for this section of the notes.",
        },
        "summary": {
            "type": "string",
            "description": "A brief summary of the topic discussed in this section.",
        },
        "keyPoints": {
            "type": "array",
            "items": {"type": "string"},
            "description": "A list of the most important bullet points or takeaways.",
        },
        "visual": {
            "type": "object",
            "properties": {
                "type": {
                    "type": "string",
                    "enum": list(VISUAL_TYPES),
                    "description": "Type of visual.",
                },
                "description": {
                    "type": "string",
                    "description": (
                        "A detailed description of a simple visual element (like a diagram or icon) "
                        "that could be sketched to illustrate the point. For example: \"A simple "
                        "flowchart with three boxes: 'Input' -> 'Process' -> 'Output'\"."
                    ),
                },
            },
            "required": ["type", "description"],
            "additionalProperties": False,
        },
    },
    "required": ["title", "summary", "keyPoints", "visual"],
    "additionalProperties": False,
}

# Strict structured outputs need an object root, so the array lives under "sections"
VISUAL_NOTES_SCHEMA = {
    "name": "visual_notes",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {"sections": {"type": "array", "items": SECTION_SCHEMA}},
        "required": ["sections"],
        "additionalProperties": False,
    },
}


def _require_str(value, name: str, allow_empty: bool = True) -> str:
    if not isinstance(value, str) or (not allow_empty and not value.strip()):
        raise SchemaViolation(f"Section field '{name}' must be a{'' if allow_empty else ' non-empty'} string")
    return value


def parse_section(item) -> VisualNoteSection:
    """Validate one raw section dict and build a VisualNoteSection."""
    if not isinstance(item, dict):
        raise SchemaViolation("Each note section must be an object")

    key_points = item.get("keyPoints")
    if not isinstance(key_points, list) or not key_points:
        raise SchemaViolation("Section field 'keyPoints' must be a non-empty list")
    key_points = [_require_str(point, "keyPoints", allow_empty=False) for point in key_points]

    visual = item.get("visual")
    if not isinstance(visual, dict):
        raise SchemaViolation("Section field 'visual' must be an object")
    visual_type = _require_str(visual.get("type"), "visual.type").strip().lower()
    if visual_type not in VISUAL_TYPES:
        visual_type = "other"

    return VisualNoteSection(
        title=_require_str(item.get("title"), "title"),
        summary=_require_str(item.get("summary"), "summary"),
        key_points=key_points,
        visual=VisualElement(
            type=visual_type,
            description=_require_str(visual.get("description"), "visual.description", allow_empty=False),
        ),
    )


def parse_visual_notes(raw_text: Optional[str]) -> list[VisualNoteSection]:
    """
    Parse raw model output into note sections. All-or-nothing.

    Accepts a bare JSON array or an object carrying the array under "sections".

    Raises:
        SchemaViolation: text is not JSON, not a sequence, or a section is malformed
    """
    try:
        parsed = json.loads((raw_text or "").strip())
    except json.JSONDecodeError as e:
        raise SchemaViolation(f"Model output is not valid JSON: {e}") from e

    if isinstance(parsed, dict) and "sections" in parsed:
        parsed = parsed["sections"]
    if not isinstance(parsed, list):
        raise SchemaViolation("API did not return a valid array for visual notes.")

    return [parse_section(item) for item in parsed]


def generate_visual_notes(transcript: str, client: Optional[OpenAI] = None) -> list[VisualNoteSection]:
    """
    Turn transcript text into visual note sections with one model call.

    Args:
        transcript: Full transcript text
        client: OpenAI client to use (built from Config when omitted)

    Returns:
        Ordered list of VisualNoteSection

    Raises:
        InvalidInput: transcript is empty
        SchemaViolation: the model output did not match the notes structure
        NoteGenerationError: any other failure (network, API, configuration)
    """
    if not transcript or not transcript.strip():
        raise InvalidInput("Transcript is empty.")

    try:
        if client is None:
            Config.validate()
            client = OpenAI(api_key=Config.OPENAI_API_KEY, timeout=300.0)

        notes_model = Config.NOTES_MODEL
        request_params = {
            "model": notes_model,
            "messages": [
                {
                    "role": "user",
                    "content": VISUAL_NOTES_PROMPT.format(transcript=transcript),
                }
            ],
            "response_format": {"type": "json_schema", "json_schema": VISUAL_NOTES_SCHEMA},
        }
        # Only set temperature if model supports it (gpt-5 models only support default)
        if not notes_model.startswith("gpt-5"):
            request_params["temperature"] = 0.3

        logger.info("Generating visual notes with {} ({} chars)", notes_model, len(transcript))
        response = client.chat.completions.create(**request_params)
        message = response.choices[0].message
        if getattr(message, "refusal", None):
            raise SchemaViolation(f"Model refused: {message.refusal}")

        sections = parse_visual_notes(message.content)
    except SchemaViolation as e:
        logger.error("Visual notes failed validation: {}", e)
        raise SchemaViolation() from e
    except Exception as e:
        logger.error("Error calling OpenAI API: {}", e)
        raise NoteGenerationError() from e

    logger.info("Generated {} note sections", len(sections))
    return sections
