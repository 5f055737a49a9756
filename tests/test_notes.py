"""Tests for visual note generation."""

import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from yt2notes.errors import InvalidInput, NoteGenerationError, SchemaViolation
from yt2notes.notes import VISUAL_NOTES_SCHEMA, generate_visual_notes, parse_visual_notes

SECTION = {
    "title": "Photosynthesis",
    "summary": "How plants turn light into sugar.",
    "keyPoints": ["Light is absorbed by chlorophyll", "CO2 and water become glucose"],
    "visual": {"type": "diagram", "description": "Sun -> leaf -> glucose arrows"},
}


def fake_client(content, refusal=None):
    message = SimpleNamespace(content=content, refusal=refusal)
    response = SimpleNamespace(choices=[SimpleNamespace(message=message)])
    client = Mock()
    client.chat.completions.create.return_value = response
    return client


class TestParseVisualNotes:
    def test_parses_sections_object(self):
        sections = parse_visual_notes(json.dumps({"sections": [SECTION, SECTION]}))
        assert len(sections) == 2
        assert sections[0].title == "Photosynthesis"
        assert sections[0].key_points[1] == "CO2 and water become glucose"
        assert sections[0].visual.type == "diagram"

    def test_accepts_bare_array_with_whitespace(self):
        sections = parse_visual_notes("\n  " + json.dumps([SECTION]) + "  \n")
        assert len(sections) == 1

    def test_unknown_visual_type_becomes_other(self):
        item = dict(SECTION, visual={"type": "Venn Diagram", "description": "two circles"})
        assert parse_visual_notes(json.dumps([item]))[0].visual.type == "other"

    def test_non_sequence_is_rejected(self):
        with pytest.raises(SchemaViolation):
            parse_visual_notes(json.dumps({"title": "not a list"}))

    def test_invalid_json_is_rejected(self):
        with pytest.raises(SchemaViolation):
            parse_visual_notes("Sure! Here are your notes:")

    @pytest.mark.parametrize("broken", [
        dict(SECTION, keyPoints=[]),
        dict(SECTION, keyPoints="one point"),
        dict(SECTION, title=None),
        dict(SECTION, visual={"type": "icon"}),
        dict(SECTION, visual="a drawing"),
    ])
    def test_one_bad_section_rejects_everything(self, broken):
        with pytest.raises(SchemaViolation):
            parse_visual_notes(json.dumps([SECTION, broken]))


class TestGenerateVisualNotes:
    def test_builds_schema_request(self):
        client = fake_client(json.dumps({"sections": [SECTION]}))

        sections = generate_visual_notes("plants use light to make sugar", client=client)

        assert [s.title for s in sections] == ["Photosynthesis"]
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_format"] == {"type": "json_schema", "json_schema": VISUAL_NOTES_SCHEMA}
        assert "plants use light to make sugar" in kwargs["messages"][0]["content"]

    def test_gpt5_models_skip_temperature(self, monkeypatch):
        from yt2notes.config import Config

        monkeypatch.setattr(Config, "NOTES_MODEL", "gpt-5-mini")
        client = fake_client(json.dumps({"sections": [SECTION]}))

        generate_visual_notes("text", client=client)

        assert "temperature" not in client.chat.completions.create.call_args.kwargs

    def test_schema_violation_has_generic_message(self):
        client = fake_client(json.dumps({"notes": "nope"}))

        with pytest.raises(SchemaViolation) as exc_info:
            generate_visual_notes("text", client=client)

        assert str(exc_info.value) == "Failed to generate visual notes from the API."

    def test_refusal_is_schema_violation(self):
        with pytest.raises(SchemaViolation):
            generate_visual_notes("text", client=fake_client(None, refusal="I can't help with that"))

    def test_api_failure_is_wrapped(self):
        client = Mock()
        client.chat.completions.create.side_effect = ConnectionError("network down")

        with pytest.raises(NoteGenerationError) as exc_info:
            generate_visual_notes("text", client=client)

        assert not isinstance(exc_info.value, SchemaViolation)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_missing_api_key_is_wrapped(self, monkeypatch):
        from yt2notes.config import Config

        monkeypatch.setattr(Config, "OPENAI_API_KEY", "")
        with pytest.raises(NoteGenerationError):
            generate_visual_notes("text")

    def test_empty_transcript_rejected_before_call(self):
        client = fake_client("[]")
        with pytest.raises(InvalidInput):
            generate_visual_notes("   ", client=client)
        client.chat.completions.create.assert_not_called()
