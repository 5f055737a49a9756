"""Markdown rendering of visual notes."""

from typing import Iterable

from yt2notes.models import VisualNoteSection


def notes_to_markdown(title: str, sections: Iterable[VisualNoteSection]) -> str:
    """
    Render note sections as a Markdown document.
    
    Format:
        # <title>
        ## <section title>
        <summary>
        - key point
        > 🎨 *<visual type>*: <visual description>
    """
    lines = [f"# {title or 'Visual Notes'}", ""]
    for section in sections:
        lines.append(f"## {section.title}")
        lines.append("")
        lines.append(section.summary)
        lines.append("")
        lines.extend(f"- {point}" for point in section.key_points)
        lines.append("")
        lines.append(f"> 🎨 *{section.visual.type}*: {section.visual.description}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
