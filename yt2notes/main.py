"""Interactive main entry point for YouTube visual notes."""

import sys

from tqdm import tqdm

from yt2notes.config import Config
from yt2notes.controller import ImageStatus, InputMode, NotesSession
from yt2notes.formatter import notes_to_markdown


def describe_image_ref(image_ref: str) -> str:
    """Short printable form of an image reference (data URIs can be megabytes)."""
    if image_ref.startswith("data:"):
        return f"embedded image ({len(image_ref) // 1024} KB data URI)"
    return image_ref


def read_manual_transcript() -> str:
    """Read pasted transcript lines until an empty line."""
    print("Paste the transcript, then press Enter on an empty line:")
    lines = []
    while True:
        line = input()
        if not line.strip():
            break
        lines.append(line)
    return "\n".join(lines)


def generate_images(session: NotesSession) -> None:
    """Generate an image for every card, one at a time."""
    for index in tqdm(range(len(session.cards)), desc="Generating images", unit="image", ncols=80):
        session.generate_card_image(index)

    print()
    for number, card in enumerate(session.cards, 1):
        if card.status == ImageStatus.SUCCEEDED:
            print(f"✓ [{number}] {card.note.title}: {describe_image_ref(card.image_ref)}")
        else:
            print(f"⚠ [{number}] {card.note.title}: {card.error_message}")


def process_input(session: NotesSession, mode: InputMode, value: str) -> bool:
    """
    Run one session pass and print the notes.

    Returns:
        True if notes were generated
    """
    if not session.process(mode, value):
        print()
        print("=" * 60)
        print(f"✗ {session.error}")
        print("=" * 60)
        return False

    if session.source:
        print(f"✓ Transcript fetched via {session.source}")
    print(f"✓ Generated {len(session.cards)} note sections")
    print()
    print("=" * 60)
    print(notes_to_markdown(session.video_title, [card.note for card in session.cards]))
    print("=" * 60)
    return True


def main():
    """Interactive main function."""
    print("=" * 60)
    print("YouTube Visual Notes")
    print("=" * 60)
    print()

    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        print(f"✗ Configuration Error: {str(e)}", file=sys.stderr)
        print("\nPlease create a .env file with your OPENAI_API_KEY.")
        print("See .env.example for reference.")
        input("\nPress Enter to exit...")
        sys.exit(1)

    if not Config.has_fal_key():
        print("ℹ FAL_API_KEY not set - images will use the OpenAI Images API only")

    session = NotesSession(auto_generate_images=False)

    while True:
        print()
        print("-" * 60)
        value = input("Paste a YouTube URL (or press Enter to paste a transcript instead): ").strip()

        if value:
            mode = InputMode.URL
        else:
            mode = InputMode.MANUAL
            value = read_manual_transcript()
            if not value.strip():
                print("No input provided. Exiting...")
                break

        print()
        print("Processing...")

        if process_input(session, mode, value):
            print()
            choice = input("Generate an illustration for each section? (y/n): ").strip().lower()
            if choice in ('y', 'yes'):
                generate_images(session)

        session.start_over()
        print()
        another = input("Would you like to create notes for another video? (y/n): ").strip().lower()
        if another not in ('y', 'yes'):
            break

    print()
    print("Thank you for using YouTube Visual Notes!")


if __name__ == "__main__":
    main()
