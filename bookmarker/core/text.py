"""Plain-text helpers for OCR output."""
from typing import List


def format_extracted_text(text: str) -> str:
    """Reflow raw OCR text into paragraphs.

    Non-empty trimmed lines are joined with spaces. A paragraph ends at the
    last line or before a line shorter than three characters; paragraphs
    are separated by a blank line.
    """
    if not text:
        return ""

    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    paragraphs: List[str] = []
    current: List[str] = []
    for index, line in enumerate(lines):
        current.append(line)
        is_last = index == len(lines) - 1
        if is_last or len(lines[index + 1]) < 3:
            paragraphs.append(" ".join(current))
            current = []

    return "\n\n".join(paragraphs)
