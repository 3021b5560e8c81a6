"""
Outline descriptor parsing.

Turns descriptor text (`page|dashes|title` per line) back into the
[level, title, page] rows PyMuPDF's set_toc() expects. Hierarchy is
recovered from the dash counts alone: level = dashes + 1.
"""
import re
from typing import List, Union

from bookmarker.core.exceptions import PDFError

DESCRIPTOR_LINE = re.compile(r"^(\d+)\|(-*)\|(.*)$")

TocRow = List[Union[int, str]]


def parse_descriptor(descriptor: str) -> List[TocRow]:
    """Parse descriptor text into PyMuPDF TOC rows.

    Args:
        descriptor: Newline-separated descriptor lines; blank lines are skipped

    Returns:
        List of [level, title, page] rows

    Raises:
        PDFError: A line is malformed or a level skips its parent
    """
    rows: List[TocRow] = []
    previous_level = 0
    for line_no, line in enumerate(descriptor.split("\n"), start=1):
        if not line:
            continue
        match = DESCRIPTOR_LINE.match(line)
        if not match:
            raise PDFError(f"Malformed outline descriptor line {line_no}: {line!r}")

        page, dashes, title = match.groups()
        level = len(dashes) + 1
        if level > previous_level + 1:
            raise PDFError(
                f"Outline descriptor line {line_no} jumps from level {previous_level} to {level}"
            )
        rows.append([level, title, int(page)])
        previous_level = level
    return rows
