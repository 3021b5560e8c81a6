"""
Commit-time validation for bookmark entries.

Store primitives accept whatever they are given; these checks run at the
point an add or edit is committed, before the store is touched.
"""
import math
import re
from typing import Any, Optional, Tuple

from bookmarker.config.outline_limits import FIRST_PAGE
from bookmarker.core.exceptions import ValidationError

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_page(value: Any) -> Optional[int]:
    """Parse a page value into an int.

    Reads the leading integer the way a form field is read: "12", " 12 " and
    "12abc" give 12, floats are truncated. Booleans, non-finite floats and
    values without a leading integer yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def validate_entry(
    title: Any, page: Any, num_pages: Optional[int] = None
) -> Tuple[str, int]:
    """Validate a bookmark title and page before committing.

    Args:
        title: Raw title text
        page: Raw page value (int or numeric string)
        num_pages: Document page count, when known

    Returns:
        Tuple of (trimmed title, page number)

    Raises:
        ValidationError: Empty title, non-positive or non-numeric page,
            or page beyond the document's last page
    """
    clean_title = title.strip() if isinstance(title, str) else ""
    if not clean_title:
        raise ValidationError("Title must not be empty")

    parsed = parse_page(page)
    if parsed is None:
        raise ValidationError(f"Page must be a number, got {page!r}")
    if parsed < FIRST_PAGE:
        raise ValidationError(f"Page must be at least {FIRST_PAGE}, got {parsed}")
    if num_pages and parsed > num_pages:
        raise ValidationError(f"Page {parsed} exceeds document length of {num_pages} pages")

    return clean_title, parsed
