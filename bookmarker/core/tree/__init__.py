"""Bookmark tree store and commit validation."""

from bookmarker.core.tree.store import BookmarkTreeStore
from bookmarker.core.tree.validation import parse_page, validate_entry

__all__ = ["BookmarkTreeStore", "parse_page", "validate_entry"]
