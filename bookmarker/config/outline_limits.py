"""
Outline defaults and constants.

Centralized values shared by the tree store, the outline serializer
and the import reconciliation.
"""

UNTITLED_TITLE = "Untitled"
"""Placeholder for imported outline items with a blank title"""

FIRST_PAGE = 1
"""Lowest valid page number (pages are 1-indexed)"""

SORT_DEFAULT_PAGE = 0
"""Sort key used for a missing or unparseable page"""

EMIT_DEFAULT_PAGE = 1
"""Page written to the descriptor for a missing or unparseable page"""

DOWNLOAD_FALLBACK_NAME = "bookmarked.pdf"
"""Download filename when the original name is unknown"""

DOWNLOAD_NAME_SUFFIX = " bookmarked"
"""Inserted before the extension of the original filename"""
