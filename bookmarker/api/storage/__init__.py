"""API-side storage."""
from bookmarker.api.storage.session_store import SessionStore

__all__ = ["SessionStore"]
