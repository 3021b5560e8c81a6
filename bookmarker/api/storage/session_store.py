"""
In-memory registry of editing sessions.

One EditingSession per uploaded document, keyed by upload id. Sessions are
not persisted; they go away with the process or when their upload expires.
"""
import logging
import threading
from typing import Callable, Dict, Iterator, List, Optional

from bookmarker.core.session import EditingSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Thread-safe mapping of upload id to EditingSession."""

    def __init__(self):
        self._sessions: Dict[str, EditingSession] = {}
        self._lock = threading.Lock()

    def __contains__(self, document_id: str) -> bool:
        """Check if session exists."""
        with self._lock:
            return document_id in self._sessions

    def __getitem__(self, document_id: str) -> EditingSession:
        """Get session by document id."""
        with self._lock:
            return self._sessions[document_id]

    def __setitem__(self, document_id: str, session: EditingSession) -> None:
        """Register a session, replacing any previous one for the document."""
        with self._lock:
            self._sessions[document_id] = session

    def __delitem__(self, document_id: str) -> None:
        with self._lock:
            del self._sessions[document_id]

    def __len__(self) -> int:
        """Get number of sessions."""
        with self._lock:
            return len(self._sessions)

    def __iter__(self) -> Iterator[str]:
        """Iterate over document ids."""
        with self._lock:
            return iter(list(self._sessions))

    def get(self, document_id: str, default: Optional[EditingSession] = None) -> Optional[EditingSession]:
        """Get session with default."""
        with self._lock:
            return self._sessions.get(document_id, default)

    def pop(self, document_id: str) -> Optional[EditingSession]:
        with self._lock:
            return self._sessions.pop(document_id, None)

    def prune(self, is_alive: Callable[[str], bool]) -> List[str]:
        """Drop sessions whose document is gone.

        Args:
            is_alive: Returns True if the document id still has a stored file

        Returns:
            Removed document ids
        """
        with self._lock:
            dead = [doc_id for doc_id in self._sessions if not is_alive(doc_id)]
            for doc_id in dead:
                del self._sessions[doc_id]
        for doc_id in dead:
            logger.info(f"Dropped session for expired document {doc_id}")
        return dead
