"""In-memory session store for question sessions."""

from __future__ import annotations

import logging
import time
import uuid
from threading import Lock
from typing import Any

from questions_ui.schemas import Question, Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Process-wide map of session id to Session.

    Every operation takes the lock: the HTTP server runs on its own thread
    while the wait loop reads from the MCP event loop.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = Lock()

    def create(
        self,
        questions: list[Question],
        title: str | None = None,
        context: str | None = None,
    ) -> Session:
        """Create a new unanswered session.

        Args:
            questions: Ordered questions for the form
            title: Optional form title
            context: Optional preamble shown before the questions

        Returns:
            Snapshot of the stored session
        """
        with self._lock:
            session_id = str(uuid.uuid4())
            while session_id in self._sessions:
                session_id = str(uuid.uuid4())

            session = Session(
                id=session_id,
                title=title,
                context=context,
                questions=list(questions),
                answers=None,
                created_at=int(time.time() * 1000),
            )
            self._sessions[session_id] = session

        logger.debug(f"Created session {session_id} with {len(questions)} questions")
        return session.model_copy(deep=True)

    def get(self, session_id: str) -> Session | None:
        """Look up a session; None when unknown or already retired."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def submit(self, session_id: str, answers: dict[str, Any]) -> bool:
        """Store answers for a session, at most once.

        Args:
            session_id: Target session
            answers: Mapping of question id to answer value, stored as given

        Returns:
            False if the session is unknown or already answered
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            if session.answers is not None:
                return False
            session.answers = dict(answers)

        logger.info(f"Answers submitted for session {session_id}")
        return True

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns whether it existed."""
        with self._lock:
            existed = self._sessions.pop(session_id, None) is not None

        if existed:
            logger.debug(f"Deleted session {session_id}")
        return existed

    def is_answered(self, session_id: str) -> bool:
        """Check whether a live session has answers."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session is not None and session.answers is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global store instance
_store_instance: SessionStore | None = None


def get_store() -> SessionStore:
    """Get or create the global session store."""
    global _store_instance
    if _store_instance is None:
        _store_instance = SessionStore()
    return _store_instance
