"""Exceptions raised by questions-ui."""

from __future__ import annotations


class QuestionsUIError(Exception):
    """Base class for questions-ui errors."""

    pass


class PortUnavailableError(QuestionsUIError):
    """Raised when no free port exists in the configured range."""

    pass


class SessionNotFoundError(QuestionsUIError):
    """Raised when a session id is unknown or has expired."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class AlreadySubmittedError(QuestionsUIError):
    """Raised when answers are posted to a session that already has them."""

    def __init__(self, session_id: str):
        super().__init__(f"Answers already submitted: {session_id}")
        self.session_id = session_id


class InvalidAnswersError(QuestionsUIError):
    """Raised when a submission body is not a JSON object."""

    pass
