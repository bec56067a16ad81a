"""Wait loop: block a tool call until its session is answered or times out."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from questions_ui.config import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT_MS
from questions_ui.store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class WaitOutcome:
    """Terminal state of a wait: answered, or timed out with no answers."""

    session_id: str
    answered: bool
    answers: dict[str, Any] = field(default_factory=dict)
    elapsed_ms: int = 0
    # Session was removed by someone else before the deadline
    expired: bool = False

    @property
    def timed_out(self) -> bool:
        return not self.answered


async def wait_for_answers(
    session_id: str,
    *,
    store: SessionStore,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> WaitOutcome:
    """Poll the store until the session has answers or the deadline passes.

    The session is deleted before returning, whatever the outcome. A session
    that disappears while pending ends the wait immediately as timed out.

    Args:
        session_id: Session to watch
        store: Store holding the session
        timeout_ms: Deadline measured from the start of the wait
        poll_interval: Seconds to sleep between checks

    Returns:
        WaitOutcome with the submitted answers, or empty answers on timeout
    """
    start = time.monotonic()
    deadline = start + timeout_ms / 1000

    def _elapsed_ms() -> int:
        return int((time.monotonic() - start) * 1000)

    try:
        while True:
            session = store.get(session_id)

            if session is None:
                logger.warning(f"Session {session_id} vanished before it was answered")
                return WaitOutcome(
                    session_id=session_id,
                    answered=False,
                    elapsed_ms=_elapsed_ms(),
                    expired=True,
                )

            if session.answers is not None:
                logger.info(f"Session {session_id} answered after {_elapsed_ms()}ms")
                return WaitOutcome(
                    session_id=session_id,
                    answered=True,
                    answers=session.answers,
                    elapsed_ms=_elapsed_ms(),
                )

            if time.monotonic() >= deadline:
                logger.info(f"Session {session_id} timed out after {timeout_ms}ms")
                return WaitOutcome(session_id=session_id, answered=False, elapsed_ms=_elapsed_ms())

            await asyncio.sleep(min(poll_interval, max(deadline - time.monotonic(), 0)))
    finally:
        store.delete(session_id)
