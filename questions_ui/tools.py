"""Tool handler for ask_questions_web."""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from typing import Any

from questions_ui.config import Settings, load_settings
from questions_ui.schemas import AskQuestionsInput, AskQuestionsResult, Question
from questions_ui.store import SessionStore, get_store
from questions_ui.waiter import wait_for_answers
from questions_ui.web import WebServer, get_web_server

logger = logging.getLogger(__name__)

TOOL_NAME = "ask_questions_web"

TOOL_DESCRIPTION = """Opens a web UI to collect answers to multiple clarification questions at once.
Use this instead of asking questions one-by-one when you have 2 or more questions.
The user will see all questions in a browser interface, answer them, and submit.
This tool blocks until the user submits their answers."""

NOT_ANSWERED = "(not answered)"

EXPIRED_MESSAGE = "Session expired before the user submitted answers."


def format_answer(answer: Any) -> str:
    """Render one answer value for the summary."""
    if answer is None:
        return NOT_ANSWERED
    if isinstance(answer, bool):
        return "yes" if answer else "no"
    if isinstance(answer, list):
        # null entries carry no choice
        return ", ".join(format_answer(item) for item in answer if item is not None)
    return str(answer)


def format_answers(questions: list[Question], answers: dict[str, Any]) -> str:
    """Build the human-readable summary, one line per question in order."""
    lines = [f"User submitted answers for {len(questions)} questions:\n"]
    for q in questions:
        lines.append(f"- {q.id}: {format_answer(answers.get(q.id))}")
    return "\n".join(lines)


def format_timeout(timeout_ms: int) -> str:
    minutes = timeout_ms / 1000 / 60
    shown = f"{minutes:g}"
    return f"Timeout: User did not submit answers within {shown} minutes."


def open_browser(url: str) -> bool:
    """Best-effort browser launch. Never raises."""
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open browser automatically ({e}). Please open the URL manually.")
        return False

    if not opened:
        logger.warning("Could not open browser automatically. Please open the URL manually.")
    return opened


async def ask_questions_web(
    request: AskQuestionsInput,
    *,
    store: SessionStore | None = None,
    server: WebServer | None = None,
    settings: Settings | None = None,
) -> AskQuestionsResult:
    """Create a session, point the user at it, and wait for answers.

    Args:
        request: Title, context and questions from the caller
        store: Session store (defaults to the global store)
        server: Running web server used to build the URL (defaults to the global one)
        settings: Timeout, poll interval and browser flag (defaults from environment)

    Returns:
        AskQuestionsResult with the summary text and raw answers
    """
    if store is None:
        store = get_store()
    if server is None:
        server = get_web_server()
    if settings is None:
        settings = load_settings()

    if not server.running:
        await asyncio.to_thread(server.start)

    session = store.create(request.questions, title=request.title, context=request.context)
    url = server.session_url(session.id)

    logger.info(f"Answer questions at: {url}")

    if not settings.no_open:
        await asyncio.to_thread(open_browser, url)

    outcome = await wait_for_answers(
        session.id,
        store=store,
        timeout_ms=settings.timeout_ms,
        poll_interval=settings.poll_interval,
    )

    if outcome.timed_out:
        summary = EXPIRED_MESSAGE if outcome.expired else format_timeout(settings.timeout_ms)
        return AskQuestionsResult(
            summary=summary,
            answers={},
            session_id=session.id,
            timed_out=True,
        )

    return AskQuestionsResult(
        summary=format_answers(request.questions, outcome.answers),
        answers=outcome.answers,
        session_id=session.id,
    )
