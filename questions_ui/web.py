"""HTTP API and local web server for the questions form."""

from __future__ import annotations

import json
import logging
import socket
import threading
import time
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from questions_ui import __version__
from questions_ui.config import (
    DEFAULT_HOST,
    PORT_RANGE_END,
    PORT_RANGE_START,
    load_settings,
)
from questions_ui.errors import (
    AlreadySubmittedError,
    InvalidAnswersError,
    PortUnavailableError,
    QuestionsUIError,
    SessionNotFoundError,
)
from questions_ui.schemas import (
    ErrorResponse,
    HealthResponse,
    SessionView,
    SubmitResponse,
)
from questions_ui.store import SessionStore, get_store

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# Seconds to wait for uvicorn to report it is serving
STARTUP_TIMEOUT = 10.0

app = FastAPI(
    title="Questions UI",
    description="Local web form for answering batches of agent questions",
    version=__version__,
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# --- HTTP Endpoints ---


@app.get("/api/session/{session_id}", response_model=SessionView)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
) -> SessionView:
    """Return a session's questions.

    Answers are never included; a submitted session only reports
    alreadySubmitted so a second viewer cannot read earlier responses.
    """
    session = store.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return SessionView.from_session(session)


@app.post("/api/session/{session_id}/submit", response_model=SubmitResponse)
async def submit_answers(
    session_id: str,
    request: Request,
    store: SessionStore = Depends(get_store),
) -> SubmitResponse:
    """Accept the answer map for a session, once."""
    session = store.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    if session.answered:
        raise AlreadySubmittedError(session_id)

    try:
        answers = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidAnswersError("Invalid answers format")
    if not isinstance(answers, dict):
        raise InvalidAnswersError("Invalid answers format")

    # Another request may have won between the check above and here
    if not store.submit(session_id, answers):
        raise AlreadySubmittedError(session_id)

    return SubmitResponse()


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check, no dependency checks."""
    return HealthResponse(timestamp=int(time.time() * 1000))


@app.get("/session/{session_id}", include_in_schema=False)
async def session_page(session_id: str) -> FileResponse:
    """Serve the form page; the page loads its session over the API."""
    return FileResponse(STATIC_DIR / "index.html")


# --- Error Handlers ---


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    return _error(404, "Session not found or expired")


@app.exception_handler(AlreadySubmittedError)
async def already_submitted_handler(request: Request, exc: AlreadySubmittedError) -> JSONResponse:
    logger.info(f"Rejected resubmission for session {exc.session_id}")
    return _error(400, "Answers already submitted")


@app.exception_handler(InvalidAnswersError)
async def invalid_answers_handler(request: Request, exc: InvalidAnswersError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error(500, str(exc))


# --- Port Selection ---


def is_port_available(port: int, host: str = DEFAULT_HOST) -> bool:
    """Check whether a TCP port can be bound on host."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(
    preferred: int,
    host: str = DEFAULT_HOST,
    range_start: int = PORT_RANGE_START,
    range_end: int = PORT_RANGE_END,
) -> int:
    """Find a free port, trying the preferred one first.

    Falls back to scanning [max(range_start, preferred), range_end], then the
    ports below preferred inside the range.

    Raises:
        PortUnavailableError: If every candidate is taken
    """
    if is_port_available(preferred, host):
        return preferred

    for port in range(max(range_start, preferred), range_end + 1):
        if port == preferred:
            continue
        if is_port_available(port, host):
            return port

    if preferred > range_start:
        for port in range(range_start, min(preferred, range_end + 1)):
            if is_port_available(port, host):
                return port

    raise PortUnavailableError(
        f"No available ports found in range {range_start}-{range_end}"
    )


# --- Server Runner ---


class WebServer:
    """Runs the HTTP API on a background thread with its own event loop."""

    def __init__(self, preferred_port: int, host: str = DEFAULT_HOST):
        self.preferred_port = preferred_port
        self.host = host
        self.port: int | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def base_url(self) -> str:
        if self.port is None:
            raise QuestionsUIError("Web server is not running")
        return f"http://localhost:{self.port}"

    def session_url(self, session_id: str) -> str:
        return f"{self.base_url}/session/{session_id}"

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Bind a port and start serving. No-op if already running.

        Raises:
            PortUnavailableError: If no port in range is free
            QuestionsUIError: If uvicorn exits before it starts serving
        """
        if self.running:
            return

        port = find_available_port(self.preferred_port, self.host)
        config = uvicorn.Config(
            app,
            host=self.host,
            port=port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            name="questions-ui-web",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + STARTUP_TIMEOUT
        while not self._server.started:
            if not self._thread.is_alive():
                raise QuestionsUIError(f"Web server failed to start on port {port}")
            if time.monotonic() > deadline:
                self._server.should_exit = True
                raise QuestionsUIError(f"Web server did not start within {STARTUP_TIMEOUT}s")
            time.sleep(0.05)

        self.port = port
        logger.info(f"Questions UI server running at {self.base_url}")

    def stop(self) -> None:
        """Signal uvicorn to exit and wait for the thread."""
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=STARTUP_TIMEOUT)
        self._server = None
        self._thread = None
        self.port = None


# Global server instance
_server_instance: WebServer | None = None


def get_web_server(preferred_port: int | None = None) -> WebServer:
    """Get or create the global web server (not started)."""
    global _server_instance
    if _server_instance is None:
        settings = load_settings()
        _server_instance = WebServer(
            preferred_port=preferred_port or settings.port,
            host=settings.host,
        )
    return _server_instance
