"""MCP server exposing the ask_questions_web tool."""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from questions_ui.config import configure_logging, load_settings
from questions_ui.errors import QuestionsUIError
from questions_ui.schemas import AskQuestionsInput, Question
from questions_ui.tools import TOOL_DESCRIPTION, TOOL_NAME, ask_questions_web as handle_ask
from questions_ui.web import get_web_server

logger = logging.getLogger(__name__)

mcp = FastMCP("questions-ui")


@mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
async def ask_questions_web(
    questions: list[Question],
    title: str | None = None,
    context: str | None = None,
) -> dict:
    """Collect answers to a batch of questions through the local web form."""
    request = AskQuestionsInput(title=title, context=context, questions=questions)
    try:
        result = await handle_ask(request)
    except Exception as e:
        logger.error(f"ask_questions_web failed: {e}", exc_info=True)
        raise

    return result.model_dump()


def main() -> None:
    """Start the web server, then serve MCP over stdio."""
    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        get_web_server(settings.port).start()
    except QuestionsUIError as e:
        logger.error(f"Failed to start web server: {e}")
        sys.exit(1)

    logger.info("Questions UI MCP server running")
    mcp.run()


if __name__ == "__main__":
    main()
