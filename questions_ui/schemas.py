"""Pydantic schemas for questions-ui sessions and HTTP/tool contracts."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuestionType(str, Enum):
    """Input kinds a question can be rendered as."""

    TEXT = "text"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"


# --- Questions ---


class Question(BaseModel):
    """A single question shown on the form.

    Field names follow the wire format (camelCase aliases) so the same model
    is used for tool input, storage and the session endpoint.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique identifier for this question")
    question: str = Field(..., description="The question text")
    description: str | None = Field(
        default=None,
        description="Optional additional context or explanation for this question",
    )
    type: QuestionType = Field(
        default=QuestionType.TEXT,
        description="The input type. Defaults to 'text' if not specified.",
    )
    options: list[str] | None = Field(
        default=None,
        description="For select/multiselect: the available choices",
    )
    allow_custom: bool | None = Field(
        default=None,
        alias="allowCustom",
        description="For select types: whether to allow typing a custom answer",
    )
    allow_none: bool | None = Field(
        default=None,
        alias="allowNone",
        description="For multiselect: whether to offer 'None of the above' (default true)",
    )
    required: bool = Field(
        default=True,
        description="Whether this question must be answered. Defaults to true.",
    )
    default: str | bool | None = Field(
        default=None,
        description="Default value to pre-fill",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AskQuestionsInput(BaseModel):
    """Arguments accepted by the ask_questions_web tool."""

    title: str | None = Field(
        default=None,
        description="Title shown at the top of the question form (e.g., 'Project Clarifications')",
    )
    context: str | None = Field(
        default=None,
        description="Optional context or background shown before the questions",
    )
    questions: list[Question] = Field(..., min_length=1)

    @field_validator("questions")
    @classmethod
    def _unique_ids(cls, questions: list[Question]) -> list[Question]:
        seen: set[str] = set()
        for q in questions:
            if q.id in seen:
                raise ValueError(f"Duplicate question id: {q.id}")
            seen.add(q.id)
        return questions


# --- Sessions ---


class Session(BaseModel):
    """One question batch and, once submitted, its answers."""

    id: str
    title: str | None = None
    context: str | None = None
    questions: list[Question]
    answers: dict[str, Any] | None = None
    created_at: int = Field(..., description="Creation time in epoch milliseconds")

    @property
    def answered(self) -> bool:
        return self.answers is not None


# --- HTTP Response Schemas ---


class SessionView(BaseModel):
    """Public view of a session; never carries the answers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str | None = None
    context: str | None = None
    questions: list[dict[str, Any]]
    already_submitted: bool = Field(..., alias="alreadySubmitted")

    @classmethod
    def from_session(cls, session: Session) -> SessionView:
        return cls(
            id=session.id,
            title=session.title,
            context=session.context,
            questions=[q.to_wire() for q in session.questions],
            already_submitted=session.answered,
        )


class SubmitResponse(BaseModel):
    """Acknowledgement for an accepted submission."""

    success: Literal[True] = True
    message: str = "Answers submitted successfully"


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: Literal["ok"] = "ok"
    timestamp: int


# --- Tool Result ---


class AskQuestionsResult(BaseModel):
    """Result returned to the calling agent."""

    summary: str
    answers: dict[str, Any] = Field(default_factory=dict)
    session_id: str
    timed_out: bool = False
