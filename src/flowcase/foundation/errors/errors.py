"""Standardized errors raised by the flow combinators.

Task failures are never wrapped: whatever a task passes as its error reaches
the outer callback untouched. The types here cover misuse of the library
itself (non-callable tasks, callbacks invoked twice) and the bridge into
exception-based code (TaskFailed).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for flow failures."""
    TASK_FAILED = "TASK_FAILED"
    CALLBACK_REUSED = "CALLBACK_REUSED"
    INVALID_TASK = "INVALID_TASK"
    UNKNOWN = "UNKNOWN"


class FlowError(BaseModel):
    """Structured description of a flow failure.

    Attributes:
        combinator: Combinator that raised ("serial", "parallel", "map", ...)
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional extra information (e.g. repr of the task)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Flow Error",
            "description": "Structured error from a flow combinator",
            "examples": [{
                "combinator": "parallel",
                "message": "Callback for task 2 was already called",
                "code": "CALLBACK_REUSED",
            }],
        },
    )

    combinator: Annotated[str, Field(min_length=1, description="Combinator that produced the error")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    details: str | None = Field(default=None, description="Optional detailed error info")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_usage_error(self) -> bool:
        """Whether the caller misused the API (as opposed to a task failing)."""
        return self.code in (ErrorCode.INVALID_TASK, ErrorCode.CALLBACK_REUSED)

    def render(self) -> str:
        parts = [f"[{self.code}] {self.combinator}: {self.message}"]
        if self.details:
            parts.append(f" ({self.details})")
        return "".join(parts)

    __str__ = render


class FlowException(Exception):
    """Exception wrapping a FlowError for raising."""

    def __init__(self, error: FlowError) -> None:
        self.error = error
        super().__init__(error.render())

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(
        cls,
        combinator: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        details: str | None = None,
    ) -> Self:
        return cls(FlowError(combinator=combinator, message=message, code=code, details=details))


class InvalidTaskError(FlowException, TypeError):
    """A task, iteratee or done callback is not callable."""

    @classmethod
    def for_object(cls, combinator: str, role: str, obj: object) -> Self:
        return cls.create(
            combinator, f"{role} must be callable, got {type(obj).__name__}",
            ErrorCode.INVALID_TASK, details=repr(obj),
        )


class CallbackAlreadyCalled(FlowException):
    """A task invoked its completion callback more than once."""

    @classmethod
    def for_task(cls, combinator: str, index: int) -> Self:
        return cls.create(combinator, f"Callback for task {index} was already called", ErrorCode.CALLBACK_REUSED)


class TaskFailed(FlowException):
    """A callback-style failure surfaced as an exception.

    Raised by wait_callback() when the reported error is not itself an
    exception. The original error and the value reported with it are kept.
    """

    def __init__(self, error: object, value: object = None, *, combinator: str = "callback") -> None:
        self.reason = error
        self.value = value
        super().__init__(FlowError(
            combinator=combinator,
            message=f"Task failed: {error!r}",
            code=ErrorCode.TASK_FAILED,
        ))
