"""Result values returned by engine operations."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from .errors import ErrorCode, ToolError

T = TypeVar("T")


class Outcome(BaseModel, Generic[T]):
    """Either a value or a ToolError, never both.

    Engine operations return an Outcome instead of raising, so callers
    decide how a failure is surfaced.
    """

    value: Optional[T] = None
    error: Optional[ToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "Outcome[T]":
        return cls(error=ToolError.from_code(code, details))
