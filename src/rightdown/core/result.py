"""Result values shared by every core operation.

Expected failures (missing tool, syntax error in a block, missing file) are
returned as ``Failure`` values instead of raised, so callers can ``match``
on the outcome::

    match await orchestrator.format(text):
        case Success(data=outcome):
            ...
        case Failure(error=error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, Literal, TypeAlias, TypeVar

T = TypeVar("T")


class ErrorCode(StrEnum):
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FORMATTER_NOT_FOUND = "FORMATTER_NOT_FOUND"
    FORMATTER_FAILED = "FORMATTER_FAILED"
    FORMATTER_TIMEOUT = "FORMATTER_TIMEOUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    IO_ERROR = "IO_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class AppError:
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None
    cause: str | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    error: AppError
    success: Literal[False] = False


Result: TypeAlias = Success[T] | Failure


def success(data: T) -> Success[T]:
    return Success(data)


def failure(error: AppError) -> Failure:
    return Failure(error)


def make_error(
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
    cause: BaseException | None = None,
) -> AppError:
    """Build an ``AppError``; ``cause`` is flattened to ``"ExcType: message"``."""
    cause_text = f"{type(cause).__name__}: {cause}" if cause is not None else None
    return AppError(code=code, message=message, details=details, cause=cause_text)
