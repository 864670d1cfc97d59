from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    MISSING_IDENTIFIER = "missing_identifier"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an identifier lookup: a value or a described failure."""

    value: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def missing(cls, message: str) -> "Outcome[T]":
        return cls(error=message, error_kind=ErrorKind.MISSING_IDENTIFIER)

    @classmethod
    def not_found(cls, message: str) -> "Outcome[T]":
        return cls(error=message, error_kind=ErrorKind.NOT_FOUND)
