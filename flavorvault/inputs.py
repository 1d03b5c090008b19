"""Parsing of raw user input shared by the web and terminal shells.

Parsers never raise. They return a :class:`ParseResult` holding either the
parsed value or a message that can be shown to the user as is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

BACK = "0"
MAX_INT = 2**31 - 1
DIFFICULTY_RANGE = (1, 5)


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult[T]":
        return cls(error=error)


def parse_int_in_range(text: Optional[str], minimum: int, maximum: int) -> ParseResult[int]:
    message = f"Please enter a whole number between {minimum} and {maximum}."
    try:
        number = int((text or "").strip())
    except ValueError:
        return ParseResult.failure(message)

    if not minimum <= number <= maximum:
        return ParseResult.failure(message)
    return ParseResult.success(number)


def parse_text(text: Optional[str]) -> ParseResult[str]:
    return ParseResult.success((text or "").strip())


def parse_required_text(text: Optional[str], field: str) -> ParseResult[str]:
    value = (text or "").strip()
    if not value:
        return ParseResult.failure(f"Please provide a recipe {field}.")
    return ParseResult.success(value)


def parse_lines(text: Optional[str]) -> ParseResult[List[str]]:
    """Split multi-line text into entries, one per non-blank line."""

    return ParseResult.success([line.strip() for line in (text or "").splitlines() if line.strip()])


def is_back_request(text: Optional[str]) -> bool:
    return (text or "").strip() == BACK


__all__ = [
    "BACK",
    "DIFFICULTY_RANGE",
    "MAX_INT",
    "ParseResult",
    "is_back_request",
    "parse_int_in_range",
    "parse_lines",
    "parse_required_text",
    "parse_text",
]
