"""
Explicit cursor-and-result parsing primitives.

Every parser is a plain function `(text, pos) -> Result`: it never mutates shared
state, and alternatives are always tried against the same starting `pos`, so
backtracking is just "use the old pos again".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    pos: int  # cursor after the match
    value: T


@dataclass(frozen=True, slots=True)
class Fail:
    pos: int  # where the mismatch was detected
    expected: str

    def furthest(self, other: Fail) -> Fail:
        return other if other.pos > self.pos else self


Result: TypeAlias = Union[Ok[T], Fail]
Parser: TypeAlias = Callable[[str, int], Result[T]]


def tag(literal: str) -> Parser[str]:
    def _tag(text: str, pos: int) -> Result[str]:
        if text.startswith(literal, pos):
            return Ok(pos + len(literal), literal)
        return Fail(pos, repr(literal))
    return _tag


def take_until(needle: str) -> Parser[str]:
    """Shortest run up to (not including) `needle`; fails if `needle` never occurs."""
    def _take_until(text: str, pos: int) -> Result[str]:
        end = text.find(needle, pos)
        if end < 0:
            return Fail(len(text), repr(needle))
        return Ok(end, text[pos:end])
    return _take_until


def alt(*parsers: Parser[T]) -> Parser[T]:
    """First success wins; on total failure report the deepest failure."""
    def _alt(text: str, pos: int) -> Result[T]:
        worst: Fail | None = None
        for p in parsers:
            r = p(text, pos)
            if isinstance(r, Ok):
                return r
            worst = r if worst is None else worst.furthest(r)
        assert worst is not None, "alt() needs at least one parser"
        return worst
    return _alt


def many0(parser: Parser[T]) -> Parser[list[T]]:
    def _many0(text: str, pos: int) -> Result[list[T]]:
        out: list[T] = []
        while True:
            r = parser(text, pos)
            # a zero-width success would loop forever
            if isinstance(r, Fail) or r.pos == pos:
                return Ok(pos, out)
            out.append(r.value)
            pos = r.pos
    return _many0
