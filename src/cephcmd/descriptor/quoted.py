"""
Quoted-literal extraction for the five/six string fields of a command.

The literals are not lexed as C strings: everything up to the first `"` is
skipped, and the interior runs to the first closing quote that is followed by
the field's terminator. That is what lets one signature literal span several
adjacent `"..." \\` fragments.
"""

from __future__ import annotations

from dataclasses import dataclass

from cephcmd.descriptor.cursor import Fail, Ok, Result
from cephcmd.descriptor.skip import skip


@dataclass(frozen=True, slots=True)
class Literal:
    text: str
    start: int  # offset of the first interior character in the document
    end: int    # offset one past the last interior character

    def __str__(self) -> str:
        return self.text


def _open(text: str, pos: int) -> Result[int]:
    pos = skip(text, pos)
    q = text.find('"', pos)
    if q < 0:
        return Fail(pos, "'\"' opening quoted literal")
    return Ok(q + 1, q + 1)


def quoted(text: str, pos: int) -> Result[Literal]:
    """
    Field terminated by `",`; the comma is consumed. Falls back to a field
    terminated by `")` (comma absent, paren left for the caller).
    """
    r = _open(text, pos)
    if isinstance(r, Fail):
        return r
    start = r.value

    end = text.find('",', start)
    if end >= 0:
        return Ok(end + 2, Literal(text[start:end], start, end))
    end = text.find('")', start)
    if end >= 0:
        return Ok(end + 1, Literal(text[start:end], start, end))
    return Fail(len(text), "'\",' closing quoted literal")


def quoted_last(text: str, pos: int) -> Result[Literal]:
    """
    The last field before the closing paren (or before a flag list): ends at the
    first `"` followed, after any SKIP, by `)` or `,`. Neither terminator is consumed.
    """
    r = _open(text, pos)
    if isinstance(r, Fail):
        return r
    start = r.value

    end = start
    while True:
        end = text.find('"', end)
        if end < 0:
            return Fail(len(text), "'\")' closing quoted literal")
        nxt = skip(text, end + 1)
        if nxt < len(text) and text[nxt] in "),":
            return Ok(end + 1, Literal(text[start:end], start, end))
        end += 1
