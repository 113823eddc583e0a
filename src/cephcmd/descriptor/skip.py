"""
Insignificant input between grammar tokens: whitespace, `//` and `#` line
comments, `/* */` block comments and backslash line continuations.
"""

from __future__ import annotations

from cephcmd.descriptor.cursor import Fail, Ok, Result, alt, many0

# str.isspace() already covers the unicode line and paragraph separators
_LINE_ENDS = ("\r\n", "\n", "\r", "\u2028", "\u2029")


def _whitespace(text: str, pos: int) -> Result[None]:
    end = pos
    while end < len(text) and text[end].isspace():
        end += 1
    if end == pos:
        return Fail(pos, "whitespace")
    return Ok(end, None)


def _line_comment(text: str, pos: int) -> Result[None]:
    if text.startswith("//", pos):
        start = pos + 2
    elif text.startswith("#", pos):
        start = pos + 1
    else:
        return Fail(pos, "line comment")
    end = start
    while end < len(text) and not text.startswith(_LINE_ENDS, end):
        end += 1
    for eol in _LINE_ENDS:
        if text.startswith(eol, end):
            return Ok(end + len(eol), None)
    return Ok(end, None)  # comment ran to end of input


def _block_comment(text: str, pos: int) -> Result[None]:
    if not text.startswith("/*", pos):
        return Fail(pos, "block comment")
    end = text.find("*/", pos + 2)
    if end < 0:
        return Fail(len(text), "'*/' closing block comment")
    return Ok(end + 2, None)


def _continuation(text: str, pos: int) -> Result[None]:
    if not text.startswith("\\", pos):
        return Fail(pos, "line continuation")
    for eol in ("\r\n", "\n"):
        if text.startswith(eol, pos + 1):
            return Ok(pos + 1 + len(eol), None)
    return Fail(pos, "line continuation")


_SKIP_ANY = many0(alt(_whitespace, _line_comment, _block_comment, _continuation))


def skip(text: str, pos: int) -> int:
    """Never fails: returns the cursor after any run of insignificant input."""
    r = _SKIP_ANY(text, pos)
    assert isinstance(r, Ok)
    return r.pos
