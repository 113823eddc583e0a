from __future__ import annotations

from cephcmd.constants import BARE_NOFORWARD, FLAG_TAG
from cephcmd.core import Flag
from cephcmd.descriptor.cursor import Fail, Ok, Result, tag, take_until
from cephcmd.descriptor.skip import skip

_FLAG_OPEN = tag(FLAG_TAG)
_FLAG_NAME = take_until(")")


def _flag(text: str, pos: int) -> Result[Flag]:
    r = _FLAG_OPEN(text, pos)
    if isinstance(r, Fail):
        return r
    name = _FLAG_NAME(text, r.pos)
    if isinstance(name, Fail):
        return Fail(name.pos, "')' closing FLAG(")
    return Ok(name.pos + 1, Flag.from_literal(name.value.strip()))


def flag_list(text: str, pos: int) -> Result[tuple[Flag, ...]]:
    """
    `, FLAG(A) | FLAG(B) ...` or `, NOFORWARD`, including the leading comma.
    Unrecognized names become Flag.NO_FLAG.
    """
    pos = skip(text, pos)
    if not text.startswith(",", pos):
        return Fail(pos, "','")
    pos = skip(text, pos + 1)

    bare = tag(BARE_NOFORWARD)(text, pos)
    if isinstance(bare, Ok):
        return Ok(bare.pos, (Flag.NO_FORWARD,))

    first = _flag(text, pos)
    if isinstance(first, Fail):
        return Fail(first.pos, f"{FLAG_TAG!r} or {BARE_NOFORWARD!r}")
    flags = [first.value]
    pos = first.pos
    while True:
        sep = skip(text, pos)
        if not text.startswith("|", sep):
            break
        nxt = _flag(text, skip(text, sep + 1))
        if isinstance(nxt, Fail):
            return nxt
        flags.append(nxt.value)
        pos = nxt.pos
    return Ok(pos, tuple(flags))
