"""
Post-parse pass that marks signatures whose generated method names would collide.

Two commands of the same module collide when their prefixes fold to the same
Python identifier (e.g. "osd pool-get", "osd pool get" and "osd pool.get"). The
first occurrence keeps its name; every later one is marked `duplicate` and gets
a suffix at emission time. Runs once over the whole parsed sequence, before any
emission.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterable
from dataclasses import replace

from cephcmd.core import Module
from cephcmd.descriptor.model import Command

_NOT_IDENT_RE = re.compile(r"\W")

# names the generated module and method bodies already bind
_RESERVED = frozenset(
    {"self", "cmd", "json", "os", "re", "uuid", "warnings", "rados", "validator", "CephError"}
)


def py_identifier(name: str) -> str:
    """Descriptor parameter/prefix name -> a usable Python identifier."""
    ident = _NOT_IDENT_RE.sub("_", name)
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    if keyword.iskeyword(ident) or ident in _RESERVED:
        ident += "_"
    return ident


def unique_identifier(ident: str, taken: set[str]) -> str:
    """First free one of `ident`, `ident_2`, `ident_3`, ...; the result is added to `taken`."""
    candidate, n = ident, 1
    while candidate in taken:
        n += 1
        candidate = f"{ident}_{n}"
    taken.add(candidate)
    return candidate


def mark_duplicates(commands: Iterable[Command]) -> list[Command]:
    """Return the commands, in order, with `signature.duplicate` set on collisions."""
    seen: set[tuple[Module, str]] = set()
    out: list[Command] = []
    for cmd in commands:
        key = (cmd.module, py_identifier(cmd.signature.normalized))
        is_dup = key in seen
        seen.add(key)
        if is_dup != cmd.signature.duplicate:
            cmd = replace(cmd, signature=replace(cmd.signature, duplicate=is_dup))
        out.append(cmd)
    return out
