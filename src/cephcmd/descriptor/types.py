"""
Type-grammar dispatch for parameter descriptors.

Each `type=` tag maps to one row of `TYPE_TABLE`: the variant class it builds and
the optional attributes it accepts. One generic interpreter (`build_param`) walks
the tokenized `key=value` pairs against the row, so attribute order never matters
and supporting a new type is a new row, not a new branch.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from cephcmd.constants import NAME_KEY, REQ_KEY, TYPE_KEY
from cephcmd.core import Repeat
from cephcmd.descriptor.model import (
    CephChoices,
    CephEntityAddr,
    CephFilepath,
    CephFloat,
    CephFragment,
    CephInt,
    CephIPAddr,
    CephName,
    CephObjectname,
    CephOsdName,
    CephPgid,
    CephPoolname,
    CephPrefix,
    CephSocketpath,
    CephString,
    CephUUID,
    ParamType,
    Unknown,
    Variant,
)
from cephcmd.descriptor.pairs import Pair
from cephcmd.errors import DescriptorError

# ────────────────────────── Attribute value grammars ──────────────────────────

_UINT_RE = re.compile(r"\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def _bounds(value: str, number_re: re.Pattern[str], conv: Callable[[str], Any]) -> dict[str, Any]:
    """`lo` or `lo|hi` or `lo|`; the upper bound is left unset when absent or empty."""
    lo, sep, hi = value.partition("|")
    if not number_re.fullmatch(lo):
        raise DescriptorError(f"invalid lower bound {lo!r} in range")
    if sep and hi and not number_re.fullmatch(hi):
        raise DescriptorError(f"invalid upper bound {hi!r} in range")
    return {"min": conv(lo), "max": conv(hi) if hi else None}


def int_range(value: str) -> dict[str, Any]:
    return _bounds(value, _UINT_RE, int)


def float_range(value: str) -> dict[str, Any]:
    return _bounds(value, _FLOAT_RE, float)


def goodchars(value: str) -> dict[str, Any]:
    if len(value) < 2 or not (value.startswith("[") and value.endswith("]")):
        raise DescriptorError(f"goodchars must be a bracketed set, got {value!r}")
    return {"goodchars": value[1:-1]}


def choices(value: str) -> dict[str, Any]:
    if not value:
        raise DescriptorError("strings= needs at least one choice")
    return {"choices": tuple(value.split("|"))}


def repeats(value: str) -> dict[str, Any]:
    return {"repeats": Repeat.from_literal(value)}


def parse_req(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise DescriptorError(f"req must be 'true' or 'false', got {value!r}")


# ────────────────────────── Declarative table ──────────────────────────


@dataclass(frozen=True, slots=True)
class Attribute:
    key: str
    parse: Callable[[str], dict[str, Any]]
    render: Callable[[Variant], str | None]


RANGE_INT = Attribute(
    "range",
    int_range,
    lambda v: _render_bounds(getattr(v, "min"), getattr(v, "max")),
)
RANGE_FLOAT = Attribute(
    "range",
    float_range,
    lambda v: _render_bounds(getattr(v, "min"), getattr(v, "max")),
)
GOODCHARS = Attribute(
    "goodchars",
    goodchars,
    lambda v: None if getattr(v, "goodchars") is None else f"[{getattr(v, 'goodchars')}]",
)
STRINGS = Attribute(
    "strings",
    choices,
    lambda v: "|".join(getattr(v, "choices")),
)
N = Attribute(
    "n",
    repeats,
    lambda v: "N" if getattr(v, "repeats") is Repeat.MANY else None,
)


def _number_text(x: int | float) -> str:
    # plain decimal; _FLOAT_RE has no exponent form
    return format(Decimal(repr(x)), "f") if isinstance(x, float) else str(x)


def _render_bounds(lo: Any, hi: Any) -> str | None:
    if lo is None:
        return None
    if hi is None:
        return _number_text(lo)
    return f"{_number_text(lo)}|{_number_text(hi)}"


@dataclass(frozen=True, slots=True)
class TypeRow:
    variant: type[Variant]
    attributes: tuple[Attribute, ...] = ()
    mandatory: frozenset[str] = frozenset()

    def attribute(self, key: str) -> Attribute | None:
        for a in self.attributes:
            if a.key == key:
                return a
        return None


TYPE_TABLE: Mapping[str, TypeRow] = {
    row.variant.TAG: row
    for row in (
        TypeRow(CephInt, (RANGE_INT,)),
        TypeRow(CephFloat, (RANGE_FLOAT,)),
        TypeRow(CephString, (N, GOODCHARS)),
        TypeRow(CephChoices, (STRINGS, N), mandatory=frozenset({"strings"})),
        TypeRow(CephPoolname, (N,)),
        TypeRow(CephSocketpath),
        TypeRow(CephIPAddr),
        TypeRow(CephEntityAddr),
        TypeRow(CephObjectname),
        TypeRow(CephPgid),
        TypeRow(CephName),
        TypeRow(CephOsdName),
        TypeRow(CephFilepath),
        TypeRow(CephFragment),
        TypeRow(CephUUID),
        TypeRow(CephPrefix),
    )
}


# ────────────────────────── Interpreter ──────────────────────────


def build_param(type_tag: str, attrs: Sequence[Pair]) -> ParamType:
    """
    Interpret the attribute pairs trailing `name=`/`type=` for the given tag.

    Absent attributes take their variant defaults; `req=` defaults to true.
    Unrecognized tags give the Unknown variant and only `req=` is looked at.
    """
    required = True
    fields: dict[str, Any] = {}
    seen: set[str] = set()
    row = TYPE_TABLE.get(type_tag)

    for pair in attrs:
        if pair.key in seen:
            raise DescriptorError(f"duplicate attribute {pair.key!r}", pair.start, pair.end)
        seen.add(pair.key)

        try:
            if pair.key == REQ_KEY:
                required = parse_req(pair.value)
                continue
            if row is None:
                continue
            attr = row.attribute(pair.key)
            if attr is None:
                raise DescriptorError(f"attribute {pair.key!r} is not accepted by {type_tag}")
            fields.update(attr.parse(pair.value))
        except DescriptorError as e:
            if e.start is None:
                raise DescriptorError(e.reason, pair.start, pair.end) from e
            raise

    if row is None:
        return ParamType(required=required, variant=Unknown(tag=type_tag))

    missing = row.mandatory - seen
    if missing:
        raise DescriptorError(f"{type_tag} requires {', '.join(sorted(missing))}=")

    return ParamType(required=required, variant=row.variant(**fields))


def split_descriptor(pairs: Sequence[Pair]) -> tuple[str, str, list[Pair]]:
    """Pull `name=` and `type=` out of a tokenized descriptor, wherever they sit."""
    name: str | None = None
    type_tag: str | None = None
    rest: list[Pair] = []
    for pair in pairs:
        if pair.key == NAME_KEY:
            if name is not None:
                raise DescriptorError("duplicate attribute 'name'", pair.start, pair.end)
            name = pair.value
        elif pair.key == TYPE_KEY:
            if type_tag is not None:
                raise DescriptorError("duplicate attribute 'type'", pair.start, pair.end)
            type_tag = pair.value
        else:
            rest.append(pair)
    if not name:
        raise DescriptorError("parameter descriptor has no name=")
    if not type_tag:
        raise DescriptorError("parameter descriptor has no type=")
    return name, type_tag, rest


def render_descriptor(name: str, param: ParamType) -> str:
    """Inverse of parsing, up to attribute order and default-valued attributes."""
    parts = [f"{NAME_KEY}={name}", f"{TYPE_KEY}={param.tag}"]
    row = TYPE_TABLE.get(param.tag)
    if row is not None:
        for attr in row.attributes:
            text = attr.render(param.variant)
            if text is not None:
                parts.append(f"{attr.key}={text}")
    if not param.required:
        parts.append(f"{REQ_KEY}=false")
    return ",".join(parts)
