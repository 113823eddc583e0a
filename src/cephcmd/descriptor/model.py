from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar

from cephcmd.constants import DUPLICATE_SUFFIX
from cephcmd.core import Availability, Flag, Module, Permissions, Repeat
from cephcmd.source import SourceSpan

# ────────────────────────── Parameter variants ──────────────────────────


class Variant:
    """Closed set of parameter kinds; TAG is the `type=` spelling in descriptors."""

    __slots__ = ()
    TAG: ClassVar[str]


@dataclass(frozen=True, slots=True)
class CephInt(Variant):
    TAG: ClassVar[str] = "CephInt"
    min: int | None = None
    max: int | None = None


@dataclass(frozen=True, slots=True)
class CephFloat(Variant):
    TAG: ClassVar[str] = "CephFloat"
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True, slots=True)
class CephString(Variant):
    TAG: ClassVar[str] = "CephString"
    goodchars: str | None = None
    repeats: Repeat = Repeat.ONE


@dataclass(frozen=True, slots=True)
class CephSocketpath(Variant):
    TAG: ClassVar[str] = "CephSocketpath"  # must be a unix socket


@dataclass(frozen=True, slots=True)
class CephIPAddr(Variant):
    TAG: ClassVar[str] = "CephIPAddr"  # v4 or v6, optional port


@dataclass(frozen=True, slots=True)
class CephEntityAddr(Variant):
    TAG: ClassVar[str] = "CephEntityAddr"  # CephIPAddr plus optional /nonce


@dataclass(frozen=True, slots=True)
class CephPoolname(Variant):
    TAG: ClassVar[str] = "CephPoolname"
    repeats: Repeat = Repeat.ONE


@dataclass(frozen=True, slots=True)
class CephObjectname(Variant):
    TAG: ClassVar[str] = "CephObjectname"


@dataclass(frozen=True, slots=True)
class CephPgid(Variant):
    TAG: ClassVar[str] = "CephPgid"  # n.xxx, n decimal, xxx hex


@dataclass(frozen=True, slots=True)
class CephName(Variant):
    TAG: ClassVar[str] = "CephName"  # '*' or <type>.<id>


@dataclass(frozen=True, slots=True)
class CephOsdName(Variant):
    TAG: ClassVar[str] = "CephOsdName"  # '*', <id> or osd.<id>


@dataclass(frozen=True, slots=True, eq=False)
class CephChoices(Variant):
    TAG: ClassVar[str] = "CephChoices"
    choices: tuple[str, ...] = ()
    repeats: Repeat = Repeat.ONE

    # order is kept for generated validators, but is not part of identity
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CephChoices):
            return NotImplemented
        return frozenset(self.choices) == frozenset(other.choices) and self.repeats == other.repeats

    def __hash__(self) -> int:
        return hash((frozenset(self.choices), self.repeats))


@dataclass(frozen=True, slots=True)
class CephFilepath(Variant):
    TAG: ClassVar[str] = "CephFilepath"


@dataclass(frozen=True, slots=True)
class CephFragment(Variant):
    TAG: ClassVar[str] = "CephFragment"  # val/bits, val hex, bits decimal


@dataclass(frozen=True, slots=True)
class CephUUID(Variant):
    TAG: ClassVar[str] = "CephUUID"


@dataclass(frozen=True, slots=True)
class CephPrefix(Variant):
    TAG: ClassVar[str] = "CephPrefix"  # literal prefix word


@dataclass(frozen=True, slots=True)
class Unknown(Variant):
    TAG: ClassVar[str] = "Unknown"
    tag: str = ""  # the unrecognized type= spelling


@dataclass(frozen=True, slots=True)
class ParamType:
    required: bool
    variant: Variant

    @property
    def tag(self) -> str:
        if isinstance(self.variant, Unknown):
            return self.variant.tag
        return self.variant.TAG


# ────────────────────────── Signature / Command ──────────────────────────


@dataclass(frozen=True, slots=True)
class ParamRejection:
    """A descriptor token that was dropped from its signature, and why."""

    token: str
    reason: str
    span: SourceSpan | None = None


@dataclass(frozen=True, slots=True)
class Signature:
    prefix: str
    parameters: Mapping[str, ParamType] = field(default_factory=dict)
    duplicate: bool = False
    rejected: tuple[ParamRejection, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, MappingProxyType):
            object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def normalized(self) -> str:
        return self.prefix.replace(" ", "_").replace("-", "_")

    @property
    def method_name(self) -> str:
        return self.normalized + (DUPLICATE_SUFFIX if self.duplicate else "")


@dataclass(frozen=True, slots=True)
class Command:
    """One COMMAND(...) / COMMAND_WITH_FLAG(...) invocation."""

    signature: Signature
    helpstring: str
    module: Module
    permissions: Permissions
    availability: Availability
    flags: tuple[Flag, ...] | None = None
    span: SourceSpan | None = field(default=None, compare=False)

    def has_flag(self, flag: Flag) -> bool:
        return self.flags is not None and flag in self.flags
