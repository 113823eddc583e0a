from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Module(StrEnum):
    MDS = "mds"
    OSD = "osd"
    PG = "pg"
    MON = "mon"
    AUTH = "auth"
    LOG = "log"
    CONFIG_KEY = "config-key"
    UNKNOWN = "unknown"

    @classmethod
    def from_literal(cls, text: str) -> Module:
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN

    @property
    def class_name(self) -> str:
        return _MODULE_CLASS_NAMES[self]


_MODULE_CLASS_NAMES: dict[Module, str] = {
    Module.MDS: "MdsCommand",
    Module.OSD: "OsdCommand",
    Module.PG: "PlacementGroupCommand",
    Module.MON: "MonitorCommand",
    Module.AUTH: "AuthCommand",
    Module.LOG: "LogCommand",
    Module.CONFIG_KEY: "ConfigKeyCommand",
    Module.UNKNOWN: "UnknownCommand",
}


class Availability(StrEnum):
    CLI = "cli"
    REST = "rest"
    BOTH = "cli,rest"
    UNKNOWN = "unknown"

    @classmethod
    def from_literal(cls, text: str) -> Availability:
        return {
            "cli": cls.CLI,
            "rest": cls.REST,
            "cli,rest": cls.BOTH,
        }.get(text, cls.UNKNOWN)


class Flag(StrEnum):
    NO_FLAG = "NONE"
    NO_FORWARD = "NOFORWARD"
    OBSOLETE = "OBSOLETE"
    DEPRECATED = "DEPRECATED"

    @classmethod
    def from_literal(cls, text: str) -> Flag:
        try:
            return cls(text)
        except ValueError:
            return cls.NO_FLAG


class Repeat(StrEnum):
    ONE = "1"
    MANY = "N"

    @classmethod
    def from_literal(cls, text: str | None) -> Repeat:
        # anything but an explicit N (including n=1, n=2, n=) means a single value
        return cls.MANY if text == "N" else cls.ONE


@dataclass(frozen=True, slots=True)
class Permissions:
    read: bool = False
    write: bool = False
    execute: bool = False

    @classmethod
    def from_literal(cls, text: str) -> Permissions:
        return cls(read="r" in text, write="w" in text, execute="x" in text)

    def __str__(self) -> str:
        return "".join(c for c, on in zip("rwx", (self.read, self.write, self.execute)) if on)
