from __future__ import annotations

import pytest

from cephcmd.core import Availability, Flag, Module, Permissions, Repeat

@pytest.mark.parametrize(
    "text,expected",
    [
        ("r", Permissions(read=True)),
        ("w", Permissions(write=True)),
        ("rw", Permissions(read=True, write=True)),
        ("wr", Permissions(read=True, write=True)),
        ("rwx", Permissions(read=True, write=True, execute=True)),
        ("xr", Permissions(read=True, execute=True)),
        ("rrw", Permissions(read=True, write=True)),
        ("", Permissions()),
        ("q", Permissions()),
    ]
)
def test_permissions(text: str, expected: Permissions) -> None:
    assert Permissions.from_literal(text) == expected

def test_permissions_str_is_canonical() -> None:
    assert str(Permissions.from_literal("xwr")) == "rwx"
    assert str(Permissions.from_literal("wr")) == "rw"
    assert str(Permissions()) == ""

@pytest.mark.parametrize(
    "text,expected",
    [
        ("cli", Availability.CLI),
        ("rest", Availability.REST),
        ("cli,rest", Availability.BOTH),
        ("rest,cli", Availability.UNKNOWN),
        ("CLI", Availability.UNKNOWN),
        ("", Availability.UNKNOWN),
    ]
)
def test_availability(text: str, expected: Availability) -> None:
    assert Availability.from_literal(text) is expected

@pytest.mark.parametrize(
    "text,expected",
    [
        ("NOFORWARD", Flag.NO_FORWARD),
        ("OBSOLETE", Flag.OBSOLETE),
        ("DEPRECATED", Flag.DEPRECATED),
        ("NONE", Flag.NO_FLAG),
        ("deprecated", Flag.NO_FLAG),
        ("TELL", Flag.NO_FLAG),
    ]
)
def test_flag(text: str, expected: Flag) -> None:
    assert Flag.from_literal(text) is expected

@pytest.mark.parametrize(
    "text,expected",
    [("N", Repeat.MANY), ("1", Repeat.ONE), ("2", Repeat.ONE), ("n", Repeat.ONE), (None, Repeat.ONE)],
)
def test_repeat(text: str | None, expected: Repeat) -> None:
    assert Repeat.from_literal(text) is expected

@pytest.mark.parametrize(
    "text,module,class_name",
    [
        ("mds", Module.MDS, "MdsCommand"),
        ("osd", Module.OSD, "OsdCommand"),
        ("pg", Module.PG, "PlacementGroupCommand"),
        ("mon", Module.MON, "MonitorCommand"),
        ("auth", Module.AUTH, "AuthCommand"),
        ("log", Module.LOG, "LogCommand"),
        ("config-key", Module.CONFIG_KEY, "ConfigKeyCommand"),
        ("fs", Module.UNKNOWN, "UnknownCommand"),
    ]
)
def test_module(text: str, module: Module, class_name: str) -> None:
    assert Module.from_literal(text) is module
    assert module.class_name == class_name
