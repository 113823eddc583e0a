"""
cephcmd
=======

Parser for monitor command descriptor tables (`COMMAND(...)` /
`COMMAND_WITH_FLAG(...)` invocations) and generator of Python client bindings.

    from cephcmd import parse_document, BindingRenderer

    commands = parse_document(Path("MonCommands.h").read_bytes())
    print(BindingRenderer().render_commands(commands))
"""

from __future__ import annotations

from cephcmd.core import Availability, Flag, Module, Permissions, Repeat
from cephcmd.descriptor import Command, ParamType, Signature, parse_command, parse_document
from cephcmd.emit import BindingRenderer, EmitProfile, resolve_renderer
from cephcmd.errors import (
    CephCmdException,
    DescriptorError,
    DocumentParseError,
    DuplicateParameterError,
    ParameterError,
)
from cephcmd.export import decode_manifest, encode_manifest
from cephcmd.rename import mark_duplicates

__all__ = [
    "Availability",
    "Flag",
    "Module",
    "Permissions",
    "Repeat",
    "Command",
    "ParamType",
    "Signature",
    "parse_command",
    "parse_document",
    "mark_duplicates",
    "BindingRenderer",
    "EmitProfile",
    "resolve_renderer",
    "encode_manifest",
    "decode_manifest",
    "CephCmdException",
    "DescriptorError",
    "DocumentParseError",
    "DuplicateParameterError",
    "ParameterError",
]
