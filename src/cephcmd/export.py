from __future__ import annotations

from collections.abc import Iterable, Sequence

import msgspec
import msgspec.json

from cephcmd.constants import MANIFEST_SCHEMA, REQ_KEY
from cephcmd.core import Availability, Flag, Module, Permissions
from cephcmd.descriptor.model import Command, ParamType, Signature
from cephcmd.descriptor.pairs import Pair
from cephcmd.descriptor.types import TYPE_TABLE, build_param
from cephcmd.emit.profile import DEFAULT_PROFILE, EmitProfile
from cephcmd.rename import mark_duplicates


class ParamRecord(msgspec.Struct, frozen=True):
    name: str
    type: str
    required: bool = True
    attrs: dict[str, str] = msgspec.field(default_factory=dict)


class CommandRecord(msgspec.Struct, frozen=True):
    prefix: str
    helpstring: str
    module: Module
    permissions: str
    availability: Availability
    params: list[ParamRecord] = msgspec.field(default_factory=list)
    flags: list[Flag] | None = None
    duplicate: bool = False


class Manifest(msgspec.Struct, frozen=True):
    commands: list[CommandRecord] = msgspec.field(default_factory=list)
    schema: int = MANIFEST_SCHEMA


def _param_record(name: str, param: ParamType) -> ParamRecord:
    attrs: dict[str, str] = {}
    row = TYPE_TABLE.get(param.tag)
    if row is not None:
        for attr in row.attributes:
            text = attr.render(param.variant)
            if text is not None:
                attrs[attr.key] = text
    return ParamRecord(name=name, type=param.tag, required=param.required, attrs=attrs)


def command_record(cmd: Command) -> CommandRecord:
    sig = cmd.signature
    return CommandRecord(
        prefix=sig.prefix,
        helpstring=cmd.helpstring,
        module=cmd.module,
        permissions=str(cmd.permissions),
        availability=cmd.availability,
        params=[_param_record(n, p) for n, p in sig.parameters.items()],
        flags=None if cmd.flags is None else list(cmd.flags),
        duplicate=sig.duplicate,
    )


def _param_from_record(rec: ParamRecord) -> ParamType:
    # same interpreter as the descriptor parser, so decoded values are validated
    pairs = [Pair(key=k, value=v, start=0, end=0) for k, v in rec.attrs.items()]
    if not rec.required:
        pairs.append(Pair(key=REQ_KEY, value="false", start=0, end=0))
    return build_param(rec.type, pairs)


def command_from_record(rec: CommandRecord) -> Command:
    return Command(
        signature=Signature(
            prefix=rec.prefix,
            parameters={p.name: _param_from_record(p) for p in rec.params},
            duplicate=rec.duplicate,
        ),
        helpstring=rec.helpstring,
        module=rec.module,
        permissions=Permissions.from_literal(rec.permissions),
        availability=rec.availability,
        flags=None if rec.flags is None else tuple(rec.flags),
    )


def encode_manifest(commands: Iterable[Command]) -> bytes:
    manifest = Manifest(commands=[command_record(c) for c in commands])
    return msgspec.json.encode(manifest) + b"\n"


def decode_manifest(data: bytes | str) -> list[Command]:
    """
    Commands back from `encode_manifest` output. Source spans and rejected
    descriptor tokens are not part of the manifest and come back empty.
    """
    manifest = msgspec.json.decode(data, type=Manifest)
    if manifest.schema != MANIFEST_SCHEMA:
        raise ValueError(
            f"Unsupported manifest schema {manifest.schema}; expected {MANIFEST_SCHEMA}."
        )
    return [command_from_record(r) for r in manifest.commands]


class ManifestRenderer:
    """Runs the rename pass, then renders the JSON manifest."""

    def __init__(self, profile: EmitProfile = DEFAULT_PROFILE):
        self.profile = profile

    def render_commands(self, commands: Sequence[Command]) -> str:
        selected = [
            c for c in mark_duplicates(commands)
            if not (self.profile.skip_obsolete and c.has_flag(Flag.OBSOLETE))
        ]
        return encode_manifest(selected).decode("utf-8")
