from __future__ import annotations

import re
import warnings
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from cephcmd.constants import PREFIX_KEY, RETURN_DOC
from cephcmd.core import Flag, Module, Repeat
from cephcmd.descriptor.model import (
    CephChoices,
    CephFloat,
    CephInt,
    CephObjectname,
    CephPoolname,
    CephString,
    CephUUID,
    Command,
    ParamType,
)
from cephcmd.emit.profile import DEFAULT_PROFILE, EmitProfile, escape_docstring
from cephcmd.rename import mark_duplicates, py_identifier, unique_identifier
from cephcmd.reporting.warnings_bridge import EmitWarning


def _raise(exc: str, message: str) -> str:
    return f"    raise {exc}({message!r})"


def _checks(ident: str, param: ParamType) -> list[str]:
    """Runtime type/range checks for one parameter, as statement lines."""
    v = param.variant
    lines: list[str] = []

    if isinstance(v, CephInt | CephFloat):
        py_type = "int" if isinstance(v, CephInt) else "(int, float)"
        lines.append(f"if not isinstance({ident}, {py_type}) or isinstance({ident}, bool):")
        lines.append(_raise("TypeError", f"{ident} must be a number"))
        if v.min is not None:
            lines.append(f"if {ident} < {v.min!r}:")
            lines.append(_raise("ValueError", f"{ident} must be >= {v.min}"))
        if v.max is not None:
            lines.append(f"if {ident} > {v.max!r}:")
            lines.append(_raise("ValueError", f"{ident} must be <= {v.max}"))
    elif isinstance(v, CephString | CephPoolname | CephObjectname):
        many = getattr(v, "repeats", Repeat.ONE) is Repeat.MANY
        items = ident if many else f"[{ident}]"
        lines.append(f"if not all(isinstance(item, str) for item in {items}):")
        lines.append(_raise("TypeError", f"{ident} must be a string" + (" list" if many else "")))
        if isinstance(v, CephString) and v.goodchars is not None:
            pattern = "[" + v.goodchars + "]*"
            lines.append(f"if not all(re.fullmatch({pattern!r}, item) for item in {items}):")
            lines.append(_raise("ValueError", f"{ident} has characters outside {pattern}"))
    elif isinstance(v, CephChoices):
        valid_type = "list" if v.repeats is Repeat.MANY else "str"
        choices = ", ".join(repr(c) for c in v.choices)
        lines.append(f"validator(value={ident}, valid_type={valid_type}, valid_range=[{choices}])")
    elif isinstance(v, CephUUID):
        lines.append(f"if not isinstance({ident}, uuid.UUID):")
        lines.append(_raise("TypeError", f"{ident} must be a uuid.UUID"))
    return lines


_FRAGMENT_JOIN_RE = re.compile(r'"\s*\\?\s*"')


def help_text(helpstring: str) -> str:
    """Raw helpstring literal -> one line, with `" \\ "` fragment joins removed."""
    return " ".join(_FRAGMENT_JOIN_RE.sub("", helpstring).split())


def _payload_value(ident: str, param: ParamType) -> str:
    return f"str({ident})" if isinstance(param.variant, CephUUID) else ident


def _payload_params(cmd: Command) -> list[tuple[str, ParamType]]:
    params: list[tuple[str, ParamType]] = []
    for name, p in cmd.signature.parameters.items():
        if name == PREFIX_KEY:
            warnings.warn(
                EmitWarning(
                    f"{cmd.signature.prefix}: parameter {name!r} would overwrite the "
                    "command prefix in the request payload; left out of the binding"
                ),
                stacklevel=3,
            )
            continue
        params.append((name, p))
    return params


def render_command(
    cmd: Command,
    profile: EmitProfile = DEFAULT_PROFILE,
    method: str | None = None,
) -> str:
    """
    One generated method (indented for a class body) for one command.

    `method` overrides the name derived from the prefix; `render_module` passes
    one that is unique within its class.
    """
    ind = profile.indent
    sig = cmd.signature
    params = _payload_params(cmd)
    required = [(n, p) for n, p in params if p.required]
    optional = [(n, p) for n, p in params if not p.required]

    # distinct names may fold to one identifier ("pool-id", "pool_id")
    taken = {"self"}
    idents = {n: unique_identifier(py_identifier(n), taken) for n, _ in required + optional}

    args = ["self"]
    args += [idents[n] for n, _ in required]
    args += [f"{idents[n]}={profile.absent}" for n, _ in optional]

    out: list[str] = [f"def {method or py_identifier(sig.method_name)}({', '.join(args)}):"]

    doc = ['"""', escape_docstring(help_text(cmd.helpstring))]
    for name, p in required + optional:
        doc.append(f":param {idents[name]}: {p.tag}{'' if p.required else ' (optional)'}")
    doc += ["", RETURN_DOC, '"""']
    out += [ind + line if line else "" for line in doc]

    if cmd.has_flag(Flag.DEPRECATED) or cmd.has_flag(Flag.OBSOLETE):
        state = "obsolete" if cmd.has_flag(Flag.OBSOLETE) else "deprecated"
        message = f"{sig.prefix} is {state}"
        out.append(f"{ind}warnings.warn({message!r}, DeprecationWarning, stacklevel=2)")

    for name, p in required:
        out += [ind + line for line in _checks(idents[name], p)]
    for name, p in optional:
        ident = idents[name]
        checks = _checks(ident, p)
        if checks:
            out.append(f"{ind}if {ident} is not {profile.absent}:")
            out += [ind * 2 + line for line in checks]

    out.append(f"{ind}cmd = {{")
    out.append(f"{ind * 2}{PREFIX_KEY!r}: {sig.prefix!r},")
    for name, p in required:
        out.append(f"{ind * 2}{name!r}: {_payload_value(idents[name], p)},")
    out.append(f"{ind}}}")
    for name, p in optional:
        ident = idents[name]
        out.append(f"{ind}if {ident} is not {profile.absent}:")
        out.append(f"{ind * 2}cmd[{name!r}] = {_payload_value(ident, p)}")
    out.append(f"{ind}return self._run(cmd)")

    return "\n".join(out)


def _class_preamble(profile: EmitProfile) -> list[str]:
    ind = profile.indent
    return [
        f"def __init__(self, conffile={profile.conffile!r}):",
        f"{ind}self.conffile = conffile",
        "",
        "def _run(self, cmd):",
        f"{ind}cluster = rados.Rados(conffile=self.conffile)",
        f"{ind}try:",
        f"{ind * 2}cluster.connect()",
        f"{ind * 2}result = cluster.mon_command(json.dumps(cmd), b'')",
        f"{ind}finally:",
        f"{ind * 2}cluster.shutdown()",
        f"{ind}if result[0] != 0:",
        f"{ind * 2}raise CephError(cmd=cmd, msg=os.strerror(abs(result[0])))",
        f"{ind}return result",
    ]


def render_module(module: Module, commands: Sequence[Command], profile: EmitProfile = DEFAULT_PROFILE) -> str:
    ind = profile.indent
    lines = [f"class {module.class_name}({profile.base_class}):"]
    lines += [ind + line if line else "" for line in _class_preamble(profile)]
    taken = {"__init__", "_run"}
    for cmd in commands:
        method = unique_identifier(py_identifier(cmd.signature.method_name), taken)
        lines.append("")
        lines += [
            ind + line if line else ""
            for line in render_command(cmd, profile, method=method).splitlines()
        ]
    return "\n".join(lines)


def group_by_module(commands: Iterable[Command]) -> dict[Module, list[Command]]:
    """Commands per module, modules in order of first appearance."""
    groups: dict[Module, list[Command]] = {}
    for cmd in commands:
        groups.setdefault(cmd.module, []).append(cmd)
    return groups


def render_bindings(commands: Iterable[Command], profile: EmitProfile = DEFAULT_PROFILE) -> str:
    """
    Whole generated client module. Expects the duplicate-rename pass to have run;
    obsolete commands are left out when `profile.skip_obsolete` is set.
    """
    selected = [
        c for c in commands if not (profile.skip_obsolete and c.has_flag(Flag.OBSOLETE))
    ]
    chunks = [profile.header.rstrip("\n")]
    for module, cmds in group_by_module(selected).items():
        chunks.append(render_module(module, cmds, profile))
    return "\n\n".join(chunks) + "\n"


@runtime_checkable
class Renderer(Protocol):
    """Capability surface for turning a parsed command sequence into output text."""
    def render_commands(self, commands: Sequence[Command]) -> str:
        ...


class BindingRenderer:
    """Runs the rename pass, then renders Python client bindings."""

    def __init__(self, profile: EmitProfile = DEFAULT_PROFILE):
        self.profile = profile

    def render_commands(self, commands: Sequence[Command]) -> str:
        return render_bindings(mark_duplicates(commands), self.profile)
