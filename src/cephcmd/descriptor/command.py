"""
Command and document framing.

    document := SKIP (command SKIP)*
    command  := ("COMMAND(" | "COMMAND_WITH_FLAG(") SKIP
                quoted quoted SKIP quoted quoted quoted_last
                ("," flag_list)? ")"

The states of a command are strictly sequential; the first one that fails aborts
the command, and the document with it.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable

from cephcmd.constants import COMMAND_TAG, COMMAND_WITH_FLAG_TAG
from cephcmd.core import Availability, Module, Permissions
from cephcmd.descriptor.cursor import Fail, Ok, Result, alt, tag
from cephcmd.descriptor.flags import flag_list
from cephcmd.descriptor.model import Command
from cephcmd.descriptor.quoted import Literal, quoted, quoted_last
from cephcmd.descriptor.signature import parse_signature
from cephcmd.descriptor.skip import skip
from cephcmd.errors import DocumentParseError
from cephcmd.reporting.diagnostics import Diagnostic, Severity
from cephcmd.reporting.warnings_bridge import TrailingInputWarning
from cephcmd.source import Source

_OPENING = alt(tag(COMMAND_WITH_FLAG_TAG), tag(COMMAND_TAG))


class _CommandFailure(Exception):
    def __init__(self, fail: Fail, field: str):
        super().__init__(fail.expected)
        self.fail = fail
        self.field = field


def _field(parser: Callable[[str, int], Result[Literal]], text: str, pos: int, field: str) -> Ok[Literal]:
    r = parser(text, pos)
    if isinstance(r, Fail):
        raise _CommandFailure(r, field)
    return r


def _parse_command(source: Source, pos: int, strict: bool) -> Ok[Command]:
    text = source.contents
    start = skip(text, pos)

    opening = _OPENING(text, start)
    if isinstance(opening, Fail):
        raise _CommandFailure(opening, "opening tag")
    pos = skip(text, opening.pos)

    signature = _field(quoted, text, pos, "signature")
    helpstring = _field(quoted, text, signature.pos, "helpstring")
    pos = skip(text, helpstring.pos)
    module = _field(quoted, text, pos, "module")
    permissions = _field(quoted, text, module.pos, "permissions")
    availability = _field(quoted_last, text, permissions.pos, "availability")
    pos = availability.pos

    flags = flag_list(text, pos)
    if isinstance(flags, Ok):
        pos = flags.pos

    pos = skip(text, pos)
    closing = tag(")")(text, pos)
    if isinstance(closing, Fail):
        # report the flag list's own error when it got further than a bare ')'
        if isinstance(flags, Fail) and flags.pos > pos:
            raise _CommandFailure(flags, "flag list")
        raise _CommandFailure(closing, "closing parenthesis")
    end = closing.pos

    sig = parse_signature(
        signature.value.text,
        source=source,
        offset=signature.value.start,
        strict=strict,
    )
    command = Command(
        signature=sig,
        helpstring=helpstring.value.text,
        module=Module.from_literal(module.value.text),
        permissions=Permissions.from_literal(permissions.value.text),
        availability=Availability.from_literal(availability.value.text),
        flags=flags.value if isinstance(flags, Ok) else None,
        span=source.span_between(start, end),
    )
    return Ok(skip(text, end), command)


def parse_command(data: str | Source, *, strict: bool = False) -> Command:
    """Parse exactly one command from the start of `data` (leading/trailing SKIP allowed)."""
    source = data if isinstance(data, Source) else Source.from_string(data)
    try:
        return _parse_command(source, 0, strict).value
    except _CommandFailure as e:
        raise DocumentParseError(_failure_diagnostic(source, 0, e)) from None


def _failure_diagnostic(source: Source, start: int, e: _CommandFailure) -> Diagnostic:
    start = skip(source.contents, start)
    return Diagnostic(
        message=f"malformed command: expected {e.fail.expected} in the {e.field}",
        severity=Severity.ERROR,
        span=source.span_between(start, max(e.fail.pos, start + 1)) if len(source) else None,
        source=source,
        code="command-syntax",
        label=f"expected {e.fail.expected}",
        notes=("no commands are returned when any command fails to parse",),
    )


def _as_source(data: str | bytes | Source) -> Source:
    if isinstance(data, Source):
        return data
    if isinstance(data, bytes):
        return Source.from_bytes(data)
    return Source.from_string(data)


def parse_document(data: str | bytes | Source, *, strict: bool = False) -> list[Command]:
    """
    Parse every command of a descriptor document, in order.

    Stops at the first position where no opening tag follows the skipped
    whitespace/comments; anything left there is discarded with a
    TrailingInputWarning. A command whose opening tag matched but whose body is
    malformed raises DocumentParseError, and nothing is returned.
    """
    source = _as_source(data)
    text = source.contents
    commands: list[Command] = []
    pos = skip(text, 0)

    while isinstance(_OPENING(text, pos), Ok):
        try:
            r = _parse_command(source, pos, strict)
        except _CommandFailure as e:
            raise DocumentParseError(_failure_diagnostic(source, pos, e)) from None
        commands.append(r.value)
        pos = r.pos

    if text[pos:].strip():
        warnings.warn(
            TrailingInputWarning(
                Diagnostic(
                    message="input after the last command is not a command; discarded",
                    severity=Severity.WARN,
                    span=source.span_between(pos, len(text)),
                    source=source,
                    code="trailing-input",
                )
            ),
            stacklevel=2,
        )
    return commands
