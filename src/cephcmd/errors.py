"""
Errors that stop a parse. The ones that point into the document carry a
Diagnostic; printing them on a rich Console draws the code frame.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult

from cephcmd.reporting.diagnostics import Diagnostic, format_plain, render_diagnostic

__all__ = [
    "CephCmdException",
    "DocumentParseError",
    "ParameterError",
    "DuplicateParameterError",
    "DescriptorError",
]


@dataclass(slots=True)
class CephCmdException(Exception):
    diagnostic: Diagnostic

    def __str__(self) -> str:
        return format_plain(self.diagnostic)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield render_diagnostic(self.diagnostic)


class DocumentParseError(CephCmdException):
    """A command's framing grammar failed; the whole document is rejected."""


class ParameterError(CephCmdException):
    """A parameter descriptor was rejected while parsing in strict mode."""


class DuplicateParameterError(CephCmdException):
    """A parameter name appeared twice in one signature while parsing in strict mode."""


class DescriptorError(ValueError):
    """
    Sub-grammar failure inside one parameter descriptor token.

    `start`/`end` are offsets into the token text; None means the whole token.
    """

    def __init__(self, reason: str, start: int | None = None, end: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.start = start
        self.end = end
