"""
Warning categories raised while reading descriptor documents, and an opt-in
`warnings.showwarning` hook that prints the ones carrying a Diagnostic as code
frames. Filters set with `warnings.simplefilter` and friends still apply because
the hook only changes how an already-issued warning is displayed.

Nothing here is installed on import; the CLI and `cephcmd.pretty` opt in.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from rich.console import Console
from rich.text import Text

from cephcmd.reporting.diagnostics import Diagnostic, Emitter, format_plain

__all__ = [
    "CephCmdWarning",
    "InputWarning",
    "ParameterWarning",
    "DuplicateParameterWarning",
    "TrailingInputWarning",
    "EmitWarning",
    "DiagnosticWarning",
    "install_warnings_bridge",
]


class CephCmdWarning(Warning):
    pass


class InputWarning(CephCmdWarning):
    """The descriptor document could only be partly read, or not at all."""


@dataclass(slots=True)
class DiagnosticWarning(CephCmdWarning):
    diagnostic: Diagnostic

    def __str__(self) -> str:
        return format_plain(self.diagnostic)


class ParameterWarning(DiagnosticWarning):
    """A parameter descriptor was rejected and dropped from its signature."""


class DuplicateParameterWarning(DiagnosticWarning):
    """A parameter name repeated within one signature; the later one wins."""


class TrailingInputWarning(DiagnosticWarning):
    """Input after the last command was not a command and was discarded."""


class EmitWarning(CephCmdWarning):
    """A parameter was left out of a generated binding."""


ShowWarning = Callable[..., None]


def _make_hook(em: Emitter, fallback: ShowWarning, only_cephcmd: bool) -> ShowWarning:
    def hook(
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        if isinstance(message, DiagnosticWarning):
            em.emit(message.diagnostic)
        elif issubclass(category, CephCmdWarning):
            # no source position to frame, so print a one-line headline
            headline = Text(f"WARN [{category.__name__}]: ", style=em.theme.warn)
            em.console.print(headline + Text(str(message)))
        elif only_cephcmd:
            fallback(message, category, filename, lineno, file=file, line=line)
        else:
            em.console.print(Text(f"{category.__name__}: {message} ({filename}:{lineno})"))

    return hook


def install_warnings_bridge(
    *,
    emitter: Emitter | None = None,
    only_cephcmd: bool = True,
) -> Callable[[], None]:
    """
    Replace `warnings.showwarning` and return a callable that puts the previous
    handler back. Warnings from other packages keep their usual display unless
    `only_cephcmd` is False, in which case they go to the same Console.
    """
    previous = warnings.showwarning
    warnings.showwarning = _make_hook(emitter or Emitter(Console(stderr=True)), previous, only_cephcmd)

    def uninstall() -> None:
        warnings.showwarning = previous

    return uninstall
