"""
Helpers for scripts that want the same terminal output as the `cephcmd` CLI.

`use_diagnostics` builds a stderr Console from the color setting and, when
pretty warnings are on, installs the warnings bridge for the enclosed block.
`run_with_diagnostics` wraps a function in it and turns an escaping
CephCmdException into a printed report and exit status 2.

Both read CEPHCMD_COLOR and CEPHCMD_PRETTY_WARNINGS when an argument is left as None.
"""

from __future__ import annotations

import contextvars
import functools
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from typing import ParamSpec, TypeVar

from rich.console import Console

from cephcmd.constants import COLOR_ENV, PRETTY_WARNINGS_ENV
from cephcmd.errors import CephCmdException
from cephcmd.reporting.diagnostics import Emitter
from cephcmd.reporting.warnings_bridge import install_warnings_bridge

__all__ = ["use_diagnostics", "active_console", "print_exception", "run_with_diagnostics"]

P = ParamSpec("P")
R = TypeVar("R")

_console_var: contextvars.ContextVar[Console | None] = contextvars.ContextVar(
    "cephcmd_console", default=None
)


def _console_for(color: str | None) -> Console:
    mode = (color or os.getenv(COLOR_ENV) or "auto").lower()
    if mode == "always":
        return Console(stderr=True, force_terminal=True)
    return Console(stderr=True, no_color=(mode == "never"))


def _wants_pretty(pretty: bool | str | None) -> bool:
    """True/False are taken as given; "auto" means only when stderr is a terminal."""
    if isinstance(pretty, bool):
        return pretty
    setting = (pretty or os.getenv(PRETTY_WARNINGS_ENV) or "auto").lower()
    if setting == "auto":
        return sys.stderr.isatty()
    return setting in {"1", "true", "yes", "on"}


@contextmanager
def use_diagnostics(
    *,
    color: str | None = None,
    pretty: bool | str | None = None,
    only_cephcmd: bool = True,
) -> Iterator[Console]:
    console = _console_for(color)
    token = _console_var.set(console)
    with ExitStack() as stack:
        stack.callback(_console_var.reset, token)
        if _wants_pretty(pretty):
            stack.callback(
                install_warnings_bridge(emitter=Emitter(console), only_cephcmd=only_cephcmd)
            )
        yield console


def active_console() -> Console:
    """The Console of the innermost `use_diagnostics` block, or a fresh stderr one."""
    return _console_var.get() or Console(stderr=True)


def print_exception(e: CephCmdException) -> None:
    active_console().print(e)


def run_with_diagnostics(
    *,
    color: str | None = None,
    pretty: bool | str | None = None,
    only_cephcmd: bool = True,
    exit_on_exception: bool = True,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    def deco(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with use_diagnostics(color=color, pretty=pretty, only_cephcmd=only_cephcmd):
                try:
                    return fn(*args, **kwargs)
                except CephCmdException as e:
                    print_exception(e)
                    if not exit_on_exception:
                        raise
            raise SystemExit(2)
        return wrapper
    return deco
