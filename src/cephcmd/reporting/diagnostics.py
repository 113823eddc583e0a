"""
cephcmd diagnostics: the record shared by parse failures and dropped
parameters, its plain one-line form, and a rich code-frame renderer.

A descriptor command can run over a dozen continuation lines, so frames are
elided in the middle when the span is taller than `FrameConfig.max_frame_lines`,
and the caret row can carry a short label such as what the parser expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from cephcmd.source import Source, SourceSpan

__all__ = [
    "Severity",
    "Diagnostic",
    "FrameConfig",
    "Theme",
    "Emitter",
    "format_plain",
    "render_diagnostic",
]


class Severity(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    severity: Severity
    span: SourceSpan | None  # None only when the source is empty
    source: Source
    code: str | None = None
    label: str | None = None  # printed after the carets
    notes: tuple[str, ...] = ()
    hint: str | None = None

    @property
    def location(self) -> str:
        line, col = self.source.pos_to_line_col(self.span.start if self.span else 0)
        return f"{self.source.label}:{line}:{col}"

    @property
    def headline(self) -> str:
        code = f" [{self.code}]" if self.code else ""
        return f"{self.severity.upper()}{code}: {self.message}"


def format_plain(d: Diagnostic) -> str:
    """`SEVERITY [code]: message at file:line:col`, used by str() of errors and warnings."""
    return f"{d.headline} at {d.location}"


@dataclass(frozen=True, slots=True)
class FrameConfig:
    context_lines: int = 1
    tab_width: int = 4
    max_frame_lines: int = 12


@dataclass(frozen=True, slots=True)
class Theme:
    info: str = "bold cyan"
    warn: str = "bold yellow"
    error: str = "bold red"
    location: str = "italic"
    gutter: str = "dim"
    caret: str = "bold red"
    label: str = "red"
    aside: str = "dim"

    def severity(self, sev: Severity) -> str:
        return {Severity.INFO: self.info, Severity.WARN: self.warn, Severity.ERROR: self.error}[sev]


def _source_line(source: Source, line_no: int) -> str:
    starts = source.line_starts
    lo = int(starts[line_no - 1])
    hi = int(starts[line_no]) if line_no < len(starts) else len(source.contents)
    return source.contents[lo:hi].rstrip("\r\n\u2028\u2029")


def _visible_lines(first: int, last: int, cfg: FrameConfig) -> list[int | None]:
    """Line numbers to print; None marks an elided run."""
    lines: list[int | None] = list(range(first, last + 1))
    if len(lines) <= cfg.max_frame_lines:
        return lines
    head = cfg.max_frame_lines // 2
    tail = cfg.max_frame_lines - head - 1
    return [*lines[:head], None, *lines[len(lines) - tail:]]


def _code_frame(d: Diagnostic, span: SourceSpan, theme: Theme, cfg: FrameConfig) -> RenderableType:
    source = d.source
    s_line, s_col = source.pos_to_line_col(span.start)
    e_line, e_col = source.pos_to_line_col(span.end)
    if e_col == 1 and e_line > s_line:
        # span ends on a line break; underline up to the end of the previous line
        e_line -= 1
        e_col = len(_source_line(source, e_line)) + 1

    last_line = max(1, len(source.line_starts) - 1)
    first = max(1, s_line - cfg.context_lines)
    last = min(last_line, e_line + cfg.context_lines)
    width = len(str(last))

    body = Text()
    for i, line_no in enumerate(_visible_lines(first, last, cfg)):
        if i:
            body.append("\n")
        if line_no is None:
            body.append(f"{'.' * width} | ...", style=theme.gutter)
            continue

        raw = _source_line(source, line_no)
        body.append(f"{line_no:>{width}} | ", style=theme.gutter)
        body.append(raw.expandtabs(cfg.tab_width))
        if not s_line <= line_no <= e_line:
            continue

        lo = s_col if line_no == s_line else 1
        hi = e_col if line_no == e_line else len(raw) + 1
        lo_disp = len(raw[: lo - 1].expandtabs(cfg.tab_width))
        hi_disp = len(raw[: hi - 1].expandtabs(cfg.tab_width))
        body.append("\n" + " " * (width + 3 + lo_disp))
        body.append("^" * max(1, hi_disp - lo_disp), style=theme.caret)
        if d.label and line_no == e_line:
            body.append(f" {d.label}", style=theme.label)

    title = Text(d.location, style=theme.location)
    return Panel.fit(body, title=title, border_style=theme.severity(d.severity), padding=(0, 1))


def render_diagnostic(
    d: Diagnostic,
    *,
    theme: Theme | None = None,
    cfg: FrameConfig | None = None,
) -> RenderableType:
    theme = theme or Theme()
    cfg = cfg or FrameConfig()

    parts: list[RenderableType] = [
        Text(d.headline, style=theme.severity(d.severity)),
        Rule(style=theme.severity(d.severity)),
    ]
    if d.span is not None:
        parts.append(_code_frame(d, d.span, theme, cfg))
    else:
        parts.append(Text(f"  --> {d.location} (empty input)", style=theme.location))
    asides = Text()
    for note in d.notes:
        asides.append("\n  = note: ", style=theme.aside)
        asides.append(note)
    if d.hint:
        asides.append("\n  = hint: ", style=theme.aside)
        asides.append(d.hint)
    if asides.plain:
        parts.append(asides)
    return Group(*parts)


class Emitter:
    """Prints diagnostics to one rich Console, shared by the warnings bridge and the CLI."""

    def __init__(
        self,
        console: Console | None = None,
        theme: Theme | None = None,
        cfg: FrameConfig | None = None,
    ):
        self.console = console or Console(stderr=True)
        self.theme = theme or Theme()
        self.cfg = cfg or FrameConfig()

    def emit(self, d: Diagnostic) -> None:
        self.console.print(render_diagnostic(d, theme=self.theme, cfg=self.cfg))
