from __future__ import annotations

import warnings

import pytest
from rich.console import Console

from cephcmd.errors import DocumentParseError
from cephcmd.pretty import active_console, run_with_diagnostics, use_diagnostics
from cephcmd.reporting.diagnostics import (
    Diagnostic,
    Emitter,
    FrameConfig,
    Severity,
    format_plain,
    render_diagnostic,
)
from cephcmd.reporting.warnings_bridge import (
    CephCmdWarning,
    InputWarning,
    TrailingInputWarning,
    install_warnings_bridge,
)
from cephcmd.source import Source, SourceSpan

SRC = Source.from_string('COMMAND("x", "y", "mon", "r", "cli"\nCOMMAND(')

def _diag(**kwargs) -> Diagnostic:
    fields = dict(
        message="malformed command",
        severity=Severity.ERROR,
        span=SourceSpan(30, 35),
        source=SRC,
        code="command-syntax",
    )
    fields.update(kwargs)
    return Diagnostic(**fields)  # type: ignore[arg-type]

def test_format_plain() -> None:
    assert format_plain(_diag()) == "ERROR [command-syntax]: malformed command at <string>:1:31"

def test_render_diagnostic_draws_carets() -> None:
    console = Console(record=True, width=100, color_system=None)
    console.print(render_diagnostic(_diag(notes=("note one",), hint="close it")))
    text = console.export_text()
    assert "ERROR [command-syntax]: malformed command" in text
    assert "^^^^^" in text
    assert "note one" in text
    assert "= hint: close it" in text

def test_exception_renders_like_diagnostic() -> None:
    console = Console(record=True, width=100, color_system=None)
    console.print(DocumentParseError(_diag()))
    assert "1 | COMMAND(" in console.export_text()

def test_emitter_prints_warning_frame() -> None:
    console = Console(record=True, width=100, color_system=None)
    d = _diag(message="odd input", severity=Severity.WARN, span=SourceSpan(0, 7), code="trailing-input")
    Emitter(console).emit(d)
    assert "WARN [trailing-input]: odd input" in console.export_text()

def test_caret_label() -> None:
    console = Console(record=True, width=100, color_system=None)
    console.print(render_diagnostic(_diag(label="expected '\")'")))
    assert "^^^^^ expected '\")'" in console.export_text()

def test_tall_frames_are_elided() -> None:
    src = Source.from_string("".join(f"line {i}\n" for i in range(1, 41)))
    d = _diag(source=src, span=SourceSpan(0, len(src) - 1))
    console = Console(record=True, width=100, color_system=None)
    console.print(render_diagnostic(d, cfg=FrameConfig(max_frame_lines=6)))
    text = console.export_text()
    assert " 1 | line 1" in text
    assert "40 | line 40" in text
    assert ".. | ..." in text
    assert "line 20" not in text

def test_bridge_renders_diagnostic_warnings() -> None:
    console = Console(record=True, width=100, color_system=None)
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        uninstall = install_warnings_bridge(emitter=Emitter(console))
        try:
            warnings.warn(TrailingInputWarning(_diag(severity=Severity.WARN, code="trailing-input")))
        finally:
            uninstall()
    assert "WARN [trailing-input]" in console.export_text()

def test_bridge_prints_plain_cephcmd_warnings_as_headlines() -> None:
    console = Console(record=True, width=100, color_system=None)
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        uninstall = install_warnings_bridge(emitter=Emitter(console))
        try:
            warnings.warn(InputWarning("could not read x.h"))
        finally:
            uninstall()
    assert "WARN [InputWarning]: could not read x.h" in console.export_text()

def test_bridge_uninstall_restores_handler() -> None:
    before = warnings.showwarning
    uninstall = install_warnings_bridge()
    assert warnings.showwarning is not before
    uninstall()
    assert warnings.showwarning is before

def test_diagnostic_warning_is_cephcmd_warning() -> None:
    w = TrailingInputWarning(_diag())
    assert isinstance(w, CephCmdWarning)
    assert str(w) == format_plain(_diag())

def test_run_with_diagnostics_exits_2(monkeypatch, capsys) -> None:
    monkeypatch.setenv("CEPHCMD_COLOR", "never")

    @run_with_diagnostics(pretty=False)
    def script() -> None:
        raise DocumentParseError(_diag())

    with pytest.raises(SystemExit) as ei:
        script()
    assert ei.value.code == 2
    assert "command-syntax" in capsys.readouterr().err

def test_run_with_diagnostics_passes_results_through() -> None:
    @run_with_diagnostics(pretty=False)
    def script(x: int) -> int:
        return x + 1

    assert script(1) == 2

def test_use_diagnostics_installs_bridge_when_asked() -> None:
    before = warnings.showwarning
    with use_diagnostics(pretty=True, color="never") as console:
        assert warnings.showwarning is not before
        assert active_console() is console
    assert warnings.showwarning is before

def test_spanless_diagnostic_on_empty_source() -> None:
    d = _diag(source=Source.from_string(""), span=None)
    console = Console(record=True, width=100, color_system=None)
    console.print(render_diagnostic(d))
    assert "--> <string>:1:1 (empty input)" in console.export_text()
    assert format_plain(d).endswith("at <string>:1:1")
