from __future__ import annotations

import re
import warnings

from cephcmd.descriptor.model import ParamRejection, ParamType, Signature
from cephcmd.descriptor.pairs import tokenize_descriptor
from cephcmd.descriptor.types import build_param, render_descriptor, split_descriptor
from cephcmd.errors import DescriptorError, DuplicateParameterError, ParameterError
from cephcmd.reporting.diagnostics import Diagnostic, Severity
from cephcmd.reporting.warnings_bridge import DuplicateParameterWarning, ParameterWarning
from cephcmd.source import Source, SourceSpan

# Stripped from the raw literal, in this order, before splitting on whitespace.
# Removing "    " after "\n" is what glues continuation fragments back together.
_STRIP_SEQUENCE = ("\\", '"', "\n", "    ")

_TOKEN_RE = re.compile(r"\S+")

_PARAM_MARKER = "name="


def _strip(text: str, offsets: list[int], needle: str) -> tuple[str, list[int]]:
    out: list[str] = []
    out_offsets: list[int] = []
    i = 0
    while i < len(text):
        if text.startswith(needle, i):
            i += len(needle)
            continue
        out.append(text[i])
        out_offsets.append(offsets[i])
        i += 1
    return "".join(out), out_offsets


def clean_signature(raw: str) -> tuple[str, list[int]]:
    """
    Remove backslashes, quotes, newlines and four-space runs from a raw signature
    literal. Returns the cleaned text and, per cleaned character, its offset in `raw`.
    """
    text, offsets = raw, list(range(len(raw)))
    for needle in _STRIP_SEQUENCE:
        text, offsets = _strip(text, offsets, needle)
    return text, offsets


def _span(source: Source, base: int, offsets: list[int], start: int, end: int) -> SourceSpan:
    return source.span_between(base + offsets[start], base + offsets[end - 1] + 1)


def parse_signature(
    raw: str,
    *,
    source: Source | None = None,
    offset: int = 0,
    strict: bool = False,
) -> Signature:
    """
    Split a signature literal into its prefix words and typed parameters.

    `source`/`offset` locate `raw` inside the document for diagnostics. Parameter
    tokens that fail their grammar are dropped with a ParameterWarning (or raise
    ParameterError when `strict`); a repeated name keeps the last definition.
    """
    if source is None:
        source, offset = Source.from_string(raw), 0

    text, offsets = clean_signature(raw)
    prefix: list[str] = []
    parameters: dict[str, ParamType] = {}
    rejected: list[ParamRejection] = []

    for m in _TOKEN_RE.finditer(text):
        token = m.group()
        if _PARAM_MARKER not in token:
            prefix.append(token)
            continue

        token_span = _span(source, offset, offsets, m.start(), m.end())
        try:
            name, type_tag, rest = split_descriptor(tokenize_descriptor(token))
            param = build_param(type_tag, rest)
        except DescriptorError as e:
            span = token_span
            if e.start is not None:
                lo = m.start() + min(e.start, len(token) - 1)
                hi = m.start() + min(max(e.end or e.start + 1, e.start + 1), len(token))
                span = _span(source, offset, offsets, lo, hi)
            diag = Diagnostic(
                message=f"dropping parameter {token!r}: {e.reason}",
                severity=Severity.ERROR if strict else Severity.WARN,
                span=span,
                source=source,
                code="param-rejected",
            )
            if strict:
                raise ParameterError(diag) from e
            warnings.warn(ParameterWarning(diag), stacklevel=2)
            rejected.append(ParamRejection(token=token, reason=e.reason, span=span))
            continue

        if name in parameters:
            diag = Diagnostic(
                message=f"parameter {name!r} is defined more than once",
                severity=Severity.ERROR if strict else Severity.WARN,
                span=token_span,
                source=source,
                code="param-duplicate",
                hint=None if strict else "the last definition is kept",
            )
            if strict:
                raise DuplicateParameterError(diag)
            warnings.warn(DuplicateParameterWarning(diag), stacklevel=2)
        parameters[name] = param

    return Signature(prefix=" ".join(prefix), parameters=parameters, rejected=tuple(rejected))


def render_signature(sig: Signature) -> str:
    """Prefix words followed by one descriptor per parameter; parses back to `sig`."""
    words = [sig.prefix] if sig.prefix else []
    words.extend(render_descriptor(name, p) for name, p in sig.parameters.items())
    return " ".join(words)
