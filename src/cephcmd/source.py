from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path


@dataclass(frozen=True, order=True, slots=True)
class SourceSpan:
    '''[start, end) character offsets into a descriptor document; never empty.'''
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"SourceSpan.start cannot be negative (got {self.start})")
        if self.end <= self.start:
            raise ValueError(f"SourceSpan.end ({self.end}) <= start ({self.start})")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Source:
    """The whole descriptor document, held immutably for the duration of a parse."""

    file: Path | None
    contents: str

    # offset of each line's first character, plus len(contents) as a sentinel
    _line_starts: tuple[int, ...] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @classmethod
    def from_string(cls, text: str) -> Source:
        return cls(None, text)

    @classmethod
    def from_bytes(cls, data: bytes, file: Path | None = None, encoding: str = "utf-8") -> Source:
        """Raises UnicodeDecodeError on undecodable input; callers decide how to recover."""
        return cls(file, data.decode(encoding))

    @classmethod
    def from_file(cls, path_rep: str | Path | PathLike[str], encoding: str = "utf-8") -> Source:
        path = Path(path_rep)
        if not path.exists():
            raise FileNotFoundError(f"No such file: {path}")
        if path.is_dir():
            raise IsADirectoryError(f"Expected a file but found a directory: {path}")
        return cls.from_bytes(path.read_bytes(), file=path, encoding=encoding)

    def __len__(self) -> int:
        return len(self.contents)

    @property
    def label(self) -> str:
        return str(self.file) if self.file is not None else "<string>"

    def slice(self, span: SourceSpan) -> str:
        if span.end > len(self.contents):
            raise ValueError("SourceSpan out of bounds for this Source")
        return self.contents[span.start:span.end]

    def span_between(self, start: int, end: int) -> SourceSpan:
        """
        Span covering [start, end), widened to at least one character and clamped
        to the document so failures at end-of-input still point somewhere.
        """
        n = len(self.contents)
        if n == 0:
            raise ValueError("Cannot build a span into an empty Source")
        start = min(max(start, 0), n - 1)
        return SourceSpan(start, min(max(end, start + 1), n))

    @property
    def line_starts(self) -> tuple[int, ...]:
        if self._line_starts is None:
            # splitlines() agrees with the skipper on \r, \r\n and the unicode separators
            starts = [0]
            for line in self.contents.splitlines(keepends=True):
                starts.append(starts[-1] + len(line))
            object.__setattr__(self, "_line_starts", tuple(starts))
        assert self._line_starts is not None
        return self._line_starts

    def pos_to_line_col(self, pos: int) -> tuple[int, int]:
        '''1-indexed (line, col), editor-style; pos == len(contents) is the EOF caret.'''
        if not 0 <= pos <= len(self.contents):
            raise ValueError(f"pos {pos} out of range [0, {len(self.contents)}]")
        line_idx = bisect.bisect_right(self.line_starts, pos) - 1
        return line_idx + 1, pos - self.line_starts[line_idx] + 1
