"""Command line: read a descriptor document, print bindings or a manifest, or fail."""

from __future__ import annotations

import argparse
import sys
import warnings
from collections.abc import Sequence
from pathlib import Path

from cephcmd.constants import DEFAULT_CONFFILE
from cephcmd.descriptor.command import parse_document
from cephcmd.emit import DEFAULT_PROFILE, resolve_renderer
from cephcmd.errors import CephCmdException
from cephcmd.pretty import print_exception, use_diagnostics
from cephcmd.reporting.warnings_bridge import InputWarning
from cephcmd.source import Source


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cephcmd",
        description="Parse a monitor command descriptor table and emit client bindings.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="Descriptor document to read; '-' or nothing reads stdin",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        choices=("python", "json"),
        default="python",
        help="Emit Python client bindings (default) or a JSON manifest",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on rejected or repeated parameters instead of warning",
    )
    parser.add_argument(
        "--conffile",
        default=DEFAULT_CONFFILE,
        help=f"Cluster config path baked into the bindings (default: {DEFAULT_CONFFILE})",
    )
    parser.add_argument(
        "--skip-obsolete",
        action="store_true",
        help="Leave commands flagged OBSOLETE out of the bindings",
    )
    parser.add_argument(
        "--color",
        choices=("auto", "always", "never"),
        default=None,
        help="Diagnostic coloring (default: $CEPHCMD_COLOR or auto)",
    )
    return parser


def read_input(path: str) -> Source:
    """
    Whole input as a Source. A read or decode failure is reported as an
    InputWarning and parsing continues on whatever could be read.
    """
    file = None if path == "-" else Path(path)
    data = b""
    try:
        data = sys.stdin.buffer.read() if file is None else file.read_bytes()
    except OSError as e:
        warnings.warn(InputWarning(f"could not read {path}: {e}"), stacklevel=2)
    try:
        return Source.from_bytes(data, file=file)
    except UnicodeDecodeError as e:
        warnings.warn(InputWarning(f"{path} is not valid UTF-8 ({e.reason}); undecodable bytes replaced"), stacklevel=2)
        return Source(file, data.decode("utf-8", errors="replace"))


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    profile = DEFAULT_PROFILE.evolve(conffile=args.conffile, skip_obsolete=args.skip_obsolete)

    with use_diagnostics(color=args.color):
        source = read_input(args.path)
        try:
            commands = parse_document(source, strict=args.strict)
        except CephCmdException as e:
            print_exception(e)
            return 2
        renderer = resolve_renderer(args.fmt, profile=profile)
        sys.stdout.write(renderer.render_commands(commands))
    return 0
