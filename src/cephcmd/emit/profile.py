from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from cephcmd.constants import DEFAULT_CONFFILE

"""
Data-driven settings for the generated client bindings: where the cluster config
lives, what the absent-value marker is, how deep to indent, and which commands to
leave out.
"""

_DEFAULT_HEADER = '''\
# Generated by cephcmd from a monitor command table. Do not edit.
import json
import os
import re
import uuid
import warnings

import rados


class CephError(Exception):
    def __init__(self, cmd, msg):
        super().__init__(msg)
        self.cmd = cmd
        self.msg = msg


def validator(value, valid_type, valid_range):
    items = value if valid_type is list else [value]
    for item in items:
        if item not in valid_range:
            raise ValueError("{!r} is not one of {!r}".format(item, valid_range))
'''


@dataclass(frozen=True, slots=True)
class EmitProfile:
    # --- cluster connection ---
    conffile: str = DEFAULT_CONFFILE
    base_class: str = "object"

    # --- layout ---
    indent: str = "    "
    absent: str = "None"  # default for optional parameters; also the "not supplied" test
    header: str = _DEFAULT_HEADER

    # --- selection ---
    skip_obsolete: bool = False

    def evolve(self, **overrides: Any) -> EmitProfile:
        _validate_override_keys(overrides)
        return replace(self, **overrides)


def _validate_override_keys(overrides: Mapping[str, Any] | None) -> None:
    if not overrides:
        return
    allowed = {f.name for f in fields(EmitProfile)}
    unknown = [k for k in overrides.keys() if k not in allowed]
    if unknown:
        raise KeyError("Unknown EmitProfile override keys: " + ", ".join(sorted(unknown)))


DEFAULT_PROFILE = EmitProfile()


def escape_docstring(s: str) -> str:
    """Content safe to place inside a triple-double-quoted docstring."""
    return s.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
