"""
cephcmd.descriptor
==================

The descriptor-language front end: framing, quoted fields, flag lists,
signatures and the per-type attribute grammars.
"""

from __future__ import annotations

from cephcmd.descriptor.command import parse_command, parse_document
from cephcmd.descriptor.model import (
    CephChoices,
    CephEntityAddr,
    CephFilepath,
    CephFloat,
    CephFragment,
    CephInt,
    CephIPAddr,
    CephName,
    CephObjectname,
    CephOsdName,
    CephPgid,
    CephPoolname,
    CephPrefix,
    CephSocketpath,
    CephString,
    CephUUID,
    Command,
    ParamRejection,
    ParamType,
    Signature,
    Unknown,
    Variant,
)
from cephcmd.descriptor.signature import parse_signature, render_signature

__all__ = [
    "parse_command",
    "parse_document",
    "parse_signature",
    "render_signature",
    "Command",
    "Signature",
    "ParamType",
    "ParamRejection",
    "Variant",
    "CephInt",
    "CephFloat",
    "CephString",
    "CephSocketpath",
    "CephIPAddr",
    "CephEntityAddr",
    "CephPoolname",
    "CephObjectname",
    "CephPgid",
    "CephName",
    "CephOsdName",
    "CephChoices",
    "CephFilepath",
    "CephFragment",
    "CephUUID",
    "CephPrefix",
    "Unknown",
]
