"""
cephcmd.constants
=================

Single place for keywords, environment variable names and schema versions, so
the parser, the emitter and the CLI never duplicate strings like "COMMAND(".
"""

from __future__ import annotations

# ---- descriptor language ----------------------------------------------------

COMMAND_TAG = "COMMAND("
COMMAND_WITH_FLAG_TAG = "COMMAND_WITH_FLAG("
FLAG_TAG = "FLAG("
BARE_NOFORWARD = "NOFORWARD"

# keys every parameter descriptor carries, interpreted before the type table
NAME_KEY = "name"
TYPE_KEY = "type"
REQ_KEY = "req"

# payload key the generated bindings reserve for the command prefix
PREFIX_KEY = "prefix"

# ---- emission ---------------------------------------------------------------

DEFAULT_CONFFILE = "/etc/ceph/ceph.conf"
DUPLICATE_SUFFIX = "_2"
RETURN_DOC = ":return: (int ret, string outbuf, string outs)"

# ---- environment ------------------------------------------------------------

COLOR_ENV = "CEPHCMD_COLOR"
PRETTY_WARNINGS_ENV = "CEPHCMD_PRETTY_WARNINGS"

# ---- schema versions --------------------------------------------------------

MANIFEST_SCHEMA = 0  # version of the JSON manifest written by cephcmd.export
