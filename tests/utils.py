from __future__ import annotations

from cephcmd.core import Availability, Module, Permissions
from cephcmd.descriptor.model import Command, ParamType, Signature

PG_DUMP_POOLS = 'COMMAND("pg dump_pools_json", "show pg pools info in json only", "pg", "r", "cli,rest")'

MON_SCRUB = (
    'COMMAND_WITH_FLAG("scrub", "scrub the monitor stores (DEPRECATED)", '
    '"mon", "rw", "cli,rest", FLAG(DEPRECATED))'
)

OSD_POOL_SET = (
    'COMMAND("osd pool set " \\\n'
    '\t"name=pool,type=CephPoolname " \\\n'
    '\t"name=var,type=CephChoices,strings=size|min_size|crush_ruleset " \\\n'
    '\t"name=val,type=CephString", \\\n'
    '\t"set pool parameter <var> to <val>", "osd", "rw", "cli,rest")'
)

# a small MonCommands.h-shaped document
DOCUMENT = f"""\
/*
 * Monitor command table.
 */

// placement groups
{PG_DUMP_POOLS}

# monitor
{MON_SCRUB}
{OSD_POOL_SET}
"""


def make_command(
    prefix: str,
    module: Module = Module.OSD,
    parameters: dict[str, ParamType] | None = None,
    **kwargs: object,
) -> Command:
    fields: dict[str, object] = {
        "helpstring": f"{prefix} help",
        "permissions": Permissions(read=True),
        "availability": Availability.BOTH,
    }
    fields.update(kwargs)
    return Command(
        signature=Signature(prefix=prefix, parameters=parameters or {}),
        module=module,
        **fields,  # type: ignore[arg-type]
    )
