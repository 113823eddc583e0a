from __future__ import annotations

import re

import pytest

from cephcmd.core import Flag, Module, Repeat
from cephcmd.descriptor.command import parse_command, parse_document
from cephcmd.descriptor.model import CephChoices, CephFloat, CephInt, CephString, CephUUID, ParamType
from cephcmd.emit import DEFAULT_PROFILE, BindingRenderer, EmitProfile, Renderer, resolve_renderer
from cephcmd.emit.profile import escape_docstring
from cephcmd.emit.render import group_by_module, help_text, py_identifier, render_bindings, render_command
from cephcmd.export import ManifestRenderer
from cephcmd.reporting.warnings_bridge import EmitWarning

from tests.utils import DOCUMENT, MON_SCRUB, OSD_POOL_SET, make_command

@pytest.mark.parametrize(
    "name,ident",
    [
        ("pool", "pool"),
        ("pool-name", "pool_name"),
        ("osd pool set", "osd_pool_set"),
        ("class", "class_"),
        ("uuid", "uuid_"),
        ("cmd", "cmd_"),
        ("2fa", "_2fa"),
    ]
)
def test_py_identifier(name: str, ident: str) -> None:
    assert py_identifier(name) == ident

def test_help_text_joins_fragments() -> None:
    assert help_text('first half " \\\n\t"second half') == "first half second half"
    assert help_text("plain") == "plain"

def test_escape_docstring() -> None:
    assert escape_docstring('say """hi"""') == 'say \\"\\"\\"hi\\"\\"\\"'
    assert escape_docstring("a\\b") == "a\\\\b"

def test_render_command_signature_and_payload() -> None:
    text = render_command(parse_command(OSD_POOL_SET))
    lines = text.splitlines()
    assert lines[0] == "def osd_pool_set(self, pool, var, val):"
    assert "    set pool parameter <var> to <val>" in lines
    assert "    :param var: CephChoices" in lines
    assert "        'prefix': 'osd pool set'," in lines
    assert "        'var': var," in lines
    assert "    validator(value=var, valid_type=str, valid_range=['size', 'min_size', 'crush_ruleset'])" in lines
    assert lines[-1] == "    return self._run(cmd)"

def test_optional_parameters_default_to_absent() -> None:
    cmd = make_command(
        "osd reweight",
        parameters={
            "id": ParamType(True, CephInt(min=0)),
            "weight": ParamType(False, CephFloat(min=0.0, max=1.0)),
        },
    )
    text = render_command(cmd)
    assert text.splitlines()[0] == "def osd_reweight(self, id, weight=None):"
    assert "    if id < 0:" in text
    assert "    if weight is not None:" in text
    assert "        if weight > 1.0:" in text
    assert "    if weight is not None:\n        cmd['weight'] = weight" in text

def test_absent_marker_follows_profile() -> None:
    cmd = make_command("osd out", parameters={"ids": ParamType(False, CephString(repeats=Repeat.MANY))})
    text = render_command(cmd, DEFAULT_PROFILE.evolve(absent="NOTHING", indent="  "))
    assert text.splitlines()[0] == "def osd_out(self, ids=NOTHING):"
    assert "  if ids is not NOTHING:" in text

def test_uuid_payload_is_stringified() -> None:
    cmd = make_command("osd create", parameters={"uuid": ParamType(False, CephUUID())})
    text = render_command(cmd)
    assert text.splitlines()[0] == "def osd_create(self, uuid_=None):"
    assert "cmd['uuid'] = str(uuid_)" in text
    assert "isinstance(uuid_, uuid.UUID)" in text

def test_goodchars_check() -> None:
    cmd = make_command("config-key put", Module.CONFIG_KEY, {"key": ParamType(True, CephString(goodchars="A-Za-z0-9-_.'"))})
    text = render_command(cmd)
    assert "re.fullmatch(\"[A-Za-z0-9-_.']*\", item) for item in [key]" in text
    compile("class C:\n" + "\n".join("    " + line for line in text.splitlines()), "<method>", "exec")

def test_deprecated_command_warns() -> None:
    text = render_command(parse_command(MON_SCRUB))
    assert "    warnings.warn('scrub is deprecated', DeprecationWarning, stacklevel=2)" in text

def test_group_by_module_keeps_first_appearance_order() -> None:
    cmds = [make_command("a", Module.MON), make_command("b", Module.OSD), make_command("c", Module.MON)]
    groups = group_by_module(cmds)
    assert list(groups) == [Module.MON, Module.OSD]
    assert [c.signature.prefix for c in groups[Module.MON]] == ["a", "c"]

def test_bindings_compile() -> None:
    text = BindingRenderer().render_commands(parse_document(DOCUMENT))
    assert "class PlacementGroupCommand(object):" in text
    assert "class MonitorCommand(object):" in text
    assert "class OsdCommand(object):" in text
    assert "def __init__(self, conffile='/etc/ceph/ceph.conf'):" in text
    compile(text, "<bindings>", "exec")

def test_binding_renderer_renames_duplicates() -> None:
    cmds = [make_command("osd pool-get"), make_command("osd pool get")]
    text = BindingRenderer().render_commands(cmds)
    assert "def osd_pool_get(self):" in text
    assert "def osd_pool_get_2(self):" in text

def test_skip_obsolete() -> None:
    cmds = [make_command("osd old", flags=(Flag.OBSOLETE,)), make_command("osd new")]
    assert "def osd_old(" in render_bindings(cmds)
    text = render_bindings(cmds, DEFAULT_PROFILE.evolve(skip_obsolete=True))
    assert "def osd_old(" not in text
    assert "def osd_new(" in text

def test_conffile_override() -> None:
    profile = DEFAULT_PROFILE.evolve(conffile="/tmp/ceph.conf")
    text = render_bindings([make_command("osd stat")], profile)
    assert "def __init__(self, conffile='/tmp/ceph.conf'):" in text

def test_profile_rejects_unknown_overrides() -> None:
    with pytest.raises(KeyError):
        EmitProfile().evolve(conf="x")

def test_renderer_registry() -> None:
    assert isinstance(resolve_renderer("python"), BindingRenderer)
    assert isinstance(resolve_renderer("json"), ManifestRenderer)
    assert isinstance(resolve_renderer("python"), Renderer)
    assert isinstance(resolve_renderer("json"), Renderer)
    with pytest.raises(KeyError):
        resolve_renderer("yaml")

def test_choices_many_validator() -> None:
    cmd = make_command(
        "osd set-group",
        parameters={"flags": ParamType(True, CephChoices(("noup", "nodown"), repeats=Repeat.MANY))},
    )
    assert "validator(value=flags, valid_type=list, valid_range=['noup', 'nodown'])" in render_command(cmd)

def test_base_class_override() -> None:
    text = render_bindings([make_command("osd stat")], DEFAULT_PROFILE.evolve(base_class="ClientBase"))
    assert "class OsdCommand(ClientBase):" in text

def _method_names(text: str) -> list[str]:
    body = text.split("class OsdCommand(", 1)[1]
    return re.findall(r"^    def (\w+)\(", body, flags=re.MULTILINE)

def test_folded_argument_names_stay_distinct() -> None:
    cmd = make_command(
        "osd x",
        parameters={"pool-id": ParamType(True, CephInt()), "pool_id": ParamType(False, CephInt())},
    )
    text = render_command(cmd)
    assert text.splitlines()[0] == "def osd_x(self, pool_id, pool_id_2=None):"
    assert "        'pool-id': pool_id," in text
    assert "        cmd['pool_id'] = pool_id_2" in text
    compile(render_bindings([cmd]), "<bindings>", "exec")

def test_prefixes_folding_to_one_identifier_get_distinct_methods() -> None:
    text = BindingRenderer().render_commands([make_command("osd a.b"), make_command("osd a_b")])
    assert _method_names(text) == ["__init__", "_run", "osd_a_b", "osd_a_b_2"]
    compile(text, "<bindings>", "exec")

def test_repeated_prefix_methods_never_shadow() -> None:
    text = BindingRenderer().render_commands([make_command("osd pool get")] * 3)
    assert _method_names(text)[2:] == ["osd_pool_get", "osd_pool_get_2", "osd_pool_get_2_2"]

def test_parameter_named_prefix_is_left_out() -> None:
    cmd = make_command("osd z", parameters={"prefix": ParamType(True, CephString())})
    with pytest.warns(EmitWarning, match="would overwrite the command prefix"):
        text = render_command(cmd)
    assert text.splitlines()[0] == "def osd_z(self):"
    assert "'prefix': prefix" not in text
    assert "        'prefix': 'osd z'," in text
