"""
cephcmd.emit
============

Output side: the emission profile, the client-binding renderer, and a small
registry of renderers by output format name.
"""

from __future__ import annotations
from importlib import import_module

from cephcmd.emit.profile import DEFAULT_PROFILE, EmitProfile
from cephcmd.emit.render import (
    BindingRenderer,
    Renderer,
    group_by_module,
    py_identifier,
    render_bindings,
    render_command,
    render_module,
)

_REGISTRY: dict[str, str] = {
    "python": "cephcmd.emit.render:BindingRenderer",
    "json": "cephcmd.export:ManifestRenderer",
}

def resolve_renderer(name: str, **kwargs) -> Renderer: # type: ignore
    """
    Instantiate a renderer by output format name.

    Example:
        renderer = resolve_renderer("python", profile=DEFAULT_PROFILE.evolve(skip_obsolete=True))
    """
    try:
        target = _REGISTRY[name]
    except KeyError as e:
        raise KeyError(f"Unknown output format '{name}'. Known: {sorted(_REGISTRY)}") from e
    mod_name, cls_name = target.split(":")
    cls = getattr(import_module(mod_name), cls_name)
    return cls(**kwargs)  # type: ignore

__all__ = [
    "DEFAULT_PROFILE",
    "EmitProfile",
    "BindingRenderer",
    "Renderer",
    "group_by_module",
    "py_identifier",
    "render_bindings",
    "render_command",
    "render_module",
    "resolve_renderer",
]
