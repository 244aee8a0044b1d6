# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/engine.py
from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from jinja2 import DictLoader, Environment, StrictUndefined, Template, TemplateSyntaxError

from etcd_cloudinit.cloudinit.errors import TemplateExecutionError, TemplateParseError
from etcd_cloudinit.cloudinit.templates import SUB_TEMPLATES

log = logging.getLogger("etcd_cloudinit")


def indent_block(spaces: int, text: str) -> str:
    """
    Prefix every line of ``text`` with ``spaces`` spaces.

    Lines are split on "\\n" only. The number of lines is unchanged, blank
    lines included, so the result can be dropped into a YAML block scalar at
    any depth.
    """
    pad = " " * spaces
    return pad + ("\n" + pad).join(text.split("\n"))


# Shared by every render. Read-only; each environment copies it into its
# globals.
TEMPLATE_FUNCTIONS: Mapping[str, Any] = MappingProxyType({
    "indent_block": indent_block,
})


def _new_environment(sources: Dict[str, str]) -> Environment:
    env = Environment(
        loader=DictLoader(sources),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(TEMPLATE_FUNCTIONS)
    return env


def _kind_name(kind: Any) -> str:
    name = kind.value if isinstance(kind, Enum) else kind
    if not isinstance(name, str) or not name:
        raise ValueError(f"template kind must be a non-empty string, got {kind!r}")
    return name


def template_context(data: Any) -> Dict[str, Any]:
    """Top-level names visible to a template: the fields of ``data``."""
    if isinstance(data, Mapping):
        return dict(data)
    if is_dataclass(data):
        return {f.name: getattr(data, f.name) for f in fields(data)}
    raise TypeError(f"cannot build a template context from {type(data).__name__}")


def _parse(env: Environment, name: str) -> Template:
    try:
        return env.get_template(name)
    except TemplateSyntaxError as e:
        raise TemplateParseError(name, e) from e


def render(
    kind: Any,
    template: str,
    data: Any,
    *,
    sub_templates: Iterable[Tuple[str, str]] = SUB_TEMPLATES,
) -> bytes:
    """
    Render the ``kind`` template, with every sub-template importable, against
    ``data``.

    ``data`` must already be prepared. A new environment is built for each
    call, so renders share nothing.

    Raises TemplateParseError naming the template that failed to parse, or
    TemplateExecutionError naming ``kind`` when evaluation fails.
    """
    name = _kind_name(kind)
    sub_templates = tuple(sub_templates)

    sources = dict(sub_templates)
    if name in sources:
        raise ValueError(f"template kind {name!r} clashes with a sub-template name")
    sources[name] = template

    env = _new_environment(sources)
    for sub_name, _ in sub_templates:
        _parse(env, sub_name)
    top = _parse(env, name)

    context = template_context(data)
    log.debug(f"rendering {name} cloud-config")
    try:
        text = top.render(context)
    except Exception as e:
        raise TemplateExecutionError(name, e) from e

    out = text.encode("utf-8")
    log.debug(f"rendered {name} cloud-config ({len(out)} bytes)")
    return out


def render_text(name: str, template: str, context: Mapping[str, Any]) -> str:
    """Render a standalone template, such as a script body, with the shared functions."""
    env = _new_environment({name: template})
    tmpl = _parse(env, name)
    try:
        return tmpl.render(**context)
    except Exception as e:
        raise TemplateExecutionError(name, e) from e
