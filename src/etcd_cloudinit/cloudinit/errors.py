# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/errors.py
from __future__ import annotations

from enum import Enum


class CloudInitError(RuntimeError):
    """Base class for cloud-config generation failures."""


class BootstrapDataError(CloudInitError):
    """Raised when bootstrap input cannot be turned into a document."""


class RenderStage(str, Enum):
    PARSE = "parse"
    EXECUTE = "execute"


class TemplateRenderError(CloudInitError):
    """
    A template failed while building a document.

    ``stage`` says whether parsing or execution failed and ``template_name``
    is the template that is blamed. The jinja2 error is chained as
    ``__cause__``.
    """

    verb = "render"

    def __init__(self, stage: RenderStage, template_name: str, reason: object):
        self.stage = stage
        self.template_name = template_name
        self.reason = str(reason)
        super().__init__(f"failed to {self.verb} {template_name} template: {self.reason}")


class TemplateParseError(TemplateRenderError):
    verb = "parse"

    def __init__(self, template_name: str, reason: object):
        super().__init__(RenderStage.PARSE, template_name, reason)


class TemplateExecutionError(TemplateRenderError):
    verb = "generate"

    def __init__(self, template_name: str, reason: object):
        super().__init__(RenderStage.EXECUTE, template_name, reason)
