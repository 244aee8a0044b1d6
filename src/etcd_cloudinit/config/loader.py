# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/config/loader.py

import logging
import os
import yaml
from pathlib import Path

from etcd_cloudinit.cloudinit.etcd_plane import EtcdPlaneInput
from .models import NodeBootstrapConfig

log = logging.getLogger("etcd_cloudinit")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_config(path: str | Path) -> NodeBootstrapConfig:
    """
    Load and validate a node bootstrap YAML file.

    Secrets such as the CA key do not have to live in the file: use
    ``${ENV_VAR}`` placeholders and they are resolved from the environment
    before parsing. Unset variables are left as written.
    """
    path = Path(path)
    data = _load_yaml(path)
    log.debug("Loaded bootstrap config from %s", path)
    return NodeBootstrapConfig.model_validate(data)


def build_input(cfg: NodeBootstrapConfig) -> EtcdPlaneInput:
    """Turn a validated config into renderer input. Config files become additional files."""
    return EtcdPlaneInput(
        pre_join_commands=list(cfg.pre_etcdadm_commands),
        post_join_commands=list(cfg.post_etcdadm_commands),
        additional_files=list(cfg.files),
        users=list(cfg.users),
        ntp=cfg.ntp,
        disk_setup=cfg.disk_setup,
        mounts=[list(m) for m in cfg.mounts],
        is_control_plane=cfg.control_plane,
        etcdadm_args=cfg.etcdadm,
        certificates=cfg.certificates,
        join_address=cfg.join_address or "",
        join_retries=cfg.join_retries,
        join_retry_delay=cfg.join_retry_delay,
    )
