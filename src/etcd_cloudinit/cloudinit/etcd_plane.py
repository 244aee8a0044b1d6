# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/etcd_plane.py
from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from etcd_cloudinit.cloudinit.engine import render, render_text
from etcd_cloudinit.cloudinit.errors import BootstrapDataError
from etcd_cloudinit.cloudinit.templates import INIT_TEMPLATE, JOIN_SCRIPT_TEMPLATE, JOIN_TEMPLATE
from etcd_cloudinit.cloudinit.types import File
from etcd_cloudinit.cloudinit.userdata import BootstrapData

log = logging.getLogger("etcd_cloudinit")

STANDARD_INIT_COMMAND = "etcdadm init"
STANDARD_JOIN_COMMAND = "etcdadm join {address}"

RETRIABLE_JOIN_SCRIPT_NAME = "/usr/local/bin/kubeadm-bootstrap-script"
RETRIABLE_JOIN_SCRIPT_OWNER = "root"
RETRIABLE_JOIN_SCRIPT_PERMISSIONS = "0755"

ETCD_CA_CERT_PATH = "/etc/etcd/pki/ca.crt"
ETCD_CA_KEY_PATH = "/etc/etcd/pki/ca.key"


class BootstrapKind(str, Enum):
    INIT = "init"
    JOIN = "join"

    @property
    def template(self) -> str:
        return _KIND_TEMPLATES[self]


_KIND_TEMPLATES = {
    BootstrapKind.INIT: INIT_TEMPLATE,
    BootstrapKind.JOIN: JOIN_TEMPLATE,
}


class EtcdadmArgs(BaseModel):
    version: Optional[str] = None
    release_url: Optional[str] = None
    install_dir: Optional[str] = None
    init_system: Optional[str] = None       # systemd, kubelet
    cipher_suites: Optional[str] = None     # comma separated

    def flags(self) -> List[str]:
        """etcdadm flags for every field that is set, in a fixed order."""
        pairs = [
            ("version", self.version),
            ("release-url", self.release_url),
            ("install-dir", self.install_dir),
            ("init-system", self.init_system),
            ("cipher-suites", self.cipher_suites),
        ]
        return [f"--{flag}={shlex.quote(value)}" for flag, value in pairs if value]


class EtcdCACertificate(BaseModel):
    cert: str = ""
    key: str = ""

    def as_files(self) -> List[File]:
        files: List[File] = []
        if self.cert:
            files.append(File(path=ETCD_CA_CERT_PATH, owner="root:root", permissions="0640", content=self.cert))
        if self.key:
            files.append(File(path=ETCD_CA_KEY_PATH, owner="root:root", permissions="0600", content=self.key))
        return files


def format_init_command(args: EtcdadmArgs) -> str:
    return " ".join([STANDARD_INIT_COMMAND, *args.flags()])


def format_join_command(address: str, args: EtcdadmArgs) -> str:
    if not address:
        raise BootstrapDataError("join requires the address of an existing etcd member")
    command = STANDARD_JOIN_COMMAND.format(address=shlex.quote(address))
    return " ".join([command, *args.flags()])


@dataclass
class EtcdPlaneInput(BootstrapData):
    """Bootstrap data for an etcd member, plus the etcdadm specifics."""
    etcdadm_args: EtcdadmArgs = field(default_factory=EtcdadmArgs)
    certificates: Optional[EtcdCACertificate] = None
    join_address: str = ""
    join_retries: int = 5
    join_retry_delay: int = 15

    # derived by new_init_etcd_plane / new_join_etcd_plane
    etcdadm_init_command: str = field(default="", init=False)
    etcdadm_join_command: str = field(default="", init=False)
    join_script_path: str = field(default=RETRIABLE_JOIN_SCRIPT_NAME, init=False)

    def certificate_files(self) -> List[File]:
        return self.certificates.as_files() if self.certificates else []


def join_script(data: EtcdPlaneInput) -> File:
    """The retriable join script, as a file to write on the machine."""
    if data.join_retries < 1:
        raise BootstrapDataError(f"join_retries must be at least 1, got {data.join_retries}")
    if data.join_retry_delay < 0:
        raise BootstrapDataError(f"join_retry_delay must not be negative, got {data.join_retry_delay}")

    content = render_text(
        "join_script",
        JOIN_SCRIPT_TEMPLATE,
        {
            "join_command": data.etcdadm_join_command,
            "retries": data.join_retries,
            "delay": data.join_retry_delay,
        },
    )
    return File(
        path=RETRIABLE_JOIN_SCRIPT_NAME,
        owner=RETRIABLE_JOIN_SCRIPT_OWNER,
        permissions=RETRIABLE_JOIN_SCRIPT_PERMISSIONS,
        content=content,
    )


def new_init_etcd_plane(data: EtcdPlaneInput) -> bytes:
    """Cloud-config that creates a new etcd cluster on this machine."""
    data.write_files = [*data.certificate_files(), *data.write_files]
    data.prepare()
    data.etcdadm_init_command = format_init_command(data.etcdadm_args)

    log.info(f"generating etcd init cloud-config ({len(data.write_files)} files)")
    return render(BootstrapKind.INIT, BootstrapKind.INIT.template, data)


def new_join_etcd_plane(data: EtcdPlaneInput) -> bytes:
    """
    Cloud-config that joins this machine to the etcd cluster at
    ``data.join_address``.

    The join command is baked into a script that retries it; runcmd calls the
    script, runs the post commands and writes the success sentinel last.
    """
    data.etcdadm_join_command = format_join_command(data.join_address, data.etcdadm_args)
    script = join_script(data)

    data.write_files = [*data.certificate_files(), script, *data.write_files]
    data.prepare()

    log.info(f"generating etcd join cloud-config for {data.join_address} ({len(data.write_files)} files)")
    return render(BootstrapKind.JOIN, BootstrapKind.JOIN.template, data)


def new_etcd_plane(kind: BootstrapKind, data: EtcdPlaneInput) -> bytes:
    if kind is BootstrapKind.INIT:
        return new_init_etcd_plane(data)
    return new_join_etcd_plane(data)
