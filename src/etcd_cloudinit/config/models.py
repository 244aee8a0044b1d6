# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/config/models.py

from typing import List, Optional
from pydantic import BaseModel, Field

from etcd_cloudinit.cloudinit.etcd_plane import BootstrapKind, EtcdadmArgs, EtcdCACertificate
from etcd_cloudinit.cloudinit.types import DiskSetup, File, MountPoints, NTP, User


class NodeBootstrapConfig(BaseModel):
    """First-boot configuration of one etcd member, as read from YAML."""

    kind: BootstrapKind = BootstrapKind.INIT
    control_plane: bool = False
    join_address: Optional[str] = None          # required when kind == join

    pre_etcdadm_commands: List[str] = Field(default_factory=list)
    post_etcdadm_commands: List[str] = Field(default_factory=list)
    files: List[File] = Field(default_factory=list)
    users: List[User] = Field(default_factory=list)
    ntp: Optional[NTP] = None
    disk_setup: Optional[DiskSetup] = None
    mounts: List[MountPoints] = Field(default_factory=list)

    etcdadm: EtcdadmArgs = EtcdadmArgs()
    certificates: Optional[EtcdCACertificate] = None

    join_retries: int = Field(default=5, ge=1)
    join_retry_delay: int = Field(default=15, ge=0)
