# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/types.py

from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class File(BaseModel):
    path: str
    owner: str = ""
    permissions: str = ""
    encoding: Literal["", "base64", "gzip", "gzip+base64"] = ""
    content: str = ""


class User(BaseModel):
    name: str
    gecos: Optional[str] = None
    groups: Optional[str] = None
    home_dir: Optional[str] = None
    inactive: Optional[bool] = None
    shell: Optional[str] = None
    passwd: Optional[str] = None
    primary_group: Optional[str] = None
    lock_password: Optional[bool] = None
    sudo: Optional[str] = None
    ssh_authorized_keys: List[str] = Field(default_factory=list)


class NTP(BaseModel):
    servers: List[str] = Field(default_factory=list)
    enabled: Optional[bool] = None


class Partition(BaseModel):
    device: str                      # e.g. /dev/sdb
    layout: bool                     # true = one partition spanning the disk
    overwrite: Optional[bool] = None
    table_type: Optional[Literal["mbr", "gpt"]] = None


class Filesystem(BaseModel):
    device: str
    filesystem: str                  # ext4, xfs, ...
    label: str
    partition: Optional[str] = None  # auto, any, none or a number
    overwrite: Optional[bool] = None
    replace_fs: Optional[str] = None
    extra_opts: List[str] = Field(default_factory=list)


class DiskSetup(BaseModel):
    partitions: List[Partition] = Field(default_factory=list)
    filesystems: List[Filesystem] = Field(default_factory=list)


# one fstab-style entry: [device, mount point, fs type, options, ...]
MountPoints = List[str]
