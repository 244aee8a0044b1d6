# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/etcd_cloudinit/cloudinit/userdata.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from etcd_cloudinit.cloudinit.types import DiskSetup, File, MountPoints, NTP, User

# "## template: jinja" makes cloud-init run the document through jinja before
# parsing it as YAML.
CLOUD_CONFIG_HEADER = "## template: jinja\n#cloud-config\n"

# Written on success so readiness checks can poll for it. Same path on every
# OS family.
SENTINEL_FILE_COMMAND = "echo success > /run/cluster-api/bootstrap-success.complete"


@dataclass
class BootstrapData:
    """
    Everything a node needs on first boot.

    Build it, call ``prepare()`` exactly once, hand it to the renderer, throw
    it away. ``prepare()`` is not reentrant: a second call appends
    ``additional_files`` to ``write_files`` again.
    """
    pre_join_commands: List[str] = field(default_factory=list)
    post_join_commands: List[str] = field(default_factory=list)
    additional_files: List[File] = field(default_factory=list)
    write_files: List[File] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    ntp: Optional[NTP] = None
    disk_setup: Optional[DiskSetup] = None
    mounts: List[MountPoints] = field(default_factory=list)
    is_control_plane: bool = False

    # set by prepare() only
    header: str = field(default="", init=False)
    completion_signal_command: str = field(default="", init=False)

    def prepare(self) -> None:
        """
        Fill the derived fields.

        Raises BootstrapDataError when the data cannot be rendered. Nothing
        fails here yet, but callers must not assume it never will.
        """
        self.header = CLOUD_CONFIG_HEADER
        self.write_files = [*self.write_files, *self.additional_files]
        self.completion_signal_command = SENTINEL_FILE_COMMAND
