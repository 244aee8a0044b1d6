from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from etcd_cloudinit.cloudinit.etcd_plane import BootstrapKind
from etcd_cloudinit.config.loader import build_input, load_config


def _write(tmp_path: Path, text: str) -> Path:
    f = tmp_path / "node.yaml"
    f.write_text(textwrap.dedent(text))
    return f


def test_load_config_minimal_ok(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "kind: init\n"))
    assert cfg.kind is BootstrapKind.INIT
    assert cfg.files == []
    assert cfg.join_retries == 5


def test_empty_file_uses_defaults(tmp_path: Path):
    cfg = load_config(_write(tmp_path, ""))
    assert cfg.kind is BootstrapKind.INIT
    assert cfg.ntp is None


def test_load_config_full_join(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("ETCD_CA_KEY", "secret-key")
    cfg = load_config(_write(tmp_path, """
        kind: join
        join_address: https://10.0.0.10:2379
        control_plane: true
        pre_etcdadm_commands:
          - swapoff -a
        files:
          - path: /etc/sysctl.d/99-etcd.conf
            owner: root:root
            permissions: "0644"
            content: |
              vm.swappiness = 0
        users:
          - name: etcd
            ssh_authorized_keys: ["ssh-ed25519 AAAA test"]
        ntp:
          enabled: true
          servers: [0.pool.ntp.org]
        disk_setup:
          partitions:
            - device: /dev/sdb
              layout: true
          filesystems:
            - device: /dev/sdb1
              filesystem: ext4
              label: etcd
        mounts:
          - [/dev/sdb1, /var/lib/etcd]
        etcdadm:
          version: 3.5.9
        certificates:
          cert: ca-cert
          key: ${ETCD_CA_KEY}
        join_retries: 3
    """))

    assert cfg.kind is BootstrapKind.JOIN
    assert cfg.certificates.key == "secret-key"
    assert cfg.etcdadm.version == "3.5.9"
    assert cfg.disk_setup.partitions[0].layout is True

    data = build_input(cfg)
    assert data.join_address == "https://10.0.0.10:2379"
    assert data.is_control_plane is True
    assert data.pre_join_commands == ["swapoff -a"]
    assert [f.path for f in data.additional_files] == ["/etc/sysctl.d/99-etcd.conf"]
    assert data.write_files == []
    assert data.mounts == [["/dev/sdb1", "/var/lib/etcd"]]
    assert data.join_retries == 3
    assert data.header == ""


def test_invalid_config_raises_validation_error(tmp_path: Path):
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, "kind: upgrade\n"))
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, "join_retries: 0\n"))
