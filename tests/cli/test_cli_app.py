import logging
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from etcd_cloudinit.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("etcd_cloudinit")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


def test_render_init_to_file(tmp_path: Path):
    cfg = tmp_path / "node.yaml"
    cfg.write_text("kind: init\npost_etcdadm_commands: [echo done]\n")
    out = tmp_path / "user-data"

    result = runner.invoke(app, ["render", "--config", str(cfg), "--output", str(out)])

    assert result.exit_code == 0, result.output
    body = out.read_bytes()
    assert body.startswith(b"## template: jinja\n#cloud-config\n")
    assert yaml.safe_load(body)["runcmd"][-2:] == [
        "echo done",
        "echo success > /run/cluster-api/bootstrap-success.complete",
    ]


def test_render_join_with_log_dir(tmp_path: Path):
    cfg = tmp_path / "node.yaml"
    cfg.write_text("kind: join\njoin_address: 10.0.0.10:2379\n")
    out = tmp_path / "user-data"
    logs = tmp_path / "logs"

    result = runner.invoke(app, ["render", "-c", str(cfg), "-o", str(out), "--log-dir", str(logs), "--debug"])

    assert result.exit_code == 0, result.output
    assert b"/usr/local/bin/kubeadm-bootstrap-script" in out.read_bytes()
    assert len(list(logs.glob("etcd_cloudinit-*.log"))) == 1


def test_join_without_address_exits_nonzero(tmp_path: Path):
    cfg = tmp_path / "node.yaml"
    cfg.write_text("kind: join\n")
    out = tmp_path / "user-data"

    result = runner.invoke(app, ["render", "-c", str(cfg), "-o", str(out)])

    assert result.exit_code == 1
    assert not out.exists()


def test_invalid_config_exits_nonzero(tmp_path: Path):
    cfg = tmp_path / "node.yaml"
    cfg.write_text("kind: upgrade\n")

    result = runner.invoke(app, ["render", "-c", str(cfg)])

    assert result.exit_code == 1


def test_render_help_describes_every_option():
    result = runner.invoke(app, ["render", "--help"])

    assert result.exit_code == 0
    assert "--debug" in result.output
    assert "Log debug output" in result.output
