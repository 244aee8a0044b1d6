# src/etcd_cloudinit/cli/app.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from etcd_cloudinit.cloudinit.errors import CloudInitError
from etcd_cloudinit.cloudinit.etcd_plane import new_etcd_plane
from etcd_cloudinit.config.loader import build_input, load_config
from etcd_cloudinit.logging.log import init_logging


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="etcd cloud-config generator")


@app.callback()
def main() -> None:
    """Render cloud-init documents that bootstrap etcd members with etcdadm."""


@app.command()
def render(
    config: Path = typer.Option(..., "--config", "-c", exists=True, dir_okay=False, help="Node bootstrap YAML"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also keep a full debug log here"),
    debug: bool = typer.Option(False, "--debug", help="Log debug output to the console"),
):
    """Render the init or join cloud-config described by CONFIG."""
    logger, run_id, _ = init_logging(base_dir=log_dir, verbose=debug)

    try:
        cfg = load_config(config)
        document = new_etcd_plane(cfg.kind, build_input(cfg))
    except (CloudInitError, ValidationError) as e:
        logger.debug(f"run {run_id} failed", exc_info=True)
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output is None:
        sys.stdout.buffer.write(document)
        sys.stdout.flush()
    else:
        output.write_bytes(document)
        logger.info(f"wrote {cfg.kind.value} cloud-config to {output}")


if __name__ == "__main__":
    app()
