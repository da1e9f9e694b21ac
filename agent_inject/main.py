"""
Vault Agent Inject: CLI entrypoint.

Usage:
    python -m agent_inject.main --help
    python -m agent_inject.main sidecar render
    python -m agent_inject.main --config agent-inject.yml sidecar check
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from agent_inject import __version__
from agent_inject.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="agent-inject")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to agent-inject.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Vault Agent Inject: build the vault-agent sidecar for a pod."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


# ── Register sub-command groups from agent_inject/ui/cli/ ─────────

from agent_inject.ui.cli.sidecar import sidecar

cli.add_command(sidecar)


if __name__ == "__main__":
    cli()
