"""
CLI commands for the vault-agent sidecar.

Thin wrappers over ``agent_inject.core.services.sidecar_*``.
"""

from __future__ import annotations

import json
import sys

import click
import yaml

from agent_inject.core.config.loader import (
    ConfigError,
    load_agent_config,
    load_env_vars,
    normalize_env,
)
from agent_inject.core.services.sidecar_resources import InvalidQuantity


def _parse_env_options(pairs: tuple[str, ...]) -> list[dict[str, str]]:
    """Turn repeated ``--env KEY=VALUE`` options into env entries."""
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--env")
        env[key] = value
    return normalize_env(env, source="--env")


def _fail(message: str, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps({"ok": False, "error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@click.group("sidecar")
def sidecar() -> None:
    """Vault Agent sidecar: render, check, pre-stop hook."""


# ── Render ──────────────────────────────────────────────────────


@sidecar.command("render")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--env",
    "env_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Extra env var for the sidecar (repeatable).",
)
@click.pass_context
def render(ctx: click.Context, as_json: bool, env_pairs: tuple[str, ...]) -> None:
    """Print the sidecar container spec."""
    from agent_inject.core.services.sidecar_container import build_sidecar_container

    config_path = ctx.obj.get("config_path")
    try:
        cfg = load_agent_config(config_path)
        env = load_env_vars(config_path) + _parse_env_options(env_pairs)
        container = build_sidecar_container(cfg, env)
    except (ConfigError, InvalidQuantity) as e:
        _fail(str(e), as_json)
        return

    if as_json:
        click.echo(json.dumps(container.to_dict(), indent=2))
    else:
        click.echo(yaml.safe_dump(container.to_dict(), sort_keys=False), nl=False)


# ── Check ───────────────────────────────────────────────────────


@sidecar.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Validate agent-inject.yml and its resource quantities."""
    from agent_inject.core.services.sidecar_container import build_volume_mounts
    from agent_inject.core.services.sidecar_resources import build_resources

    try:
        cfg = load_agent_config(ctx.obj.get("config_path"))
        resources = build_resources(cfg)
    except (ConfigError, InvalidQuantity) as e:
        _fail(str(e), as_json)
        return

    mounts = build_volume_mounts(cfg)

    if as_json:
        click.echo(json.dumps({
            "ok": True,
            "image": cfg.image_name,
            "resources": resources.to_dict(),
            "volume_mounts": [m.to_dict() for m in mounts],
            "revoke_on_shutdown": cfg.revoke_on_shutdown,
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Image: {cfg.image_name}")
    res = resources.to_dict()
    for side in ("limits", "requests"):
        values = res.get(side, {})
        shown = ", ".join(f"{k}={v}" for k, v in values.items()) or "unset"
        click.echo(f"   {side.capitalize()}: {shown}")
    click.echo(f"   Mounts: {', '.join(m.mount_path for m in mounts)}")
    if cfg.revoke_on_shutdown:
        click.echo(f"   Revoke on shutdown: yes (grace {cfg.revoke_grace}s)")
    else:
        click.echo("   Revoke on shutdown: no")


# ── Pre-stop ────────────────────────────────────────────────────


@sidecar.command("prestop")
@click.pass_context
def prestop(ctx: click.Context) -> None:
    """Print the pre-stop revoke command."""
    from agent_inject.core.services.sidecar_lifecycle import build_lifecycle_hook

    try:
        cfg = load_agent_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        _fail(str(e), as_json=False)
        return

    hook = build_lifecycle_hook(cfg)
    if hook.is_empty:
        click.secho("No pre-stop hook (revoke_on_shutdown is off)", fg="yellow")
        return

    click.echo(hook.pre_stop[-1])
