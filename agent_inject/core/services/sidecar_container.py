"""
Sidecar container: compose the vault-agent container for a mutated pod.

Pure function of the agent config and the caller's env vars: a new
mount list is built on every call and nothing is kept between calls.
"""

from __future__ import annotations

import logging
from typing import Any

from agent_inject.core.models.agent import AgentConfig
from agent_inject.core.models.container import ContainerSpec, SecurityContext, VolumeMount
from agent_inject.core.services.sidecar_common import (
    CONFIG_MAP_CONTAINER_ARG,
    CONFIG_VOLUME_NAME,
    CONFIG_VOLUME_PATH,
    CONTAINER_COMMAND,
    CONTAINER_NAME,
    DEFAULT_CONTAINER_ARG,
    RUN_AS_GROUP,
    RUN_AS_USER,
    SECRET_VOLUME_NAME,
    SECRET_VOLUME_PATH,
    TLS_SECRET_VOLUME_NAME,
    TLS_SECRET_VOLUME_PATH,
)
from agent_inject.core.services.sidecar_lifecycle import build_lifecycle_hook
from agent_inject.core.services.sidecar_resources import build_resources

logger = logging.getLogger(__name__)


def build_volume_mounts(cfg: AgentConfig) -> list[VolumeMount]:
    """Mounts for the sidecar, in a stable order.

    Always: rendered secrets (read-write), then the service account
    token (read-only). Then the config-map mount if a ConfigMap is used,
    then the TLS secret mount if a TLS secret is set.
    """
    mounts = [
        VolumeMount(name=SECRET_VOLUME_NAME, mount_path=SECRET_VOLUME_PATH, read_only=False),
        VolumeMount(
            name=cfg.service_account_name,
            mount_path=cfg.service_account_path,
            read_only=True,
        ),
    ]

    if cfg.uses_config_map:
        mounts.append(
            VolumeMount(name=CONFIG_VOLUME_NAME, mount_path=CONFIG_VOLUME_PATH, read_only=True)
        )

    if cfg.uses_tls_secret:
        mounts.append(
            VolumeMount(name=TLS_SECRET_VOLUME_NAME, mount_path=TLS_SECRET_VOLUME_PATH, read_only=True)
        )

    return mounts


def container_arg(cfg: AgentConfig) -> str:
    """Startup line passed to ``/bin/sh -ec``."""
    if cfg.uses_config_map:
        return CONFIG_MAP_CONTAINER_ARG
    return DEFAULT_CONTAINER_ARG


def build_sidecar_container(
    cfg: AgentConfig,
    env_vars: list[dict[str, Any]] | None = None,
) -> ContainerSpec:
    """Build the vault-agent sidecar container.

    Args:
        cfg: Agent configuration for this pod.
        env_vars: Already-built env entries (``{"name", "value"}`` or
            ``valueFrom`` dicts). Passed through as-is.

    Returns:
        The composed container.

    Raises:
        InvalidQuantity: If one of the resource strings is invalid.
    """
    mounts = build_volume_mounts(cfg)
    resources = build_resources(cfg)
    lifecycle = build_lifecycle_hook(cfg)

    logger.debug(
        "Sidecar for sa=%s: %d mounts, config_map=%s, tls=%s, revoke=%s",
        cfg.service_account_name,
        len(mounts),
        cfg.config_map_name or "-",
        cfg.vault.tls_secret or "-",
        not lifecycle.is_empty,
    )

    return ContainerSpec(
        name=CONTAINER_NAME,
        image=cfg.image_name,
        command=list(CONTAINER_COMMAND),
        args=[container_arg(cfg)],
        env=[dict(e) for e in (env_vars or [])],
        resources=resources,
        security_context=SecurityContext(
            run_as_user=RUN_AS_USER,
            run_as_group=RUN_AS_GROUP,
            run_as_non_root=True,
        ),
        lifecycle=lifecycle,
        volume_mounts=mounts,
    )
