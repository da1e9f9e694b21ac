"""
Sidecar lifecycle: the pre-stop hook that revokes the agent token.

The hook sleeps for ``revoke_grace`` seconds so in-flight requests can
finish with the token, then runs ``vault token revoke -self``. Kubernetes
enforces the pod's terminationGracePeriodSeconds on its own: a grace
longer than that period gets the hook killed before the revoke runs.
The two values are not cross-checked here.

The revoke's exit status is never inspected and nothing is retried.
"""

from __future__ import annotations

import logging
import shlex

from agent_inject.core.models.agent import AgentConfig, VaultConnection
from agent_inject.core.models.container import LifecycleHook

logger = logging.getLogger(__name__)


_PRESTOP_TEMPLATE = "/bin/sleep {grace} && /bin/vault token revoke {flags}"

_SELF_REVOKE_FLAG = "-self"


def vault_cli_flags(vault: VaultConnection) -> list[str]:
    """Connection flags for ``vault`` CLI calls made from the sidecar.

    ``-address`` is always present; the TLS and namespace flags only
    when configured. Values are shell-quoted.
    """
    flags = [f"-address={vault.address}"]
    if vault.ca_cert:
        flags.append(f"-ca-cert={vault.ca_cert}")
    if vault.ca_key:
        flags.append(f"-ca-path={vault.ca_key}")
    if vault.client_cert:
        flags.append(f"-client-cert={vault.client_cert}")
    if vault.client_key:
        flags.append(f"-client-key={vault.client_key}")
    if vault.tls_server_name:
        flags.append(f"-tls-server-name={vault.tls_server_name}")
    if vault.tls_skip_verify:
        flags.append("-tls-skip-verify")
    if vault.namespace:
        flags.append(f"-namespace={vault.namespace}")
    return [shlex.quote(f) for f in flags]


def format_prestop_command(grace: int, flags: list[str]) -> str:
    """Render the shell line run by the pre-stop hook."""
    return _PRESTOP_TEMPLATE.format(grace=grace, flags=" ".join(flags))


def build_lifecycle_hook(cfg: AgentConfig) -> LifecycleHook:
    """Build the sidecar's lifecycle.

    Only meant for the sidecar container: an init container has no
    long-lived token to revoke.
    """
    if not cfg.revoke_on_shutdown:
        return LifecycleHook()

    flags = [*vault_cli_flags(cfg.vault), _SELF_REVOKE_FLAG]
    command = format_prestop_command(cfg.revoke_grace, flags)
    logger.debug("Pre-stop revoke hook: %s", command)

    return LifecycleHook(pre_stop=["/bin/sh", "-c", command])
