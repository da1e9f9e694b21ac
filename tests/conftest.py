"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from agent_inject.core.models import AgentConfig, VaultConnection


@pytest.fixture
def agent_config() -> AgentConfig:
    """A minimal agent config: no config map, no TLS, no revoke."""
    return AgentConfig(service_account_name="app-token-x7k2p")


@pytest.fixture
def make_agent_config():
    """Factory for agent configs with overrides."""

    def _make(**overrides) -> AgentConfig:
        vault = overrides.pop("vault", None)
        if isinstance(vault, dict):
            vault = VaultConnection(**vault)
        fields = {"service_account_name": "app-token-x7k2p", **overrides}
        if vault is not None:
            fields["vault"] = vault
        return AgentConfig(**fields)

    return _make


@pytest.fixture
def config_yml(tmp_path: Path) -> Path:
    """A full agent-inject.yml with env entries."""
    content = textwrap.dedent("""\
        agent:
          image_name: hashicorp/vault:1.15.2
          service_account_name: app-token-x7k2p
          config_map_name: app-vault-config
          limits_cpu: "1"
          limits_mem: 256Mi
          requests_cpu: 100m
          requests_mem: 32Mi
          revoke_on_shutdown: true
          revoke_grace: 10
          vault:
            address: https://vault.vault.svc:8200
            tls_secret: vault-tls
            ca_cert: /vault/tls/ca.crt
        env:
          - name: VAULT_LOG_LEVEL
            value: debug
    """)
    path = tmp_path / "agent-inject.yml"
    path.write_text(content)
    return path
