"""
Agent model: the injected agent's configuration.

Built once per pod mutation (from annotations or from ``agent-inject.yml``)
and read-only afterwards. Every builder in ``core.services`` takes an
``AgentConfig`` and never mutates it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# https://kubernetes.io/docs/concepts/configuration/manage-compute-resources-container/#meaning-of-cpu
DEFAULT_RESOURCE_LIMIT_CPU = "500m"
DEFAULT_RESOURCE_LIMIT_MEM = "128Mi"
DEFAULT_RESOURCE_REQUEST_CPU = "250m"
DEFAULT_RESOURCE_REQUEST_MEM = "64Mi"

DEFAULT_AGENT_IMAGE = "hashicorp/vault:1.15.2"
DEFAULT_SERVICE_ACCOUNT_PATH = "/var/run/secrets/kubernetes.io/serviceaccount"
DEFAULT_VAULT_ADDRESS = "http://127.0.0.1:8200"
DEFAULT_REVOKE_GRACE = 5
DEFAULT_AGENT_LOG_LEVEL = "info"


class VaultConnection(BaseModel):
    """How the agent (and the revoke hook) reaches the Vault server.

    Empty strings mean "not set" and produce no CLI flag.
    """

    model_config = ConfigDict(frozen=True)

    address: str = DEFAULT_VAULT_ADDRESS
    ca_cert: str = ""
    ca_key: str = ""          # directory of CA certs, passed as -ca-path
    client_cert: str = ""
    client_key: str = ""
    tls_secret: str = ""      # k8s secret holding TLS material, mounted at /vault/tls
    tls_server_name: str = ""
    tls_skip_verify: bool = False
    namespace: str = ""


class AgentConfig(BaseModel):
    """Configuration of one injected Vault Agent sidecar.

    The four resource strings use ``""`` as the "unset" sentinel, which
    is different from an invalid string. Defaults below are the values
    the injector applies when an annotation is absent.
    """

    model_config = ConfigDict(frozen=True)

    image_name: str = DEFAULT_AGENT_IMAGE
    service_account_name: str
    service_account_path: str = DEFAULT_SERVICE_ACCOUNT_PATH
    config_map_name: str = ""
    vault: VaultConnection = Field(default_factory=VaultConnection)

    # ── Resources ────────────────────────────────────────────────
    limits_cpu: str = DEFAULT_RESOURCE_LIMIT_CPU
    limits_mem: str = DEFAULT_RESOURCE_LIMIT_MEM
    requests_cpu: str = DEFAULT_RESOURCE_REQUEST_CPU
    requests_mem: str = DEFAULT_RESOURCE_REQUEST_MEM

    # ── Shutdown ─────────────────────────────────────────────────
    revoke_on_shutdown: bool = False
    revoke_grace: int = Field(default=DEFAULT_REVOKE_GRACE, ge=0)

    log_level: str = DEFAULT_AGENT_LOG_LEVEL

    @property
    def uses_config_map(self) -> bool:
        """Whether the agent reads its config from a mounted ConfigMap."""
        return bool(self.config_map_name)

    @property
    def uses_tls_secret(self) -> bool:
        return bool(self.vault.tls_secret)
