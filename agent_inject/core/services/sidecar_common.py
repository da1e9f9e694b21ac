"""
Sidecar shared constants.

Imported by all sidecar_* sub-modules. Must NOT import from any sibling
sidecar_* module to avoid circular imports.

Volume names and mount paths are shared with the code that provisions the
pod volumes; renaming any of them breaks the injected pod.
"""

from __future__ import annotations


# ═══════════════════════════════════════════════════════════════════
#  Container
# ═══════════════════════════════════════════════════════════════════


CONTAINER_NAME = "vault-agent"
CONTAINER_COMMAND = ("/bin/sh", "-ec")

RUN_AS_USER = 100
RUN_AS_GROUP = 1000

TOKEN_FILE = "/home/vault/.vault-token"


# ═══════════════════════════════════════════════════════════════════
#  Volumes
# ═══════════════════════════════════════════════════════════════════


SECRET_VOLUME_NAME = "vault-secrets"
SECRET_VOLUME_PATH = "/vault/secrets"

CONFIG_VOLUME_NAME = "vault-config"
CONFIG_VOLUME_PATH = "/vault/configs"

TLS_SECRET_VOLUME_NAME = "vault-tls-secrets"
TLS_SECRET_VOLUME_PATH = "/vault/tls"


# ═══════════════════════════════════════════════════════════════════
#  Startup arguments
# ═══════════════════════════════════════════════════════════════════


# Agent config arrives base64-encoded in $VAULT_CONFIG
DEFAULT_CONTAINER_ARG = (
    "echo ${VAULT_CONFIG?} | base64 -d > /tmp/config.json"
    " && vault agent -config=/tmp/config.json"
)

CONFIG_MAP_CONTAINER_ARG = (
    f"touch {TOKEN_FILE} && vault agent -config={CONFIG_VOLUME_PATH}/config.hcl"
)
