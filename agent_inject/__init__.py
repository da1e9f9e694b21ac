"""Vault Agent Inject: sidecar container builder."""

__version__ = "0.1.0"
