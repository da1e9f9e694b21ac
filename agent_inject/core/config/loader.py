"""
Configuration loader: reads agent-inject.yml into domain models.

Stands in for the annotation parser when the injector is driven from the
CLI: it reads YAML, validates it against the Pydantic schema, and returns
an ``AgentConfig`` plus the env entries to hand to the sidecar.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agent_inject.core.models.agent import AgentConfig

logger = logging.getLogger(__name__)

# Default config filename
AGENT_CONFIG_FILE = "agent-inject.yml"


class ConfigError(Exception):
    """Raised when the agent configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for agent-inject.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to agent-inject.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / AGENT_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_document(path: Path | None) -> tuple[Path, dict[str, Any]]:
    """Locate, read and YAML-parse the config file."""
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(
            f"No {AGENT_CONFIG_FILE} found. "
            "Create one in the current directory, or specify --config."
        )

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading agent config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    return path, data


def load_agent_config(path: Path | None = None) -> AgentConfig:
    """Load and validate the agent configuration.

    The YAML may wrap the settings under an ``agent`` key or be flat.
    A top-level ``env`` section is ignored here (see ``load_env_vars``).

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path, data = _read_document(path)

    if "agent" in data:
        agent_data = data["agent"]
        if not isinstance(agent_data, dict):
            raise ConfigError(f"'agent' in {path} must be a mapping")
    else:
        agent_data = {k: v for k, v in data.items() if k != "env"}

    try:
        cfg = AgentConfig.model_validate(agent_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid agent configuration in {path}: {e}") from e

    logger.info(
        "Loaded agent config (image=%s, service account=%s)",
        cfg.image_name, cfg.service_account_name,
    )
    return cfg


def load_env_vars(path: Path | None = None) -> list[dict[str, Any]]:
    """Load the ``env`` section as a list of Kubernetes env entries.

    Accepts either the Kubernetes list shape::

        env:
          - name: VAULT_LOG_LEVEL
            value: info

    or a plain mapping (``VAULT_LOG_LEVEL: info``). Missing section → ``[]``.

    Raises:
        ConfigError: If the section has the wrong shape.
    """
    path, data = _read_document(path)
    return normalize_env(data.get("env"), source=str(path))


def normalize_env(env: Any, source: str = "env") -> list[dict[str, Any]]:
    """Turn a mapping or list of env entries into the Kubernetes list shape."""
    if env is None:
        return []

    if isinstance(env, dict):
        return [{"name": str(k), "value": "" if v is None else str(v)} for k, v in env.items()]

    if not isinstance(env, list):
        raise ConfigError(f"'env' in {source} must be a list or a mapping")

    entries: list[dict[str, Any]] = []
    for i, item in enumerate(env):
        if not isinstance(item, dict) or not item.get("name"):
            raise ConfigError(f"env[{i}] in {source} must be a mapping with a 'name'")
        entries.append(dict(item))
    return entries
