"""
Domain models: Pydantic types for the injector.

All models are re-exported here for convenient access:

    from agent_inject.core.models import AgentConfig, ContainerSpec, VolumeMount
"""

from agent_inject.core.models.agent import AgentConfig, VaultConnection
from agent_inject.core.models.container import (
    ContainerSpec,
    LifecycleHook,
    Quantity,
    ResourceList,
    ResourceSpec,
    SecurityContext,
    VolumeMount,
)

__all__ = [
    # agent.py
    "AgentConfig",
    # container.py
    "ContainerSpec",
    "LifecycleHook",
    "Quantity",
    "ResourceList",
    "ResourceSpec",
    "SecurityContext",
    "VaultConnection",
    "VolumeMount",
]
