"""
Container models: the sidecar's Kubernetes container object.

Fields are snake_case in Python; ``to_dict()`` emits the camelCase shape
the pod spec expects. Optional parts (unset quantities, an empty
lifecycle) are left out of the dict instead of being written as zero.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VolumeMount(BaseModel):
    """A volume mounted into the sidecar."""

    model_config = ConfigDict(frozen=True)

    name: str
    mount_path: str
    read_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "mountPath": self.mount_path,
            "readOnly": self.read_only,
        }


class Quantity(BaseModel):
    """A validated resource quantity.

    Attributes:
        raw:   The string as the operator wrote it (``"500m"``).
        value: Numeric value in base units (cores or bytes).
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    value: Decimal

    def __str__(self) -> str:
        return self.raw


class ResourceList(BaseModel):
    """CPU and memory for one side (limits or requests). ``None`` = unset."""

    model_config = ConfigDict(frozen=True)

    cpu: Quantity | None = None
    memory: Quantity | None = None

    @property
    def is_empty(self) -> bool:
        return self.cpu is None and self.memory is None

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.cpu is not None:
            out["cpu"] = str(self.cpu)
        if self.memory is not None:
            out["memory"] = str(self.memory)
        return out


class ResourceSpec(BaseModel):
    """Limits and requests for the sidecar."""

    model_config = ConfigDict(frozen=True)

    limits: ResourceList = Field(default_factory=ResourceList)
    requests: ResourceList = Field(default_factory=ResourceList)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if not self.limits.is_empty:
            out["limits"] = self.limits.to_dict()
        if not self.requests.is_empty:
            out["requests"] = self.requests.to_dict()
        return out


class SecurityContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    run_as_user: int
    run_as_group: int
    run_as_non_root: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "runAsUser": self.run_as_user,
            "runAsGroup": self.run_as_group,
            "runAsNonRoot": self.run_as_non_root,
        }


class LifecycleHook(BaseModel):
    """Pre-stop hook of the sidecar, or nothing.

    ``pre_stop`` is the exec command run before the container gets
    SIGTERM. ``None`` means no hook is attached.
    """

    model_config = ConfigDict(frozen=True)

    pre_stop: list[str] | None = None

    @property
    def is_empty(self) -> bool:
        return self.pre_stop is None

    def to_dict(self) -> dict[str, Any]:
        if self.pre_stop is None:
            return {}
        return {"preStop": {"exec": {"command": list(self.pre_stop)}}}


class ContainerSpec(BaseModel):
    """The fully composed sidecar container."""

    model_config = ConfigDict(frozen=True)

    name: str
    image: str
    command: list[str]
    args: list[str]
    env: list[dict[str, Any]] = Field(default_factory=list)
    resources: ResourceSpec = Field(default_factory=ResourceSpec)
    security_context: SecurityContext
    lifecycle: LifecycleHook = Field(default_factory=LifecycleHook)
    volume_mounts: list[VolumeMount] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Kubernetes ``Container`` object as a plain dict."""
        out: dict[str, Any] = {
            "name": self.name,
            "image": self.image,
            "command": list(self.command),
            "args": list(self.args),
        }
        if self.env:
            out["env"] = [dict(e) for e in self.env]
        resources = self.resources.to_dict()
        if resources:
            out["resources"] = resources
        out["securityContext"] = self.security_context.to_dict()
        if not self.lifecycle.is_empty:
            out["lifecycle"] = self.lifecycle.to_dict()
        out["volumeMounts"] = [vm.to_dict() for vm in self.volume_mounts]
        return out
