# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Configuration classes and cluster config models."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from nvkind.constants import (
    DEFAULT_KIND_BINARY,
    DEFAULT_KUBECONFIG,
    DEFAULT_KUBECTL_BINARY,
    DEFAULT_STORE_NAMESPACE,
    DEFAULT_WRITE_ATTEMPTS,
    KIND_API_VERSION,
    KIND_CONFIG_KIND,
    KIND_CONTEXT_PREFIX,
    NodeRole,
)
from nvkind.errors import InvalidConfig


def _default_kubeconfig() -> str:
    """Pick the first KUBECONFIG entry, falling back to ~/.kube/config."""
    env = os.environ.get("KUBECONFIG", "")
    paths = [p for p in env.split(os.pathsep) if p]
    if paths:
        return paths[0]
    return str(Path(DEFAULT_KUBECONFIG).expanduser())


# ============================================================================
# Settings
# ============================================================================

class NvkindSettings(BaseSettings):
    """Runtime settings, auto-loaded from NVKIND_* env vars.

    Attributes:
        kubeconfig: Kubeconfig file holding the kind-<name> contexts.
        store_namespace: Namespace of the config store record.
        write_attempts: Maximum attempts for the conflict-retried store write.
        compare_nodes: Whether node declarations take part in the conflict
            check against a stored config, or only cluster-level fields.
        kind_binary: kind executable.
        kubectl_binary: kubectl executable.
    """

    model_config = SettingsConfigDict(env_prefix="NVKIND_", extra="ignore")

    kubeconfig: str = Field(default_factory=_default_kubeconfig)
    store_namespace: str = DEFAULT_STORE_NAMESPACE
    write_attempts: int = Field(default=DEFAULT_WRITE_ATTEMPTS, ge=1, le=20)
    compare_nodes: bool = True
    kind_binary: str = DEFAULT_KIND_BINARY
    kubectl_binary: str = DEFAULT_KUBECTL_BINARY


def load_settings(**overrides: Any) -> NvkindSettings:
    """Load settings from the environment, applying non-None *overrides*.

    Raises:
        InvalidConfig: If an NVKIND_* variable or override fails validation.
    """
    try:
        return NvkindSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as err:
        raise InvalidConfig("invalid nvkind settings", str(err)) from err


@dataclass(frozen=True)
class ClusterContext:
    """Execution context shared by a cluster handle and its nodes.

    Attributes:
        name: Cluster identity.
        kubeconfig: Kubeconfig file holding the cluster's context.
        kind_binary: kind executable.
        kubectl_binary: kubectl executable.
        stdout: Sink for child-process stdout, or None for sys.stdout.
        stderr: Sink for child-process stderr, or None for sys.stderr.
    """

    name: str
    kubeconfig: str
    kind_binary: str = DEFAULT_KIND_BINARY
    kubectl_binary: str = DEFAULT_KUBECTL_BINARY
    stdout: TextIO | None = field(default=None, compare=False, repr=False)
    stderr: TextIO | None = field(default=None, compare=False, repr=False)

    @property
    def kube_context(self) -> str:
        return kube_context_name(self.name)

    @classmethod
    def from_settings(
        cls,
        name: str,
        settings: NvkindSettings,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> ClusterContext:
        return cls(
            name=name,
            kubeconfig=settings.kubeconfig,
            kind_binary=settings.kind_binary,
            kubectl_binary=settings.kubectl_binary,
            stdout=stdout,
            stderr=stderr,
        )


def kube_context_name(name: str) -> str:
    """Kube context kind writes for cluster *name*."""
    return f"{KIND_CONTEXT_PREFIX}{name}"


# ============================================================================
# kind config document
# ============================================================================

class NodeConfig(BaseModel):
    """A node declaration of a kind cluster config.

    Fields nvkind does not interpret (kubeadmConfigPatches,
    extraPortMappings, ...) are kept as extras and round-trip verbatim.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    role: NodeRole = NodeRole.CONTROL_PLANE
    image: str | None = None
    labels: dict[str, str] | None = None
    extra_mounts: list[dict[str, Any]] | None = Field(default=None, alias="extraMounts")


class ClusterConfig(BaseModel):
    """A kind ``Cluster`` config document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    kind: str = KIND_CONFIG_KIND
    api_version: str = Field(default=KIND_API_VERSION, alias="apiVersion")
    name: str = ""
    nodes: list[NodeConfig] = Field(default_factory=list)

    def document(self, include_nodes: bool = True) -> dict[str, Any]:
        """Return the decoded document as kind spells it.

        Args:
            include_nodes: Whether to keep the ``nodes`` list.

        Returns:
            Plain dict with kind field names and ``None`` values dropped.
        """
        exclude = None if include_nodes else {"nodes"}
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=exclude)

    def matches(self, other: ClusterConfig, compare_nodes: bool = True) -> bool:
        """Structural equality of two decoded configs.

        Args:
            other: Config to compare against.
            compare_nodes: When False only cluster-level fields are compared.
        """
        return self.document(compare_nodes) == other.document(compare_nodes)

    def with_name(self, name: str) -> ClusterConfig:
        """Return a deep copy whose ``name`` is *name*."""
        return self.model_copy(update={"name": name}, deep=True)

    def to_yaml(self) -> str:
        """Serialize to the YAML handed to kind and the config store."""
        return yaml.safe_dump(self.document(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, text: str) -> ClusterConfig:
        """Parse a YAML config document.

        Raises:
            InvalidConfig: If the text is not YAML or fails validation.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise InvalidConfig("config is not valid YAML", str(err)) from err
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfig("config must be a YAML mapping", f"got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise InvalidConfig("config failed validation", str(err)) from err


def load_cluster_config(path: Path) -> ClusterConfig:
    """Load a kind cluster config from a YAML file.

    Args:
        path: Path to the config file.

    Returns:
        The parsed config.

    Raises:
        InvalidConfig: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text()
    except OSError as err:
        raise InvalidConfig(f"cannot read config file '{path}'", str(err)) from err
    return ClusterConfig.from_yaml(text)
