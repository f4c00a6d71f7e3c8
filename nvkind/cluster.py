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

"""kind cluster handle: config reconciliation, lifecycle, and node listing."""

from __future__ import annotations

from typing import TextIO

from rich.panel import Panel

from nvkind import console, logger
from nvkind import kind
from nvkind.config import ClusterConfig, ClusterContext, NvkindSettings, load_settings
from nvkind.constants import NVIDIA_RUNTIME_CLASS_YAML
from nvkind.errors import ConfigConflict, ConfigMissing, StoreInconsistent, StoreUnavailable
from nvkind.reconcile import Reconciliation, resolve_effective_config
from nvkind.store import ConfigStore
from nvkind.topology import ResolvedNode, resolve_nodes


class Cluster:
    """A kind cluster bound to its effective config.

    Use :meth:`open` to build one; it decides the effective config before
    anything is created.
    """

    def __init__(
        self,
        reconciliation: Reconciliation,
        context: ClusterContext,
        store: ConfigStore,
    ) -> None:
        self.reconciliation = reconciliation
        self.context = context
        self.store = store

    @property
    def name(self) -> str:
        return self.context.name

    @property
    def config(self) -> ClusterConfig:
        return self.reconciliation.config

    @classmethod
    def open(
        cls,
        name: str | None = None,
        config: ClusterConfig | None = None,
        settings: NvkindSettings | None = None,
        store: ConfigStore | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> Cluster:
        """Build a handle for cluster *name*.

        Args:
            name: Cluster identity; defaults to the config's own name.
            config: Desired config, or None to attach to an existing cluster.
            settings: Runtime settings; loaded from the environment if None.
            store: Config store; built from *settings* if None.
            stdout: Sink for kind/kubectl stdout, shared with resolved nodes.
            stderr: Sink for kind/kubectl stderr, shared with resolved nodes.

        Raises:
            ConfigMissing: If no name can be determined, or the cluster does
                not exist and no config was given.
            ConfigConflict: If *config* differs from the one recorded for the
                existing cluster.
            StoreInconsistent: If the cluster exists without a recorded config.
            StoreUnavailable: If the recorded config cannot be read.
            ProvisioningToolFailure: If listing clusters fails.
            InvalidConfig: If *settings* is None and the environment holds
                invalid NVKIND_* values.
        """
        settings = settings or load_settings()
        if not name:
            name = config.name if config is not None else ""
        if not name:
            raise ConfigMissing("a cluster name is required when the config does not set one")

        store = store or ConfigStore(
            settings.kubeconfig,
            namespace=settings.store_namespace,
            write_attempts=settings.write_attempts,
        )
        existing = kind.get_cluster_names(settings.kind_binary)

        reconciliation = resolve_effective_config(
            name, config, existing, store, compare_nodes=settings.compare_nodes,
        )
        context = ClusterContext.from_settings(name, settings, stdout=stdout, stderr=stderr)
        return cls(reconciliation, context, store)

    def create(self, retain: bool = False, wait: str | None = None) -> None:
        """Create the cluster and record its config.

        The config is recorded only after kind reports success, so a failed
        creation never leaves a record behind. A handle attached to a live
        cluster leaves both kind and the record untouched.

        Args:
            retain: Keep node containers when creation fails.
            wait: Duration to wait for the control plane (e.g. ``60s``).

        Raises:
            ProvisioningToolFailure: If kind fails.
            ConfigConflict: If a concurrent creator recorded a different config.
            StoreUnavailable: If the config cannot be recorded.
        """
        if not self.reconciliation.needs_store_write:
            logger.info("Cluster %s already exists (%s)", self.name, self.reconciliation.outcome.value)
            console.print(f"[yellow]\u26a0\ufe0f  Cluster '{self.name}' already exists with this config[/yellow]")
            return

        console.print(Panel.fit(f"Creating kind cluster '{self.name}'", style="bold blue"))
        kind.create_cluster(self.context, self.config.to_yaml(), retain=retain, wait=wait)
        console.print(f"[green]\u2705 Cluster '{self.name}' created[/green]")

        logger.info("Recording config of cluster %s", self.name)
        try:
            self.store.write(self.name, self.config)
        except (ConfigConflict, StoreInconsistent, StoreUnavailable) as err:
            raise type(err)(
                f"cluster '{self.name}' was created but recording its config failed: {err.message}",
                err.details,
            ) from err

    def print_cluster_info(self) -> None:
        """Show API endpoints and nodes of the cluster."""
        kind.kubectl(self.context, ["cluster-info"])
        kind.kubectl(self.context, ["get", "nodes"])

    def register_nvidia_runtime_class(self) -> None:
        """Register runtimeclass.node.k8s.io/nvidia (idempotent)."""
        console.print(Panel.fit("Registering nvidia RuntimeClass", style="bold blue"))
        kind.kubectl(self.context, ["apply", "-f", "-"], NVIDIA_RUNTIME_CLASS_YAML)
        console.print("[green]\u2705 RuntimeClass 'nvidia' registered[/green]")

    def get_nodes(self) -> list[ResolvedNode]:
        """Return the live nodes paired with their declared configs.

        Raises:
            ProvisioningToolFailure: If kind cannot list the nodes.
            UnknownNodeRole: If a node name carries no role suffix.
            TopologyMismatch: If live and declared node counts differ.
        """
        names = kind.get_node_names(self.context)
        return resolve_nodes(names, self.config.nodes, self.context)
