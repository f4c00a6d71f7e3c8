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

"""Decide the effective config of a cluster handle.

A cluster keeps one config for its whole lifetime. The decision is a pure
function of (cluster exists, config supplied, config stored):

====== ======== ============== ==============================
exists supplied stored         result
====== ======== ============== ==============================
no     yes      -              create from supplied
no     no       -              ConfigMissing
yes    no       yes            adopt stored
yes    yes      yes, equal     keep supplied, store untouched
yes    yes      yes, different ConfigConflict
yes    any      no             StoreInconsistent
====== ======== ============== ==============================
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from nvkind import logger
from nvkind.config import ClusterConfig
from nvkind.errors import ConfigConflict, ConfigMissing, ConfigNotFound, StoreInconsistent
from nvkind.store import ConfigStore


class ReconcileOutcome(str, Enum):
    CREATE_FROM_SUPPLIED = "create-from-supplied"
    ADOPT_STORED = "adopt-stored"
    KEEP_SUPPLIED = "keep-supplied"


@dataclass(frozen=True)
class Reconciliation:
    """Result of reconciling a requested cluster.

    Attributes:
        outcome: Which row of the decision table applied.
        config: The effective config, named after the cluster.
    """

    outcome: ReconcileOutcome
    config: ClusterConfig

    @property
    def needs_store_write(self) -> bool:
        """Whether kind must still create the cluster and its config be recorded."""
        return self.outcome is ReconcileOutcome.CREATE_FROM_SUPPLIED


def reconcile(
    name: str,
    supplied: ClusterConfig | None,
    exists: bool,
    stored: ClusterConfig | None,
    *,
    compare_nodes: bool = True,
) -> Reconciliation:
    """Map (exists, supplied, stored) to the effective config.

    Args:
        name: Cluster identity; the effective config is always renamed to it.
        supplied: Config passed by the caller, if any.
        exists: Whether a cluster named *name* is live.
        stored: Config recorded for the live cluster, or None on a store miss.
            Ignored when the cluster does not exist.
        compare_nodes: Include node declarations in the conflict check.

    Returns:
        The outcome and the effective config.

    Raises:
        ConfigMissing: No cluster exists and no config was supplied.
        StoreInconsistent: The cluster exists but nothing is recorded for it.
        ConfigConflict: The supplied config differs from the recorded one.
    """
    if supplied is not None:
        supplied = supplied.with_name(name)

    if not exists:
        if supplied is None:
            raise ConfigMissing(f"cluster '{name}' does not exist and no config was given to create it")
        return Reconciliation(ReconcileOutcome.CREATE_FROM_SUPPLIED, supplied)

    if stored is None:
        raise StoreInconsistent(
            f"cluster '{name}' exists but has no recorded config",
            "it was probably not created by nvkind; delete and recreate it",
        )
    stored = stored.with_name(name)

    if supplied is None:
        return Reconciliation(ReconcileOutcome.ADOPT_STORED, stored)
    if not supplied.matches(stored, compare_nodes=compare_nodes):
        raise ConfigConflict(f"cannot pass new config to existing cluster '{name}'")
    return Reconciliation(ReconcileOutcome.KEEP_SUPPLIED, supplied)


def resolve_effective_config(
    name: str,
    supplied: ClusterConfig | None,
    existing: Collection[str],
    store: ConfigStore,
    *,
    compare_nodes: bool = True,
) -> Reconciliation:
    """Consult the store as needed and reconcile.

    The store is only read when *name* is among the *existing* clusters.

    Raises:
        StoreUnavailable: If the store cannot be read.
    """
    exists = name in existing
    stored: ClusterConfig | None = None
    if exists:
        try:
            stored = store.read(name)
        except ConfigNotFound:
            logger.info("No config recorded for existing cluster %s", name)

    result = reconcile(name, supplied, exists, stored, compare_nodes=compare_nodes)
    logger.info("Cluster %s: %s", name, result.outcome.value)
    return result
