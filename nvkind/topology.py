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

"""Pair live kind node names with their declared node configs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from nvkind.config import ClusterContext, NodeConfig
from nvkind.constants import ROLE_PRIORITY, ROLE_TOKENS, NodeRole
from nvkind.errors import TopologyMismatch, UnknownNodeRole


@dataclass(frozen=True)
class ResolvedNode:
    """A live node paired with its own copy of the declared config.

    Attributes:
        name: Node (container) name reported by kind.
        role: Role inferred from the name.
        config: Deep copy of the matching node declaration.
        context: Execution context of the owning cluster.
    """

    name: str
    role: NodeRole
    config: NodeConfig
    context: ClusterContext


def classify_role(name: str, tokens: Mapping[NodeRole, str] = ROLE_TOKENS) -> NodeRole:
    """Infer a node's role from its name.

    kind names nodes ``<cluster>-<role>[N]``, e.g. ``gpu-control-plane``,
    ``gpu-worker``, ``gpu-worker2``. Trailing digits are stripped before
    matching the role suffix.

    Args:
        name: Live node name.
        tokens: Suffix per role, checked in role-priority order.

    Raises:
        UnknownNodeRole: If no suffix matches.
    """
    trimmed = name.rstrip("0123456789")
    for role in ROLE_PRIORITY:
        token = tokens.get(role)
        if token and trimmed.endswith(token):
            return role
    raise UnknownNodeRole(f"unable to determine node role from name: {name}")


def _group_by_role(items: Iterable[tuple[NodeRole, object]]) -> dict[NodeRole, list]:
    groups: dict[NodeRole, list] = {role: [] for role in ROLE_PRIORITY}
    for role, item in items:
        groups[role].append(item)
    return groups


def resolve_nodes(
    live_names: Iterable[str],
    declared: Sequence[NodeConfig],
    context: ClusterContext,
    tokens: Mapping[NodeRole, str] = ROLE_TOKENS,
) -> list[ResolvedNode]:
    """Map live node names onto declared nodes.

    Names are sorted, classified by role and paired by position with the
    declarations of the same role. Output is grouped control-plane first,
    then workers, independent of the order kind reported the names in.

    Args:
        live_names: Node names reported by kind.
        declared: Node declarations of the effective cluster config.
        context: Execution context attached to every resolved node.
        tokens: Role suffixes used for classification.

    Returns:
        One resolved node per live node.

    Raises:
        UnknownNodeRole: If a live name carries no role suffix.
        TopologyMismatch: If live and declared counts differ for a role.
    """
    names = sorted(live_names)
    live_by_role = _group_by_role((classify_role(n, tokens), n) for n in names)
    declared_by_role = _group_by_role((node.role, node) for node in declared)

    resolved: list[ResolvedNode] = []
    for role in ROLE_PRIORITY:
        role_names = live_by_role[role]
        role_configs = declared_by_role[role]
        if len(role_names) != len(role_configs):
            raise TopologyMismatch(role.value, len(role_names), len(role_configs))
        resolved.extend(
            ResolvedNode(name=n, role=role, config=cfg.model_copy(deep=True), context=context)
            for n, cfg in zip(role_names, role_configs)
        )
    return resolved
