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

"""kind and kubectl invocations.

Every kubectl call names its context explicitly. kind also switches the
default context on create, but relying on it races when several nvkind
processes work on different clusters at once.
"""

from __future__ import annotations

from nvkind.config import ClusterContext
from nvkind.constants import DEFAULT_KIND_BINARY
from nvkind.utils import capture_output, run_child_process


# ============================================================================
# kind
# ============================================================================

def get_cluster_names(kind_binary: str = DEFAULT_KIND_BINARY) -> set[str]:
    """Return the names of all existing kind clusters."""
    output = capture_output([kind_binary, "get", "clusters", "-q"])
    return set(output.split())


def get_node_names(ctx: ClusterContext) -> list[str]:
    """Return the live node names of the cluster, in kind's reporting order."""
    output = capture_output([ctx.kind_binary, "get", "nodes", "--name", ctx.name])
    return output.split()


def create_cluster(ctx: ClusterContext, config_yaml: str, retain: bool = False, wait: str | None = None) -> None:
    """Run ``kind create cluster`` with the config fed on stdin.

    Args:
        ctx: Context of the cluster to create.
        config_yaml: Serialized kind cluster config.
        retain: Keep node containers when creation fails.
        wait: Duration to wait for the control plane (e.g. ``60s``).
    """
    args = [
        ctx.kind_binary, "create", "cluster",
        "--name", ctx.name,
        "--config", "-",
    ]
    if retain:
        args.append("--retain")
    if wait:
        args.extend(["--wait", wait])
    run_child_process(args, config_yaml, stdout=ctx.stdout, stderr=ctx.stderr)


def delete_cluster(ctx: ClusterContext) -> None:
    """Run ``kind delete cluster`` for the cluster."""
    run_child_process(
        [ctx.kind_binary, "delete", "cluster", "--name", ctx.name],
        stdout=ctx.stdout, stderr=ctx.stderr,
    )


# ============================================================================
# kubectl
# ============================================================================

def kubectl(ctx: ClusterContext, args: list[str], input_data: str = "") -> None:
    """Run kubectl against the cluster's own context and kubeconfig.

    Args:
        ctx: Context of the target cluster.
        args: kubectl arguments (e.g. ``["get", "nodes"]``).
        input_data: Data for kubectl's stdin, e.g. a manifest for ``apply -f -``.
    """
    run_child_process(
        [ctx.kubectl_binary, "--kubeconfig", ctx.kubeconfig, "--context", ctx.kube_context, *args],
        input_data,
        stdout=ctx.stdout, stderr=ctx.stderr,
    )
