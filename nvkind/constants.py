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

"""Constants shared by the store, topology and provisioning modules."""

from __future__ import annotations

from enum import Enum


class NodeRole(str, Enum):
    """Node roles understood by kind."""

    CONTROL_PLANE = "control-plane"
    WORKER = "worker"


# -- Node roles --
# Iteration order is the role priority used when emitting resolved nodes.
ROLE_PRIORITY = (NodeRole.CONTROL_PLANE, NodeRole.WORKER)
ROLE_TOKENS: dict[NodeRole, str] = {
    NodeRole.CONTROL_PLANE: NodeRole.CONTROL_PLANE.value,
    NodeRole.WORKER: NodeRole.WORKER.value,
}

# -- kind config document --
KIND_API_VERSION = "kind.x-k8s.io/v1alpha4"
KIND_CONFIG_KIND = "Cluster"

# -- Kube contexts --
KIND_CONTEXT_PREFIX = "kind-"
DEFAULT_KUBECONFIG = "~/.kube/config"

# -- Config store --
CLUSTER_CONFIG_RECORD_NAME = "nvkind-cluster-config"
CLUSTER_CONFIG_RECORD_KEY = "config"
DEFAULT_STORE_NAMESPACE = "default"

# Mirrors client-go's retry.DefaultRetry (5 steps, 10ms, 10% jitter).
DEFAULT_WRITE_ATTEMPTS = 5
WRITE_RETRY_WAIT_SECONDS = 0.01
WRITE_RETRY_JITTER_SECONDS = 0.001

# -- HTTP status codes returned by the API server --
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409

# -- Binaries --
DEFAULT_KIND_BINARY = "kind"
DEFAULT_KUBECTL_BINARY = "kubectl"

# Registers runtimeclass.node.k8s.io/nvidia so workloads can request
# runtimeClassName=nvidia (e.g. when helm-installing the k8s-device-plugin).
NVIDIA_RUNTIME_CLASS_YAML = """---
apiVersion: node.k8s.io/v1
handler: nvidia
kind: RuntimeClass
metadata:
  name: nvidia
"""
