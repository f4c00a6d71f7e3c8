"""Pytest configuration and shared fixtures."""

import pytest
from hypothesis import Verbosity, settings

from nvkind.config import ClusterConfig, ClusterContext, NodeConfig
from nvkind.constants import NodeRole
from nvkind.errors import ConfigNotFound

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")


SAMPLE_CONFIG_YAML = """\
kind: Cluster
apiVersion: kind.x-k8s.io/v1alpha4
name: gpu
nodes:
- role: control-plane
  image: kindest/node:v1.29.2
- role: worker
  image: kindest/node:v1.29.2
  extraMounts:
  - hostPath: /dev/null
    containerPath: /var/run/nvidia-container-devices/0
- role: worker
  image: kindest/node:v1.29.2
  extraMounts:
  - hostPath: /dev/null
    containerPath: /var/run/nvidia-container-devices/1
"""


class MemoryStore:
    """In-memory stand-in for ConfigStore with the same read/write contract."""

    def __init__(self, records=None):
        self.records = dict(records or {})
        self.reads = []
        self.writes = []

    def read(self, name):
        self.reads.append(name)
        if name not in self.records:
            raise ConfigNotFound(f"no config recorded for cluster '{name}'")
        return ClusterConfig.from_yaml(self.records[name])

    def write(self, name, config):
        self.writes.append(name)
        self.records[name] = config.to_yaml()


@pytest.fixture
def sample_config():
    """A control-plane plus two GPU workers."""
    return ClusterConfig.from_yaml(SAMPLE_CONFIG_YAML)


@pytest.fixture
def simple_config():
    """One control-plane and one worker, no extras."""
    return ClusterConfig(
        name="simple",
        nodes=[NodeConfig(role=NodeRole.CONTROL_PLANE), NodeConfig(role=NodeRole.WORKER)],
    )


@pytest.fixture
def cluster_context():
    return ClusterContext(name="gpu", kubeconfig="/tmp/kubeconfig")


@pytest.fixture
def memory_store():
    return MemoryStore()
