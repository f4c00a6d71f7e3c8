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

"""Create subcommands (cluster)."""

from __future__ import annotations

from pathlib import Path

import typer

from nvkind.cluster import Cluster
from nvkind.config import load_cluster_config, load_settings
from nvkind.utils import require_command

app = typer.Typer(help="Create infrastructure resources.")


@app.command("cluster")
def cluster(
    config_file: Path = typer.Option(..., "--config-file", help="kind cluster config (YAML)"),
    name: str | None = typer.Option(None, "--name", help="Cluster name (defaults to the config's name)"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Kubeconfig file"),
    retain: bool = typer.Option(False, "--retain", help="Keep node containers if creation fails"),
    wait: str | None = typer.Option(None, "--wait", help="Wait for the control plane (e.g. 60s)"),
    skip_runtime_class: bool = typer.Option(
        False, "--skip-runtime-class", help="Skip registering the nvidia RuntimeClass"),
    skip_info: bool = typer.Option(False, "--skip-info", help="Skip printing cluster info"),
) -> None:
    """Create a kind cluster from a config, then register the nvidia RuntimeClass.

    Running it again with the same config against an existing cluster only
    re-applies the RuntimeClass; a different config is rejected.
    """
    settings = load_settings(kubeconfig=kubeconfig)
    for cmd in (settings.kind_binary, settings.kubectl_binary):
        require_command(cmd)

    config = load_cluster_config(config_file)
    handle = Cluster.open(name=name, config=config, settings=settings)
    handle.create(retain=retain, wait=wait)

    if not skip_info:
        handle.print_cluster_info()
    if not skip_runtime_class:
        handle.register_nvidia_runtime_class()
