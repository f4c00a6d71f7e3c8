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

"""Get subcommands (clusters, nodes, config)."""

from __future__ import annotations

import typer
from rich.table import Table

from nvkind import console
from nvkind.cluster import Cluster
from nvkind.config import load_settings
from nvkind.kind import get_cluster_names

app = typer.Typer(help="Inspect clusters.")


@app.command("clusters")
def clusters() -> None:
    """List existing kind clusters."""
    for name in sorted(get_cluster_names(load_settings().kind_binary)):
        typer.echo(name)


@app.command("nodes")
def nodes(
    name: str = typer.Option(..., "--name", help="Cluster name"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Kubeconfig file"),
) -> None:
    """List the cluster's nodes with the role and image they were declared with."""
    handle = Cluster.open(name=name, settings=load_settings(kubeconfig=kubeconfig))

    table = Table(title=f"Nodes of {handle.name}")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Image")
    for node in handle.get_nodes():
        table.add_row(node.name, node.role.value, node.config.image or "-")
    console.print(table)


@app.command("config")
def config(
    name: str = typer.Option(..., "--name", help="Cluster name"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Kubeconfig file"),
) -> None:
    """Print the config recorded for an existing cluster."""
    handle = Cluster.open(name=name, settings=load_settings(kubeconfig=kubeconfig))
    typer.echo(handle.config.to_yaml(), nl=False)
