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

"""Delete subcommands (cluster)."""

from __future__ import annotations

import typer

from nvkind import console
from nvkind.config import ClusterContext, load_settings
from nvkind.kind import delete_cluster, get_cluster_names

app = typer.Typer(help="Delete infrastructure resources.")


@app.command("cluster")
def cluster(
    name: str = typer.Option(..., "--name", help="Cluster name"),
) -> None:
    """Delete a kind cluster (its recorded config goes with it)."""
    settings = load_settings()
    if name not in get_cluster_names(settings.kind_binary):
        console.print(f"[yellow]\u26a0\ufe0f  Cluster '{name}' not found or already deleted[/yellow]")
        return

    console.print(f"[yellow]\u2139\ufe0f  Deleting kind cluster '{name}'...[/yellow]")
    delete_cluster(ClusterContext.from_settings(name, settings))
    console.print(f"[green]\u2705 Cluster '{name}' deleted[/green]")
