#!/usr/bin/env python3
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

"""
cli.py - CLI for GPU-enabled kind clusters.

Subcommands:
    create     Create a kind cluster from a config and record the config
    delete     Delete a kind cluster
    get        List clusters, resolved nodes, or the recorded config

Examples:
    # Create a cluster from a kind config
    nvkind create cluster --config-file gpu.yaml

    # Attach to an existing cluster and list its nodes
    nvkind get nodes --name gpu

    # Delete the cluster
    nvkind delete cluster --name gpu

Settings can be overridden via NVKIND_* environment variables
(NVKIND_KUBECONFIG, NVKIND_COMPARE_NODES, NVKIND_WRITE_ATTEMPTS, ...).
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.markup import escape

from nvkind import console
from nvkind.commands import create_cmd, delete_cmd, get_cmd
from nvkind.errors import NvkindError

app = typer.Typer(
    help="Manage GPU-enabled kind clusters.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(create_cmd.app, name="create")
app.add_typer(delete_cmd.app, name="delete")
app.add_typer(get_cmd.app, name="get")


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except NvkindError as e:
        console.print(f"[red]\u274c {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
