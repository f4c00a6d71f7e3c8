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

"""Utility functions for running child processes and command checks."""

from __future__ import annotations

import shlex
import sys
from typing import TextIO

import sh
from rich.markup import escape

from nvkind import console, logger
from nvkind.errors import NvkindError, ProvisioningToolFailure

COMMAND_NOT_FOUND_EXIT_CODE = 127


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        NvkindError: If the command is not found.
    """
    try:
        found = sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise NvkindError(f"Required command '{cmd}' not found. Please install it first.") from err
    if not found:
        raise NvkindError(f"Required command '{cmd}' not found. Please install it first.")


def capture_output(args: list[str]) -> str:
    """Run a command and return its stdout.

    Args:
        args: Command and arguments.

    Returns:
        Decoded stdout of the command.

    Raises:
        ProvisioningToolFailure: If the command is missing or exits non-zero.
    """
    cmd_str = shlex.join(args)
    logger.debug("Running %s", cmd_str)
    try:
        return str(sh.Command(args[0])(*args[1:]))
    except sh.CommandNotFound as err:
        raise ProvisioningToolFailure(cmd_str, COMMAND_NOT_FOUND_EXIT_CODE, "command not found") from err
    except sh.ErrorReturnCode as err:
        raise ProvisioningToolFailure(cmd_str, err.exit_code, _decode(err.stderr)) from err


def run_child_process(
    args: list[str],
    input_data: str = "",
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Run a command, streaming its output and optionally feeding stdin.

    The child's stdout and stderr flow to *stdout*/*stderr*. stderr is also
    kept so it can be attached to the failure. When *input_data* is given, sh
    writes it to the child's stdin from a feeder thread while this call
    waits for the process to exit.

    Args:
        args: Command and arguments.
        input_data: Data for the child's stdin; empty for none.
        stdout: Sink for the child's stdout, defaults to sys.stdout.
        stderr: Sink for the child's stderr, defaults to sys.stderr.

    Raises:
        ProvisioningToolFailure: If the command is missing or exits non-zero.
    """
    cmd_str = shlex.join(args)
    kwargs = {
        "_out": stdout or sys.stdout,
        "_err": stderr or sys.stderr,
        "_tee": "err",
    }
    if input_data:
        kwargs["_in"] = input_data

    console.print(f"[dim]+ {escape(cmd_str)}[/dim]")
    try:
        sh.Command(args[0])(*args[1:], **kwargs)
    except sh.CommandNotFound as err:
        raise ProvisioningToolFailure(cmd_str, COMMAND_NOT_FOUND_EXIT_CODE, "command not found") from err
    except sh.ErrorReturnCode as err:
        raise ProvisioningToolFailure(cmd_str, err.exit_code, _decode(err.stderr)) from err
