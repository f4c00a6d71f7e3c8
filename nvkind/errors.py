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

"""Exception hierarchy for nvkind."""

from __future__ import annotations


class NvkindError(Exception):
    """Base exception for all nvkind errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Main error message.
            details: Additional details such as captured stderr.
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            The message, followed by the details when present.
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class ProvisioningToolFailure(NvkindError):
    """An external command (kind, kubectl) exited non-zero."""

    def __init__(self, command: str, exit_code: int, stderr: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            f"error running '{command}' (exit code {exit_code})",
            stderr.strip() or None,
        )


class StoreUnavailable(NvkindError):
    """The config store could not be reached or refused the request."""


class StoreInconsistent(NvkindError):
    """The cluster exists but no configuration was ever recorded for it."""


class ConfigNotFound(NvkindError):
    """No configuration record exists for the cluster."""


class ConfigConflict(NvkindError):
    """A supplied configuration differs from the one recorded for the cluster."""


class ConfigMissing(NvkindError):
    """No configuration was supplied and none can be adopted."""


class InvalidConfig(NvkindError):
    """A configuration document could not be parsed or validated."""


class UnknownNodeRole(NvkindError):
    """A live node name does not carry any known role token."""


class TopologyMismatch(NvkindError):
    """Live and declared node counts differ for a role."""

    def __init__(self, role: str, live: int, declared: int) -> None:
        self.role = role
        self.live = live
        self.declared = declared
        super().__init__(
            f"node names and configs mismatch for {role} role",
            f"{live} live node(s), {declared} declared",
        )
