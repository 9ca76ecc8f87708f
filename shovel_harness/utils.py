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


"""Utility functions for running the plugin and checking prerequisites."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import sh

from shovel_harness.errors import ConfigurationError


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    try:
        sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"Required command '{cmd}' not found. Please install it first.") from err


def run_plugin(
    binary: str,
    args: list[str],
    kubeconfig: Path | None = None,
    timeout: float = 600,
) -> tuple[int, str, str]:
    """Run the plugin via subprocess and return (returncode, stdout, stderr).

    Args:
        binary: Plugin executable.
        args: Rendered plugin arguments.
        kubeconfig: Credentials file exported as ``KUBECONFIG``, or None to
            inherit the caller's environment.
        timeout: Maximum seconds to wait for the plugin to exit.

    Returns:
        Tuple of (returncode, stdout, stderr). Timeouts and launch failures
        are reported as returncode -1 with the error in stderr.
    """
    env = os.environ.copy()
    if kubeconfig is not None:
        env["KUBECONFIG"] = str(kubeconfig)
    try:
        result = subprocess.run(
            [binary, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
        return result.returncode, result.stdout, result.stderr
    except (subprocess.SubprocessError, OSError) as exc:
        return -1, "", str(exc)


def parse_key_values(items: list[str]) -> list[str]:
    """Flatten ``key=value`` strings into alternating key and value tokens.

    Raises:
        ConfigurationError: If an item has no ``=`` or an empty key.
    """
    pairs: list[str] = []
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ConfigurationError(f"Expected KEY=VALUE, got '{item}'")
        pairs.extend((key.lstrip("-"), value))
    return pairs
