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


"""Error types raised by the harness."""

from __future__ import annotations


class HarnessError(RuntimeError):
    """Base class for harness failures."""


class ConfigurationError(HarnessError):
    """A test case was configured in a way the plugin cannot be invoked with."""


class ClusterAPIError(HarnessError):
    """The Kubernetes API rejected a pod request."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ReadinessTimeoutError(HarnessError):
    """A pod did not reach the running, ready state in time."""


class RunAborted(HarnessError):
    """The run was cancelled while a case was waiting on the cluster."""


class InvocationError(HarnessError):
    """The plugin exited non-zero or did not produce the expected output."""
