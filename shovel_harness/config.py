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


"""Harness settings, auto-loaded from SHOVEL_* environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shovel_harness import console
from shovel_harness.constants import (
    DEFAULT_KUBECONFIG,
    DEFAULT_MAX_WORKERS,
    DEFAULT_OUTPUT_ROOT,
    DEFAULT_PLUGIN_BINARY,
    DEFAULT_PLUGIN_TIMEOUT_SECONDS,
    DEFAULT_READY_POLL_INTERVAL_SECONDS,
    DEFAULT_READY_TIMEOUT_SECONDS,
    DUMPER_IMAGE,
    NS_DEFAULT,
    SIDECAR_CONTAINER_IMAGE,
    TARGET_CONTAINER_IMAGE,
)


class HarnessSettings(BaseSettings):
    """Harness configuration, auto-loaded from SHOVEL_* env vars.

    Attributes:
        namespace: Namespace the target pods are deployed to.
        dumper_image: Image passed to the plugin via ``--image``.
        target_image: Image of the container being dumped.
        sidecar_image: Image of the idle sidecar container.
        plugin_binary: Executable invoked for each test case.
        kubeconfig: Cluster credentials file, or None for ``~/.kube/config``.
            Also read from ``KUBECONFIG``.
        output_root: Temp root under which downloaded outputs are staged.
        ready_timeout: Maximum seconds to wait for a pod to become ready.
        ready_poll_interval: Seconds between readiness polls.
        plugin_timeout: Maximum seconds a single plugin invocation may run.
        max_workers: Upper bound on test cases running at the same time.
        keep_outputs: Whether staged outputs survive the end of a run.
    """

    model_config = SettingsConfigDict(env_prefix="SHOVEL_", extra="ignore")

    namespace: str = NS_DEFAULT
    dumper_image: str = DUMPER_IMAGE
    target_image: str = TARGET_CONTAINER_IMAGE
    sidecar_image: str = SIDECAR_CONTAINER_IMAGE
    plugin_binary: str = DEFAULT_PLUGIN_BINARY
    kubeconfig: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("SHOVEL_KUBECONFIG", "KUBECONFIG", "kubeconfig"),
    )
    output_root: Path = DEFAULT_OUTPUT_ROOT
    ready_timeout: float = Field(default=DEFAULT_READY_TIMEOUT_SECONDS, gt=0)
    ready_poll_interval: float = Field(default=DEFAULT_READY_POLL_INTERVAL_SECONDS, gt=0)
    plugin_timeout: float = Field(default=DEFAULT_PLUGIN_TIMEOUT_SECONDS, gt=0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1, le=64)
    keep_outputs: bool = False

    def resolved_kubeconfig(self) -> Path:
        """Return the kubeconfig path, falling back to the per-user default."""
        if self.kubeconfig:
            return self.kubeconfig.expanduser()
        return DEFAULT_KUBECONFIG


def display_settings(settings: HarnessSettings) -> None:
    """Print the effective settings."""
    console.print("[bold]Harness configuration:[/bold]")
    console.print(f"  namespace:       {settings.namespace}")
    console.print(f"  kubeconfig:      {settings.resolved_kubeconfig()}")
    console.print(f"  plugin:          {settings.plugin_binary}")
    console.print(f"  dumper image:    {settings.dumper_image}")
    console.print(f"  output root:     {settings.output_root}")
    console.print(f"  ready timeout:   {settings.ready_timeout}s")
    console.print(f"  max workers:     {settings.max_workers}")
