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


"""Declarative test cases and the plugin invocation they render to."""

from __future__ import annotations

from pathlib import Path

from kubernetes import client

from shovel_harness.args import Args
from shovel_harness.constants import (
    DUMPER_IMAGE,
    FLAG_CONTAINER,
    FLAG_IMAGE,
    FLAG_OUTPUT,
    FLAG_POD_NAME,
    FLAG_STORE_OUTPUT_ON_HOST,
    SIDECAR_CONTAINER_IMAGE,
    TARGET_CONTAINER_IMAGE,
    TARGET_CONTAINER_NAME,
)
from shovel_harness.errors import ConfigurationError
from shovel_harness.pods import (
    multi_container_pod,
    multi_container_pod_with_default_container,
    multi_container_pod_with_shared_mount,
    single_container_pod,
)


class TestCase:
    """One plugin invocation against one freshly deployed pod.

    Defaults to a single-container pod with output stored on the host. In
    download mode ``output`` stays unset until the harness stages a directory
    for the case.
    """

    # Keep pytest from collecting this class.
    __test__ = False

    def __init__(self, name: str, pod: client.V1Pod | None = None) -> None:
        self.name = name
        self.pod = pod if pod is not None else single_container_pod()
        self.args: list[str] = []
        self.host_output = True
        self.output: Path | None = None

    @property
    def pod_name(self) -> str:
        return self.pod.metadata.name

    @property
    def labels(self) -> dict[str, str]:
        return dict(self.pod.metadata.labels or {})

    def with_pod(self, pod: client.V1Pod) -> TestCase:
        self.pod = pod
        return self

    def download_output(self) -> TestCase:
        self.host_output = False
        return self

    def with_args(self, *args: str) -> TestCase:
        """Add extra ``key, value`` pairs passed through to the plugin.

        Raises:
            ConfigurationError: If an odd number of tokens is given.
        """
        if len(args) % 2 != 0:
            raise ConfigurationError(
                f"Test case '{self.name}': extra args must be key/value pairs, got {len(args)} tokens"
            )
        self.args.extend(args)
        return self

    def format_args(self, command: str, dumper_image: str = DUMPER_IMAGE) -> list[str]:
        """Render the plugin command line for this case.

        Order: command, pod name, dumper image, output mode, then the extra
        pairs in the order they were added.

        Args:
            command: Plugin subcommand (e.g. ``trace``, ``gcdump``).
            dumper_image: Image the plugin runs the dumper with.

        Returns:
            The token list to pass to the plugin binary.

        Raises:
            ConfigurationError: If download mode is set but no output path
                has been staged yet.
        """
        args = (
            Args()
            .append_raw(command)
            .append(FLAG_POD_NAME, self.pod_name)
            .append(FLAG_IMAGE, dumper_image)
        )

        if self.host_output:
            args.append_key(FLAG_STORE_OUTPUT_ON_HOST)
        else:
            if self.output is None:
                raise ConfigurationError(f"Test case '{self.name}': output path has not been staged")
            args.append(FLAG_OUTPUT, str(self.output))

        for key, value in zip(self.args[::2], self.args[1::2]):
            args.append(key, value)

        return args.get()

    def __repr__(self) -> str:
        mode = "host" if self.host_output else "download"
        return f"TestCase(name={self.name!r}, pod={self.pod_name!r}, output={mode!r})"


def default_cases(
    *additional: TestCase,
    target_image: str = TARGET_CONTAINER_IMAGE,
    sidecar_image: str = SIDECAR_CONTAINER_IMAGE,
) -> list[TestCase]:
    """Build the standard case matrix followed by any command-specific cases.

    Each call generates fresh pods, so the returned cases may run in parallel
    with cases from another call.
    """
    basic = [
        TestCase("Basic test with output on host", single_container_pod(target_image)),
        TestCase("Basic test with downloading output", single_container_pod(target_image))
        .download_output(),
        TestCase("MultiContainer pod")
        .with_pod(multi_container_pod(target_image, sidecar_image))
        .with_args(FLAG_CONTAINER, TARGET_CONTAINER_NAME)
        .download_output(),
        TestCase("MultiContainer pod with default-container annotation")
        .with_pod(multi_container_pod_with_default_container(target_image, sidecar_image))
        .download_output(),
        TestCase("MultiContainer pod with shared mount")
        .with_pod(multi_container_pod_with_shared_mount(target_image, sidecar_image))
        .with_args(FLAG_CONTAINER, TARGET_CONTAINER_NAME)
        .download_output(),
    ]
    return basic + list(additional)
