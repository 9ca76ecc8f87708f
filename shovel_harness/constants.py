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


"""Constants, image defaults loading, and the dep_value helper."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import yaml

PACKAGE_DIR = Path(__file__).resolve().parent


def load_images() -> dict:
    """Load container images and probe policy from images.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    images_file = PACKAGE_DIR / "images.yaml"
    with open(images_file) as f:
        return yaml.safe_load(f)


IMAGES = load_images()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the IMAGES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = IMAGES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Plugin --
PLUGIN_NAME = "kubectl-shovel"
DEFAULT_PLUGIN_BINARY = "kubectl-shovel"
OUTPUT_FILE_NAME = "output"

# -- Plugin flags --
FLAG_POD_NAME = "pod-name"
FLAG_IMAGE = "image"
FLAG_OUTPUT = "output"
FLAG_STORE_OUTPUT_ON_HOST = "store-output-on-host"
FLAG_CONTAINER = "container"

# -- Images --
DUMPER_IMAGE = dep_value("images", "dumper", default="kubectl-shovel/dumper-integration-tests")
TARGET_CONTAINER_IMAGE = dep_value("images", "target", default="kubectl-shovel/sample-integration-tests")
SIDECAR_CONTAINER_IMAGE = dep_value("images", "sidecar", default="gcr.io/google_containers/pause:3.1")

# -- Pod naming --
NS_DEFAULT = "default"
TARGET_POD_NAME_PREFIX = "sample-app"
TARGET_CONTAINER_NAME = "target"
SIDECAR_CONTAINER_NAME = "sidecar"
LABEL_APP = "app"

# -- Well-known annotations --
ANNOTATION_DEFAULT_CONTAINER = "kubectl.kubernetes.io/default-container"

# -- Target container --
TARGET_PORT = dep_value("target", "port", default=6000)
TARGET_PORT_NAME = "app"
LIVENESS_PATH = dep_value("target", "liveness", "path", default="/health/live")
LIVENESS_INITIAL_DELAY_SECONDS = dep_value("target", "liveness", "initial_delay_seconds", default=2)
LIVENESS_TIMEOUT_SECONDS = dep_value("target", "liveness", "timeout_seconds", default=1)
LIVENESS_PERIOD_SECONDS = dep_value("target", "liveness", "period_seconds", default=1)
LIVENESS_SUCCESS_THRESHOLD = dep_value("target", "liveness", "success_threshold", default=1)
LIVENESS_FAILURE_THRESHOLD = dep_value("target", "liveness", "failure_threshold", default=5)

# -- Shared mount --
SHARED_VOLUME_NAME = "shared-path-to-tmp"
SHARED_MOUNT_PATH = "/tmp"

# -- Pod phases --
PHASE_RUNNING = "Running"
TERMINAL_PHASES = ("Failed", "Succeeded")
CONDITION_READY = "Ready"

# -- Deletion --
PROPAGATION_FOREGROUND = "Foreground"

# -- Harness defaults --
DEFAULT_OUTPUT_ROOT = Path(tempfile.gettempdir())
DEFAULT_KUBECONFIG = Path.home() / ".kube" / "config"
DEFAULT_READY_TIMEOUT_SECONDS = 180
DEFAULT_READY_POLL_INTERVAL_SECONDS = 2
DEFAULT_PLUGIN_TIMEOUT_SECONDS = 600
DEFAULT_MAX_WORKERS = 5
