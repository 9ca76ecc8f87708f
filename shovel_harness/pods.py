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


"""Pod topologies deployed as dump targets.

Every constructor returns a new ``V1Pod`` with a freshly generated name and an
``app`` label equal to that name, so parallel cases never share a name or a
readiness selector.
"""

from __future__ import annotations

import uuid

from kubernetes import client

from shovel_harness.constants import (
    ANNOTATION_DEFAULT_CONTAINER,
    LABEL_APP,
    LIVENESS_FAILURE_THRESHOLD,
    LIVENESS_INITIAL_DELAY_SECONDS,
    LIVENESS_PATH,
    LIVENESS_PERIOD_SECONDS,
    LIVENESS_SUCCESS_THRESHOLD,
    LIVENESS_TIMEOUT_SECONDS,
    SHARED_MOUNT_PATH,
    SHARED_VOLUME_NAME,
    SIDECAR_CONTAINER_IMAGE,
    SIDECAR_CONTAINER_NAME,
    TARGET_CONTAINER_IMAGE,
    TARGET_CONTAINER_NAME,
    TARGET_POD_NAME_PREFIX,
    TARGET_PORT,
    TARGET_PORT_NAME,
)


def random_pod_meta(annotations: dict[str, str] | None = None) -> client.V1ObjectMeta:
    """Build pod metadata with a unique name and a matching ``app`` label.

    Args:
        annotations: Optional pod annotations.

    Returns:
        Object metadata for a new target pod.
    """
    name = f"{TARGET_POD_NAME_PREFIX}-{uuid.uuid4()}"
    return client.V1ObjectMeta(
        name=name,
        labels={LABEL_APP: name},
        annotations=annotations,
    )


def target_container(image: str = TARGET_CONTAINER_IMAGE) -> client.V1Container:
    """Build the container that gets dumped, with an HTTP liveness probe."""
    return client.V1Container(
        name=TARGET_CONTAINER_NAME,
        image=image,
        image_pull_policy="IfNotPresent",
        ports=[client.V1ContainerPort(
            container_port=TARGET_PORT,
            name=TARGET_PORT_NAME,
            protocol="TCP",
        )],
        liveness_probe=client.V1Probe(
            http_get=client.V1HTTPGetAction(
                path=LIVENESS_PATH,
                port=TARGET_PORT_NAME,
                scheme="HTTP",
            ),
            initial_delay_seconds=LIVENESS_INITIAL_DELAY_SECONDS,
            timeout_seconds=LIVENESS_TIMEOUT_SECONDS,
            period_seconds=LIVENESS_PERIOD_SECONDS,
            success_threshold=LIVENESS_SUCCESS_THRESHOLD,
            failure_threshold=LIVENESS_FAILURE_THRESHOLD,
        ),
        termination_message_policy="FallbackToLogsOnError",
    )


def sidecar_container(image: str = SIDECAR_CONTAINER_IMAGE) -> client.V1Container:
    """Build the idle sidecar container."""
    return client.V1Container(name=SIDECAR_CONTAINER_NAME, image=image)


def _shared_mounts() -> list[client.V1VolumeMount]:
    return [client.V1VolumeMount(name=SHARED_VOLUME_NAME, mount_path=SHARED_MOUNT_PATH)]


def single_container_pod(
    target_image: str = TARGET_CONTAINER_IMAGE,
) -> client.V1Pod:
    """Pod with only the target container."""
    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=random_pod_meta(),
        spec=client.V1PodSpec(containers=[target_container(target_image)]),
    )


def multi_container_pod(
    target_image: str = TARGET_CONTAINER_IMAGE,
    sidecar_image: str = SIDECAR_CONTAINER_IMAGE,
) -> client.V1Pod:
    """Pod with the target container followed by a sidecar."""
    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=random_pod_meta(),
        spec=client.V1PodSpec(containers=[
            target_container(target_image),
            sidecar_container(sidecar_image),
        ]),
    )


def multi_container_pod_with_default_container(
    target_image: str = TARGET_CONTAINER_IMAGE,
    sidecar_image: str = SIDECAR_CONTAINER_IMAGE,
) -> client.V1Pod:
    """Multi-container pod annotated with the target as its default container."""
    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=random_pod_meta(annotations={ANNOTATION_DEFAULT_CONTAINER: TARGET_CONTAINER_NAME}),
        spec=client.V1PodSpec(containers=[
            target_container(target_image),
            sidecar_container(sidecar_image),
        ]),
    )


def multi_container_pod_with_shared_mount(
    target_image: str = TARGET_CONTAINER_IMAGE,
    sidecar_image: str = SIDECAR_CONTAINER_IMAGE,
) -> client.V1Pod:
    """Multi-container pod whose containers share an emptyDir at the temp path.

    Lets the dumper read artifacts the sidecar writes into the common
    filesystem location.
    """
    target = target_container(target_image)
    target.volume_mounts = _shared_mounts()
    sidecar = sidecar_container(sidecar_image)
    sidecar.volume_mounts = _shared_mounts()

    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=random_pod_meta(),
        spec=client.V1PodSpec(
            containers=[target, sidecar],
            volumes=[client.V1Volume(
                name=SHARED_VOLUME_NAME,
                empty_dir=client.V1EmptyDirVolumeSource(),
            )],
        ),
    )


def default_container_name(pod: client.V1Pod) -> str:
    """Resolve the container tooling acts on when no container is given.

    Args:
        pod: Pod to inspect.

    Returns:
        The annotated default container, else the first container's name.
    """
    annotations = pod.metadata.annotations or {}
    annotated = annotations.get(ANNOTATION_DEFAULT_CONTAINER)
    if annotated:
        return annotated
    return pod.spec.containers[0].name


def label_selector(labels: dict[str, str]) -> str:
    """Render a label dict as an equality-based selector string."""
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


TOPOLOGIES = {
    "single": single_container_pod,
    "multi": multi_container_pod,
    "multi-default": multi_container_pod_with_default_container,
    "multi-shared-mount": multi_container_pod_with_shared_mount,
}
