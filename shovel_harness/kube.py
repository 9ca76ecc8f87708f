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


"""Target pod lifecycle: create, wait until ready, delete."""

from __future__ import annotations

import threading
from pathlib import Path

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_delay,
    stop_when_event_set,
    wait_fixed,
)

from shovel_harness import console, logger
from shovel_harness.constants import (
    CONDITION_READY,
    DEFAULT_READY_POLL_INTERVAL_SECONDS,
    DEFAULT_READY_TIMEOUT_SECONDS,
    NS_DEFAULT,
    PHASE_RUNNING,
    PROPAGATION_FOREGROUND,
    TERMINAL_PHASES,
)
from shovel_harness.errors import ClusterAPIError, ReadinessTimeoutError, RunAborted
from shovel_harness.pods import label_selector


def is_pod_ready(pod: client.V1Pod) -> bool:
    """Return True if the pod is running and reports the Ready condition."""
    status = pod.status
    if status is None or status.phase != PHASE_RUNNING:
        return False
    return any(
        condition.type == CONDITION_READY and condition.status == "True"
        for condition in status.conditions or []
    )


class PodController:
    """Create, poll and delete target pods in a single namespace.

    The controller never retries creation or deletion. Readiness polling is
    the only blocking call and is bounded by a timeout and a cancel event.
    """

    def __init__(self, core_v1: client.CoreV1Api, namespace: str = NS_DEFAULT) -> None:
        self.core_v1 = core_v1
        self.namespace = namespace

    @classmethod
    def from_kubeconfig(cls, kubeconfig: Path, namespace: str = NS_DEFAULT) -> PodController:
        """Build a controller from a kubeconfig file.

        Uses a dedicated API client so the process-wide default configuration
        is left untouched.

        Args:
            kubeconfig: Path to the cluster credentials file.
            namespace: Namespace pods are deployed to.

        Returns:
            A controller bound to the cluster in the kubeconfig's current context.
        """
        logger.debug("Loading kubeconfig from %s", kubeconfig)
        api_client = config.new_client_from_config(config_file=str(kubeconfig))
        return cls(client.CoreV1Api(api_client), namespace)

    def deploy(self, pod: client.V1Pod) -> client.V1Pod:
        """Create the pod and return without waiting for it to start.

        Args:
            pod: Pod manifest to create.

        Returns:
            The pod as accepted by the API server.

        Raises:
            ClusterAPIError: If the API server rejects the pod.
        """
        name = pod.metadata.name
        console.print(f"[yellow]ℹ️  Deploying target pod {self.namespace}/{name}...[/yellow]")
        try:
            return self.core_v1.create_namespaced_pod(namespace=self.namespace, body=pod)
        except ApiException as err:
            raise ClusterAPIError(
                f"Failed to create pod {self.namespace}/{name}: {err.status} {err.reason}",
                status=err.status,
            ) from err

    def _ready_pod(self, selector: str) -> client.V1Pod | None:
        """Return the single ready pod matching the selector, if there is one.

        Raises:
            ReadinessTimeoutError: If the matching pod already terminated.
        """
        pods = self.core_v1.list_namespaced_pod(namespace=self.namespace, label_selector=selector).items
        if len(pods) != 1:
            logger.debug("Selector %s matched %d pods", selector, len(pods))
            return None
        pod = pods[0]
        phase = pod.status.phase if pod.status else None
        if phase in TERMINAL_PHASES:
            raise ReadinessTimeoutError(
                f"Pod {self.namespace}/{pod.metadata.name} terminated with phase {phase} before becoming ready"
            )
        if is_pod_ready(pod):
            return pod
        logger.debug("Pod %s not ready yet (phase=%s)", pod.metadata.name, phase)
        return None

    def wait_ready(
        self,
        labels: dict[str, str],
        timeout: float = DEFAULT_READY_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_READY_POLL_INTERVAL_SECONDS,
        cancel: threading.Event | None = None,
    ) -> client.V1Pod:
        """Block until exactly one pod matching ``labels`` is running and ready.

        Args:
            labels: Labels that uniquely identify the pod.
            timeout: Maximum seconds to wait.
            poll_interval: Seconds between polls.
            cancel: Event that interrupts the wait when set.

        Returns:
            The ready pod.

        Raises:
            ReadinessTimeoutError: If no ready pod appears within the timeout,
                or the pod terminates while waiting.
            RunAborted: If ``cancel`` is set while waiting.
        """
        if cancel is None:
            cancel = threading.Event()
        selector = label_selector(labels)
        console.print(f"[yellow]ℹ️  Waiting for pod ({selector}) to start...[/yellow]")

        @retry(
            stop=stop_after_delay(timeout) | stop_when_event_set(cancel),
            wait=wait_fixed(poll_interval),
            retry=retry_if_result(lambda pod: pod is None) | retry_if_exception_type(ApiException),
            sleep=cancel.wait,
        )
        def _poll() -> client.V1Pod | None:
            return self._ready_pod(selector)

        try:
            pod = _poll()
        except RetryError as err:
            if cancel.is_set():
                raise RunAborted(f"Run aborted while waiting for pod ({selector})") from err
            last = err.last_attempt
            detail = f": {last.exception()}" if last.failed else ""
            raise ReadinessTimeoutError(
                f"Pod ({selector}) in namespace {self.namespace} not ready after {timeout}s{detail}"
            ) from err

        console.print(f"[green]✅ Pod {pod.metadata.name} is ready[/green]")
        return pod

    def teardown(self, name: str) -> bool:
        """Delete the pod with foreground cascading propagation.

        Attempted once. Failures are logged and swallowed so cleanup never
        fails the case.

        Args:
            name: Pod name.

        Returns:
            True if the API server accepted the delete request.
        """
        console.print(f"[yellow]ℹ️  Deleting test pod {self.namespace}/{name}[/yellow]")
        try:
            self.core_v1.delete_namespaced_pod(
                name=name,
                namespace=self.namespace,
                propagation_policy=PROPAGATION_FOREGROUND,
            )
            return True
        except ApiException as err:
            if err.status == 404:
                logger.debug("Pod %s/%s already gone", self.namespace, name)
            else:
                logger.warning("Failed to delete pod %s/%s: %s %s", self.namespace, name, err.status, err.reason)
        except Exception as err:
            logger.warning("Failed to delete pod %s/%s: %s", self.namespace, name, err)
        return False
