"""Tests for the pod lifecycle controller."""

import threading
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client.rest import ApiException

from shovel_harness.errors import ClusterAPIError, ReadinessTimeoutError, RunAborted
from shovel_harness.kube import PodController, is_pod_ready
from shovel_harness.pods import single_container_pod

from .conftest import make_pod, pod_list

LABELS = {"app": "sample-app-1"}


class TestDeploy:

    def test_creates_pod_in_namespace(self, controller, core_v1):
        pod = single_container_pod()
        core_v1.create_namespaced_pod.return_value = pod

        assert controller.deploy(pod) is pod
        core_v1.create_namespaced_pod.assert_called_once_with(namespace="e2e", body=pod)

    def test_rejection_raises_cluster_api_error(self, controller, core_v1):
        core_v1.create_namespaced_pod.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(ClusterAPIError) as exc_info:
            controller.deploy(single_container_pod())

        assert exc_info.value.status == 403
        assert core_v1.create_namespaced_pod.call_count == 1


class TestWaitReady:

    def test_returns_ready_pod(self, controller, core_v1):
        ready = make_pod("sample-app-1")
        core_v1.list_namespaced_pod.return_value = pod_list(ready)

        assert controller.wait_ready(LABELS, timeout=1, poll_interval=0.01) is ready
        core_v1.list_namespaced_pod.assert_called_with(namespace="e2e", label_selector="app=sample-app-1")

    def test_polls_until_ready(self, controller, core_v1):
        core_v1.list_namespaced_pod.side_effect = [
            pod_list(),
            pod_list(make_pod("sample-app-1", phase="Pending", ready=False)),
            pod_list(make_pod("sample-app-1", ready=False)),
            pod_list(make_pod("sample-app-1")),
        ]

        pod = controller.wait_ready(LABELS, timeout=5, poll_interval=0.01)

        assert pod.metadata.name == "sample-app-1"
        assert core_v1.list_namespaced_pod.call_count == 4

    def test_retries_transient_api_errors(self, controller, core_v1):
        core_v1.list_namespaced_pod.side_effect = [
            ApiException(status=500, reason="Internal"),
            pod_list(make_pod("sample-app-1")),
        ]

        assert controller.wait_ready(LABELS, timeout=5, poll_interval=0.01).metadata.name == "sample-app-1"

    def test_ambiguous_selector_is_not_ready(self, controller, core_v1):
        core_v1.list_namespaced_pod.return_value = pod_list(make_pod("a"), make_pod("b"))

        with pytest.raises(ReadinessTimeoutError):
            controller.wait_ready(LABELS, timeout=0.05, poll_interval=0.01)

    def test_times_out_when_selector_never_matches(self, controller, core_v1):
        core_v1.list_namespaced_pod.return_value = pod_list()

        with pytest.raises(ReadinessTimeoutError, match="not ready after"):
            controller.wait_ready(LABELS, timeout=0.05, poll_interval=0.01)
        assert core_v1.list_namespaced_pod.call_count >= 2

    def test_terminated_pod_fails_immediately(self, controller, core_v1):
        core_v1.list_namespaced_pod.return_value = pod_list(make_pod("sample-app-1", phase="Failed", ready=False))

        with pytest.raises(ReadinessTimeoutError, match="Failed"):
            controller.wait_ready(LABELS, timeout=5, poll_interval=0.01)
        assert core_v1.list_namespaced_pod.call_count == 1

    def test_cancel_event_aborts_wait(self, controller, core_v1):
        core_v1.list_namespaced_pod.return_value = pod_list()
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(RunAborted):
            controller.wait_ready(LABELS, timeout=30, poll_interval=10, cancel=cancel)

    def test_cancel_from_another_thread_interrupts_sleep(self, controller, core_v1):
        core_v1.list_namespaced_pod.return_value = pod_list()
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        try:
            with pytest.raises(RunAborted):
                controller.wait_ready(LABELS, timeout=30, poll_interval=10, cancel=cancel)
        finally:
            timer.cancel()
        assert core_v1.list_namespaced_pod.call_count <= 2


class TestTeardown:

    def test_deletes_with_foreground_propagation(self, controller, core_v1):
        assert controller.teardown("sample-app-1") is True
        core_v1.delete_namespaced_pod.assert_called_once_with(
            name="sample-app-1",
            namespace="e2e",
            propagation_policy="Foreground",
        )

    @pytest.mark.parametrize("status", [404, 409, 500])
    def test_api_failures_are_swallowed(self, controller, core_v1, status):
        core_v1.delete_namespaced_pod.side_effect = ApiException(status=status, reason="nope")

        assert controller.teardown("sample-app-1") is False
        assert core_v1.delete_namespaced_pod.call_count == 1

    def test_transport_failures_are_swallowed(self, controller, core_v1):
        core_v1.delete_namespaced_pod.side_effect = ConnectionError("connection reset")

        assert controller.teardown("sample-app-1") is False


def test_is_pod_ready():
    assert is_pod_ready(make_pod("a"))
    assert not is_pod_ready(make_pod("a", ready=False))
    assert not is_pod_ready(make_pod("a", phase="Pending"))


def test_from_kubeconfig_uses_dedicated_api_client(tmp_path):
    kubeconfig = tmp_path / "config"
    api_client = MagicMock()
    with patch("shovel_harness.kube.config.new_client_from_config", return_value=api_client) as new_client, \
            patch("shovel_harness.kube.client.CoreV1Api") as core_v1_cls:
        controller = PodController.from_kubeconfig(kubeconfig, namespace="e2e")

    new_client.assert_called_once_with(config_file=str(kubeconfig))
    core_v1_cls.assert_called_once_with(api_client)
    assert controller.namespace == "e2e"
    assert controller.core_v1 is core_v1_cls.return_value
