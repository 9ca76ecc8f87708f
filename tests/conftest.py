"""Shared fixtures for the harness tests."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from kubernetes import client

from shovel_harness import console
from shovel_harness.config import HarnessSettings
from shovel_harness.kube import PodController

logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s"
)


def make_pod(name: str, phase: str = "Running", ready: bool = True) -> client.V1Pod:
    """Build a pod object as the API server would report it."""
    conditions = [client.V1PodCondition(type="Ready", status="True" if ready else "False")]
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, labels={"app": name}),
        status=client.V1PodStatus(phase=phase, conditions=conditions),
    )


def pod_list(*pods: client.V1Pod) -> client.V1PodList:
    return client.V1PodList(items=list(pods))


@pytest.fixture
def core_v1():
    """CoreV1Api stand-in."""
    return MagicMock(spec=client.CoreV1Api)


@pytest.fixture
def controller(core_v1):
    return PodController(core_v1, namespace="e2e")


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings isolated from the caller's SHOVEL_* and KUBECONFIG env."""
    for var in ("KUBECONFIG", "SHOVEL_KUBECONFIG", "SHOVEL_NAMESPACE", "SHOVEL_MAX_WORKERS"):
        monkeypatch.delenv(var, raising=False)
    return HarnessSettings(
        namespace="e2e",
        output_root=tmp_path,
        ready_timeout=0.2,
        ready_poll_interval=0.01,
        plugin_timeout=5,
    )


@pytest.fixture
def wide_console(monkeypatch):
    """Keep rich from wrapping table cells in captured output."""
    monkeypatch.setattr(console._real, "width", 250)
