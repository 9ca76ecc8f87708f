"""Tests for harness settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from shovel_harness.config import HarnessSettings
from shovel_harness.constants import DEFAULT_KUBECONFIG, DUMPER_IMAGE, NS_DEFAULT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("KUBECONFIG", "SHOVEL_KUBECONFIG", "SHOVEL_NAMESPACE", "SHOVEL_DUMPER_IMAGE",
                "SHOVEL_READY_TIMEOUT", "SHOVEL_MAX_WORKERS"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    settings = HarnessSettings()

    assert settings.namespace == NS_DEFAULT
    assert settings.dumper_image == DUMPER_IMAGE
    assert settings.kubeconfig is None
    assert settings.resolved_kubeconfig() == DEFAULT_KUBECONFIG
    assert settings.keep_outputs is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SHOVEL_NAMESPACE", "shovel-e2e")
    monkeypatch.setenv("SHOVEL_DUMPER_IMAGE", "localhost:5001/dumper:dev")
    monkeypatch.setenv("SHOVEL_READY_TIMEOUT", "30")

    settings = HarnessSettings()

    assert settings.namespace == "shovel-e2e"
    assert settings.dumper_image == "localhost:5001/dumper:dev"
    assert settings.ready_timeout == 30


def test_kubeconfig_from_standard_env(monkeypatch, tmp_path):
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "kind.yaml"))

    assert HarnessSettings().resolved_kubeconfig() == tmp_path / "kind.yaml"


def test_prefixed_kubeconfig_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "kind.yaml"))
    monkeypatch.setenv("SHOVEL_KUBECONFIG", str(tmp_path / "e2e.yaml"))

    assert HarnessSettings().kubeconfig == tmp_path / "e2e.yaml"


def test_kubeconfig_by_keyword():
    assert HarnessSettings(kubeconfig="/etc/kube/config").kubeconfig == Path("/etc/kube/config")


@pytest.mark.parametrize("field, value", [("max_workers", 0), ("ready_timeout", 0), ("ready_poll_interval", -1)])
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        HarnessSettings(**{field: value})
