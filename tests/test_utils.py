"""Tests for utility helpers."""

import subprocess
from unittest.mock import patch

import pytest
import sh

from shovel_harness.errors import ConfigurationError
from shovel_harness.utils import parse_key_values, require_command, run_plugin


def test_parse_key_values_flattens_pairs():
    assert parse_key_values(["duration=10s", "--container=target", "format="]) == [
        "duration", "10s", "container", "target", "format", "",
    ]


@pytest.mark.parametrize("item", ["duration", "=10s"])
def test_parse_key_values_rejects_malformed_items(item):
    with pytest.raises(ConfigurationError):
        parse_key_values([item])


def test_run_plugin_passes_kubeconfig(tmp_path):
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ok", stderr="")
    with patch("shovel_harness.utils.subprocess.run", return_value=completed) as run:
        assert run_plugin("kubectl-shovel", ["trace"], kubeconfig=tmp_path / "config", timeout=3) == (0, "ok", "")

    cmd = run.call_args.args[0]
    kwargs = run.call_args.kwargs
    assert cmd == ["kubectl-shovel", "trace"]
    assert kwargs["env"]["KUBECONFIG"] == str(tmp_path / "config")
    assert kwargs["timeout"] == 3


def test_run_plugin_reports_timeouts():
    with patch("shovel_harness.utils.subprocess.run", side_effect=subprocess.TimeoutExpired("kubectl-shovel", 3)):
        returncode, stdout, stderr = run_plugin("kubectl-shovel", ["trace"])

    assert returncode == -1
    assert "timed out" in stderr


def test_run_plugin_reports_missing_binary():
    returncode, _, stderr = run_plugin("definitely-not-a-shovel-binary", ["trace"])

    assert returncode == -1
    assert stderr


def test_require_command_raises_for_missing_tool():
    with patch("shovel_harness.utils.sh") as fake_sh:
        fake_sh.ErrorReturnCode = sh.ErrorReturnCode
        fake_sh.which.side_effect = sh.ErrorReturnCode_1("which kubectl-shovel", b"", b"")
        with pytest.raises(RuntimeError, match="not found"):
            require_command("kubectl-shovel")
