"""Tests for output staging."""

from shovel_harness.staging import OutputStaging


def test_command_directory_is_namespaced_by_plugin_and_command(tmp_path):
    staging = OutputStaging(tmp_path, "trace")

    assert staging.prepare() == tmp_path / "kubectl-shovel" / "trace"
    assert staging.dir.is_dir()


def test_case_outputs_are_unique(tmp_path):
    with OutputStaging(tmp_path, "trace", keep=True) as staging:
        outputs = [staging.case_output() for _ in range(20)]

    assert len({output.parent for output in outputs}) == 20
    for output in outputs:
        assert output.name == "output"
        assert output.parent.parent == staging.dir
        assert output.parent.is_dir()
        assert not output.exists()


def test_cleanup_removes_command_directory_with_outputs(tmp_path):
    with OutputStaging(tmp_path, "gcdump") as staging:
        staging.case_output().write_text("dump")

    assert not staging.dir.exists()
    assert (tmp_path / "kubectl-shovel").is_dir()


def test_keep_preserves_outputs(tmp_path):
    with OutputStaging(tmp_path, "gcdump", keep=True) as staging:
        output = staging.case_output()
        output.write_text("dump")

    assert output.read_text() == "dump"


def test_cleanup_failure_is_swallowed(tmp_path, caplog):
    staging = OutputStaging(tmp_path, "dump")

    staging.cleanup()

    assert "Could not remove" in caplog.text
