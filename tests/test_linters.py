"""Tests for the external linter commands."""

import sys
from pathlib import Path

# Add parent directory to path to import the main module
sys.path.insert(0, str(Path(__file__).parent.parent))

from pattern_ops.linters import (
    SUPER_LINTER_IMAGE,
    ansible_lint_command,
    run_ansible_unittest,
    run_super_linter,
    super_linter_command,
)


def test_super_linter_command(tmp_path):
    """The built-in validators are disabled and extra flags are appended before the mount."""
    cmd = super_linter_command(tmp_path, "-e VALIDATE_MARKDOWN=false -e VALIDATE_PYTHON_PYLINT=false")

    assert cmd[:2] == ["podman", "run"]
    assert "VALIDATE_TEKTON=false" in cmd
    assert cmd[-3:] == ["-v", f"{tmp_path}:/tmp/lint:rw,z", SUPER_LINTER_IMAGE]
    assert cmd[-7:-3] == ["-e", "VALIDATE_MARKDOWN=false", "-e", "VALIDATE_PYTHON_PYLINT=false"]


def test_run_super_linter_removes_mypy_cache(fake_run, tmp_path):
    """A stale .mypy_cache is removed before the linter runs."""
    (tmp_path / ".mypy_cache" / "3.11").mkdir(parents=True)

    assert run_super_linter(tmp_path) == 0
    assert not (tmp_path / ".mypy_cache").exists()
    assert fake_run.commands("podman")


def test_ansible_lint_command(tmp_path):
    """ansible-lint runs in the creator image against ansible/."""
    cmd = ansible_lint_command(tmp_path, interactive=True)

    assert cmd[:3] == ["podman", "run", "-it"]
    assert cmd[-3:] == ["quay.io/ansible/creator-ee:latest", "-vvv", "ansible/"]
    assert "-it" not in ansible_lint_command(tmp_path, interactive=False)


def test_run_ansible_unittest(fake_run, tmp_path):
    """Unit test files under ansible/tests/unit are passed to pytest."""
    unit_dir = tmp_path / "ansible" / "tests" / "unit"
    unit_dir.mkdir(parents=True)
    (unit_dir / "test_b.py").write_text("")
    (unit_dir / "test_a.py").write_text("")
    (unit_dir / "helper.py").write_text("")

    assert run_ansible_unittest(tmp_path) == 0
    assert fake_run.calls[-1] == [
        "pytest", "-r", "a", "--fulltrace", "--color", "yes",
        "ansible/tests/unit/test_a.py", "ansible/tests/unit/test_b.py",
    ]


def test_run_ansible_unittest_without_tests(fake_run, tmp_path):
    """No unit tests is a failure, pytest is not started."""
    assert run_ansible_unittest(tmp_path) == 1
    assert fake_run.calls == []
