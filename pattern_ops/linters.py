"""External linters, run in containers where they need their own toolchain."""

import shlex
import shutil
import sys
from pathlib import Path
from .utils import log, run_command


SUPER_LINTER_IMAGE = "docker.io/github/super-linter:slim-v4"
ANSIBLE_LINT_IMAGE = "quay.io/ansible/creator-ee:latest"

# Validators that do not understand pattern repositories
SUPER_LINTER_DISABLED = [
    "VALIDATE_BASH",
    "VALIDATE_JSCPD",
    "VALIDATE_KUBERNETES_KUBEVAL",
    "VALIDATE_YAML",
    "VALIDATE_ANSIBLE",
    "VALIDATE_DOCKERFILE_HADOLINT",
    "VALIDATE_TEKTON",
]


def super_linter_command(workdir: Path, disable_linters: str = "") -> list[str]:
    """
    Build the podman command running super-linter on workdir.

    Args:
        workdir: Directory mounted as the lint root
        disable_linters: Extra podman flags, e.g. "-e VALIDATE_MARKDOWN=false"
    """
    cmd = ["podman", "run", "-e", "RUN_LOCAL=true", "-e", "USE_FIND_ALGORITHM=true"]
    for validator in SUPER_LINTER_DISABLED:
        cmd.extend(["-e", f"{validator}=false"])
    cmd.extend(shlex.split(disable_linters or ""))
    cmd.extend(["-v", f"{workdir}:/tmp/lint:rw,z", SUPER_LINTER_IMAGE])
    return cmd


def run_super_linter(workdir: Path, disable_linters: str = "", verbose: bool = False) -> int:
    """Run super-linter locally after dropping a stale mypy cache it would trip over."""
    mypy_cache = workdir / ".mypy_cache"
    if mypy_cache.exists():
        log(f"Removing {mypy_cache}", verbose)
        shutil.rmtree(mypy_cache)

    return run_command(super_linter_command(workdir, disable_linters), cwd=workdir, verbose=verbose)


def ansible_lint_command(workdir: Path, interactive: bool = False) -> list[str]:
    """Build the podman command running ansible-lint on the ansible/ folder."""
    cmd = ["podman", "run"]
    if interactive:
        cmd.append("-it")
    cmd.extend([
        "-v", f"{workdir}:/workspace:rw,z",
        "--workdir", "/workspace",
        "--entrypoint", "/usr/local/bin/ansible-lint",
        ANSIBLE_LINT_IMAGE,
        "-vvv",
        "ansible/",
    ])
    return cmd


def run_ansible_lint(workdir: Path, verbose: bool = False) -> int:
    """Run ansible-lint in the creator execution environment."""
    # podman refuses -it without a terminal attached
    cmd = ansible_lint_command(workdir, interactive=sys.stdin.isatty())
    return run_command(cmd, cwd=workdir, verbose=verbose)


def run_ansible_unittest(workdir: Path, verbose: bool = False) -> int:
    """Run the pattern's ansible unit tests with pytest."""
    tests = sorted(str(path.relative_to(workdir)) for path in (workdir / "ansible" / "tests" / "unit").glob("test_*.py"))
    if not tests:
        print("No ansible unit tests found in ansible/tests/unit", file=sys.stderr)
        return 1

    cmd = ["pytest", "-r", "a", "--fulltrace", "--color", "yes"] + tests
    return run_command(cmd, cwd=workdir, verbose=verbose)
