"""Global pytest configuration and fixtures for all tests."""

import os
import shutil
import subprocess
from pathlib import Path
import pytest


class FakeSubprocess:
    """Stand-in for subprocess.run that records commands and replays canned results.

    A response matches a command when every token of the response appears in
    the command. The most recently registered matching response wins; anything
    unmatched succeeds with empty output.
    """

    def __init__(self):
        self.calls = []
        self.kwargs = []
        self._responses = []

    def respond(self, tokens, returncode=0, stdout="", stderr=""):
        self._responses.append((list(tokens), returncode, stdout, stderr))

    def __call__(self, cmd, **kwargs):
        cmd = [str(part) for part in cmd]
        self.calls.append(cmd)
        self.kwargs.append(kwargs)
        for tokens, returncode, stdout, stderr in reversed(self._responses):
            if all(token in cmd for token in tokens):
                return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands(self, executable):
        """Commands run so far whose first element is executable."""
        return [cmd for cmd in self.calls if cmd[0] == executable]


@pytest.fixture(scope="function", autouse=True)
def clean_environment(monkeypatch):
    """Keep the caller's pattern settings (TARGET_SITE=... etc.) out of the tests."""
    for name in ("PATTERN_NAME", "TARGET_ORIGIN", "TARGET_SITE", "API_URL", "KUBECONFORM_SKIP", "DISABLE_LINTERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run; git answers as a checkout of git@github.com:org/mypattern.git on main."""
    fake = FakeSubprocess()
    fake.respond(["ls-remote", "--get-url"], stdout="git@github.com:org/mypattern.git\n")
    fake.respond(["rev-parse", "--abbrev-ref"], stdout="main\n")
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


def write_chart(root: Path, chart: str, manifest: str = "Chart.yaml", version: str = "0.1.0") -> Path:
    """Create a minimal chart directory below root."""
    chart_dir = root / chart
    chart_dir.mkdir(parents=True, exist_ok=True)
    (chart_dir / manifest).write_text(f"apiVersion: v2\nname: {chart_dir.name}\nversion: {version}\n")
    return chart_dir


@pytest.fixture
def pattern_dir(tmp_path):
    """A pattern checkout layout: values files, common charts and an examples chart."""
    root = tmp_path / "mypattern"
    root.mkdir()
    (root / "values-global.yaml").write_text("global:\n  pattern: mypattern\n")
    (root / "values-hub.yaml").write_text("clusterGroup:\n  name: hub\n")
    (root / "values-region-one.yaml").write_text("clusterGroup:\n  name: region-one\n")
    write_chart(root, "common/clustergroup")
    write_chart(root, "common/operator-install")
    write_chart(root, "charts/hub/app")
    write_chart(root, "common/examples/example-chart")
    return root.resolve()


@pytest.fixture
def git_pattern_dir(tmp_path, monkeypatch):
    """A real git checkout on branch 'main' whose origin is git@host:org/repo.git."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    # url.insteadOf rules from the user config would rewrite the remotes
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")

    root = tmp_path / "repo"
    root.mkdir()
    git = ["git", "-C", str(root), "-c", "user.name=Test", "-c", "user.email=test@example.com"]
    subprocess.run(git + ["init", "-q"], check=True)
    subprocess.run(git + ["symbolic-ref", "HEAD", "refs/heads/main"], check=True)
    subprocess.run(git + ["commit", "-q", "--allow-empty", "-m", "init"], check=True)
    subprocess.run(git + ["remote", "add", "origin", "git@host:org/repo.git"], check=True)
    subprocess.run(git + ["remote", "add", "fork", "https://github.com/someone/repo.git"], check=True)
    return root.resolve()
