"""Git repository operations and utilities."""

import re
import subprocess
from pathlib import Path
from .utils import log, capture_command, run_command


SCP_REMOTE_RE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>(?!//).+)$")
SSH_REMOTE_RE = re.compile(r"^ssh://(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?/(?P<path>.+)$")


def get_remote_url(workdir: Path, origin: str = "origin", verbose: bool = False) -> str:
    """
    Get the URL git reports for a remote.

    Raises:
        RuntimeError: If the remote cannot be resolved
    """
    cmd = ["git", "-C", str(workdir), "ls-remote", "--get-url", "--symref", origin]
    return capture_command(cmd, verbose=verbose)


def normalize_repo_url(raw_url: str) -> str:
    """
    Turn whatever git reports for a remote into an https:// URL.

    Repositories are accessed with tokens rather than SSH keys, so every form
    ends up as https. Examples:

        git@github.com:org/repo.git         -> https://github.com/org/repo
        ssh://git@github.com:22/org/repo    -> https://github.com/org/repo
        https://github.com/org/repo.git     -> https://github.com/org/repo
        https://git.example.com:8443/org/r  -> https://git.example.com:8443/org/r
    """
    url = raw_url.strip()

    # Some git versions prefix the answer with "URL:" (symref output)
    if "URL:" in url:
        url = url.split("URL:", 1)[1].strip()

    if url.startswith(("https://", "http://")):
        url = url.split("://", 1)[1]
    elif SSH_REMOTE_RE.match(url):
        match = SSH_REMOTE_RE.match(url)
        url = f"{match.group('host')}/{match.group('path')}"
    elif SCP_REMOTE_RE.match(url):
        match = SCP_REMOTE_RE.match(url)
        url = f"{match.group('host')}/{match.group('path')}"

    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]

    return f"https://{url}"


def get_target_repo(workdir: Path, origin: str = "origin", verbose: bool = False) -> str:
    """Resolve the https URL of the given remote."""
    raw_url = get_remote_url(workdir, origin, verbose)
    repo_url = normalize_repo_url(raw_url)
    log(f"Target repository: {raw_url} -> {repo_url}", verbose)
    return repo_url


def get_current_branch(workdir: Path, verbose: bool = False) -> str:
    """
    Get the name of the checked out branch.

    Uses rev-parse rather than 'branch --show-current' to work with git < 2.22.
    """
    cmd = ["git", "-C", str(workdir), "rev-parse", "--abbrev-ref", "HEAD"]
    branch = capture_command(cmd, verbose=verbose)
    log(f"Target branch: {branch}", verbose)
    return branch


def remote_branch_exists(repo_url: str, branch: str, verbose: bool = False) -> bool:
    """Check that the branch exists on the remote repository."""
    cmd = ["git", "ls-remote", "--exit-code", "--heads", repo_url, branch]
    result = run_command(cmd, stdout=subprocess.DEVNULL, verbose=verbose)
    return result == 0
