"""
PatternSettings collects what every command needs to know about the pattern
being deployed: where it lives, what it is called and which git remote and
cluster group it targets.

The repository URL and branch are resolved from git on first use, so commands
that never talk to git (lint, test, prerequisite checks) work outside a
checkout.
"""

from pathlib import Path
from typing import Optional

from .git_helper import get_target_repo, get_current_branch
from .helm_opts import compute_helm_opts


class PatternSettings:
    """Settings for one pattern-ops invocation."""

    def __init__(
        self,
        workdir: Path,
        name: Optional[str] = None,
        target_origin: str = "origin",
        target_site: Optional[str] = None,
        verbose: bool = False,
    ):
        """
        Args:
            workdir: Pattern repository root
            name: Release name, defaults to the basename of workdir
            target_origin: Git remote the cluster pulls from
            target_site: Cluster group name overriding values-global.yaml
            verbose: Enable verbose logging
        """
        self.workdir = Path(workdir)
        self.name = name or self.workdir.resolve().name
        self.target_origin = target_origin or "origin"
        self.target_site = target_site or None
        self.verbose = verbose
        self._target_repo = None
        self._target_branch = None

    @property
    def target_repo(self) -> str:
        """https URL of the target origin."""
        if self._target_repo is None:
            self._target_repo = get_target_repo(self.workdir, self.target_origin, self.verbose)
        return self._target_repo

    @property
    def target_branch(self) -> str:
        """Branch currently checked out in workdir."""
        if self._target_branch is None:
            self._target_branch = get_current_branch(self.workdir, self.verbose)
        return self._target_branch

    def helm_opts(self) -> list[str]:
        """Helm arguments pointing the cluster at this checkout."""
        return compute_helm_opts(self.target_repo, self.target_branch, self.target_site, self.verbose)

    def __repr__(self) -> str:
        return (
            f"PatternSettings(workdir={self.workdir!r}, name={self.name!r}, "
            f"target_origin={self.target_origin!r}, target_site={self.target_site!r})"
        )
