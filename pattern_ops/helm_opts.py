"""Helm flag assembly for pattern installs and tests."""

from pathlib import Path
from .utils import log


GLOBAL_VALUES_FILE = "values-global.yaml"
VALUES_FILE_GLOB = "values-*.yaml"

TEST_REPO_URL = "https://github.com/pattern-clone/mypattern"

# Fixed overrides so every chart renders without a real pattern checkout
TEST_OPTS = [
    "-f", GLOBAL_VALUES_FILE,
    "--set", f"global.repoURL={TEST_REPO_URL}",
    "--set", f"main.git.repoURL={TEST_REPO_URL}",
    "--set", "main.git.revision=main",
    "--set", "global.pattern=mypattern",
    "--set", "global.namespace=pattern-namespace",
    "--set", "global.hubClusterDomain=apps.hub.example.com",
    "--set", "global.localClusterDomain=apps.region.example.com",
    "--set", "global.clusterDomain=region.example.com",
    "--set", "clusterGroup.imperative.jobs[0].name=test",
    "--set", "clusterGroup.imperative.jobs[0].playbook=ansible/test.yml",
]

PATTERN_OPTS = ["-f", "common/examples/values-example.yaml"]


def compute_helm_opts(repo_url: str, branch: str, target_site: str = None, verbose: bool = False) -> list[str]:
    """
    Compute the helm arguments shared by show, validate-schema and install.

    Values set with --set always take precedence over the contents of -f files.

    Args:
        repo_url: https URL of the pattern repository
        branch: Git revision the cluster should track
        target_site: Optional cluster group name overriding values-global.yaml

    Returns:
        list[str]: Command-line arguments for helm
    """
    args = [
        "-f", GLOBAL_VALUES_FILE,
        "--set", f"main.git.repoURL={repo_url}",
        "--set", f"main.git.revision={branch}",
    ]

    if target_site:
        args.extend(["--set", f"main.clusterGroupName={target_site}"])

    log(f"Helm options: {' '.join(args)}", verbose)
    return args


def joined_test_opts() -> str:
    """
    TEST_OPTS as the single argument the chart test script expects.

    The script expands it unquoted, so it is split on whitespace only and any
    quote characters would reach helm literally.
    """
    return " ".join(TEST_OPTS)


def discover_values_files(workdir: Path) -> list[Path]:
    """Return the values-*.yaml files at the top of the pattern, sorted by name."""
    return sorted(path for path in workdir.glob(VALUES_FILE_GLOB) if path.is_file())
