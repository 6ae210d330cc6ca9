"""OpenShift cluster queries through the oc CLI."""

from pathlib import Path
from .utils import capture_command, run_command


GITOPS_NAMESPACE = "openshift-operators"
GITOPS_SUBSCRIPTION = "openshift-gitops-operator"


def get_gitops_csv(workdir: Path, verbose: bool = False) -> str:
    """
    Get the ClusterServiceVersion currently installed by the GitOps operator subscription.

    Raises:
        RuntimeError: If the subscription cannot be read
    """
    cmd = [
        "oc", "get", "subscriptions",
        "-n", GITOPS_NAMESPACE,
        GITOPS_SUBSCRIPTION,
        "-ojsonpath={.status.currentCSV}",
    ]
    return capture_command(cmd, cwd=workdir, verbose=verbose)


def delete_csv(workdir: Path, csv: str, verbose: bool = False) -> int:
    """Delete a ClusterServiceVersion from the operators namespace."""
    cmd = ["oc", "delete", "csv", "-n", GITOPS_NAMESPACE, csv]
    return run_command(cmd, cwd=workdir, verbose=verbose)
