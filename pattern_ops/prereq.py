"""Checks for the tools a pattern install depends on."""

import shutil
import subprocess
import click
from .utils import log, format_command, run_command


EXECUTABLES = ["git", "helm", "oc", "ansible"]
REQUIRED_COLLECTION = "kubernetes.core"


def find_missing_executables(executables: list[str] = EXECUTABLES) -> list[str]:
    """Return the executables that cannot be found in PATH, in the order given."""
    return [name for name in executables if shutil.which(name) is None]


def has_python_kubernetes(verbose: bool = False) -> bool:
    """Check that ansible's python interpreter can import the kubernetes client."""
    cmd = [
        "ansible",
        "-m", "ansible.builtin.command",
        "-a", "{{ ansible_python_interpreter }} -c 'import kubernetes'",
        "localhost",
    ]
    result = run_command(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, verbose=verbose)
    return result == 0


def has_ansible_collection(collection: str = REQUIRED_COLLECTION, verbose: bool = False) -> bool:
    """Check that an ansible collection shows up in 'ansible-galaxy collection list'."""
    cmd = ["ansible-galaxy", "collection", "list"]
    log(f"Running: {format_command(cmd)}", verbose)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        return False

    if result.returncode != 0:
        return False

    return collection in result.stdout


def validate_prereq(executables: list[str] = EXECUTABLES, verbose: bool = False) -> int:
    """
    Verify everything a pattern install needs is available locally.

    Checks, in order, stopping at the first failure:
    - every executable is in PATH
    - the python kubernetes binding is importable by ansible
    - the kubernetes.core ansible collection is installed

    Returns:
        0 if all checks pass, 1 otherwise
    """
    click.echo("Checking prerequisites:")

    missing = find_missing_executables(executables)
    if missing:
        click.echo(f"No {missing[0]} in PATH")
        return 1
    click.echo(f"  Check for '{' '.join(executables)}': OK")

    click.echo("  Check for python-kubernetes: ", nl=False)
    if not has_python_kubernetes(verbose):
        click.echo("Not found")
        return 1
    click.echo("OK")

    click.echo(f"  Check for {REQUIRED_COLLECTION} collection: ", nl=False)
    if not has_ansible_collection(REQUIRED_COLLECTION, verbose):
        click.echo("Not found")
        return 1
    click.echo("OK")

    return 0
