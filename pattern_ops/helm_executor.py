"""Helm command execution for pattern install, validation and chart tests."""

import shlex
import subprocess
import sys
from pathlib import Path
from .helm_opts import TEST_OPTS, PATTERN_OPTS, joined_test_opts
from .utils import log, format_command, run_command


OPERATOR_INSTALL_CHART = "common/operator-install/"
CLUSTERGROUP_CHART = "common/clustergroup"
SCRIPTS_DIR = "common/scripts"

DEFAULT_SCHEMA_URL = "https://raw.githubusercontent.com/hybrid-cloud-patterns/ocp-schemas/main/openshift/4.10/"
# openapi2jsonschema cannot generate CRD schemas yet
DEFAULT_KUBECONFORM_SKIP = "-skip 'CustomResourceDefinition'"


def show_template(workdir: Path, name: str, helm_opts: list[str], verbose: bool = False) -> int:
    """Render the operator-install chart to stdout without installing it."""
    cmd = ["helm", "template", OPERATOR_INSTALL_CHART, "--name-template", name]
    cmd.extend(helm_opts)
    return run_command(cmd, cwd=workdir, verbose=verbose)


def render_clustergroup(workdir: Path, helm_opts: list[str], values_file: Path, verbose: bool = False) -> int:
    """
    Render the clustergroup chart with one extra values file, discarding the manifests.

    The clustergroup chart carries the values schema, so a successful render
    means the values file validates.
    """
    cmd = ["helm", "template", CLUSTERGROUP_CHART]
    cmd.extend(helm_opts)
    cmd.extend(["-f", str(values_file)])
    return run_command(cmd, cwd=workdir, stdout=subprocess.DEVNULL, verbose=verbose)


def install_pattern(workdir: Path, name: str, helm_opts: list[str], verbose: bool = False) -> int:
    """Install or upgrade the operator-install release."""
    cmd = ["helm", "upgrade", "--install", name, OPERATOR_INSTALL_CHART]
    cmd.extend(helm_opts)
    return run_command(cmd, cwd=workdir, verbose=verbose)


def uninstall_pattern(workdir: Path, name: str, verbose: bool = False) -> int:
    """Remove the operator-install release."""
    return run_command(["helm", "uninstall", name], cwd=workdir, verbose=verbose)


def run_chart_test(workdir: Path, chart: str, verbose: bool = False) -> int:
    """Run the pattern's chart test script; the script takes the helm options as one argument."""
    cmd = [f"{SCRIPTS_DIR}/test.sh", chart, "all", joined_test_opts()]
    return run_command(cmd, cwd=workdir, verbose=verbose)


def lint_chart(workdir: Path, chart: str, verbose: bool = False) -> int:
    """Run the pattern's helm lint script against one chart."""
    cmd = [f"{SCRIPTS_DIR}/lint.sh", chart]
    cmd.extend(TEST_OPTS)
    return run_command(cmd, cwd=workdir, verbose=verbose)


def kubeconform_chart(
    workdir: Path,
    chart: str,
    schema_url: str = DEFAULT_SCHEMA_URL,
    skip_opts: str = DEFAULT_KUBECONFORM_SKIP,
    verbose: bool = False,
) -> int:
    """
    Render a chart with the test values and check the manifests with kubeconform.

    Args:
        workdir: Pattern repository root
        chart: Chart directory relative to workdir
        schema_url: Schema catalog passed as -schema-location
        skip_opts: kubeconform flags selecting what not to validate,
            e.g. "-skip 'CustomResourceDefinition,Secret'"
        verbose: Enable verbose logging

    Returns:
        The helm exit code if rendering failed, otherwise kubeconform's
    """
    helm_cmd = ["helm", "template"] + TEST_OPTS + PATTERN_OPTS + [chart]

    kubeconform_cmd = ["kubeconform", "-strict"]
    kubeconform_cmd.extend(shlex.split(skip_opts or ""))
    kubeconform_cmd.extend(["-verbose", "-schema-location", schema_url])

    log(f"Running: {format_command(helm_cmd)} | {format_command(kubeconform_cmd)}", verbose)

    try:
        helm = subprocess.Popen(helm_cmd, cwd=workdir, stdout=subprocess.PIPE)
    except FileNotFoundError:
        print("helm: command not found", file=sys.stderr)
        return 127

    try:
        kubeconform = subprocess.Popen(kubeconform_cmd, cwd=workdir, stdin=helm.stdout)
    except FileNotFoundError:
        helm.kill()
        helm.wait()
        print("kubeconform: command not found", file=sys.stderr)
        return 127
    finally:
        # Only kubeconform reads the pipe now
        helm.stdout.close()

    kubeconform_returncode = kubeconform.wait()
    helm_returncode = helm.wait()

    if helm_returncode != 0:
        return helm_returncode
    return kubeconform_returncode
