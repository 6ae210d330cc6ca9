"""
pattern-ops - Install, validate and test validated patterns.
Wraps helm, oc, ansible, kubeconform and podman with the arguments a
validated pattern checkout needs.
"""

from pathlib import Path
import yaml
import click

from .settings import PatternSettings
from .utils import log
from .git_helper import remote_branch_exists
from .helm_opts import discover_values_files
from .chart_manager import discover_charts, read_chart_metadata, run_for_each_chart
from .helm_executor import (
    DEFAULT_KUBECONFORM_SKIP,
    DEFAULT_SCHEMA_URL,
    install_pattern,
    kubeconform_chart,
    lint_chart,
    render_clustergroup,
    run_chart_test,
    show_template,
    uninstall_pattern,
)
from .cluster import get_gitops_csv, delete_csv
from .prereq import validate_prereq
from .vault import push_secrets
from .linters import run_super_linter, run_ansible_lint, run_ansible_unittest

__version__ = "0.1.0"

# Present when running inside a podman container
CONTAINER_ENV_FILE = Path("/run/.containerenv")

RETIRED_TARGETS = ["deploy", "upgrade", "legacy-deploy", "legacy-upgrade"]


def validate_origin(settings: PatternSettings) -> int:
    """
    Verify the target branch exists on the target repository.

    The check is skipped inside a container, where git ssh auth is unreliable.

    Returns:
        0 if the branch exists or the check was skipped, 1 otherwise
    """
    click.echo("Checking repository:")
    click.echo(f"  {settings.target_repo} - branch {settings.target_branch}: ", nl=False)

    if CONTAINER_ENV_FILE.exists():
        click.echo("Running inside a container: Skipping git ssh checks")
        return 0

    if remote_branch_exists(settings.target_repo, settings.target_branch, settings.verbose):
        click.echo("OK")
        return 0

    click.echo("NOT FOUND")
    return 1


def validate_schema(settings: PatternSettings) -> int:
    """
    Render the clustergroup chart once per values-*.yaml file.

    Stops at the first values file that fails to render.
    """
    helm_opts = settings.helm_opts()
    values_files = discover_values_files(settings.workdir)

    click.echo("Validating clustergroup schema of: ", nl=False)
    for values_file in values_files:
        click.echo(f" ./{values_file.name}", nl=False)
        returncode = render_clustergroup(settings.workdir, helm_opts, values_file, settings.verbose)
        if returncode != 0:
            click.echo()
            return returncode
    click.echo()

    return 0


def deploy_pattern(settings: PatternSettings) -> int:
    """Check prerequisites and origin, then install or upgrade the pattern with helm."""
    returncode = validate_prereq(verbose=settings.verbose)
    if returncode != 0:
        return returncode

    returncode = validate_origin(settings)
    if returncode != 0:
        return returncode

    click.echo("Running helm:")
    return install_pattern(settings.workdir, settings.name, settings.helm_opts(), settings.verbose)


def uninstall(settings: PatternSettings) -> int:
    """
    Uninstall the helm release and the GitOps operator CSV it brought in.

    The release is removed even when the subscription is already gone, so a
    partial teardown can be finished by running uninstall again.
    """
    try:
        csv = get_gitops_csv(settings.workdir, settings.verbose)
    except RuntimeError as e:
        click.echo(f"Could not read the GitOps operator subscription: {e}", err=True)
        csv = ""
    log(f"GitOps operator CSV: {csv}", settings.verbose)

    returncode = uninstall_pattern(settings.workdir, settings.name, settings.verbose)
    if returncode != 0:
        return returncode

    if not csv:
        raise RuntimeError("GitOps operator subscription reports no current CSV")
    return delete_csv(settings.workdir, csv, settings.verbose)


def for_each_chart(settings: PatternSettings, operation) -> int:
    """Run operation(workdir, chart, verbose) for every chart, stopping at the first failure."""
    charts = discover_charts(settings.workdir)
    log(f"Found {len(charts)} charts", settings.verbose)
    return run_for_each_chart(
        charts,
        lambda chart: operation(settings.workdir, chart, verbose=settings.verbose),
        settings.verbose,
    )


def _finish(ctx, action, *args, **kwargs):
    """Run action and exit with its return code, turning RuntimeError into a CLI error."""
    try:
        returncode = action(*args, **kwargs)
    except RuntimeError as e:
        raise click.ClickException(str(e))
    ctx.exit(returncode)


@click.group()
@click.version_option(version=__version__, prog_name='pattern-ops')
@click.option(
    '--workdir',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help='Pattern repository root (default: current directory)'
)
@click.option(
    '--name',
    envvar='PATTERN_NAME',
    default=None,
    help='Helm release name (default: basename of the pattern directory)'
)
@click.option(
    '--target-origin',
    envvar='TARGET_ORIGIN',
    default='origin',
    show_default=True,
    help='Git remote the cluster pulls the pattern from'
)
@click.option(
    '--target-site',
    envvar='TARGET_SITE',
    default=None,
    help='Cluster group name, overrides main.clusterGroupName'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose output'
)
@click.pass_context
def cli(ctx, workdir, name, target_origin, target_site, verbose):
    """pattern-ops - Install, validate and test validated patterns.

    Every command runs one external tool (helm, oc, ansible, kubeconform,
    podman) and exits with that tool's exit code.
    """
    workdir = workdir.resolve() if workdir else Path.cwd()
    log(f"Working directory: {workdir}", verbose)

    ctx.obj = PatternSettings(
        workdir=workdir,
        name=name,
        target_origin=target_origin,
        target_site=target_site,
        verbose=verbose,
    )


@cli.command()
@click.pass_context
def show(ctx):
    """Show the starting template without installing it."""
    settings = ctx.obj
    _finish(ctx, lambda: show_template(settings.workdir, settings.name, settings.helm_opts(), settings.verbose))


@cli.command('validate-origin')
@click.pass_context
def validate_origin_cmd(ctx):
    """Verify the git origin is available."""
    _finish(ctx, validate_origin, ctx.obj)


@cli.command('validate-schema')
@click.pass_context
def validate_schema_cmd(ctx):
    """Validate values files against the schema in common/clustergroup."""
    _finish(ctx, validate_schema, ctx.obj)


@click.command('operator-deploy')
@click.pass_context
def operator_deploy(ctx):
    """Check prerequisites and origin, then run helm install."""
    _finish(ctx, deploy_pattern, ctx.obj)


cli.add_command(operator_deploy, 'operator-deploy')
cli.add_command(operator_deploy, 'operator-upgrade')


@click.command()
def retired():
    """Does nothing anymore, use operator-deploy."""
    click.echo("UNSUPPORTED TARGET: please switch to 'operator-deploy'")
    raise click.exceptions.Exit(1)


for target in RETIRED_TARGETS:
    cli.add_command(retired, target)


@cli.command('uninstall')
@click.pass_context
def uninstall_cmd(ctx):
    """Run helm uninstall and remove the GitOps operator CSV."""
    _finish(ctx, uninstall, ctx.obj)


@cli.command('load-secrets')
@click.pass_context
def load_secrets(ctx):
    """Load the secrets into the vault."""
    settings = ctx.obj
    _finish(ctx, push_secrets, settings.workdir, settings.name, verbose=settings.verbose)


@cli.command()
@click.pass_context
def charts(ctx):
    """List the charts test, helmlint and kubeconform run against."""
    settings = ctx.obj
    for chart in discover_charts(settings.workdir):
        try:
            metadata = read_chart_metadata(settings.workdir, chart)
        except (yaml.YAMLError, ValueError) as e:
            raise click.ClickException(f"Invalid Chart.yaml in {chart}: {str(e)}")
        click.echo(f"{chart}  {metadata.get('name', '')} {metadata.get('version', '')}".rstrip())


@cli.command('test')
@click.pass_context
def run_tests(ctx):
    """Run helm tests for every chart."""
    _finish(ctx, for_each_chart, ctx.obj, run_chart_test)


@cli.command()
@click.pass_context
def helmlint(ctx):
    """Run helm lint for every chart."""
    _finish(ctx, for_each_chart, ctx.obj, lint_chart)


@cli.command()
@click.option(
    '--api-url',
    envvar='API_URL',
    default=DEFAULT_SCHEMA_URL,
    show_default=True,
    help='Schema catalog passed to kubeconform -schema-location'
)
@click.option(
    '--skip-opts',
    envvar='KUBECONFORM_SKIP',
    default=DEFAULT_KUBECONFORM_SKIP,
    show_default=True,
    help='kubeconform skip flags, e.g. "-skip CustomResourceDefinition,Secret" (empty to validate all)'
)
@click.pass_context
def kubeconform(ctx, api_url, skip_opts):
    """Run kubeconform against every rendered chart."""
    def check(workdir, chart, verbose=False):
        return kubeconform_chart(workdir, chart, schema_url=api_url, skip_opts=skip_opts, verbose=verbose)

    _finish(ctx, for_each_chart, ctx.obj, check)


@cli.command('validate-prereq')
@click.pass_context
def validate_prereq_cmd(ctx):
    """Verify pre-requisites."""
    _finish(ctx, validate_prereq, verbose=ctx.obj.verbose)


@cli.command('super-linter')
@click.option(
    '--disable-linters',
    envvar='DISABLE_LINTERS',
    default='',
    help='Extra podman flags, e.g. "-e VALIDATE_MARKDOWN=false"'
)
@click.pass_context
def super_linter(ctx, disable_linters):
    """Run super-linter locally."""
    settings = ctx.obj
    _finish(ctx, run_super_linter, settings.workdir, disable_linters, verbose=settings.verbose)


@cli.command('ansible-lint')
@click.pass_context
def ansible_lint(ctx):
    """Run ansible-lint on the ansible/ folder."""
    settings = ctx.obj
    _finish(ctx, run_ansible_lint, settings.workdir, verbose=settings.verbose)


@cli.command('ansible-unittest')
@click.pass_context
def ansible_unittest(ctx):
    """Run ansible unit tests."""
    settings = ctx.obj
    _finish(ctx, run_ansible_unittest, settings.workdir, verbose=settings.verbose)


__all__ = [
    "cli",
    "PatternSettings",
    "validate_origin",
    "validate_schema",
    "deploy_pattern",
    "uninstall",
    "for_each_chart",
]
