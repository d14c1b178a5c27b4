"""semtag CLI"""

from pathlib import Path

import click
from click.core import ParameterSource

from semtag import __version__
from semtag.action import run as run_action
from semtag.config import ActionInputs, ConfigAccessor, InputSource
from semtag.versioning import VersioningError, parse_version

from .utils.logging import configure_logging, logger


def _set_debug(ctx, param, value):
    ctx.ensure_object(dict)
    # A --debug anywhere on the command line wins
    ctx.obj["DEBUG"] = ctx.obj.get("DEBUG", False) or bool(value)
    configure_logging(ctx.obj["DEBUG"])
    return value


debug_option = click.option(
    "--debug/--no-debug",
    default=False,
    is_eager=True,
    expose_value=False,
    callback=_set_debug,
    help="Enable debug mode",
)


@click.group()
@click.version_option(__version__, prog_name="semtag")
@debug_option
@click.pass_context
def cli(ctx):
    """
    Infer a project's version and keep its floating git tags in sync.
    """
    ctx.ensure_object(dict)


@cli.command("run")
@debug_option
@click.option("--ref", default=None, help="Ref to tag [env: INPUT_REF, default: HEAD]")
@click.option(
    "--workspace",
    default=None,
    help="Project workspace, a git checkout [env: INPUT_WORKSPACE, default: .]",
)
@click.option(
    "--manifest-path",
    default=None,
    help="Manifest file, relative to the workspace [env: INPUT_MANIFEST-PATH]",
)
@click.option(
    "--use-version",
    default=None,
    help="Use this version instead of inferring one [env: INPUT_USE-VERSION]",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=None,
    help="Move the tags of an already published version",
)
@click.option(
    "--check-only/--no-check-only",
    default=None,
    help="Only check that the version is new, never tag",
)
@click.option(
    "--allow-prerelease/--no-allow-prerelease",
    default=None,
    help="Never fail because a prerelease version exists",
)
@click.option(
    "--push-tags/--no-push-tags",
    default=None,
    help="Push the tags to the remote [default: push]",
)
@click.option("--token", default=None, help="GitHub token [env: INPUT_TOKEN]")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file with an [inputs] section [default: ./semtag.cfg]",
)
@click.pass_context
def run(ctx, config_path, **options):
    """Check the version and tag the ref with it.

    Inputs are read from the options, then INPUT_* environment variables,
    then the config file.
    """
    overrides = {}
    for key, value in options.items():
        # Options left out must not shadow the environment or config file
        if ctx.get_parameter_source(key) is not ParameterSource.COMMANDLINE:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        overrides[key.replace("_", "-")] = value

    source = InputSource(overrides=overrides, config=ConfigAccessor(config_path))
    inputs = ActionInputs.from_source(source)

    ctx.exit(run_action(inputs))


@cli.command("show")
@debug_option
@click.argument("version")
@click.pass_context
def show(ctx, version: str):
    """Show how VERSION is parsed and the tags it maps to."""
    try:
        parsed = parse_version(version)
    except VersioningError as e:
        logger.error(str(e))
        ctx.exit(1)

    click.echo(f"version:    {parsed.to_string(prefix=False, build=True)}")
    click.echo(f"major:      {parsed.major}")
    click.echo(f"minor:      {parsed.minor}")
    click.echo(f"patch:      {parsed.patch}")
    click.echo(f"prerelease: {parsed.prerelease or ''}")
    click.echo(f"build:      {parsed.build or ''}")
    click.echo(f"tags:       {' '.join(parsed.tags())}")


if __name__ == "__main__":
    cli(obj={})
