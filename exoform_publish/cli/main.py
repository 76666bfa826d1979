"""
Main CLI entry point for exoform-publish.
"""

import logging
import shlex
import sys
from dataclasses import replace
from pathlib import Path

import click

from exoform_publish import __version__
from exoform_publish.config.targets import TARGETS, get_target

DEFAULT_TARGET = "exoform-client"

# Options naming one target's files or directories
PER_TARGET_OPTIONS = ("output_name", "staging_dir", "server_dir")


def config_options(func):
    """Options shared by every command that builds a PipelineConfig."""
    options = [
        click.option(
            "--root",
            type=click.Path(file_okay=False, path_type=Path),
            default=Path("."),
            show_default=True,
            help="Project root containing the client and server directories.",
        ),
        click.option("--output-name", default=None, help="Base name of generated files."),
        click.option("--platform", default=None, help="Compiler target triple."),
        click.option(
            "--staging-dir",
            type=click.Path(path_type=Path),
            default=None,
            help="Staging directory. Defaults to <workspace>/build.",
        ),
        click.option(
            "--assets-dir",
            type=click.Path(path_type=Path),
            default=None,
            help="Static asset directory. Defaults to <workspace>/assets.",
        ),
        click.option(
            "--server-dir",
            type=click.Path(path_type=Path),
            default=None,
            help="Published asset directory. Defaults to the target's server path.",
        ),
        click.option("--compiler", default=None, help="Compiler command (default: cargo)."),
        click.option(
            "--bindgen", default=None, help="Binding generator command (default: wasm-bindgen)."
        ),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to allow each external tool. Unbounded by default.",
        ),
        click.option(
            "--no-atomic",
            is_flag=True,
            help="Clear and refill the server directory instead of swapping it.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def make_config(target, options: dict):
    """Build a PipelineConfig for a target from CLI option values."""
    from exoform_publish.config.settings import PipelineConfig

    compiler = options.get("compiler")
    bindgen = options.get("bindgen")
    try:
        return PipelineConfig.for_target(
            target,
            options["root"],
            staging_dir=options.get("staging_dir"),
            assets_dir=options.get("assets_dir"),
            server_dir=options.get("server_dir"),
            compiler_command=tuple(shlex.split(compiler)) if compiler else None,
            bindgen_command=tuple(shlex.split(bindgen)) if bindgen else None,
            tool_timeout=options.get("timeout"),
            atomic_publish=False if options.get("no_atomic") else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def resolve_target(name: str, options: dict):
    """Registered target with --output-name / --platform applied."""
    target = get_target(name)
    changes = {
        key: options[key]
        for key in ("output_name", "platform")
        if options.get(key) is not None
    }
    return replace(target, **changes) if changes else target


def run_stage(stage: str, func):
    """Run a single stage, exiting 1 with the diagnostic on failure."""
    from exoform_publish.core.errors import PipelineError

    try:
        return func()
    except PipelineError as e:
        click.echo(f"{stage} failed: {e}", err=True)
        sys.exit(1)


target_option = click.option(
    "--target",
    "target_name",
    type=click.Choice(sorted(TARGETS)),
    default=DEFAULT_TARGET,
    show_default=True,
    help="Build target.",
)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log tool output and commands.")
def cli(verbose):
    """Exoform client build and publish pipeline."""
    if verbose:
        from exoform_publish.utils.logging import logger

        logger.setLevel(logging.DEBUG)


@cli.group()
def build():
    """Pipeline stage commands."""
    pass


@build.command()
@target_option
@config_options
def prepare(target_name, **options):
    """Create the staging directory and remove its contents."""
    from exoform_publish.operations.workspace import prepare_staging_dir

    config = make_config(resolve_target(target_name, options), options)
    run_stage("prepare", lambda: prepare_staging_dir(config.staging_dir))


@build.command()
@target_option
@config_options
def compile(target_name, **options):
    """Compile the client to a wasm binary."""
    from exoform_publish.operations.compile import compile_target

    target = resolve_target(target_name, options)
    config = make_config(target, options)
    artifact = run_stage("compile", lambda: compile_target(target, config))
    click.echo(str(artifact))


@build.command()
@target_option
@config_options
def bindgen(target_name, **options):
    """Generate the web module and JS glue into the staging directory."""
    from exoform_publish.operations.bindgen import generate_bindings

    target = resolve_target(target_name, options)
    config = make_config(target, options)
    artifact = config.artifact_path(target)
    run_stage("bindgen", lambda: generate_bindings(artifact, target, config))


@build.command()
@target_option
@config_options
def assets(target_name, **options):
    """Copy static assets into the staging directory."""
    from exoform_publish.operations.assets import merge_assets

    config = make_config(resolve_target(target_name, options), options)
    run_stage("assets", lambda: merge_assets(config.assets_dir, config.staging_dir))


@build.command()
@target_option
@config_options
def publish(target_name, **options):
    """Replace the server asset directory with the staging directory."""
    from exoform_publish.operations.publish import publish as do_publish

    config = make_config(resolve_target(target_name, options), options)
    run_stage(
        "publish",
        lambda: do_publish(
            config.staging_dir,
            config.server_dir,
            atomic=config.atomic_publish,
            lock_timeout=config.lock_timeout,
        ),
    )


@build.command()
@click.option(
    "--target",
    "target_names",
    type=click.Choice(sorted(TARGETS)),
    multiple=True,
    help="Build target (repeatable). Defaults to every registered target.",
)
@config_options
def all(target_names, **options):
    """Run the complete pipeline for each target."""
    from exoform_publish.pipeline.runner import run_targets

    names = target_names or tuple(sorted(TARGETS))
    if len(names) > 1:
        shared = [
            f"--{key.replace('_', '-')}"
            for key in PER_TARGET_OPTIONS
            if options.get(key) is not None
        ]
        if shared:
            raise click.UsageError(
                f"{', '.join(shared)} cannot be shared by several targets; pass one --target"
            )

    targets = [resolve_target(name, options) for name in names]
    configs = {target.name: make_config(target, options) for target in targets}
    results = run_targets(targets, lambda target: configs[target.name])

    for result in results:
        if not result.ok:
            click.echo(result.describe(), err=True)
            sys.exit(1)


@cli.group()
def validate():
    """Published asset validation commands."""
    pass


@validate.command()
@target_option
@config_options
def published(target_name, **options):
    """Check the server directory matches the staging directory."""
    from exoform_publish.pipeline.validate import verify_published

    config = make_config(resolve_target(target_name, options), options)
    if not verify_published(config.staging_dir, config.server_dir):
        sys.exit(1)


@cli.command()
def targets():
    """List registered build targets."""
    for name in sorted(TARGETS):
        target = TARGETS[name]
        click.echo(f"{name}\t{target.workspace} -> {target.server_dir}\t{target.description}")


if __name__ == "__main__":
    cli()
