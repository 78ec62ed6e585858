"""
deploygen — CLI entrypoint.

Usage:
    python -m deploygen.main --help
    python -m deploygen.main generate frontend
    python -m deploygen.main check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from deploygen import __version__
from deploygen.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)

ENV_NAMESPACE = "DGEN_NAMESPACE"


@click.group()
@click.version_option(version=__version__, prog_name="deploygen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--store",
    "-s",
    "store_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to deploygen.yml (default: auto-detect).",
)
@click.option(
    "--namespace",
    "-n",
    default=None,
    help=f"Namespace to work in (default: ${ENV_NAMESPACE} or none).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    store_path: str | None,
    namespace: str | None,
) -> None:
    """deploygen — version deployment configs when tracked images change."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["store_path"] = Path(store_path) if store_path else None
    ctx.obj["namespace"] = namespace if namespace is not None else os.environ.get(ENV_NAMESPACE, "")

    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


@cli.command()
@click.argument("config_id")
@click.option("--write", is_flag=True, help="Save a new version back to the store.")
@click.option(
    "--initial-deploy",
    is_flag=True,
    help="Raise a never-deployed config (version 0) to version 1.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    config_id: str,
    write: bool,
    initial_deploy: bool,
    as_json: bool,
) -> None:
    """Generate the next version of a deployment config."""
    from deploygen.core.use_cases.generate import run_generate

    result = run_generate(
        config_id,
        store_path=ctx.obj.get("store_path"),
        namespace=ctx.obj.get("namespace", ""),
        write=write,
        initial_deploy=initial_deploy,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert result.previous is not None and result.config is not None
    quiet = ctx.obj.get("quiet", False)

    if not result.changed:
        if not quiet:
            click.secho(
                f"✓ {config_id}: up to date at version {result.config.latest_version}",
                fg="green",
            )
        return

    click.secho(
        f"⬆ {config_id}: version {result.previous.latest_version} → "
        f"{result.config.latest_version}",
        fg="cyan",
        bold=True,
    )
    if result.initial_deployment:
        click.echo("   initial deployment")
    for change in result.image_changes:
        click.echo(f"   • {change.container}: {change.old_image or '(none)'} → {change.new_image}")
    if result.deployment is not None and not quiet:
        click.echo(f"   deployment: {result.deployment.metadata.name}")
    if result.written:
        click.secho(f"   💾 saved to {result.store_path}", fg="green")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Validate deploygen.yml and its triggers."""
    from deploygen.core.use_cases.check import check_store

    result = check_store(store_path=ctx.obj.get("store_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        assert result.document is not None
        click.secho("✅ Store is valid", fg="green", bold=True)
        click.echo(f"   Deployment configs: {len(result.document.deployment_configs)}")
        click.echo(f"   Image repositories: {len(result.document.image_repositories)}")
    else:
        click.secho("❌ Store errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)


# ── Register sub-command groups from deploygen/ui/cli/ ────────────

from deploygen.ui.cli.configs import configs

cli.add_command(configs)


if __name__ == "__main__":
    cli()
