"""
CLI commands for inspecting deployment configs in the store.

Thin wrappers over ``deploygen.adapters.file_store`` and
``deploygen.core.services.deploy_util``.
"""

from __future__ import annotations

import json
import sys

import click
import yaml


def _load_store(ctx: click.Context):
    """Load the store file or exit with the loader's message."""
    from deploygen.adapters.file_store import FileStore
    from deploygen.core.config.loader import ConfigError

    try:
        return FileStore.from_path(ctx.obj.get("store_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _get_config(ctx: click.Context, config_id: str):
    """Fetch one config from the store or exit with NotFound."""
    from deploygen.core.context import RequestContext
    from deploygen.core.errors import NotFoundError

    store = _load_store(ctx)
    try:
        return store.get_config(RequestContext(namespace=ctx.obj.get("namespace", "")), config_id)
    except NotFoundError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group("configs")
def configs() -> None:
    """Deployment configs — list, show, deployment annotations."""


@configs.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_configs(ctx: click.Context, as_json: bool) -> None:
    """List deployment configs and their trigger sources."""
    store = _load_store(ctx)
    rows = []
    for config in store.document.deployment_configs:
        sources = []
        for params in config.image_change_triggers():
            if params.from_ref is not None:
                sources.append(f"{params.from_ref.name}:{params.tag}")
            else:
                sources.append(f"{params.repository_name}:{params.tag}")
        rows.append({
            "name": config.name,
            "namespace": config.namespace,
            "latest_version": config.latest_version,
            "triggers": sources,
        })

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No deployment configs")
        return

    for row in rows:
        ns = f"{row['namespace']}/" if row["namespace"] else ""
        click.secho(f"📦 {ns}{row['name']}  v{row['latest_version']}", fg="cyan")
        for source in row["triggers"]:
            click.echo(f"   ← {source}")


@configs.command("show")
@click.argument("config_id")
@click.pass_context
def show(ctx: click.Context, config_id: str) -> None:
    """Print a deployment config as YAML."""
    config = _get_config(ctx, config_id)
    click.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False), nl=False)


@configs.command("annotations")
@click.argument("config_id")
@click.pass_context
def annotations(ctx: click.Context, config_id: str) -> None:
    """Print the annotations the config's current deployment carries."""
    from deploygen.core.services.deploy_util import deployment_for_config

    config = _get_config(ctx, config_id)
    deployment = deployment_for_config(config)
    click.echo(json.dumps(
        {"name": deployment.metadata.name, "annotations": deployment.metadata.annotations},
        indent=2,
    ))
