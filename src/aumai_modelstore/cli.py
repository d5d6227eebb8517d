"""CLI entry point for aumai-modelstore."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from .config import StoreConfig
from .core import ModelStore, parse_model_reference
from .errors import ModelStoreError


@click.group()
@click.version_option(package_name="aumai-modelstore")
@click.option(
    "--models-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Models root directory. Defaults to $OLLAMA_MODELS or ~/.ollama/models.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, models_dir: Path | None, verbose: bool) -> None:
    """AumAI ModelStore — model references, blob paths and manifest migration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if models_dir is not None:
        config = StoreConfig(models_root=models_dir)
    else:
        config = StoreConfig.from_env()
    ctx.obj = ModelStore(config)


@main.command("parse")
@click.argument("reference")
@click.option("--json", "as_json", is_flag=True, help="Print the reference as JSON.")
def parse_command(reference: str, as_json: bool) -> None:
    """Resolve a model reference, filling in the defaults."""
    try:
        ref = parse_model_reference(reference)
    except ModelStoreError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(ref.model_dump(), indent=2))
        return

    click.echo(f"Scheme    : {ref.protocol_scheme}")
    click.echo(f"Registry  : {ref.registry}")
    click.echo(f"Namespace : {ref.namespace}")
    click.echo(f"Repository: {ref.repository}")
    click.echo(f"Tag       : {ref.tag}")


@main.command("blob-path")
@click.argument("digest", default="")
@click.pass_obj
def blob_path_command(store: ModelStore, digest: str) -> None:
    """Print the blob path for DIGEST (the blobs directory if omitted)."""
    try:
        path = store.blob_path(digest)
    except ModelStoreError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(str(path))


@main.command("manifest-path")
@click.argument("reference")
@click.pass_obj
def manifest_path_command(store: ModelStore, reference: str) -> None:
    """Print the manifest path for REFERENCE."""
    try:
        path = store.manifest_path(reference)
    except ModelStoreError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(str(path))


@main.command("migrate")
@click.pass_obj
def migrate_command(store: ModelStore) -> None:
    """Move manifests from the legacy registry directory to the canonical one."""
    try:
        report = store.migrate()
    except ModelStoreError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    root = store.models_root
    for src, dst in report.moved:
        click.echo(f"  moved    {src.relative_to(root)} -> {dst.relative_to(root)}")
    for src in report.skipped:
        click.echo(f"  skipped  {src.relative_to(root)} (destination exists)")
    click.echo(
        f"Migration complete: {len(report.moved)} moved, "
        f"{len(report.skipped)} skipped."
    )


if __name__ == "__main__":
    main()
