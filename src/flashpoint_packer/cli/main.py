"""
Main CLI entry point for the Flashpoint packer.

Provides the ``fpack`` command group: ``build`` runs the full archive build,
``groups`` previews the archives a build would produce and ``verify``
re-hashes archives against a written manifest.
"""

from datetime import date, datetime
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click

from .. import __version__
from ..core.config import Config
from ..core.database import SQLiteCatalogSource
from ..core.exceptions import PackerError
from ..core.logging import configure_logging, get_logger
from ..packaging import ArchiveBuilder, PackagingPipeline, load_manifest, verify

logger = get_logger(__name__)


def _parse_date(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError:
        raise click.BadParameter("expected YYYYMMDD", ctx=ctx, param=param)


def _load_config(ctx: click.Context, config_path: Path) -> Config:
    """Load configuration and apply its logging section unless overridden."""
    config = Config.from_file(config_path)
    level = ctx.obj.get("log_level") or config.logging.level
    json_format = ctx.obj.get("json_logs") or config.logging.json_format
    configure_logging(level=level, json_format=json_format)
    return config


def _fail(ctx: click.Context, error: PackerError) -> NoReturn:
    logger.critical(str(error), **error.to_dict())
    click.echo(f"❌ {error}", err=True)
    ctx.exit(1)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="config.json",
    show_default=True,
    help="Configuration file (YAML or JSON)",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool, json_logs: bool) -> None:
    """
    Flashpoint packer

    Builds distributable ZIP archives for every platform in the catalogue,
    plus the auxiliary bundles, and writes a manifest with their sizes and
    SHA-256 digests.
    """
    ctx.ensure_object(dict)

    log_level = None
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"

    ctx.obj["log_level"] = log_level
    ctx.obj["json_logs"] = json_logs
    configure_logging(level=log_level or "WARNING", json_format=json_logs)


@cli.command()
@config_option
@click.option("--category", "categories", multiple=True, help="Only build this category (repeatable)")
@click.option("--date", "build_date", callback=_parse_date, help="Build date as YYYYMMDD (default: today)")
@click.option("--no-auxiliary", is_flag=True, help="Skip the Legacy/Extras/cgi-bin bundles")
@click.pass_context
def build(
    ctx: click.Context,
    config_path: Path,
    categories: Tuple[str, ...],
    build_date: Optional[date],
    no_auxiliary: bool,
) -> None:
    """Build every archive and write the manifest."""
    try:
        config = _load_config(ctx, config_path)
        with SQLiteCatalogSource(config.database_path) as source:
            pipeline = PackagingPipeline(config, source, build_date=build_date)
            manifest = pipeline.run(
                categories=list(categories) or None,
                include_auxiliary=not no_auxiliary,
            )
    except PackerError as e:
        _fail(ctx, e)

    click.echo(f"✅ Built {len(manifest)} archives")
    click.echo(f"   Manifest: {config.manifest_path}")
    click.echo(f"   Compressed size: {manifest.compressed_size} bytes")
    click.echo(f"   Uncompressed size: {manifest.uncompressed_size} bytes")


@cli.command()
@config_option
@click.option("--category", "categories", multiple=True, help="Only list this category (repeatable)")
@click.option("--date", "build_date", callback=_parse_date, help="Build date as YYYYMMDD (default: today)")
@click.option("--no-auxiliary", is_flag=True, help="Skip the Legacy/Extras/cgi-bin bundles")
@click.pass_context
def groups(
    ctx: click.Context,
    config_path: Path,
    categories: Tuple[str, ...],
    build_date: Optional[date],
    no_auxiliary: bool,
) -> None:
    """List the archives a build would produce, without writing anything."""
    try:
        config = _load_config(ctx, config_path)
        with SQLiteCatalogSource(config.database_path) as source:
            pipeline = PackagingPipeline(config, source, build_date=build_date)
            planned = pipeline.plan(
                categories=list(categories) or None,
                include_auxiliary=not no_auxiliary,
            )
    except PackerError as e:
        _fail(ctx, e)

    builder: ArchiveBuilder = pipeline.builder
    for group in planned:
        click.echo(
            f"{builder.archive_name(group)}\t{group.section.value}\t{len(group.files)} files"
        )
    click.echo(f"{len(planned)} archives planned")


@cli.command(name="verify")
@click.argument("manifest_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--archive-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the archives (default: the manifest's directory)",
)
@click.pass_context
def verify_command(ctx: click.Context, manifest_path: Path, archive_dir: Optional[Path]) -> None:
    """Re-hash archives and compare them with a manifest."""
    try:
        manifest = load_manifest(manifest_path)
        report = verify(manifest, archive_dir or manifest_path.parent)
    except PackerError as e:
        _fail(ctx, e)

    for name in report.missing:
        click.echo(f"✗ missing: {name}")
    for name in report.mismatched:
        click.echo(f"✗ mismatch: {name}")
    click.echo(f"{len(report.verified)} verified, {len(report.missing)} missing, {len(report.mismatched)} mismatched")

    if not report.ok:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
