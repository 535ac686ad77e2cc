"""Click CLI for imgcache — materialize and inspect cache entries."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imgcache.config.hierarchy import load_config_hierarchy
from imgcache.config.schema import CacheSettings

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = getattr(logging, default_level.upper(), logging.WARNING)
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="imgcache")
def cli() -> None:
    """imgcache — on-demand JPEG crop/resize cache."""


@cli.command()
@click.argument("filenames", nargs=-1, required=True)
@click.option(
    "--source-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Master repository (default: IMGCACHE_SOURCE_DIR or config).",
)
@click.option(
    "--cache-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Cache directory (default: IMGCACHE_CACHE_DIR or config).",
)
@click.option("--workers", type=int, default=None, help="Concurrent requests for several files.")
@click.option("--quality", type=int, default=None, help="JPEG quality for transformed images.")
@click.option("--chunk-size", type=int, default=None, help="Bytes per streamed chunk.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def fetch(
    filenames: tuple[str, ...],
    source_dir: str | None,
    cache_dir: str | None,
    workers: int | None,
    quality: int | None,
    chunk_size: int | None,
    verbose: int,
) -> None:
    """Cache FILENAMES from the master repository into the cache directory."""
    from imgcache.concurrency.pool import ConcurrencyPool
    from imgcache.core import CacheOrchestrator

    config = load_config_hierarchy(
        source_dir=source_dir,
        cache_dir=cache_dir,
        max_workers=workers,
        jpeg_quality=quality,
        chunk_size=chunk_size,
    )
    try:
        settings = CacheSettings.from_mapping(config)
    except ValidationError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(2)

    if settings.source_dir is None:
        raise click.UsageError("No master repository: pass --source-dir or set IMGCACHE_SOURCE_DIR.")
    if settings.cache_dir is None:
        raise click.UsageError("No cache directory: pass --cache-dir or set IMGCACHE_CACHE_DIR.")

    _setup_logging(verbose, settings.log_level)
    orchestrator = CacheOrchestrator.from_config(settings)
    pool = ConcurrencyPool(max_workers=settings.max_workers)

    outcomes = asyncio.run(
        pool.cache_batch(orchestrator, settings.source_dir, settings.cache_dir, list(filenames))
    )

    table = Table(title="Cache Results", show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Result")
    table.add_column("Detail")
    for name, outcome in zip(filenames, outcomes, strict=True):
        if outcome.succeeded:
            table.add_row(name, "[green]cached[/green]", str(outcome.destination))
        else:
            error = outcome.error
            table.add_row(name, "[red]failed[/red]", f"{type(error).__name__}: {error}")
    console.print(table)

    if not all(o.succeeded for o in outcomes):
        sys.exit(1)


@cli.command()
@click.argument("filename")
def decode(filename: str) -> None:
    """Show how FILENAME is interpreted."""
    from imgcache.errors.exceptions import ImgCacheError
    from imgcache.naming.decoder import decode_filename, encode_filename
    from imgcache.types import TransformSpec

    try:
        decoded = decode_filename(filename)
    except ImgCacheError as e:
        error_console.print(f"[red]Cannot decode:[/red] {e}")
        sys.exit(1)

    table = Table(title="Decoded Filename", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Kind", decoded.kind)
    if isinstance(decoded, TransformSpec):
        table.add_row("Operation", decoded.operation.value)
        table.add_row("Width", str(decoded.width))
        table.add_row("Height", str(decoded.height))
        table.add_row("Original", decoded.original_filename)
        table.add_row(
            "Canonical",
            encode_filename(
                decoded.operation, decoded.width, decoded.height, decoded.original_filename
            ),
        )
    else:
        table.add_row("Original", decoded.filename)
    console.print(table)


@cli.command()
@click.argument("path", type=click.Path())
@click.option("--format", "format_name", default="jpeg", show_default=True, help="Format name.")
def verify(path: str, format_name: str) -> None:
    """Check that PATH carries the signature of an image format."""
    from imgcache.errors.exceptions import ImgCacheError
    from imgcache.formats.signatures import verify_image_format

    try:
        rule = asyncio.run(verify_image_format(path, format_name))
    except ImgCacheError as e:
        error_console.print(f"[red]Not verified:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]{path} is a valid {rule.format_name} file[/green]")


@cli.command("formats")
def list_formats() -> None:
    """List supported image formats."""
    from imgcache.formats.signatures import list_signatures

    table = Table(title="Supported Formats", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Signature")
    for rule in list_signatures():
        table.add_row(rule.format_name, rule.magic.hex(" ").upper())
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()
