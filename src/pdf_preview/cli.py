"""CLI entry points for PDF preview conversion."""
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Tuple

import click
from tqdm import tqdm

from schemas.conversion import ConversionResult, InputDocument
from telemetry import Telemetry

from .pipeline import convert
from .rasterize import DEFAULT_SCALE


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _show_timing(result: ConversionResult):
    click.echo(Telemetry.format_timings(result.timings))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """PDF preview - render the first page of a résumé PDF as a PNG."""
    _configure_logging(verbose)


@cli.command("convert")
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file or directory (default: resume.png next to the PDF)",
)
@click.option(
    "--scale",
    "-s",
    type=float,
    default=DEFAULT_SCALE,
    help=f"Render scale relative to native page size (default: {DEFAULT_SCALE})",
)
@click.option("--timing", is_flag=True, help="Show per-stage timing")
def convert_one(pdf_path: Path, output: Path | None, scale: float, timing: bool):
    """
    Convert the first page of a PDF to a PNG preview.

    Example:
        pdf-preview convert uploads/jane-doe.pdf -o previews/
    """
    if output is None:
        output = pdf_path.parent

    document = InputDocument.from_path(pdf_path)
    result = asyncio.run(convert(document, scale=scale))

    if not result.ok:
        click.echo(f"Error: {result.error_message}", err=True)
        if timing:
            _show_timing(result)
        sys.exit(1)

    saved = result.save(output)
    click.echo(f"Wrote {saved} ({result.width}x{result.height} px, {len(result.image_bytes):,} bytes)")
    if timing:
        _show_timing(result)


async def _convert_many(pdf_files: List[Path], scale: float) -> List[Tuple[Path, ConversionResult]]:
    async def _one(pdf_path: Path) -> Tuple[Path, ConversionResult]:
        document = InputDocument.from_path(pdf_path)
        return pdf_path, await convert(document, scale=scale)

    results = []
    tasks = [_one(p) for p in pdf_files]
    with tqdm(total=len(tasks), desc="Converting PDFs") as progress:
        for future in asyncio.as_completed(tasks):
            results.append(await future)
            progress.update(1)
    return results


@cli.command("convert-all")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--scale",
    "-s",
    type=float,
    default=DEFAULT_SCALE,
    help=f"Render scale relative to native page size (default: {DEFAULT_SCALE})",
)
@click.option(
    "--force",
    is_flag=True,
    help="Regenerate previews that already exist",
)
def convert_all(directory: Path, scale: float, force: bool):
    """
    Convert every PDF in a directory to <name>.png alongside it.

    Example:
        pdf-preview convert-all uploads/
        pdf-preview convert-all uploads/ --force
    """
    pdf_files = sorted(directory.glob("*.pdf"))
    click.echo(f"Found {len(pdf_files)} PDFs")

    pending = []
    skipped_count = 0
    for pdf_path in pdf_files:
        # Skip if a preview already exists (unless --force)
        if pdf_path.with_suffix(".png").exists() and not force:
            skipped_count += 1
            continue
        pending.append(pdf_path)

    results = asyncio.run(_convert_many(pending, scale)) if pending else []

    failed = []
    for pdf_path, result in sorted(results, key=lambda r: r[0]):
        if result.ok:
            result.save(pdf_path.with_suffix(".png"))
        else:
            failed.append((pdf_path, result))

    click.echo("")
    click.echo("Conversion complete!")
    click.echo(f"  PDFs converted: {len(results) - len(failed)}")
    if skipped_count > 0:
        click.echo(f"  PDFs skipped (preview exists): {skipped_count}")
    if failed:
        click.echo(f"  PDFs failed: {len(failed)}")
        for pdf_path, result in failed:
            click.echo(f"    {pdf_path.name}: {result.error_message}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
