"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from brick_mosaic.catalog import CATALOGS
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import BrickMosaicError
from brick_mosaic.image_io import make_comparison_grid, save_upscaled
from brick_mosaic.pipeline import convert
from brick_mosaic.renderer import render
from brick_mosaic.report import BomLine, bill_of_materials, format_bom

app = typer.Typer(
    name="brick-mosaic",
    help="Turn any image into a brick mosaic with a parts list.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

_REPORT_SUFFIX = {"text": "txt", "csv": "csv", "json": "json"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _bom_table(lines: list[BomLine]) -> Table:
    table = Table(title="Bill of materials", show_footer=True)
    table.add_column("Shape", footer="Total")
    table.add_column("Colour")
    table.add_column("Count", justify="right", footer=str(sum(ln.count for ln in lines)))
    for line in lines:
        color = line.piece.color
        table.add_row(
            str(line.piece.shape),
            f"[{color.hex}]■[/] {color.name}",
            str(line.count),
        )
    return table


def _process(
    img_path: Path, cfg: MosaicConfig, mosaic_path: Path, stem: str,
) -> list[BomLine]:
    """Build, render and save the mosaic for one image.

    Side files (target, comparison, report) are named after *stem*.
    """
    target, grid, panel = convert(img_path, cfg)
    out_dir = mosaic_path.parent

    mosaic = render(panel, cfg.scale, cfg.outline)
    mosaic.save(mosaic_path)

    if cfg.save_target:
        save_upscaled(
            grid.to_rgb(), out_dir / f"{stem}_target.{cfg.output_format}", cfg.scale,
        )
    if cfg.save_comparison:
        make_comparison_grid(
            img_path, grid.to_rgb(), mosaic,
            out_dir / f"{stem}_comparison.{cfg.output_format}",
        )

    lines = bill_of_materials(panel, grid.catalog)
    if cfg.save_report:
        report_path = out_dir / f"{stem}_bom.{_REPORT_SUFFIX[cfg.report_format]}"
        report_path.write_text(format_bom(lines, cfg.report_format))
    return lines


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


def _make_config(**kwargs) -> MosaicConfig:
    if kwargs["catalog"] not in CATALOGS:
        console.print(
            f"[red]Unknown catalog '{kwargs['catalog']}'.[/red] "
            f"Available: {', '.join(sorted(CATALOGS))}"
        )
        raise typer.Exit(1)
    try:
        return MosaicConfig(**kwargs)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    width: int = typer.Option(
        _DEFAULTS.width, "--width", "-w", help="Mosaic width in bricks",
    ),
    catalog: str = typer.Option(
        _DEFAULTS.catalog, "--catalog", "-c", help="'basic', 'advanced' or 'all'",
    ),
    color_space: str = typer.Option(
        _DEFAULTS.color_space, "--color-space", help="'rgb' or 'lab'",
    ),
    dither: bool = typer.Option(
        _DEFAULTS.dither, "--dither/--no-dither", help="Floyd-Steinberg dithering",
    ),
    scale: int = typer.Option(
        _DEFAULTS.scale, "--scale", "-s", help="Output pixels per brick cell",
    ),
    outline: bool = typer.Option(
        _DEFAULTS.outline, "--outline/--no-outline", help="Outline every brick",
    ),
    report_format: str = typer.Option(
        _DEFAULTS.report_format, "--report", help="'text', 'csv' or 'json'",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Process all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    logger = logging.getLogger("brick_mosaic")

    cfg = _make_config(
        width=width,
        catalog=catalog,
        color_space=color_space,
        dither=dither,
        scale=scale,
        outline=outline,
        report_format=report_format,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]BRICK MOSAIC GENERATOR[/bold]\n"
        f"Width: {cfg.width}  |  Catalog: {cfg.catalog}\n"
        f"Colour space: {cfg.color_space}  |  Dithering: {cfg.dither}\n"
        f"Images: {len(images)}",
        border_style="cyan",
    ))

    failed = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()
        mosaic_path = output_dir / f"{img_path.stem}_mosaic.{cfg.output_format}"

        try:
            lines = _process(img_path, cfg, mosaic_path, img_path.stem)
        except BrickMosaicError as exc:
            logger.error("%s: %s", img_path.name, exc)
            failed += 1
            continue

        elapsed = time.perf_counter() - t_total
        console.print(
            f"  [green]✓[/green] {mosaic_path.name}  "
            f"[dim]{sum(ln.count for ln in lines)} bricks, "
            f"{len(lines)} kinds  time={elapsed:.1f}s[/dim]"
        )

    if failed:
        console.print(Panel.fit(
            f"[bold red]{failed} of {len(images)} images failed[/bold red]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- single-image command ----------------------------------------------

@app.command()
def single(
    target: Path = typer.Argument(..., help="Path to the source image"),
    output: Path = typer.Option(Path("output/mosaic.png"), "--output", "-o"),
    width: int = typer.Option(_DEFAULTS.width, "--width", "-w"),
    catalog: str = typer.Option(_DEFAULTS.catalog, "--catalog", "-c"),
    color_space: str = typer.Option(_DEFAULTS.color_space, "--color-space"),
    dither: bool = typer.Option(_DEFAULTS.dither, "--dither/--no-dither"),
    scale: int = typer.Option(_DEFAULTS.scale, "--scale", "-s"),
    outline: bool = typer.Option(_DEFAULTS.outline, "--outline/--no-outline"),
    report_format: str = typer.Option(_DEFAULTS.report_format, "--report"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Process a single image and print its bill of materials."""
    _setup_logging(verbose)

    if not target.is_file():
        console.print(f"[red]No such image: {target}[/red]")
        raise typer.Exit(1)

    cfg = _make_config(
        width=width,
        catalog=catalog,
        color_space=color_space,
        dither=dither,
        scale=scale,
        outline=outline,
        report_format=report_format,
        save_target=False,
        save_comparison=False,
    )
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        lines = _process(target, cfg, output, output.stem)
    except BrickMosaicError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(_bom_table(lines))
    console.print(f"[green]✓[/green] Saved to {output}")


# -- catalogs command --------------------------------------------------

@app.command()
def catalogs() -> None:
    """List the built-in brick catalogs."""
    table = Table(title="Catalogs")
    table.add_column("Name")
    table.add_column("Colours", justify="right")
    table.add_column("Pieces", justify="right")
    for name, cat in CATALOGS.items():
        table.add_row(name, str(len(cat)), str(len(cat.pieces())))
    console.print(table)


if __name__ == "__main__":
    app()
