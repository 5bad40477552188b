"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from pixel_remix.color_utils import mean_error, perceptual_error
from pixel_remix.config import RemixConfig
from pixel_remix.engine import RemixEngine, RemixResult
from pixel_remix.errors import RemixError
from pixel_remix.image_io import load_pair, make_comparison_grid, save_upscaled

app = typer.Typer(
    name="pixel-remix",
    help="Rearrange the pixels of one image into another.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


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


def _progress() -> Progress:
    return Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>5.1f}%"),
        TimeElapsedColumn(),
        console=console,
    )


def _remix_file(
    source_path: Path,
    target_path: Path,
    output: Path,
    cfg: RemixConfig,
    progress: Progress,
) -> tuple[RemixResult, np.ndarray]:
    source, target = load_pair(source_path, target_path, cfg.grid_size)
    h, w = target.shape[:2]

    task = progress.add_task(source_path.name, total=1.0)
    engine = RemixEngine(
        cfg, on_progress=lambda f: progress.update(task, completed=f),
    )
    result = engine.run(source, target)

    remixed = result.pixels.reshape(h, w, 4)
    save_upscaled(remixed, output, cfg.pixel_upscale)
    if cfg.save_comparison:
        comp_path = output.with_name(f"{output.stem}_comparison{output.suffix}")
        make_comparison_grid(source, target, remixed, comp_path, cfg.pixel_upscale)
    return result, target


def _summary(name: str, result: RemixResult, target_pixels) -> str:
    return (
        f"  [green]✓[/green] {name}  "
        f"[dim]{result.mode}  N={len(result.pixels)}  window={result.window}  "
        f"error={mean_error(target_pixels, result.pixels):.1f}  "
        f"ΔE={perceptual_error(target_pixels, result.pixels):.1f}  "
        f"time={result.elapsed:.1f}s[/dim]"
    )


# Defaults come from RemixConfig - single source of truth
_DEFAULTS = RemixConfig()


# -- single command ----------------------------------------------------

@app.command()
def single(
    source: Path = typer.Argument(..., help="Image whose pixels are rearranged"),
    target: Path = typer.Argument(..., help="Image to reproduce"),
    output: Path = typer.Option(Path("output/remix.png"), "--output", "-o"),
    size: int = typer.Option(
        _DEFAULTS.grid_size, "--size", "-s",
        help="Longest side of the working grid (aspect ratio of TARGET)",
    ),
    quality: int = typer.Option(
        _DEFAULTS.quality, "--quality", "-q", min=0, max=100,
        help="0 = fastest, 100 = exhaustive nearest-available search",
    ),
    mode: str = typer.Option(_DEFAULTS.mode, "--mode", help="'heuristic' or 'exact'"),
    fallback: bool = typer.Option(
        _DEFAULTS.exact_fallback_to_greedy, "--fallback/--no-fallback",
        help="Use the heuristic when exact mode cannot run",
    ),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Rearrange SOURCE into TARGET and save the result."""
    _setup_logging(verbose)

    cfg = RemixConfig(
        grid_size=size,
        quality=quality,
        mode=mode,
        exact_fallback_to_greedy=fallback,
        pixel_upscale=upscale,
        save_comparison=comparison,
    )
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        with _progress() as progress:
            result, target_pixels = _remix_file(source, target, output, cfg, progress)
    except (RemixError, ValueError) as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(_summary(output.name, result, target_pixels))


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    target: Path = typer.Argument(..., help="Image every source is rearranged into"),
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    size: int = typer.Option(_DEFAULTS.grid_size, "--size", "-s"),
    quality: int = typer.Option(_DEFAULTS.quality, "--quality", "-q", min=0, max=100),
    mode: str = typer.Option(_DEFAULTS.mode, "--mode", help="'heuristic' or 'exact'"),
    fallback: bool = typer.Option(
        _DEFAULTS.exact_fallback_to_greedy, "--fallback/--no-fallback",
    ),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Parallel runs"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Rearrange every image in INPUT_DIR into TARGET, results in OUTPUT_DIR."""
    _setup_logging(verbose)

    cfg = RemixConfig(
        grid_size=size,
        quality=quality,
        mode=mode,
        exact_fallback_to_greedy=fallback,
        pixel_upscale=upscale,
        input_dir=input_dir,
        output_dir=output_dir,
    )
    output_dir.mkdir(parents=True, exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]PIXEL REMIX[/bold]\n"
        f"Target: {target.name}  |  Grid: {cfg.grid_size}\n"
        f"Mode: {cfg.mode}  |  Quality: {cfg.quality}\n"
        f"Images: {len(images)}  |  Workers: {workers}",
        border_style="cyan",
    ))

    def _one(img_path: Path):
        out = output_dir / f"{img_path.stem}_remix.{cfg.output_format}"
        try:
            result, target_pixels = _remix_file(img_path, target, out, cfg, progress)
        except (RemixError, ValueError) as exc:
            return img_path, None, exc
        return img_path, (result, target_pixels), None

    # one engine per run, so workers never share a working set
    with _progress() as progress, ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(_one, images))

    failures = 0
    for img_path, done, exc in outcomes:
        if exc is not None:
            failures += 1
            console.print(f"  [red]✗[/red] {img_path.name}  [dim]{exc}[/dim]")
            continue
        result, target_pixels = done
        console.print(_summary(img_path.name, result, target_pixels))

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]"
        + (f"  [red]({failures} failed)[/red]" if failures else ""),
        border_style="green",
    ))
    if failures:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
