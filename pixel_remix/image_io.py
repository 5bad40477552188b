"""Image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    """
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def resize_rgba(img: Image.Image, size: tuple[int, int]) -> np.ndarray:
    """Resize to exactly *size* (w, h) and return an (H, W, 4) uint8 array."""
    img = img.convert("RGBA").resize(size, Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def load_and_resize(path: str | Path, max_side: int = 64) -> np.ndarray:
    """Load an image and resize preserving aspect ratio.

    The longest side becomes *max_side*.

    Returns:
        (H, W, 4) uint8 RGBA array.
    """
    img = Image.open(path)
    w, h = compute_target_size(img.width, img.height, max_side)
    return resize_rgba(img, (w, h))


def load_pair(
    source_path: str | Path,
    target_path: str | Path,
    max_side: int = 64,
) -> tuple[np.ndarray, np.ndarray]:
    """Load source and target on the same grid.

    The grid follows the target's aspect ratio; the source is stretched onto
    it so both hold exactly the same number of pixels.

    Returns:
        ``(source, target)`` - two (H, W, 4) uint8 arrays of equal shape.
    """
    target = load_and_resize(target_path, max_side)
    h, w = target.shape[:2]
    source = resize_rgba(Image.open(source_path), (w, h))
    return source, target


def save_upscaled(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 8,
) -> None:
    """Save a small array as a nearest-neighbour-upscaled image."""
    img = Image.fromarray(array.astype(np.uint8))
    h, w = array.shape[:2]
    img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
    img.save(path)


def make_comparison_grid(
    source: np.ndarray,
    target: np.ndarray,
    result: np.ndarray,
    output_path: str | Path,
    pixel_upscale: int = 8,
) -> None:
    """Create a 3-panel comparison: Source | Target | Result.

    All three arrays share the grid shape (H, W, 4); panels are upscaled
    by *pixel_upscale*.
    """
    th, tw = target.shape[:2]
    panel_w = tw * pixel_upscale
    panel_h = th * pixel_upscale
    label_height = 36

    panels = [
        Image.fromarray(a.astype(np.uint8)).convert("RGB").resize(
            (panel_w, panel_h), Image.NEAREST,
        )
        for a in (source, target, result)
    ]
    labels = ["Source", f"Target {tw}x{th}", "Result"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
