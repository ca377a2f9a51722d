from __future__ import annotations
from typing import Sequence

from PIL import Image

from kscopedata import to_pil


def montage(images: Sequence, cols: int, background: tuple[int, int, int, int] = (0, 0, 0, 0),
            padding: int = 0) -> Image.Image:
    """Contact sheet of identicons (tensors [1,4,H,W] or PIL images), row-major."""
    if not images:
        raise ValueError("montage needs at least one image")
    if cols <= 0:
        raise ValueError("cols must be > 0")
    tiles = [im.convert("RGBA") if isinstance(im, Image.Image) else to_pil(im) for im in images]
    W = max(t.width for t in tiles)
    H = max(t.height for t in tiles)
    cols = min(cols, len(tiles))
    rows = (len(tiles) + cols - 1) // cols
    sheet = Image.new("RGBA", (cols * W + (cols + 1) * padding, rows * H + (rows + 1) * padding), background)
    for i, tile in enumerate(tiles):
        r, c = divmod(i, cols)
        x = padding + c * (W + padding)
        y = padding + r * (H + padding)
        sheet.alpha_composite(tile, (x, y))
    return sheet
