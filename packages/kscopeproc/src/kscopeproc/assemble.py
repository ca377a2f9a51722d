from __future__ import annotations
import torch

from .raster import src_over, rotate, rotate90, flip_horizontal


def add_rotations(img: torch.Tensor, degrees: float = 90, count: int = 3, *,
                  mode: str = "bilinear") -> torch.Tensor:
    """Draw `count` copies of `img`, rotated by degrees, 2*degrees, ..., over `img`."""
    acc = img.clone()
    exact = float(degrees) % 90.0 == 0.0
    for i in range(1, int(count) + 1):
        if exact:
            layer = rotate90(img, int(round(i * float(degrees) / 90.0)))
        else:
            layer = rotate(img, i * float(degrees), mode=mode)
        acc = src_over(acc, layer)
    return acc


def add_flipped(img: torch.Tensor) -> torch.Tensor:
    """Draw the horizontal mirror of `img` over it."""
    return src_over(img, flip_horizontal(img))


@torch.no_grad()
def kaleidoscope(crop: torch.Tensor) -> torch.Tensor:
    # 4 rotations x mirror = 8 copies of the 45° slice
    return add_flipped(add_rotations(crop, 90, 3))
