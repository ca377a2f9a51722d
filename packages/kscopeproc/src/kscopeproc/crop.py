from __future__ import annotations
import torch

from .mask import Mask
from .raster import check_rgba, solid, src_in, dst_over, dst_in, circle_coverage, rotate


@torch.no_grad()
def build_slice(source: torch.Tensor, mask: Mask, foreground: int, background: int, *,
                supersample: int = 4, interpolation: str = "bilinear") -> torch.Tensor:
    """Recolour `source`, put the background disc behind it, clip to the wedge.

    Every step is drawn in a frame rotated by -tilt_angle about the centre, so
    the wedge's start point ends up at 12 o'clock. The rotation commutes with the
    per-pixel compositing below and is applied once at the end.
    """
    size = check_rgba(source)
    device, dtype = source.device, source.dtype

    # 1) foreground colour, destination alpha kept (SRC_IN)
    layer = src_in(source, solid(foreground, device=device, dtype=dtype))

    # 2) background disc behind the shapes (DST_OVER)
    half = size / 2.0
    disc = circle_coverage(size, (half, half), half, supersample=supersample,
                           device=device, dtype=dtype)
    layer = dst_over(layer, disc * solid(background, device=device, dtype=dtype))

    # 3) keep the wedge only (DST_IN)
    layer = dst_in(layer, mask.alpha.to(device=device, dtype=dtype))

    return rotate(layer, -mask.tilt_angle, mode=interpolation)
