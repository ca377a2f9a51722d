from __future__ import annotations
from dataclasses import dataclass

import torch

from .geometry import Wedge
from .raster import triangle_coverage


@dataclass(frozen=True)
class Mask:
    """Wedge coverage [1,1,D,D] plus the angle the wedge is tilted from 12 o'clock."""
    alpha: torch.Tensor
    tilt_angle: float
    wedge: Wedge


def build_mask(size: int, wedge: Wedge, *, stroke: float = 2.0, supersample: int = 4,
               device=None, dtype=torch.float32) -> Mask:
    # triangle start -> end -> centre -> start
    pts = (wedge.start, wedge.end, wedge.center)
    alpha = triangle_coverage(size, pts, stroke=stroke, supersample=supersample,
                              device=device, dtype=dtype)
    return Mask(alpha=alpha, tilt_angle=wedge.tilt_angle, wedge=wedge)
