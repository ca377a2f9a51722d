from __future__ import annotations
import torch
from kscopecore.device import get_device


def sample_grid(h: int, w: int, supersample: int = 1, *, device=None, dtype=None):
    """Sample positions in pixel units, `supersample` per pixel axis.

    Returns (xx, yy) of shape (h*s, w*s). Samples sit at (i + (k + 0.5) / s),
    so with s=1 they are the pixel centres.
    """
    if device is None:
        device = get_device()
    if dtype is None:
        dtype = torch.float32
    s = int(supersample)
    ys = (torch.arange(h * s, device=device, dtype=dtype) + 0.5) / s
    xs = (torch.arange(w * s, device=device, dtype=dtype) + 0.5) / s
    yy, xx = torch.meshgrid(ys, xs, indexing="ij")
    return xx, yy


def downsample(fine: torch.Tensor, supersample: int) -> torch.Tensor:
    """(h*s, w*s) coverage samples -> (1, 1, h, w) mean coverage."""
    s = int(supersample)
    x = fine.unsqueeze(0).unsqueeze(0)
    if s == 1:
        return x
    return torch.nn.functional.avg_pool2d(x, kernel_size=s, stride=s)
