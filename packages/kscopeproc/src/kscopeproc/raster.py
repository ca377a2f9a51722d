"""Premultiplied RGBA raster operations on [B,4,H,W] tensors.

Porter-Duff modes follow the Android/Skia definitions with S = layer drawn,
D = destination already on the canvas (premultiplied, alpha in channel 3):

    src_over : S + D * (1 - Sa)
    dst_over : D + S * (1 - Da)
    src_in   : S * Da
    dst_in   : D * Sa
"""
from __future__ import annotations
import math

import torch
import torch.nn.functional as F

from kscopecore.errors import InvalidImageError
from .palette import unpack_argb
from .utils import sample_grid, downsample

__all__ = [
    "check_rgba", "solid", "premultiply", "unpremultiply",
    "src_over", "dst_over", "src_in", "dst_in",
    "circle_coverage", "triangle_coverage",
    "rotate", "rotate90", "flip_horizontal",
]


def check_rgba(img: torch.Tensor) -> int:
    """Validate a square [1,4,D,D] tensor and return D."""
    if not isinstance(img, torch.Tensor):
        raise InvalidImageError(f"expected a torch.Tensor, got {type(img).__name__}")
    if img.ndim != 4 or img.shape[0] != 1 or img.shape[1] != 4:
        raise InvalidImageError(f"image must be [1,4,D,D], got {tuple(img.shape)}")
    h, w = int(img.shape[2]), int(img.shape[3])
    if h <= 0 or w <= 0:
        raise InvalidImageError(f"image must not be empty, got {h}x{w}")
    if h != w:
        raise InvalidImageError(f"image must be square, got {h}x{w}")
    if not img.is_floating_point():
        raise InvalidImageError(f"image must be floating point, got {img.dtype}")
    return h


def solid(color: int, *, device=None, dtype=torch.float32) -> torch.Tensor:
    """Premultiplied [1,4,1,1] tensor of an ARGB colour (broadcasts over H,W)."""
    r, g, b, a = unpack_argb(color)
    return torch.tensor([r * a, g * a, b * a, a], device=device, dtype=dtype).view(1, 4, 1, 1)


def premultiply(straight: torch.Tensor) -> torch.Tensor:
    a = straight[:, 3:4]
    return torch.cat([straight[:, :3] * a, a], dim=1)


def unpremultiply(img: torch.Tensor) -> torch.Tensor:
    a = img[:, 3:4]
    rgb = torch.where(a > 0, img[:, :3] / a.clamp_min(1e-12), torch.zeros_like(img[:, :3]))
    return torch.cat([rgb.clamp(0.0, 1.0), a], dim=1)


def _alpha(x: torch.Tensor) -> torch.Tensor:
    # coverage masks are [B,1,H,W], images [B,4,H,W]
    return x if x.shape[1] == 1 else x[:, 3:4]


def src_over(dst: torch.Tensor, src: torch.Tensor) -> torch.Tensor:
    return src + dst * (1.0 - _alpha(src))


def dst_over(dst: torch.Tensor, src: torch.Tensor) -> torch.Tensor:
    return dst + src * (1.0 - _alpha(dst))


def src_in(dst: torch.Tensor, src: torch.Tensor) -> torch.Tensor:
    return src * _alpha(dst)


def dst_in(dst: torch.Tensor, src: torch.Tensor) -> torch.Tensor:
    return dst * _alpha(src)


# -----------------------------
# Coverage (anti-aliased by supersampling)
# -----------------------------

def circle_coverage(size: int, center: tuple[float, float], radius: float, *,
                    supersample: int = 4, device=None, dtype=torch.float32) -> torch.Tensor:
    xx, yy = sample_grid(size, size, supersample, device=device, dtype=dtype)
    inside = ((xx - center[0]) ** 2 + (yy - center[1]) ** 2) <= radius * radius
    return downsample(inside.to(dtype), supersample)


def _edge(ax, ay, bx, by, xx, yy):
    return (bx - ax) * (yy - ay) - (by - ay) * (xx - ax)


def _segment_dist2(ax, ay, bx, by, xx, yy):
    vx, vy = bx - ax, by - ay
    ll = max(vx * vx + vy * vy, 1e-12)
    t = (((xx - ax) * vx + (yy - ay) * vy) / ll).clamp(0.0, 1.0)
    px = ax + t * vx
    py = ay + t * vy
    return (xx - px) ** 2 + (yy - py) ** 2


def triangle_coverage(size: int, pts, *, stroke: float = 0.0, supersample: int = 4,
                      device=None, dtype=torch.float32) -> torch.Tensor:
    """Coverage [1,1,size,size] of a filled (and optionally stroked) triangle.

    A triangle has no self-intersection, so even-odd and non-zero fills agree:
    a sample is inside when the three edge functions share a sign.
    """
    (ax, ay), (bx, by), (cx, cy) = [(float(p[0]), float(p[1])) for p in pts]
    xx, yy = sample_grid(size, size, supersample, device=device, dtype=dtype)
    e0 = _edge(ax, ay, bx, by, xx, yy)
    e1 = _edge(bx, by, cx, cy, xx, yy)
    e2 = _edge(cx, cy, ax, ay, xx, yy)
    inside = ((e0 >= 0) & (e1 >= 0) & (e2 >= 0)) | ((e0 <= 0) & (e1 <= 0) & (e2 <= 0))
    if stroke > 0:
        half2 = (stroke / 2.0) ** 2
        near = (_segment_dist2(ax, ay, bx, by, xx, yy) <= half2) \
            | (_segment_dist2(bx, by, cx, cy, xx, yy) <= half2) \
            | (_segment_dist2(cx, cy, ax, ay, xx, yy) <= half2)
        inside = inside | near
    return downsample(inside.to(dtype), supersample)


# -----------------------------
# Transforms
# -----------------------------

def rotate(img: torch.Tensor, degrees: float, *, mode: str = "bilinear") -> torch.Tensor:
    """Rotate clockwise (on screen) by `degrees` about the image centre.

    Pixels coming from outside the source are transparent.
    """
    B, _, H, W = img.shape
    if float(degrees) % 360.0 == 0.0:
        return img.clone()
    t = math.radians(float(degrees))
    c, s = math.cos(t), math.sin(t)
    # affine_grid maps output coords -> input coords, i.e. the inverse rotation
    theta = torch.tensor([[c, s, 0.0], [-s, c, 0.0]], device=img.device, dtype=img.dtype)
    theta = theta.unsqueeze(0).expand(B, 2, 3)
    grid = F.affine_grid(theta, [B, 4, H, W], align_corners=False)
    out = F.grid_sample(img, grid, mode=mode, padding_mode="zeros", align_corners=False)
    if mode == "bicubic":
        # bicubic overshoots; keep premultiplied colour <= alpha
        a = out[:, 3:4].clamp(0.0, 1.0)
        out = torch.cat([torch.minimum(out[:, :3].clamp_min(0.0), a), a], dim=1)
    return out


def rotate90(img: torch.Tensor, k: int = 1) -> torch.Tensor:
    """Exact clockwise rotation by k * 90°."""
    return torch.rot90(img, k=-int(k), dims=(-2, -1))


def flip_horizontal(img: torch.Tensor) -> torch.Tensor:
    """Mirror about the vertical axis through the centre (scale(-1, 1) then translate by W)."""
    return torch.flip(img, dims=(-1,))
