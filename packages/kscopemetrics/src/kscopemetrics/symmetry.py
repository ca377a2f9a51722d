from __future__ import annotations
from typing import Any

import torch

from .psnr import psnr, mae


def _rot(img: torch.Tensor, k: int) -> torch.Tensor:
    return torch.rot90(img, k=-int(k), dims=(-2, -1))


def rotation_error(img: torch.Tensor, k: int = 1) -> torch.Tensor:
    """Mean absolute difference between `img` and itself rotated by k*90°."""
    return mae(img, _rot(img, k))


def mirror_error(img: torch.Tensor) -> torch.Tensor:
    """Mean absolute difference between `img` and its horizontal mirror."""
    return mae(img, torch.flip(img, dims=(-1,)))


def outlier_fraction(a: torch.Tensor, b: torch.Tensor, threshold: float = 0.25) -> float:
    """Share of pixels whose largest channel difference exceeds `threshold`."""
    d = (a - b).abs().amax(dim=1)
    return float((d > threshold).to(torch.float32).mean().item())


def symmetry_report(img: torch.Tensor, threshold: float = 0.25) -> dict[str, Any]:
    x = img.detach().to(torch.float32)
    r = _rot(x, 1)
    m = torch.flip(x, dims=(-1,))
    return {
        "size": int(x.shape[-1]),
        "rot90_mae": float(mae(x, r).mean()),
        "rot90_psnr": float(psnr(x, r).mean()),
        "rot90_outliers": outlier_fraction(x, r, threshold),
        "mirror_mae": float(mae(x, m).mean()),
        "mirror_psnr": float(psnr(x, m).mean()),
        "mirror_outliers": outlier_fraction(x, m, threshold),
        "coverage": float(x[:, 3].mean()),
    }
