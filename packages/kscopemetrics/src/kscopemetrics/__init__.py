from __future__ import annotations

from .psnr import psnr, mae
from .symmetry import rotation_error, mirror_error, outlier_fraction, symmetry_report

__all__ = ["psnr", "mae", "rotation_error", "mirror_error", "outlier_fraction", "symmetry_report"]
