# packages/kscopeproc/src/kscopeproc/config.py
from __future__ import annotations
from dataclasses import dataclass

__all__ = ["IdenticonConfig", "INTERPOLATIONS"]

INTERPOLATIONS = ("bilinear", "nearest", "bicubic")


@dataclass(frozen=True, slots=True)
class IdenticonConfig:
    """
    Rendering configuration of the identicon pipeline.

    Consumed by `kscopeproc.factory.create_identicon/render_identicon`.

    Fields
    ------
    mask_stroke : float, default=2.0
        Width (px) of the stroke drawn around the wedge triangle on top of the
        fill. Adjacent wedges overlap by half of it, which hides the seams
        between the eight copies. 0 disables the stroke.
    supersample : int, default=4
        Sub-samples per pixel axis used to anti-alias the wedge and the
        background disc. Must be in [1..16].
    interpolation : str, default="bilinear"
        Resampling used when the slice is rotated by the tilt angle
        (`grid_sample` mode: bilinear | nearest | bicubic).
    seed : int | None, default=None
        Seed of the wedge selection when the caller does not inject a
        generator. None draws a fresh seed from OS entropy.
    device : str, default="auto"
        auto | cuda | cpu.

    Notes
    -----
    - Frozen so that a config can be shared between runs and hashed.
    - Invalid values raise `ValueError` in `__post_init__`; nothing is coerced.
    """

    mask_stroke: float = 2.0
    supersample: int = 4
    interpolation: str = "bilinear"
    seed: int | None = None
    device: str = "auto"

    def __post_init__(self) -> None:
        if self.mask_stroke < 0:
            raise ValueError("IdenticonConfig.mask_stroke must be >= 0")
        if not (1 <= int(self.supersample) <= 16):
            raise ValueError("IdenticonConfig.supersample must be in [1..16]")
        if self.interpolation not in INTERPOLATIONS:
            raise ValueError(f"IdenticonConfig.interpolation must be one of {INTERPOLATIONS}")
        if self.device not in ("auto", "cuda", "cpu"):
            raise ValueError("IdenticonConfig.device must be auto|cuda|cpu")
