from __future__ import annotations
import logging
import time
from dataclasses import dataclass

import torch

from kscopecore.device import get_device
from kscopecore.rng import make_generator
from .assemble import kaleidoscope
from .config import IdenticonConfig
from .crop import build_slice
from .geometry import Wedge, select_wedge
from .mask import Mask, build_mask
from .palette import DEFAULT_BACKGROUND, parse_color
from .raster import check_rgba

log = logging.getLogger(__name__)

__all__ = ["IdenticonResult", "create_identicon", "render_identicon", "kaleidoscope_crop"]


@dataclass(frozen=True)
class IdenticonResult:
    image: torch.Tensor   # [1,4,D,D] premultiplied
    slice: torch.Tensor   # wedge after tilt normalisation
    mask: Mask
    wedge: Wedge


def _prepare(source: torch.Tensor, cfg: IdenticonConfig) -> torch.Tensor:
    check_rgba(source)
    if cfg.device == "auto":
        return source
    return source.to(get_device(cfg.device))


def kaleidoscope_crop(source: torch.Tensor, foreground: int | str, background: int | str, *,
                      generator: torch.Generator | None = None,
                      cfg: IdenticonConfig | None = None,
                      wedge: Wedge | None = None) -> tuple[torch.Tensor, Mask]:
    """45° slice taken at a random angle, recoloured and tilted back to 12 o'clock."""
    cfg = cfg or IdenticonConfig()
    src = _prepare(source, cfg)
    size = int(src.shape[-1])
    fg = parse_color(foreground)
    bg = parse_color(background)

    if wedge is None:
        if generator is None:
            generator = make_generator(cfg.seed)
        wedge = select_wedge(size, generator)
    log.debug("wedge start=%s end=%s tilt=%.3f°", tuple(wedge.start), tuple(wedge.end), wedge.tilt_angle)

    mask = build_mask(size, wedge, stroke=cfg.mask_stroke, supersample=cfg.supersample,
                      device=src.device, dtype=src.dtype)
    crop = build_slice(src, mask, fg, bg, supersample=cfg.supersample,
                       interpolation=cfg.interpolation)
    return crop, mask


def render_identicon(source: torch.Tensor, foreground: int | str,
                     background: int | str = DEFAULT_BACKGROUND, *,
                     generator: torch.Generator | None = None,
                     cfg: IdenticonConfig | None = None,
                     wedge: Wedge | None = None) -> IdenticonResult:
    t0 = time.perf_counter()
    crop, mask = kaleidoscope_crop(source, foreground, background,
                                   generator=generator, cfg=cfg, wedge=wedge)
    image = kaleidoscope(crop)
    log.debug("identicon %dx%d rendered in %.2f ms", image.shape[-1], image.shape[-2],
              (time.perf_counter() - t0) * 1000.0)
    return IdenticonResult(image=image, slice=crop, mask=mask, wedge=mask.wedge)


def create_identicon(source: torch.Tensor, foreground: int | str,
                     background: int | str = DEFAULT_BACKGROUND, *,
                     generator: torch.Generator | None = None,
                     cfg: IdenticonConfig | None = None,
                     wedge: Wedge | None = None) -> torch.Tensor:
    """Colour the shapes of `source`, cut a random 45° slice and mirror it into a disc.

    Parameters
    ----------
    source : Tensor [1,4,D,D]
        Premultiplied RGBA, shapes on a transparent background. Not modified.
    foreground, background : int | str
        ARGB colours (see `palette.parse_color`).
    generator : torch.Generator, optional
        Randomness of the wedge selection. Takes precedence over `cfg.seed`.
    wedge : Wedge, optional
        Fixed wedge; bypasses the random selection entirely.

    Returns
    -------
    Tensor [1,4,D,D], newly allocated.
    """
    return render_identicon(source, foreground, background,
                            generator=generator, cfg=cfg, wedge=wedge).image
