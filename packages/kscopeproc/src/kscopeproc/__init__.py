# packages/kscopeproc/src/kscopeproc/__init__.py
from __future__ import annotations

"""kscope - identicon generator (public surface)."""

from .config import IdenticonConfig
from .geometry import Point, Wedge, start_point, end_point, tilt_angle, select_wedge, wedge_from_start
from .mask import Mask, build_mask
from .crop import build_slice
from .assemble import add_rotations, add_flipped, kaleidoscope
from .factory import IdenticonResult, create_identicon, render_identicon, kaleidoscope_crop
from .palette import DEFAULT_FOREGROUNDS, DEFAULT_BACKGROUND, parse_color, palette_color

__all__ = [
    "IdenticonConfig",
    "Point", "Wedge", "start_point", "end_point", "tilt_angle", "select_wedge", "wedge_from_start",
    "Mask", "build_mask", "build_slice",
    "add_rotations", "add_flipped", "kaleidoscope",
    "IdenticonResult", "create_identicon", "render_identicon", "kaleidoscope_crop",
    "DEFAULT_FOREGROUNDS", "DEFAULT_BACKGROUND", "parse_color", "palette_color",
]
