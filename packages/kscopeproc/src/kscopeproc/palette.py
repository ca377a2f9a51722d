from __future__ import annotations
from typing import Sequence

from kscopecore.errors import InvalidColorError

__all__ = [
    "DEFAULT_FOREGROUNDS", "DEFAULT_BACKGROUND",
    "parse_color", "pack_argb", "unpack_argb", "palette_color", "color_hex",
]

# Palette d'origine (rouge, vert, bleu, violet, gris anthracite) sur fond gris clair
DEFAULT_FOREGROUNDS: tuple[int, ...] = (0xFFF14242, 0xFF57C867, 0xFF5379E5, 0xFF9753E5, 0xFF3E3E3E)
DEFAULT_BACKGROUND: int = 0xFFDDDDDD


def pack_argb(r: int, g: int, b: int, a: int = 255) -> int:
    for name, v in (("r", r), ("g", g), ("b", b), ("a", a)):
        if not (0 <= int(v) <= 255):
            raise InvalidColorError(f"{name}={v} ∉ [0, 255]")
    return (int(a) << 24) | (int(r) << 16) | (int(g) << 8) | int(b)


def unpack_argb(color: int) -> tuple[float, float, float, float]:
    """0xAARRGGBB -> (r, g, b, a) floats in [0, 1] (straight alpha)."""
    if isinstance(color, bool) or not isinstance(color, int):
        raise InvalidColorError(f"colour must be an int, got {type(color).__name__}")
    if not (0 <= color <= 0xFFFFFFFF):
        raise InvalidColorError(f"colour {color:#x} does not fit in 32-bit ARGB")
    a = (color >> 24) & 0xFF
    r = (color >> 16) & 0xFF
    g = (color >> 8) & 0xFF
    b = color & 0xFF
    return r / 255.0, g / 255.0, b / 255.0, a / 255.0


def parse_color(value: int | str) -> int:
    """Accepts an ARGB int, "#RRGGBB", "#AARRGGBB", "0xAARRGGBB" or a decimal string.

    Six-digit forms are taken as fully opaque.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        unpack_argb(value)  # range check
        return value
    if not isinstance(value, str):
        raise InvalidColorError(f"unsupported colour value {value!r}")
    s = value.strip()
    digits: str | None = None
    if s.startswith("#"):
        digits = s[1:]
    elif s.lower().startswith("0x"):
        digits = s[2:]
    if digits is None:
        try:
            return parse_color(int(s, 10))
        except ValueError:
            raise InvalidColorError(f"cannot parse colour {value!r}") from None
    if len(digits) not in (6, 8):
        raise InvalidColorError(f"colour {value!r} must have 6 or 8 hex digits")
    try:
        n = int(digits, 16)
    except ValueError:
        raise InvalidColorError(f"cannot parse colour {value!r}") from None
    if len(digits) == 6:
        return pack_argb((n >> 16) & 0xFF, (n >> 8) & 0xFF, n & 0xFF)
    return n


def color_hex(color: int) -> str:
    unpack_argb(color)
    return f"#{color:08x}"


def palette_color(palette: Sequence[int], index: int) -> int:
    if not palette:
        raise InvalidColorError("empty palette")
    return palette[index % len(palette)]
