"""Wedge geometry on the square bounding the circular source.

Coordinates are image-space: x to the right, y down, the square spans
[0, d] x [0, d] and its centre is (d/2, d/2). "Clockwise" always means
clockwise as seen on screen.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import NamedTuple

import torch

from kscopecore.errors import InvalidImageError

__all__ = [
    "Point", "Wedge", "SIDES",
    "start_point", "border_side", "other_side", "end_point",
    "tilt_angle", "angle_between", "wedge_from_start", "select_wedge",
]

SIDES = ("left", "top", "right", "bottom")


class Point(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Wedge:
    start: Point
    end: Point
    center: tuple[float, float]
    tilt_angle: float


def _check_diameter(diameter: int) -> None:
    if int(diameter) <= 0:
        raise InvalidImageError(f"diameter must be > 0, got {diameter}")


def start_point(diameter: int, generator: torch.Generator | None = None) -> Point:
    """Random point on the border: side uniform over SIDES, position uniform over [0, d)."""
    _check_diameter(diameter)
    side = int(torch.randint(0, 4, (1,), generator=generator).item())
    pos = int(torch.randint(0, diameter, (1,), generator=generator).item())
    if side == 0:
        return Point(0, pos)
    if side == 1:
        return Point(pos, 0)
    if side == 2:
        return Point(diameter, pos)
    return Point(pos, diameter)


def border_side(point: Point, diameter: int) -> str:
    # x first, so corners belong to left/right
    if point.x == 0:
        return "left"
    if point.x == diameter:
        return "right"
    if point.y == 0:
        return "top"
    if point.y == diameter:
        return "bottom"
    raise ValueError(f"{point} is not on the border of a {diameter}x{diameter} square")


def other_side(start: Point, diameter: int) -> Point:
    """Border point 90° clockwise from `start` around the centre."""
    side = border_side(start, diameter)
    if side == "left":
        return Point(diameter - start.y, 0)
    if side == "right":
        return Point(diameter - start.y, diameter)
    if side == "top":
        return Point(diameter, start.x)
    return Point(0, start.x)


def end_point(start: Point, diameter: int) -> Point:
    """Border point such that the angle start-centre-end is 45° (clockwise).

    The ray from the centre through the midpoint of `start` and
    `other_side(start)` is extended until it leaves the square.
    """
    _check_diameter(diameter)
    c = diameter / 2.0
    o = other_side(start, diameter)
    mx = (start.x + o.x) / 2.0
    my = (start.y + o.y) / 2.0
    dx = mx - c
    dy = my - c
    if abs(dx) > abs(dy):
        # left / right border
        steps = c / abs(dx)
        x = 0 if dx < 0 else diameter
        y = c + dy * steps
    else:
        # top / bottom border
        steps = c / abs(dy)
        x = c + dx * steps
        y = 0 if dy < 0 else diameter
    # nearest pixel: the angle error stays under 0.5/c rad
    return Point(round(x), round(y))


def tilt_angle(point: Point, center: tuple[float, float]) -> float:
    """Clockwise angle in degrees from 12 o'clock to `point`, in [0, 360).

    Inscribed-angle construction: the chord from the top of the circle through
    `point` makes half the central angle with the vertical.
    """
    cx, cy = center
    dx = point.x - cx
    dy = point.y - cy
    top_x = cx
    top_y = cy - math.sqrt(dx * dx + dy * dy)
    deg = 2.0 * math.degrees(math.atan2(point.y - top_y, point.x - top_x))
    return deg % 360.0


def angle_between(a: Point, center: tuple[float, float], b: Point) -> float:
    """Unsigned angle a-centre-b in degrees."""
    ax, ay = a.x - center[0], a.y - center[1]
    bx, by = b.x - center[0], b.y - center[1]
    na = math.hypot(ax, ay)
    nb = math.hypot(bx, by)
    if na == 0.0 or nb == 0.0:
        return 0.0
    cos = max(-1.0, min(1.0, (ax * bx + ay * by) / (na * nb)))
    return math.degrees(math.acos(cos))


def wedge_from_start(start: Point, diameter: int) -> Wedge:
    _check_diameter(diameter)
    center = (diameter / 2.0, diameter / 2.0)
    return Wedge(
        start=start,
        end=end_point(start, diameter),
        center=center,
        tilt_angle=tilt_angle(start, center),
    )


def select_wedge(diameter: int, generator: torch.Generator | None = None) -> Wedge:
    return wedge_from_start(start_point(diameter, generator), diameter)
