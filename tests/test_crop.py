import math
import pytest
import torch
from PIL import Image, ImageDraw

from kscopedata import from_pil
from kscopeproc.geometry import Point, wedge_from_start
from kscopeproc.mask import build_mask
from kscopeproc.crop import build_slice
from kscopeproc.raster import unpremultiply

FG = 0xFFF14242
BG = 0xFFDDDDDD


def rgb(color):
    return torch.tensor([(color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF], dtype=torch.float32) / 255.0


def shapes_source(d=100):
    img = Image.new("RGBA", (d, d), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse((d * 0.55, d * 0.05, d * 0.85, d * 0.35), fill=(0, 0, 0, 255))
    draw.rectangle((d * 0.1, d * 0.6, d * 0.4, d * 0.9), fill=(10, 20, 30, 255))
    return from_pil(img, device="cpu")


def transparent_source(d=100):
    return torch.zeros(1, 4, d, d)


def test_colour_mapping_without_tilt():
    d = 100
    src = shapes_source(d)
    w = wedge_from_start(Point(50, 0), d)        # tilt 0: no resampling
    assert w.tilt_angle == 0.0
    mask = build_mask(d, w, stroke=0.0)
    out = build_slice(src, mask, FG, BG)

    src_a = src[0, 3]
    full = (mask.alpha[0, 0] == 1.0)
    yy, xx = torch.meshgrid(torch.arange(d) + 0.5, torch.arange(d) + 0.5, indexing="ij")
    in_disc = ((xx - 50) ** 2 + (yy - 50) ** 2) < 48 ** 2

    fg_px = full & (src_a == 1.0)
    bg_px = full & (src_a == 0.0) & in_disc
    assert int(fg_px.sum()) > 50 and int(bg_px.sum()) > 50
    straight = unpremultiply(out)[0]
    assert torch.allclose(straight[:3, fg_px], rgb(FG).view(3, 1).expand(3, int(fg_px.sum())), atol=1e-6)
    assert torch.allclose(straight[:3, bg_px], rgb(BG).view(3, 1).expand(3, int(bg_px.sum())), atol=1e-6)
    assert torch.all(out[0, 3, fg_px] == 1.0) and torch.all(out[0, 3, bg_px] == 1.0)
    # nothing survives outside the wedge
    assert float(out[0, :, mask.alpha[0, 0] == 0.0].abs().max()) == 0.0


def test_transparent_source_gives_background_only():
    d = 100
    w = wedge_from_start(Point(0, 37), d)
    out = build_slice(transparent_source(d), build_mask(d, w), FG, BG)
    a = out[0, 3]
    visible = a > 0.01
    assert int(visible.sum()) > 100
    straight = unpremultiply(out)[0, :3]
    assert torch.allclose(straight[:, visible], rgb(BG).view(3, 1).expand(3, int(visible.sum())), atol=1e-3)


def test_slice_is_tilted_back_to_twelve_oclock():
    d = 128
    c = d / 2.0
    w = wedge_from_start(Point(d, 90), d)        # right border, below the centre
    mask = build_mask(d, w, stroke=0.0)
    out = build_slice(transparent_source(d), mask, FG, BG)
    a = out[0, 3]
    yy, xx = torch.meshgrid(torch.arange(d) + 0.5, torch.arange(d) + 0.5, indexing="ij")
    mass = float(a.sum())
    mx = float((a * xx).sum()) / mass - c
    my = float((a * yy).sum()) / mass - c
    bearing = math.degrees(math.atan2(mx, -my)) % 360.0
    # a 45° disc sector starting at 12 o'clock, going clockwise
    assert bearing == pytest.approx(22.5, abs=2.0)
    assert mass == pytest.approx(math.pi * c * c / 8.0, rel=0.04)


def test_source_is_not_modified():
    src = shapes_source(64)
    before = src.clone()
    build_slice(src, build_mask(64, wedge_from_start(Point(10, 64), 64)), FG, BG)
    assert torch.equal(src, before)
