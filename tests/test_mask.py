import pytest
import torch

from kscopeproc.geometry import Point, wedge_from_start
from kscopeproc.mask import build_mask


def test_mask_covers_the_wedge_only():
    w = wedge_from_start(Point(0, 50), 100)   # start (0,50) -> end (0,0) -> centre
    m = build_mask(100, w, stroke=0.0, supersample=4)
    assert m.alpha.shape == (1, 1, 100, 100)
    assert m.tilt_angle == pytest.approx(270.0)
    assert float(m.alpha[0, 0, 33, 16]) == 1.0    # around the centroid
    assert float(m.alpha[0, 0, 80, 80]) == 0.0    # opposite quadrant
    assert float(m.alpha.sum()) == pytest.approx(1250.0, abs=15.0)
    assert float(m.alpha.max()) <= 1.0 and float(m.alpha.min()) >= 0.0


def test_stroke_grows_the_mask():
    w = wedge_from_start(Point(30, 0), 64)
    thin = build_mask(64, w, stroke=0.0)
    thick = build_mask(64, w, stroke=2.0)
    assert float(thick.alpha.sum()) > float(thin.alpha.sum())
    assert thick.wedge is w


def test_mask_is_deterministic():
    w = wedge_from_start(Point(64, 17), 64)
    assert torch.equal(build_mask(64, w).alpha, build_mask(64, w).alpha)
