"""kscope: unified API
Install once, import one namespace:

    pip install -e .

Usage:

    import kscope as ks
    src = ks.load_source("shapes.png")
    img = ks.create_identicon(src, 0xFFF14242, 0xFFDDDDDD)
    ks.save_png(img, "identicon.png")

Or detailed modules:

    from kscope import core, proc, data, metrics, viz, wf
"""

__version__ = "1.0.0"

import kscopecore as core
import kscopeproc as proc
import kscopedata as data
import kscopemetrics as metrics
import kscopeviz as viz
import kscopewf as wf

# High-level convenience re-exports
from kscopecore import InvalidImageError, InvalidColorError, make_generator
from kscopeproc import (
    IdenticonConfig, create_identicon, render_identicon,
    DEFAULT_FOREGROUNDS, DEFAULT_BACKGROUND, parse_color,
)
from kscopedata import load_source, save_png, to_pil, from_pil
from kscopemetrics import symmetry_report
from kscopeviz import montage

__all__ = [
    # sub-namespaces
    "core", "proc", "data", "metrics", "viz", "wf",
    # convenience
    "InvalidImageError", "InvalidColorError", "make_generator",
    "IdenticonConfig", "create_identicon", "render_identicon",
    "DEFAULT_FOREGROUNDS", "DEFAULT_BACKGROUND", "parse_color",
    "load_source", "save_png", "to_pil", "from_pil",
    "symmetry_report", "montage",
    "__version__",
]
