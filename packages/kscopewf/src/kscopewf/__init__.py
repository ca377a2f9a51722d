# packages/kscopewf/src/kscopewf/__init__.py
from __future__ import annotations

from .api import atomic_write, identicon_name, log_append, detect_gpu
from .paths import PathsConfig

__all__ = [
    "atomic_write",
    "identicon_name",
    "log_append",
    "detect_gpu",
    "PathsConfig",
    # cli is not imported here, keeps the top-level import light
]

__version__ = "1.0.0"
