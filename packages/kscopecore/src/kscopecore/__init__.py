# packages/kscopecore/src/kscopecore/__init__.py
from __future__ import annotations

from .errors import KscopeError, InvalidImageError, InvalidColorError, MissingCudaError
from .device import get_device, cuda_info
from .rng import derive_seed64, make_generator, frame_generators

__all__ = [
    "KscopeError", "InvalidImageError", "InvalidColorError", "MissingCudaError",
    "get_device", "cuda_info",
    "derive_seed64", "make_generator", "frame_generators",
]
