from __future__ import annotations

from .api import montage

__all__ = ["montage"]
