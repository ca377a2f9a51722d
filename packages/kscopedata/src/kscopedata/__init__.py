from __future__ import annotations

from .api import scan_images, from_pil, to_pil, load_source, save_png

__all__ = ["scan_images", "from_pil", "to_pil", "load_source", "save_png"]
