from __future__ import annotations
from pathlib import Path

import numpy as np
import torch
from PIL import Image

from kscopecore.device import get_device
from kscopecore.errors import InvalidImageError

IMG_EXTS = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp"}


def scan_images(root: str | Path) -> list[Path]:
    root = Path(root)
    return sorted(p for p in root.rglob("*") if p.suffix.lower() in IMG_EXTS)


def from_pil(img: Image.Image, *, device=None, dtype=torch.float32) -> torch.Tensor:
    """PIL image (any mode) -> premultiplied RGBA tensor [1,4,H,W] in [0,1]."""
    arr = np.asarray(img.convert("RGBA"), dtype=np.float32) / 255.0   # H,W,4 straight alpha
    arr[..., :3] *= arr[..., 3:4]
    t = torch.from_numpy(np.ascontiguousarray(arr.transpose(2, 0, 1))).unsqueeze(0)
    if device is None:
        device = get_device()
    return t.to(device=device, dtype=dtype)


def to_pil(t: torch.Tensor) -> Image.Image:
    """Premultiplied [1,4,H,W] tensor -> RGBA PIL image (straight alpha)."""
    if t.ndim != 4 or t.shape[0] != 1 or t.shape[1] != 4:
        raise InvalidImageError(f"expected [1,4,H,W], got {tuple(t.shape)}")
    x = t[0].detach().to(device="cpu", dtype=torch.float32).clamp(0.0, 1.0)
    a = x[3:4]
    rgb = torch.where(a > 0, x[:3] / a.clamp_min(1e-12), torch.zeros_like(x[:3])).clamp(0.0, 1.0)
    arr = torch.cat([rgb, a], dim=0).permute(1, 2, 0).numpy()
    return Image.fromarray(np.round(arr * 255.0).astype(np.uint8))


def load_source(path: str | Path, *, size: int | None = None, crop: bool = False,
                device=None, dtype=torch.float32) -> torch.Tensor:
    """Read a source image (shapes on transparent background) as [1,4,D,D].

    Non-square images are rejected unless crop=True (centre crop to the short
    side). `size` resizes the square result.
    """
    img = Image.open(path)
    img.load()
    w, h = img.size
    if w != h:
        if not crop:
            raise InvalidImageError(f"{path}: source must be square, got {w}x{h}")
        side = min(w, h)
        img = img.crop(((w - side) // 2, (h - side) // 2, (w - side) // 2 + side, (h - side) // 2 + side))
    if size is not None:
        if size <= 0:
            raise InvalidImageError(f"size must be > 0, got {size}")
        if img.size != (size, size):
            img = img.convert("RGBA").resize((size, size), Image.Resampling.LANCZOS)
    return from_pil(img, device=device, dtype=dtype)


def save_png(t: torch.Tensor, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_pil(t).save(path, format="PNG")
    return path
