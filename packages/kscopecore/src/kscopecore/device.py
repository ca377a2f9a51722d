from __future__ import annotations
import os
from typing import Any

import torch

from .errors import MissingCudaError


def get_device(prefer: str = "auto", strict_gpu: bool = False) -> torch.device:
    """Resolve the device used for rendering.

    prefer: "auto" (CUDA if available), "cuda" or "cpu".
    strict_gpu: refuse to fall back to CPU, unless KSCOPE_ALLOW_CPU_TESTS=1.
    """
    prefer = (prefer or "auto").lower()
    if prefer not in ("auto", "cuda", "cpu"):
        raise ValueError(f"unknown device {prefer!r} (expected auto|cuda|cpu)")
    if prefer == "cpu":
        return torch.device("cpu")
    if torch.cuda.is_available():
        return torch.device("cuda")
    allow_cpu = os.getenv("KSCOPE_ALLOW_CPU_TESTS", "0") == "1"
    if (prefer == "cuda" or strict_gpu) and not allow_cpu:
        raise MissingCudaError("CUDA requested but no GPU is available")
    return torch.device("cpu")


def cuda_info() -> dict[str, Any]:
    available = torch.cuda.is_available()
    return {
        "cuda_available": available,
        "device_count": torch.cuda.device_count() if available else 0,
        "current_device": torch.cuda.current_device() if available else None,
        "name": torch.cuda.get_device_name(0) if available else None,
    }
