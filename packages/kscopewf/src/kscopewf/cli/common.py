from __future__ import annotations
import logging, subprocess, sys, time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import torch

from kscopeproc.config import IdenticonConfig
from ..api import detect_gpu


def setup_logging(log_file: Optional[Path], verbose: bool = True) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=log_fmt, datefmt=datefmt, handlers=handlers)


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def add_render_args(p) -> None:
    """Options shared by every command that renders identicons."""
    p.add_argument("--size", type=int, default=None, help="Resize the source to SIZE x SIZE")
    p.add_argument("--crop", action="store_true", help="Centre-crop non-square sources")
    p.add_argument("--seed", type=int, default=None, help="Seed of the wedge selection")
    p.add_argument("--stroke", type=float, default=2.0, help="Wedge stroke width (px)")
    p.add_argument("--supersample", type=int, default=4)
    p.add_argument("--interpolation", default="bilinear", choices=("bilinear", "nearest", "bicubic"))
    p.add_argument("--device", default="auto", choices=("auto", "cuda", "cpu"))
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")


def config_from_args(args) -> IdenticonConfig:
    return IdenticonConfig(
        mask_stroke=args.stroke,
        supersample=args.supersample,
        interpolation=args.interpolation,
        seed=args.seed,
        device=args.device,
    )


@dataclass
class RunMeta:
    cmd: list[str]
    start_ts: float
    git_commit: Optional[str]
    torch: Optional[str]
    cuda: Optional[str]
    gpu: dict
    device: str
    seed: Optional[int]

    @staticmethod
    def collect(seed: Optional[int] = None, device: str = "auto") -> "RunMeta":
        git_commit = None
        try:
            git_commit = subprocess.check_output(
                ["git", "rev-parse", "--short", "HEAD"], text=True, stderr=subprocess.DEVNULL
            ).strip()
        except (OSError, subprocess.CalledProcessError):
            pass
        gpu = detect_gpu()
        cuda_v = torch.version.cuda if gpu["cuda_available"] else None
        return RunMeta(sys.argv[:], time.time(), git_commit, torch.__version__, cuda_v, gpu, device, seed)
