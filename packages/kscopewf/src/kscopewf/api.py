from __future__ import annotations
import os, time
from pathlib import Path


def atomic_write(path: Path | str, data: bytes) -> None:
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


def identicon_name(source: str, index: int, color: int, seed: int | None) -> str:
    s = "rnd" if seed is None else str(seed)
    return f"{source}__{index:04d}__{color:08x}__s{s}.png"


def log_append(path: Path | str, msg: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"[{ts}] {msg}\n")


def detect_gpu() -> dict:
    from kscopecore.device import cuda_info
    return cuda_info()
