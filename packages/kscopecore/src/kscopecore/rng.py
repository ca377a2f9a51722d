from __future__ import annotations
import torch

_MASK64 = 0xFFFFFFFFFFFFFFFF
_SIGNBIT = 1 << 63
_MOD64 = 1 << 64


def splitmix64(x: int) -> int:
    x &= _MASK64
    x = (x + 0x9E3779B97F4A7C15) & _MASK64
    z = x
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & _MASK64
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & _MASK64
    z ^= z >> 31
    return z & _MASK64


def derive_seed64(*keys: int) -> int:
    """Mix any number of integer keys into one unsigned 64-bit seed."""
    s = 0x1234ABCD9876EF01
    for k in keys:
        s = splitmix64(s ^ (k & _MASK64))
    return s


def to_int64_signed(u: int) -> int:
    """Unsigned 64-bit -> signed int64 (two's complement)."""
    return u - _MOD64 if (u & _SIGNBIT) else u


def make_generator(seed: int | None = None, device: str | torch.device = "cpu") -> torch.Generator:
    """Build an isolated torch.Generator.

    With seed=None the generator is seeded from OS entropy; the global torch
    RNG is never touched.
    """
    dev = torch.device(device)
    g = torch.Generator(device=dev.type)
    if seed is None:
        g.seed()
    else:
        # manual_seed refuses values >= 2**63 on some builds
        g.manual_seed(derive_seed64(seed) & 0x7FFFFFFFFFFFFFFF)
    return g


def frame_generators(seed: int, count: int, device: str | torch.device = "cpu") -> list[torch.Generator]:
    """One independent generator per frame index, all derived from `seed`."""
    gens: list[torch.Generator] = []
    for i in range(count):
        gens.append(make_generator(to_int64_signed(derive_seed64(seed, i)), device=device))
    return gens
