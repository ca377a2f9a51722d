from __future__ import annotations

__all__ = ["KscopeError", "InvalidImageError", "InvalidColorError", "MissingCudaError"]


class KscopeError(RuntimeError):
    """Base class for every error raised by the kscope packages."""


class InvalidImageError(KscopeError, ValueError):
    """Source image is empty, not square, or not a [1,4,D,D] RGBA tensor."""


class InvalidColorError(KscopeError, ValueError):
    """Colour cannot be parsed or does not fit in 32-bit ARGB."""


class MissingCudaError(KscopeError):
    pass
