"""Coherent Point Drift point set registration: rigid, affine and nonrigid."""

__version__ = "0.1.0"

__all__ = [
    "matrix",
    "normalization",
    "gauss_transform",
    "transform",
    "rigid",
    "affine",
    "nonrigid",
    "jsonio",
    "cli",
]