# explainer/perturbation.py
"""
Illustrative perturbation for demo mode.

This is signed noise, not a gradient: every pixel is pushed up or down by
epsilon * 255 with a sign that depends only on the pixel's position. It
shows what an epsilon-bounded change looks like; it is not an attack.
"""
from dataclasses import dataclass

import numpy as np

from .config import MAX_EPSILON
from .imaging import PIXEL_COUNT, SIDE, CanonicalImage

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x9E3779B9
_M1 = 0x85EBCA6B
_M2 = 0xC2B2AE35

SOURCE_LOCAL = "local"
SOURCE_REMOTE = "remote"


@dataclass(frozen=True)
class PerturbedImage:
    png: bytes
    source: str = SOURCE_LOCAL
    # Only known when the image was synthesized locally
    pixels: CanonicalImage | None = None


def index_hash(i: int) -> int:
    """MurmurHash3 32-bit finalizer applied to a golden-ratio offset of `i`."""
    x = (i + _GOLDEN) & _MASK32
    x ^= x >> 16
    x = (x * _M1) & _MASK32
    x ^= x >> 13
    x = (x * _M2) & _MASK32
    x ^= x >> 16
    return x


def index_signs(count: int = PIXEL_COUNT) -> np.ndarray:
    """+1 for indices whose hash is even, -1 for odd ones."""
    return np.array([1 if index_hash(i) % 2 == 0 else -1 for i in range(count)], dtype=np.int8)


_SIGNS = index_signs().reshape(SIDE, SIDE)


def check_epsilon(epsilon) -> float:
    eps = float(epsilon)
    if not 0.0 <= eps <= MAX_EPSILON:
        raise ValueError(f"epsilon must be within [0, {MAX_EPSILON}], got {eps}")
    return eps


def perturb_pixels(image: CanonicalImage, epsilon: float) -> CanonicalImage:
    eps = check_epsilon(epsilon)
    shifted = image.luminance.astype(np.float64) + _SIGNS * (eps * 255)
    gray = np.clip(np.rint(shifted), 0, 255).astype(np.uint8)
    return CanonicalImage.from_luminance(gray)


def synthesize(image: CanonicalImage, epsilon: float) -> PerturbedImage:
    """Build a fresh demo-mode preview for `image` at `epsilon`."""
    pixels = perturb_pixels(image, epsilon)
    return PerturbedImage(png=pixels.to_png(), source=SOURCE_LOCAL, pixels=pixels)
