# explainer/imaging.py
"""
Image loading and normalization.

Every stage of the pipeline works on the same canonical picture: a 28x28
grayscale buffer stored as RGBA with the three color channels equal and
alpha fixed at 255.
"""
import base64
import binascii
import io
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

from .errors import DecodeError

# ------------------------------
# Constants
# ------------------------------
SIDE = 28
CANONICAL_SIZE = (SIDE, SIDE)
PIXEL_COUNT = SIDE * SIDE

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

PNG_DATA_URL_PREFIX = "data:image/png;base64,"


# ------------------------------
# Canonical image
# ------------------------------
@dataclass(frozen=True, eq=False)
class CanonicalImage:
    """A 28x28 RGBA buffer that is visually grayscale (R == G == B, A == 255)."""

    pixels: np.ndarray

    def __post_init__(self):
        px = np.asarray(self.pixels)
        if px.shape != (SIDE, SIDE, 4) or px.dtype != np.uint8:
            raise ValueError(f"expected uint8 array of shape {(SIDE, SIDE, 4)}, got {px.dtype} {px.shape}")
        if not (np.array_equal(px[..., 0], px[..., 1]) and np.array_equal(px[..., 0], px[..., 2])):
            raise ValueError("color channels must be equal")
        if not np.all(px[..., 3] == 255):
            raise ValueError("alpha must be 255 everywhere")
        px = px.copy()
        px.setflags(write=False)
        object.__setattr__(self, "pixels", px)

    @classmethod
    def from_luminance(cls, gray) -> "CanonicalImage":
        """Broadcast a (28, 28) uint8 luminance plane into RGBA."""
        g = np.asarray(gray, dtype=np.uint8)
        alpha = np.full_like(g, 255)
        return cls(np.stack([g, g, g, alpha], axis=-1))

    @property
    def luminance(self) -> np.ndarray:
        return self.pixels[..., 0]

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.to_pil().save(buffer, format="PNG")
        return buffer.getvalue()

    def to_data_url(self) -> str:
        return to_data_url(self.to_png())

    def __eq__(self, other):
        if not isinstance(other, CanonicalImage):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)


# ------------------------------
# Normalization
# ------------------------------
def flatten_on_black(img: Image.Image) -> Image.Image:
    """Composite images carrying alpha over opaque black; others pass through."""
    if img.mode not in ("RGBA", "LA", "PA", "RGBa", "La") and "transparency" not in img.info:
        return img
    rgba = img.convert("RGBA")
    background = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
    return Image.alpha_composite(background, rgba)


def normalize_image(img: Image.Image) -> CanonicalImage:
    """
    Stretch an already-decoded image to 28x28 and convert it to grayscale.

    The aspect ratio is not preserved. Luminance is rounded half-to-even,
    which is what a canvas does when floats are written into its byte buffer.
    Transparent areas come out black, as if drawn onto a cleared canvas.
    """
    img = flatten_on_black(img)
    small = img.convert("RGB").resize(CANONICAL_SIZE, resample=Image.Resampling.BILINEAR)
    rgb = np.asarray(small, dtype=np.float64)
    lum = rgb @ LUMA_WEIGHTS
    gray = np.clip(np.rint(lum), 0, 255).astype(np.uint8)
    return CanonicalImage.from_luminance(gray)


def decode_image(source) -> CanonicalImage:
    """
    Decode raw bytes, a binary file object (e.g. a Streamlit upload) or a
    PIL image into a CanonicalImage.

    Raises DecodeError when the data is not a readable image.
    """
    try:
        if isinstance(source, Image.Image):
            img = source
        else:
            if isinstance(source, (bytes, bytearray, memoryview)):
                fp = io.BytesIO(bytes(source))
            else:
                if hasattr(source, "seek"):
                    source.seek(0)
                fp = source
            img = Image.open(fp)
            img.load()
        # Auto-rotate mobile photos before shrinking them
        img = ImageOps.exif_transpose(img)
        return normalize_image(img)
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Unsupported or corrupt image: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e


def sample_digit() -> CanonicalImage:
    """A hand-drawn looking '7' shown until the user uploads something."""
    img = Image.new("RGB", CANONICAL_SIZE, "white")
    draw = ImageDraw.Draw(img)
    draw.line([(4, 6), (24, 6), (10, 26)], fill="black", width=2)
    return normalize_image(img)


# ------------------------------
# Data URLs
# ------------------------------
def to_data_url(png: bytes) -> str:
    return PNG_DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")


def decode_data_url(value: str) -> bytes:
    """Accept either a `data:<mime>;base64,...` URL or bare base64 text."""
    if not isinstance(value, str) or not value:
        raise DecodeError("image payload must be a non-empty string")
    payload = value
    if value.startswith("data:"):
        header, sep, payload = value.partition(",")
        if not sep or ";base64" not in header:
            raise DecodeError("only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 image payload: {e}") from e


def load_image_bytes(data: bytes) -> bytes:
    """Check that `data` is a decodable image and hand the same bytes back."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e
    return data
