"""
Raster image value passed between pipeline stages.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

# Rec. 709 luma coefficients
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Calculate perceptual luminance from an ``H x W x 3`` float array"""
    return rgb[..., 0] * LUMA_WEIGHTS[0] + rgb[..., 1] * LUMA_WEIGHTS[1] + rgb[..., 2] * LUMA_WEIGHTS[2]


def _normalize(array: np.ndarray) -> np.ndarray:
    """Convert any supported pixel array to float32 RGBA in [0, 1]"""
    array = np.asarray(array)

    if array.dtype == np.uint8:
        data = array.astype(np.float32) / 255.0
    elif array.dtype == np.uint16:
        data = array.astype(np.float32) / 65535.0
    elif np.issubdtype(array.dtype, np.floating):
        data = array.astype(np.float32)
    else:
        raise TypeError(f"Unsupported pixel dtype: {array.dtype}")

    # Grayscale to 3 channels
    if data.ndim == 2:
        data = np.stack([data] * 3, axis=-1)
    if data.ndim != 3 or data.shape[2] not in (1, 3, 4):
        raise ValueError(f"Unsupported image shape: {array.shape}")
    if data.shape[2] == 1:
        data = np.repeat(data, 3, axis=2)
    if data.shape[2] == 3:
        alpha = np.ones(data.shape[:2] + (1,), dtype=np.float32)
        data = np.concatenate([data, alpha], axis=2)

    return np.clip(np.nan_to_num(data, nan=0.0), 0.0, 1.0)


@dataclass(frozen=True, eq=False)
class ColorImage:
    """
    Immutable RGBA image with straight alpha.

    Pixels are stored as a read-only float32 ``H x W x 4`` array in the
    ``[0, 1]`` range. Operators build new instances with :meth:`with_rgb`
    instead of writing into an existing one.
    """
    pixels: np.ndarray

    def __post_init__(self):
        # _normalize always returns a fresh array, so callers keep theirs
        pixels = _normalize(self.pixels)
        pixels.setflags(write=False)
        object.__setattr__(self, 'pixels', pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'ColorImage':
        """Create from a uint8, uint16 or float array with 1, 3 or 4 channels"""
        return cls(np.asarray(array))

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'ColorImage':
        """Create from a Pillow image of any mode"""
        if image.mode not in ('RGB', 'RGBA'):
            has_alpha = 'A' in image.getbands() or 'transparency' in image.info
            image = image.convert('RGBA' if has_alpha else 'RGB')
        return cls(np.asarray(image))

    @classmethod
    def solid(cls, width: int, height: int,
              rgb: Tuple[float, float, float], alpha: float = 1.0) -> 'ColorImage':
        """Create a uniformly colored image"""
        pixels = np.empty((height, width, 4), dtype=np.float32)
        pixels[..., :3] = rgb
        pixels[..., 3] = alpha
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self.height, self.width

    @property
    def rgb(self) -> np.ndarray:
        """Read-only view of the color channels"""
        return self.pixels[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        """Read-only view of the alpha channel"""
        return self.pixels[..., 3]

    def with_rgb(self, rgb: np.ndarray) -> 'ColorImage':
        """Return a new image with ``rgb`` colors and this image's alpha"""
        if rgb.shape[:2] != self.shape:
            raise ValueError(f"Color shape {rgb.shape[:2]} does not match image {self.shape}")
        pixels = np.empty_like(self.pixels)
        pixels[..., :3] = np.clip(rgb, 0.0, 1.0)
        pixels[..., 3] = self.alpha
        return ColorImage(pixels)

    def to_uint8(self) -> np.ndarray:
        """RGBA uint8 copy for display and encoding"""
        return np.rint(self.pixels * 255.0).astype(np.uint8)

    def is_opaque(self) -> bool:
        return bool(np.all(self.alpha >= 1.0))

    def pixel_equal(self, other: 'ColorImage') -> bool:
        """True when both images hold exactly the same pixels"""
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    def mean_saturation(self) -> float:
        """Average HSV saturation, used to compare look results"""
        rgb = self.rgb
        high = rgb.max(axis=2)
        low = rgb.min(axis=2)
        saturation = np.where(high > 1e-6, (high - low) / np.maximum(high, 1e-6), 0.0)
        return float(saturation.mean())

    def __repr__(self) -> str:
        return f"ColorImage(width={self.width}, height={self.height})"
