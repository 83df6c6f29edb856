"""
Turn result images into displayable or savable Pillow images.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..errors import RenderError
from ..processing.image import ColorImage

logger = logging.getLogger(__name__)

# Formats that cannot store an alpha channel
OPAQUE_FORMATS = {'.jpg', '.jpeg', '.bmp'}


class PillowRenderer:
    """Render :class:`ColorImage` results with Pillow"""

    def __init__(self, jpeg_quality: int = 92):
        self.jpeg_quality = int(jpeg_quality)

    @classmethod
    def from_config(cls, config: dict) -> 'PillowRenderer':
        render = (config or {}).get('render', {}) or {}
        return cls(jpeg_quality=render.get('jpeg_quality', 92))

    def render(self, image: ColorImage) -> Image.Image:
        """RGB when fully opaque, RGBA otherwise"""
        data = image.to_uint8()
        if image.is_opaque():
            return Image.fromarray(np.ascontiguousarray(data[:, :, :3]))
        return Image.fromarray(data)

    def save(self, image: ColorImage, path: Union[str, Path]) -> Path:
        """
        Write ``image`` to ``path``; the format follows the file suffix.

        Raises:
            RenderError: If the image cannot be encoded or written
        """
        path = Path(path)
        rendered = self.render(image)

        save_kwargs = {}
        suffix = path.suffix.lower()
        if suffix in OPAQUE_FORMATS and rendered.mode == 'RGBA':
            rendered = rendered.convert('RGB')
        if suffix in ('.jpg', '.jpeg'):
            save_kwargs['quality'] = self.jpeg_quality

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            rendered.save(path, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise RenderError(f"Failed to save {path}: {e}") from e

        logger.debug(f"Saved {path}")
        return path
