"""
Image sources: where the photo being edited comes from.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import ImageSourceError
from ..processing.image import ColorImage

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp', '.webp')


class ImageSource(ABC):
    """Provides the photo to edit, or None when the user cancels"""

    @abstractmethod
    def select_image(self) -> Optional[ColorImage]:
        """Return the selected image, or None for a cancelled selection"""
        pass


class FileImageSource(ImageSource):
    """Decode a photo from disk with Pillow"""

    def __init__(self, path: Optional[Union[str, Path]]):
        """
        Args:
            path: Image file; None behaves like a cancelled picker
        """
        self.path = Path(path) if path is not None else None

    def select_image(self) -> Optional[ColorImage]:
        if self.path is None:
            return None
        return load_image(self.path)


class ArrayImageSource(ImageSource):
    """Serve an image that is already in memory"""

    def __init__(self, image: Optional[ColorImage]):
        self.image = image

    def select_image(self) -> Optional[ColorImage]:
        return self.image


def load_image(path: Union[str, Path]) -> ColorImage:
    """
    Load an image file with its EXIF orientation applied.

    Raises:
        ImageSourceError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            image = ColorImage.from_pil(img)
    except FileNotFoundError as e:
        raise ImageSourceError(f"Image not found: {path}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageSourceError(f"Cannot decode image {path}: {e}") from e

    logger.debug(f"Decoded {path.name}: {image.width}x{image.height}")
    return image


def find_images(input_path: Union[str, Path], recursive: bool = False,
                extensions: Iterable[str] = IMAGE_EXTENSIONS) -> List[Path]:
    """
    Find image files under a directory

    Args:
        input_path: Directory (or single file) to search
        recursive: Descend into subdirectories
        extensions: Accepted suffixes, case-insensitive

    Returns:
        Sorted list of image paths
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise ImageSourceError(f"Input path does not exist: {input_path}")

    suffixes = {ext.lower() for ext in extensions}
    if input_path.is_file():
        return [input_path] if input_path.suffix.lower() in suffixes else []

    candidates = input_path.rglob('*') if recursive else input_path.glob('*')
    images = sorted(p for p in candidates if p.is_file() and p.suffix.lower() in suffixes)
    logger.info(f"Found {len(images)} images in {input_path}")
    return images
