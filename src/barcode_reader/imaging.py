from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from .errors import ImageReadError

logger = logging.getLogger(__name__)

ImageSource = Union[np.ndarray, str, Path, bytes, bytearray]


class ImageFormat(str, Enum):
    BMP = "bmp"
    JPEG = "jpeg"
    PNG = "png"
    TIFF = "tiff"
    WEBP = "webp"

    @property
    def suffix(self) -> str:
        return f".{self.value}"


def load_image(source: ImageSource) -> np.ndarray:
    """
    Return the bitmap for ``source``.

    Arrays are passed through untouched, paths are read with OpenCV and raw
    bytes are decoded as an encoded image file.
    """
    if isinstance(source, np.ndarray):
        if source.size == 0:
            raise ImageReadError("Empty image array")
        return source

    if isinstance(source, (bytes, bytearray)):
        buffer = np.frombuffer(bytes(source), dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
        if image is None:
            raise ImageReadError("Failed to decode image bytes")
        return image

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise ImageReadError(f"Missing image file: {path}")
        image = cv2.imread(str(path))
        if image is None:
            raise ImageReadError(f"Failed to read image: {path}")
        return image

    raise ImageReadError(f"Unsupported image source: {type(source).__name__}")


def to_grayscale(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    if image.shape[2] == 1:
        return image[:, :, 0]
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def ensure_suffix(path: str | Path, image_format: ImageFormat) -> Path:
    text = str(path)
    ending = ImageFormat(image_format).suffix

    # exact, case-sensitive match; "a.PNG" still gets ".png"
    if len(text) <= len(ending) or text[-len(ending):] != ending:
        text += ending
    return Path(text)


def save_bitmap(
    image: np.ndarray,
    path: str | Path,
    image_format: ImageFormat = ImageFormat.PNG,
) -> Path:
    """Write ``image`` to ``path``, appending the format suffix when missing."""
    out_path = ensure_suffix(path, image_format)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        ok = cv2.imwrite(str(out_path), image)
    except cv2.error as exc:
        raise ImageReadError(f"Failed to encode image as {image_format.value}: {out_path}") from exc
    if not ok:
        raise ImageReadError(f"Failed to write image: {out_path}")

    logger.debug("Saved bitmap to %s", out_path)
    return out_path
