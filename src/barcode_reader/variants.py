from __future__ import annotations

from typing import Iterator

import cv2
import numpy as np

from .imaging import to_grayscale
from .options import DecodingOptions

_ROTATIONS = (
    ("rot90", cv2.ROTATE_90_CLOCKWISE),
    ("rot180", cv2.ROTATE_180),
    ("rot270", cv2.ROTATE_90_COUNTERCLOCKWISE),
)


def _effort_variants(image: np.ndarray, try_harder: bool) -> Iterator[tuple[str, np.ndarray]]:
    yield "original", image
    if not try_harder:
        return

    gray = to_grayscale(image)
    yield "equalized", cv2.equalizeHist(gray)

    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    yield "otsu", binary

    yield "upscaled", cv2.resize(gray, None, fx=2.0, fy=2.0, interpolation=cv2.INTER_CUBIC)


def iter_variants(image: np.ndarray, options: DecodingOptions) -> Iterator[tuple[str, np.ndarray]]:
    """
    Yield ``(label, image)`` pairs in the order they should be tried.

    The original image always comes first; rotations follow every effort
    variant when ``auto_rotate`` is set.
    """
    for label, variant in _effort_variants(image, options.try_harder):
        yield label, variant
        if not options.auto_rotate:
            continue
        for rot_label, code in _ROTATIONS:
            yield f"{label}/{rot_label}", cv2.rotate(variant, code)
