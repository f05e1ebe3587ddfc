"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides a scriptable fake engine and in-memory bitmaps so the reader can be
tested without the native zbar library or a Java runtime.

==============================================================================
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import pytest

from barcode_reader.engines import BaseEngine, DecodeResult
from barcode_reader.formats import BarcodeFormat


class FakeEngine(BaseEngine):
    """Engine returning a fixed result for bitmaps accepted by ``match``."""

    def __init__(
        self,
        text: str = "4006381333931",
        fmt: Optional[BarcodeFormat] = BarcodeFormat.EAN_13,
        match: Optional[Callable[[np.ndarray], bool]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.text = text
        self.fmt = fmt
        self.match = match
        self.error = error
        self.calls: list[tuple[tuple[int, ...], frozenset]] = []

    @property
    def name(self) -> str:
        return "fake"

    def _decode(self, image, formats):
        self.calls.append((image.shape, formats))
        if self.error is not None:
            raise self.error
        if self.fmt is not None and self.fmt not in formats:
            return None
        if self.match is not None and not self.match(image):
            return None
        return DecodeResult(text=self.text, format=self.fmt, engine=self.name)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def blank_engine() -> FakeEngine:
    """Engine that never finds anything."""
    return FakeEngine(match=lambda image: False)


@pytest.fixture
def bitmap() -> np.ndarray:
    """A 40x80 BGR bitmap."""
    image = np.full((40, 80, 3), 255, dtype=np.uint8)
    image[10:30, 20:60] = 0
    return image
