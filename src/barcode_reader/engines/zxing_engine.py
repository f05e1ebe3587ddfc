from __future__ import annotations

import tempfile
from pathlib import Path

import cv2
import numpy as np

from ..errors import EngineError, ImageReadError
from ..formats import BarcodeFormat
from .base import BaseEngine, DecodeResult, safe_str


def _parse_format(value) -> BarcodeFormat | None:
    name = safe_str(value).strip().upper()
    try:
        return BarcodeFormat[name]
    except KeyError:
        return None


class ZXingEngine(BaseEngine):
    def __init__(self) -> None:
        from pyzxing import BarCodeReader

        self._reader = BarCodeReader()

    @property
    def name(self) -> str:
        return "zxing"

    def _decode(self, image: np.ndarray, formats: frozenset[BarcodeFormat]) -> DecodeResult | None:
        # pyzxing only reads from files
        with tempfile.TemporaryDirectory(prefix="barcode_reader_") as tmp:
            image_path = Path(tmp) / "bitmap.png"
            if not cv2.imwrite(str(image_path), image):
                raise ImageReadError(f"Failed to stage image for ZXing: {image_path}")

            try:
                result = self._reader.decode(str(image_path))
            except Exception as exc:
                raise EngineError(f"ZXing failed to read image: {exc}") from exc

        if not result:
            return None

        items = result if isinstance(result, list) else [result]
        for item in items:
            if not isinstance(item, dict):
                continue
            parsed = safe_str(item.get("parsed", ""))
            if not parsed:
                continue
            fmt = _parse_format(item.get("format"))
            if fmt is not None and fmt not in formats:
                continue
            return DecodeResult(text=parsed, format=fmt, engine=self.name)
        return None
