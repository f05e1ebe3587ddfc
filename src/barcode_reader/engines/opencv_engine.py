from __future__ import annotations

import numpy as np

from ..errors import EngineError
from ..formats import BarcodeFormat
from .base import BaseEngine, DecodeResult, safe_str

# symbologies cv2.barcode.BarcodeDetector reads
LINEAR_FORMATS = frozenset(
    {
        BarcodeFormat.EAN_8,
        BarcodeFormat.EAN_13,
        BarcodeFormat.UPC_A,
        BarcodeFormat.UPC_E,
    }
)


class OpenCVEngine(BaseEngine):
    def __init__(self) -> None:
        import cv2

        self._cv2 = cv2
        self._qr_detector = cv2.QRCodeDetector()
        barcode_module = getattr(cv2, "barcode", None)
        self._linear_detector = barcode_module.BarcodeDetector() if barcode_module is not None else None

    @property
    def name(self) -> str:
        return "opencv"

    @property
    def supports_linear(self) -> bool:
        return self._linear_detector is not None

    def _decode(self, image: np.ndarray, formats: frozenset[BarcodeFormat]) -> DecodeResult | None:
        cv2 = self._cv2

        try:
            if BarcodeFormat.QR_CODE in formats:
                result = self._decode_qr(image)
                if result is not None:
                    return result

            if self._linear_detector is not None and formats & LINEAR_FORMATS:
                return self._decode_linear(image, formats)
        except cv2.error as exc:
            raise EngineError(f"OpenCV failed to decode image: {exc}") from exc

        return None

    def _decode_qr(self, image: np.ndarray) -> DecodeResult | None:
        retval, decoded_info, _, _ = self._qr_detector.detectAndDecodeMulti(image)
        if retval and decoded_info:
            for value in decoded_info:
                if value:
                    return DecodeResult(text=str(value), format=BarcodeFormat.QR_CODE, engine=self.name)

        decoded_str, _, _ = self._qr_detector.detectAndDecode(image)
        if decoded_str:
            return DecodeResult(text=str(decoded_str), format=BarcodeFormat.QR_CODE, engine=self.name)
        return None

    def _decode_linear(self, image: np.ndarray, formats: frozenset[BarcodeFormat]) -> DecodeResult | None:
        retval, decoded_info, decoded_type, _ = self._linear_detector.detectAndDecodeWithType(image)
        if not retval or decoded_info is None:
            return None

        types = list(decoded_type) if decoded_type is not None else []
        for idx, value in enumerate(decoded_info):
            if not value:
                continue
            type_name = safe_str(types[idx]) if idx < len(types) else ""
            fmt = BarcodeFormat.__members__.get(type_name.strip().upper())
            if fmt is not None and fmt not in formats:
                continue
            return DecodeResult(text=str(value), format=fmt, engine=self.name)
        return None
