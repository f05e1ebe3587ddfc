from __future__ import annotations

import numpy as np

from ..errors import EngineError
from ..formats import BarcodeFormat
from ..imaging import to_grayscale
from .base import BaseEngine, DecodeResult, safe_str

# ZXing format -> ZBar symbol names
_ZBAR_SYMBOLS: dict[BarcodeFormat, tuple[str, ...]] = {
    BarcodeFormat.CODABAR: ("CODABAR",),
    BarcodeFormat.CODE_39: ("CODE39",),
    BarcodeFormat.CODE_93: ("CODE93",),
    BarcodeFormat.CODE_128: ("CODE128",),
    BarcodeFormat.EAN_8: ("EAN8",),
    BarcodeFormat.EAN_13: ("EAN13", "ISBN13"),
    BarcodeFormat.ITF: ("I25",),
    BarcodeFormat.RSS_14: ("DATABAR",),
    BarcodeFormat.RSS_EXPANDED: ("DATABAR_EXP",),
    BarcodeFormat.UPC_A: ("UPCA",),
    BarcodeFormat.UPC_E: ("UPCE",),
    BarcodeFormat.UPC_EAN_EXTENSION: ("EAN2", "EAN5"),
    BarcodeFormat.PDF_417: ("PDF417",),
    BarcodeFormat.QR_CODE: ("QRCODE",),
}

_FORMAT_BY_SYMBOL: dict[str, BarcodeFormat] = {
    symbol: fmt for fmt, symbols in _ZBAR_SYMBOLS.items() for symbol in symbols
}


def zbar_symbol_names(formats: frozenset[BarcodeFormat]) -> list[str]:
    names: list[str] = []
    for fmt in sorted(formats, key=lambda f: f.value):
        names.extend(_ZBAR_SYMBOLS.get(fmt, ()))
    return names


class ZBarEngine(BaseEngine):
    def __init__(self) -> None:
        from pyzbar.pyzbar import decode as zbar_decode
        from pyzbar.pyzbar import ZBarSymbol

        self._zbar_decode = zbar_decode
        self._ZBarSymbol = ZBarSymbol

    @property
    def name(self) -> str:
        return "zbar"

    def _decode(self, image: np.ndarray, formats: frozenset[BarcodeFormat]) -> DecodeResult | None:
        names = zbar_symbol_names(formats)
        if not names:
            return None

        symbols = [self._ZBarSymbol[name] for name in names if name in self._ZBarSymbol.__members__]
        gray = np.ascontiguousarray(to_grayscale(image))
        try:
            decoded = self._zbar_decode(gray, symbols=symbols)
        except Exception as exc:
            raise EngineError(f"ZBar failed to decode image: {exc}") from exc

        for item in decoded:
            data = safe_str(item.data)
            if not data:
                continue
            return DecodeResult(
                text=data,
                format=_FORMAT_BY_SYMBOL.get(safe_str(item.type)),
                engine=self.name,
            )
        return None
