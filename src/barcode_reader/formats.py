from __future__ import annotations

from enum import Enum
from typing import Iterable


class BarcodeFormat(str, Enum):
    AZTEC = "AZTEC"
    CODABAR = "CODABAR"
    CODE_39 = "CODE_39"
    CODE_93 = "CODE_93"
    CODE_128 = "CODE_128"
    DATA_MATRIX = "DATA_MATRIX"
    EAN_8 = "EAN_8"
    EAN_13 = "EAN_13"
    ITF = "ITF"
    MAXICODE = "MAXICODE"
    PDF_417 = "PDF_417"
    QR_CODE = "QR_CODE"
    RSS_14 = "RSS_14"
    RSS_EXPANDED = "RSS_EXPANDED"
    UPC_A = "UPC_A"
    UPC_E = "UPC_E"
    UPC_EAN_EXTENSION = "UPC_EAN_EXTENSION"
    MSI = "MSI"
    PLESSEY = "PLESSEY"
    IMB = "IMB"
    PHARMA_CODE = "PHARMA_CODE"

    # group, expanded by expand_formats()
    ALL_1D = "ALL_1D"


ALL_1D_FORMATS: frozenset[BarcodeFormat] = frozenset(
    {
        BarcodeFormat.CODABAR,
        BarcodeFormat.CODE_39,
        BarcodeFormat.CODE_93,
        BarcodeFormat.CODE_128,
        BarcodeFormat.EAN_8,
        BarcodeFormat.EAN_13,
        BarcodeFormat.ITF,
        BarcodeFormat.RSS_14,
        BarcodeFormat.RSS_EXPANDED,
        BarcodeFormat.UPC_A,
        BarcodeFormat.UPC_E,
        BarcodeFormat.UPC_EAN_EXTENSION,
        BarcodeFormat.MSI,
        BarcodeFormat.PLESSEY,
        BarcodeFormat.IMB,
        BarcodeFormat.PHARMA_CODE,
    }
)

_GROUPS: dict[BarcodeFormat, frozenset[BarcodeFormat]] = {
    BarcodeFormat.ALL_1D: ALL_1D_FORMATS,
}


def expand_formats(formats: Iterable[BarcodeFormat] | None) -> frozenset[BarcodeFormat]:
    """
    Resolve group members into concrete formats.

    An empty or missing selection means every one-dimensional format.
    """
    selected = list(formats or ())
    if not selected:
        selected = [BarcodeFormat.ALL_1D]

    expanded: set[BarcodeFormat] = set()
    for fmt in selected:
        fmt = BarcodeFormat(fmt)
        expanded.update(_GROUPS.get(fmt, {fmt}))
    return frozenset(expanded)


def parse_formats(text: str | None) -> tuple[BarcodeFormat, ...]:
    if not text:
        return ()

    parsed: list[BarcodeFormat] = []
    for chunk in text.split(","):
        name = chunk.strip().upper().replace("-", "_")
        if not name:
            continue
        try:
            parsed.append(BarcodeFormat[name])
        except KeyError:
            raise ValueError(f"Unknown barcode format: {chunk.strip()!r}") from None
    return tuple(parsed)
