from __future__ import annotations

from typing import Any

NO_BARCODE_MESSAGE = "The provided bitmap did not contain a readable barcode."


class BarcodeReaderError(Exception):
    """Base class for barcode reader errors."""


class EngineError(BarcodeReaderError):
    """Raised when a decoding backend fails."""


class ImageReadError(EngineError):
    """Raised when an image cannot be read or loaded."""


class UnknownEngineError(BarcodeReaderError, KeyError):
    """Raised when an engine name is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NoBarcodeDetectedError(BarcodeReaderError):
    """Decoding finished but the bitmap holds no readable barcode."""

    def __init__(self, message: str = NO_BARCODE_MESSAGE, image: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.image = image


class DecodeCancelledError(BarcodeReaderError):
    """A queued decode was cancelled because the reader was closed."""
