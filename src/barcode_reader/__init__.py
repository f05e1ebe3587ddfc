from .engines import ENGINE_REGISTRY, BaseEngine, DecodeResult, create_engine
from .errors import (
    BarcodeReaderError,
    DecodeCancelledError,
    EngineError,
    ImageReadError,
    NoBarcodeDetectedError,
    UnknownEngineError,
)
from .events import BarcodeEventArgs, Event
from .formats import ALL_1D_FORMATS, BarcodeFormat, expand_formats, parse_formats
from .imaging import ImageFormat, ensure_suffix, load_image, save_bitmap
from .options import DecodingOptions
from .reader import BarcodeReader

__all__ = [
    "ALL_1D_FORMATS",
    "BarcodeEventArgs",
    "BarcodeFormat",
    "BarcodeReader",
    "BarcodeReaderError",
    "DecodeCancelledError",
    "BaseEngine",
    "DecodeResult",
    "DecodingOptions",
    "ENGINE_REGISTRY",
    "EngineError",
    "Event",
    "ImageFormat",
    "ImageReadError",
    "NoBarcodeDetectedError",
    "UnknownEngineError",
    "create_engine",
    "ensure_suffix",
    "expand_formats",
    "load_image",
    "parse_formats",
    "save_bitmap",
]
