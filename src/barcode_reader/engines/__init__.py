from __future__ import annotations

from typing import Dict, Type

from ..errors import UnknownEngineError
from .base import BaseEngine, DecodeResult
from .opencv_engine import OpenCVEngine
from .zbar_engine import ZBarEngine
from .zxing_engine import ZXingEngine


ENGINE_REGISTRY: Dict[str, Type[BaseEngine]] = {
    "zbar": ZBarEngine,
    "zxing": ZXingEngine,
    "opencv": OpenCVEngine,
}

DEFAULT_ENGINE = "zbar"


def create_engine(name: str | None = None) -> BaseEngine:
    key = (name or DEFAULT_ENGINE).strip().lower()
    try:
        engine_cls = ENGINE_REGISTRY[key]
    except KeyError:
        raise UnknownEngineError(
            f"Unknown engine {key!r}; expected one of: {', '.join(ENGINE_REGISTRY)}"
        ) from None
    return engine_cls()


__all__ = [
    "BaseEngine",
    "DecodeResult",
    "DEFAULT_ENGINE",
    "ENGINE_REGISTRY",
    "OpenCVEngine",
    "ZBarEngine",
    "ZXingEngine",
    "create_engine",
]
