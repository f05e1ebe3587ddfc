from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from time import perf_counter

import numpy as np

from ..formats import BarcodeFormat
from ..options import DecodingOptions
from ..variants import iter_variants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeResult:
    text: str
    format: BarcodeFormat | None
    engine: str


class BaseEngine(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def _decode(self, image: np.ndarray, formats: frozenset[BarcodeFormat]) -> DecodeResult | None:
        raise NotImplementedError

    def decode(self, image: np.ndarray, options: DecodingOptions) -> DecodeResult | None:
        for label, variant in iter_variants(image, options):
            result = self._decode(variant, options.possible_formats)
            if result is not None and result.text:
                logger.debug("%s decoded %s from variant %s", self.name, result.format, label)
                return result
        return None

    def decode_once(self, image: np.ndarray, options: DecodingOptions) -> tuple[DecodeResult | None, float]:
        start = perf_counter()
        decoded = self.decode(image, options)
        end = perf_counter()
        return decoded, end - start


def safe_str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    return str(value)
