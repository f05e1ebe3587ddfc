"""
Facade over the barcode decoding engines.

``BarcodeReader`` configures an engine, runs each decode on a single
background worker, and reports the outcome three ways: the
``detected_barcode`` event, the boolean returned by ``decode`` and the
``error`` attribute holding the last failure.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .engines import BaseEngine, DecodeResult, create_engine
from .errors import BarcodeReaderError, DecodeCancelledError, NoBarcodeDetectedError
from .events import BarcodeEventArgs, Event
from .formats import BarcodeFormat
from .imaging import ImageFormat, ImageSource, load_image, save_bitmap
from .options import DecodingOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DecodeOutcome:
    """Outcome of one decode, independent of later decodes on the same reader."""

    found: bool
    image: np.ndarray | None = None
    result: DecodeResult | None = None
    error: Exception | None = None


class BarcodeReader:
    """
    Decode barcodes from bitmaps.

    Example:
        >>> with BarcodeReader(True, BarcodeFormat.EAN_13) as reader:
        ...     reader.detected_barcode += lambda sender, e: print(e.value)
        ...     found = reader.decode("label.png")
    """

    def __init__(
        self,
        performance_mode: bool = True,
        *formats: BarcodeFormat,
        engine: BaseEngine | str | None = None,
    ) -> None:
        self._init(DecodingOptions.from_performance_mode(performance_mode, *formats), engine)

    @classmethod
    def with_options(
        cls,
        try_harder: bool,
        auto_rotate: bool,
        *formats: BarcodeFormat,
        engine: BaseEngine | str | None = None,
    ) -> BarcodeReader:
        reader = cls.__new__(cls)
        reader._init(DecodingOptions.create(try_harder, auto_rotate, *formats), engine)
        return reader

    def _init(self, options: DecodingOptions, engine: BaseEngine | str | None) -> None:
        self._options = options
        self._engine = engine if isinstance(engine, BaseEngine) else create_engine(engine)

        self.detected_barcode = Event()

        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="barcode-reader")
        self._worker_ident: int | None = None
        self._pending: Future | None = None
        self._closed = False

        self._error: Exception | None = None
        self._image: np.ndarray | None = None
        self._found_value: str | None = None
        self._successful = False
        self._last_result: DecodeResult | None = None

        logger.debug(
            "Reader created (engine=%s, try_harder=%s, auto_rotate=%s, formats=%d)",
            self._engine.name,
            options.try_harder,
            options.auto_rotate,
            len(options.possible_formats),
        )

    # state

    @property
    def options(self) -> DecodingOptions:
        return self._options

    @property
    def engine(self) -> BaseEngine:
        return self._engine

    @property
    def error(self) -> Exception | None:
        """Last failure, ``None`` after a clean decode."""
        with self._lock:
            return self._error

    @property
    def image(self) -> np.ndarray | None:
        with self._lock:
            return self._image

    @property
    def found_value(self) -> str | None:
        with self._lock:
            return self._found_value

    @property
    def successful(self) -> bool:
        with self._lock:
            return self._successful

    @property
    def last_result(self) -> DecodeResult | None:
        with self._lock:
            return self._last_result

    @property
    def closed(self) -> bool:
        return self._closed

    # decoding

    def decode(self, bitmap: ImageSource) -> bool:
        """Decode ``bitmap`` on the worker and wait for the outcome."""
        return self._decode_outcome(bitmap).found

    def decode_async(self, bitmap: ImageSource) -> Future:
        """Queue ``bitmap`` for decoding; the future resolves to the boolean outcome."""
        return self._submit(self._run, bitmap)

    def read(self, bitmap: ImageSource) -> BarcodeEventArgs:
        """Decode ``bitmap`` and return its event args, raising its error on failure."""
        outcome = self._decode_outcome(bitmap)
        if not outcome.found:
            raise outcome.error or NoBarcodeDetectedError(image=outcome.image)
        return BarcodeEventArgs(outcome.result.text, outcome.image)

    def _submit(self, fn, bitmap: ImageSource) -> Future:
        if self._closed:
            raise RuntimeError("BarcodeReader is closed")
        future = self._executor.submit(fn, bitmap)
        self._pending = future
        return future

    def _decode_outcome(self, bitmap: ImageSource) -> DecodeOutcome:
        if self._worker_ident == threading.get_ident():
            # called from an event handler, the worker is busy with us
            return self._execute(bitmap)

        future = self._submit(self._execute, bitmap)
        try:
            return future.result()
        except CancelledError:
            error = DecodeCancelledError("Decode was cancelled because the reader was closed")
            logger.debug("Queued decode cancelled")
            with self._lock:
                self._error = error
                self._successful = False
            return DecodeOutcome(found=False, error=error)

    def _run(self, bitmap: ImageSource) -> bool:
        return self._execute(bitmap).found

    def _execute(self, bitmap: ImageSource) -> DecodeOutcome:
        self._worker_ident = threading.get_ident()

        with self._lock:
            self._error = None
            self._found_value = None
            self._successful = False
            self._last_result = None

        try:
            image = load_image(bitmap)
        except BarcodeReaderError as exc:
            logger.warning("Failed to load bitmap: %s", exc)
            self._record_failure(exc)
            return DecodeOutcome(found=False, error=exc)

        with self._lock:
            self._image = image

        try:
            result = self._engine.decode(image, self._options)
        except BarcodeReaderError as exc:
            logger.warning("%s engine failed: %s", self._engine.name, exc)
            self._record_failure(exc)
            return DecodeOutcome(found=False, error=exc)

        if result is None:
            logger.debug("No barcode found by %s", self._engine.name)
            error = NoBarcodeDetectedError(image=image)
            with self._lock:
                self._error = error
            return DecodeOutcome(found=False, image=image, error=error)

        with self._lock:
            self._found_value = result.text
            self._successful = True
            self._last_result = result

        logger.info("Detected %s barcode via %s", result.format.value if result.format else "unknown", result.engine)

        failures = self.detected_barcode.fire(self, BarcodeEventArgs(result.text, image))
        error = failures[-1] if failures else None
        if error is not None:
            with self._lock:
                self._error = error
        return DecodeOutcome(found=True, image=image, result=result, error=error)

    def _record_failure(self, exc: Exception) -> None:
        with self._lock:
            self._error = exc
            self._image = None


    # lifecycle

    def close(self) -> None:
        """Cancel a queued decode, stop the worker and release the held image."""
        if self._closed:
            return
        self._closed = True

        if self._pending is not None:
            self._pending.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

        with self._lock:
            self._image = None
        logger.debug("Reader closed")

    def __enter__(self) -> BarcodeReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def save_bitmap(image: np.ndarray, path: str | Path, image_format: ImageFormat = ImageFormat.PNG) -> Path:
        return save_bitmap(image, path, image_format)
