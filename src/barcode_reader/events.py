from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarcodeEventArgs:
    """Decoded value of a barcode and the bitmap it was read from."""

    value: str
    image: np.ndarray = field(repr=False, compare=False)


Handler = Callable[[Any, BarcodeEventArgs], None]


class Event:
    """
    Ordered list of subscribers called as ``handler(sender, args)``.

    Supports ``event += handler`` and ``event -= handler``.
    """

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Handler:
        if not callable(handler):
            raise TypeError(f"Event handler must be callable, got {type(handler).__name__}")
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: Handler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.debug("Handler %r was not subscribed", handler)

    def fire(self, sender: Any, args: BarcodeEventArgs) -> list[Exception]:
        """Call every handler; return the exceptions raised by handlers."""
        failures: list[Exception] = []
        for handler in list(self._handlers):
            try:
                handler(sender, args)
            except Exception as exc:
                logger.exception("Barcode event handler %r failed", handler)
                failures.append(exc)
        return failures

    def __iadd__(self, handler: Handler) -> Event:
        self.subscribe(handler)
        return self

    def __isub__(self, handler: Handler) -> Event:
        self.unsubscribe(handler)
        return self

    def __len__(self) -> int:
        return len(self._handlers)
