from __future__ import annotations

from dataclasses import dataclass

from .formats import BarcodeFormat, expand_formats


@dataclass(frozen=True)
class DecodingOptions:
    try_harder: bool = False
    auto_rotate: bool = False
    possible_formats: frozenset[BarcodeFormat] = expand_formats(None)

    @classmethod
    def create(cls, try_harder: bool, auto_rotate: bool, *formats: BarcodeFormat) -> DecodingOptions:
        return cls(
            try_harder=bool(try_harder),
            auto_rotate=bool(auto_rotate),
            possible_formats=expand_formats(formats),
        )

    @classmethod
    def from_performance_mode(cls, performance_mode: bool = True, *formats: BarcodeFormat) -> DecodingOptions:
        """Performance mode skips the extra effort and rotation passes."""
        return cls.create(not performance_mode, not performance_mode, *formats)

    def allows(self, fmt: BarcodeFormat | None) -> bool:
        return fmt is not None and fmt in self.possible_formats
