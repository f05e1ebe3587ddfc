"""
Reader configuration loaded from ``BARCODE_READER_*`` environment variables.

Configuration priority (highest to lowest):
    1. Keyword arguments
    2. Environment variables
    3. Default values
"""
from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import Field, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .engines import DEFAULT_ENGINE, ENGINE_REGISTRY
from .formats import BarcodeFormat, parse_formats
from .reader import BarcodeReader

ENV_PREFIX = "BARCODE_READER_"

_BOOL = TypeAdapter(bool)


class ReaderConfig(BaseSettings):
    """
    Settings for building a ``BarcodeReader``.

    Example:
        >>> cfg = ReaderConfig.from_env()
        >>> reader = cfg.build_reader()
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        frozen=True,
    )

    engine: str = Field(
        default=DEFAULT_ENGINE,
        description="Decoding engine name",
    )
    performance_mode: bool = Field(
        default=True,
        description="Skip the try-harder and rotation passes",
    )
    # comma separated in the environment, e.g. "QR_CODE,EAN_13"
    formats: Annotated[tuple[BarcodeFormat, ...], NoDecode] = Field(
        default=(BarcodeFormat.ALL_1D,),
        description="Accepted barcode formats",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level for the CLI and web app",
    )

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, value: str) -> str:
        key = value.strip().lower()
        if key not in ENGINE_REGISTRY:
            raise ValueError(f"engine must be one of {sorted(ENGINE_REGISTRY)}, got {value!r}")
        return key

    @field_validator("formats", mode="before")
    @classmethod
    def validate_formats(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = parse_formats(value)
        if not value:
            return (BarcodeFormat.ALL_1D,)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"not a logging level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> ReaderConfig:
        return cls()

    def build_reader(self) -> BarcodeReader:
        return BarcodeReader(self.performance_mode, *self.formats, engine=self.engine)


def parse_bool(value: Any) -> bool:
    """Parse a boolean the same way settings fields are parsed; raises ``ValueError``."""
    return _BOOL.validate_python(value)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
