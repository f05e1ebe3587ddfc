from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from time import perf_counter
from typing import Callable, Iterator

from .errors import NoBarcodeDetectedError
from .reader import BarcodeReader

logger = logging.getLogger(__name__)

IMAGE_EXTS = {".bmp", ".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp"}


@dataclass(frozen=True)
class ScanRecord:
    image_path: str
    found: bool
    value: str
    format: str
    engine: str
    time_sec: float
    error: str | None = None


@dataclass(frozen=True)
class ScanSummary:
    processed: int
    found: int
    not_found: int
    failed: int


def iter_images(directory: Path, recursive: bool = False) -> Iterator[Path]:
    if not directory.is_dir():
        return

    candidates = directory.rglob("*") if recursive else directory.iterdir()
    for path in sorted(candidates):
        if not path.is_file():
            continue
        if path.suffix.lower() not in IMAGE_EXTS:
            continue
        yield path


def scan_directory(
    directory: Path,
    reader: BarcodeReader,
    recursive: bool = False,
    progress_cb: Callable[[ScanRecord], None] | None = None,
) -> tuple[list[ScanRecord], ScanSummary]:
    records: list[ScanRecord] = []
    found = 0
    not_found = 0
    failed = 0

    for image_path in iter_images(directory, recursive=recursive):
        start = perf_counter()
        ok = reader.decode(image_path)
        elapsed = perf_counter() - start

        result = reader.last_result
        error = reader.error
        if ok:
            found += 1
        elif isinstance(error, NoBarcodeDetectedError):
            not_found += 1
        else:
            failed += 1

        record = ScanRecord(
            image_path=_relative_path(image_path, directory),
            found=ok,
            value=reader.found_value or "",
            format=result.format.value if result and result.format else "",
            engine=reader.engine.name,
            time_sec=float(elapsed),
            error=str(error) if error is not None else None,
        )
        records.append(record)
        if progress_cb:
            progress_cb(record)

    summary = ScanSummary(
        processed=len(records),
        found=found,
        not_found=not_found,
        failed=failed,
    )
    logger.info(
        "Scanned %s: %d processed, %d found, %d not found, %d failed",
        directory, summary.processed, summary.found, summary.not_found, summary.failed,
    )
    return records, summary


def save_report_json(records: list[ScanRecord], out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [asdict(item) for item in records]

    with out_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    return out_path


def _relative_path(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
