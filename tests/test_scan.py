"""
==============================================================================
Batch Scan Tests
==============================================================================

Tests for directory scanning and the JSON report.

==============================================================================
"""

import json

import cv2
import numpy as np

from barcode_reader.reader import BarcodeReader
from barcode_reader.scan import iter_images, save_report_json, scan_directory

from conftest import FakeEngine


def _write(path, image):
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), image)


def test_iter_images_filters_and_sorts(tmp_path, bitmap):
    _write(tmp_path / "b.png", bitmap)
    _write(tmp_path / "a.JPG", bitmap)
    (tmp_path / "notes.txt").write_text("hi")
    _write(tmp_path / "sub" / "c.bmp", bitmap)

    assert [p.name for p in iter_images(tmp_path)] == ["a.JPG", "b.png"]
    assert [p.name for p in iter_images(tmp_path, recursive=True)] == ["a.JPG", "b.png", "c.bmp"]
    assert list(iter_images(tmp_path / "missing")) == []


def test_scan_directory_counts_outcomes(tmp_path, bitmap):
    _write(tmp_path / "1_dark.png", np.zeros_like(bitmap))
    _write(tmp_path / "2_light.png", bitmap)
    (tmp_path / "3_broken.png").write_bytes(b"garbage")

    engine = FakeEngine(match=lambda image: image.mean() < 128)
    seen = []
    with BarcodeReader(engine=engine) as reader:
        records, summary = scan_directory(tmp_path, reader, progress_cb=seen.append)

    assert [r.image_path for r in records] == ["1_dark.png", "2_light.png", "3_broken.png"]
    assert seen == records

    dark, light, broken = records
    assert dark.found is True
    assert dark.value == "4006381333931"
    assert dark.format == "EAN_13"
    assert dark.engine == "fake"
    assert dark.error is None

    assert light.found is False
    assert light.value == ""
    assert "did not contain a readable barcode" in light.error

    assert broken.found is False
    assert broken.error

    assert summary.processed == 3
    assert summary.found == 1
    assert summary.not_found == 1
    assert summary.failed == 1


def test_save_report_json(tmp_path, bitmap):
    _write(tmp_path / "images" / "x.png", np.zeros_like(bitmap))
    with BarcodeReader(engine=FakeEngine()) as reader:
        records, _ = scan_directory(tmp_path / "images", reader)

    out = save_report_json(records, tmp_path / "outputs" / "report.json")
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload[0]["image_path"] == "x.png"
    assert payload[0]["found"] is True
    assert set(payload[0]) == {"image_path", "found", "value", "format", "engine", "time_sec", "error"}
