"""
==============================================================================
Imaging Helper Tests
==============================================================================

Tests for bitmap loading, suffix handling, saving and decode variants.

==============================================================================
"""

from pathlib import Path

import cv2
import numpy as np
import pytest

from barcode_reader.errors import ImageReadError
from barcode_reader.imaging import ImageFormat, ensure_suffix, load_image, save_bitmap, to_grayscale
from barcode_reader.options import DecodingOptions
from barcode_reader.variants import iter_variants


class TestEnsureSuffix:
    """Tests for file suffix correction."""

    def test_appends_missing_suffix(self):
        assert ensure_suffix("out/label", ImageFormat.JPEG) == Path("out/label.jpeg")

    def test_keeps_matching_suffix(self):
        assert ensure_suffix("label.png", ImageFormat.PNG) == Path("label.png")

    def test_other_suffix_is_kept_and_extended(self):
        assert ensure_suffix("label.jpg", ImageFormat.JPEG) == Path("label.jpg.jpeg")

    def test_suffix_match_is_case_sensitive(self):
        assert ensure_suffix("label.PNG", ImageFormat.PNG) == Path("label.PNG.png")

    def test_path_not_longer_than_suffix(self):
        assert ensure_suffix(".png", ImageFormat.PNG) == Path(".png.png")
        assert ensure_suffix("a", ImageFormat.BMP) == Path("a.bmp")


class TestSaveAndLoad:
    """Tests for save_bitmap() and load_image()."""

    def test_save_then_load(self, bitmap, tmp_path):
        saved = save_bitmap(bitmap, tmp_path / "nested" / "label", ImageFormat.PNG)
        assert saved == tmp_path / "nested" / "label.png"
        loaded = load_image(saved)
        assert np.array_equal(loaded, bitmap)

    def test_load_from_bytes(self, bitmap):
        ok, encoded = cv2.imencode(".png", bitmap)
        assert ok
        loaded = load_image(encoded.tobytes())
        assert loaded.shape == bitmap.shape

    def test_array_passes_through(self, bitmap):
        assert load_image(bitmap) is bitmap

    @pytest.mark.parametrize("source", [b"", b"not an image", np.zeros((0, 0), dtype=np.uint8), 42])
    def test_bad_sources(self, source):
        with pytest.raises(ImageReadError):
            load_image(source)

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"garbage")
        with pytest.raises(ImageReadError):
            load_image(path)

    def test_grayscale(self, bitmap):
        gray = to_grayscale(bitmap)
        assert gray.shape == bitmap.shape[:2]
        assert to_grayscale(gray) is gray


class TestVariants:
    """Tests for the try-harder and auto-rotate passes."""

    def test_performance_mode_yields_original_only(self, bitmap):
        variants = list(iter_variants(bitmap, DecodingOptions.from_performance_mode(True)))
        assert [label for label, _ in variants] == ["original"]
        assert variants[0][1] is bitmap

    def test_try_harder(self, bitmap):
        labels = [label for label, _ in iter_variants(bitmap, DecodingOptions.create(True, False))]
        assert labels == ["original", "equalized", "otsu", "upscaled"]

    def test_auto_rotate(self, bitmap):
        variants = dict(iter_variants(bitmap, DecodingOptions.create(False, True)))
        assert list(variants) == ["original", "original/rot90", "original/rot180", "original/rot270"]
        assert variants["original/rot90"].shape[:2] == (80, 40)
        assert variants["original/rot180"].shape[:2] == (40, 80)

    def test_full_effort_count(self, bitmap):
        variants = list(iter_variants(bitmap, DecodingOptions.from_performance_mode(False)))
        assert len(variants) == 16
        assert variants[0][0] == "original"
