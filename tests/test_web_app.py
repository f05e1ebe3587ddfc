"""
==============================================================================
Web App Tests
==============================================================================

Tests for the Flask decode endpoints.

==============================================================================
"""

import io

import cv2
import numpy as np
import pytest

from barcode_reader.config import ReaderConfig
from barcode_reader.engines import create_engine
from barcode_reader.formats import BarcodeFormat
from barcode_reader.web_app import create_app

from conftest import FakeEngine


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def client(requests_seen):
    def factory(engine_key):
        if engine_key != "fake":
            return create_engine(engine_key)
        engine = FakeEngine(match=lambda image: image.mean() < 128)
        requests_seen.append(engine)
        return engine

    app = create_app(ReaderConfig(engine="zbar"), engine_factory=factory)
    app.config["TESTING"] = True
    return app.test_client()


def _png(image):
    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return io.BytesIO(encoded.tobytes())


class TestPages:
    """Tests for the informational endpoints."""

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert b"Barcode Reader" in response.data

    def test_engines(self, client):
        data = client.get("/api/engines").get_json()
        assert data["default"] == "zbar"
        assert set(data["engines"]) == {"zbar", "zxing", "opencv"}


class TestDecodeEndpoint:
    """Tests for POST /api/decode."""

    def test_found(self, client, requests_seen):
        response = client.post(
            "/api/decode",
            data={
                "image": (_png(np.zeros((20, 40), dtype=np.uint8)), "dark.png"),
                "engine": "fake",
                "performance_mode": "false",
                "formats": "EAN_13",
            },
            content_type="multipart/form-data",
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data == {
            "found": True,
            "value": "4006381333931",
            "format": "EAN_13",
            "engine": "fake",
            "error": None,
        }
        (engine,) = requests_seen
        assert engine.calls[-1][1] == frozenset({BarcodeFormat.EAN_13})

    def test_not_found(self, client):
        response = client.post(
            "/api/decode",
            data={"image": (_png(np.full((20, 40), 255, dtype=np.uint8)), "light.png"), "engine": "fake"},
            content_type="multipart/form-data",
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data["found"] is False
        assert data["value"] is None
        assert "did not contain a readable barcode" in data["error"]

    def test_missing_image(self, client):
        response = client.post("/api/decode", data={"engine": "fake"}, content_type="multipart/form-data")
        assert response.status_code == 400

    def test_bad_formats(self, client):
        response = client.post(
            "/api/decode",
            data={"image": (_png(np.zeros((4, 4), dtype=np.uint8)), "x.png"), "formats": "NOPE"},
            content_type="multipart/form-data",
        )
        assert response.status_code == 400

    def test_unknown_engine(self, client):
        response = client.post(
            "/api/decode",
            data={"image": (_png(np.zeros((4, 4), dtype=np.uint8)), "x.png"), "engine": "tesseract"},
            content_type="multipart/form-data",
        )
        assert response.status_code == 404

    def test_undecodable_upload(self, client):
        response = client.post(
            "/api/decode",
            data={"image": (io.BytesIO(b"not an image"), "x.png"), "engine": "fake"},
            content_type="multipart/form-data",
        )
        assert response.status_code == 422
        assert response.get_json()["found"] is False

    @pytest.mark.parametrize("mode", ["maybe", "2", "fasle"])
    def test_bad_performance_mode(self, client, requests_seen, mode):
        response = client.post(
            "/api/decode",
            data={"image": (_png(np.zeros((4, 4), dtype=np.uint8)), "x.png"), "engine": "fake", "performance_mode": mode},
            content_type="multipart/form-data",
        )
        assert response.status_code == 400
        assert "performance_mode" in response.get_json()["error"]
        assert requests_seen == []
