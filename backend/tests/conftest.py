"""
Test configuration and fixtures for SpotPalette tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from spotpalette.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def make_rgba():
    """
    Build a 1-pixel-high RGBA buffer from (rgb, count) runs.

    Returns (pixels, width, height).
    """
    def _make(runs, alpha=255):
        pixels = bytearray()
        for rgb, count in runs:
            pixels.extend(bytes((rgb[0], rgb[1], rgb[2], alpha)) * count)
        return bytes(pixels), len(pixels) // 4, 1
    return _make


@pytest.fixture
def logo_array():
    """40x40 two-color logo: red in columns 0-29, blue in columns 30-39."""
    img = np.zeros((40, 40, 4), dtype=np.uint8)
    img[:, :, 3] = 255
    img[:, :30, 0] = 255
    img[:, 30:, 2] = 255
    return img


@pytest.fixture
def noise_array():
    """64x64 opaque random noise, photo-like for the classifier."""
    rng = np.random.default_rng(42)
    img = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    img[:, :, 3] = 255
    return img


@pytest.fixture
def encode_png():
    """Encode an (H, W, 4) uint8 array as PNG bytes."""
    def _encode(array):
        buffer = io.BytesIO()
        Image.fromarray(np.ascontiguousarray(array)).save(buffer, format="PNG")
        return buffer.getvalue()
    return _encode
