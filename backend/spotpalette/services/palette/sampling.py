"""
Pixel sampling over decoded RGBA buffers.
"""

from typing import Iterator, Union

import numpy as np

from .colorspace import RGB
from .errors import DecodeError


PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]

# Every 10th pixel
DEFAULT_STRIDE_BYTES = 40
# Alpha at or below this is treated as transparent
DEFAULT_ALPHA_THRESHOLD = 128


def _as_bytes_view(pixels: PixelBuffer) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        return pixels.astype(np.uint8, copy=False).reshape(-1)
    return np.frombuffer(pixels, dtype=np.uint8)


def _check_buffer(buf: np.ndarray, width: int, height: int, stride_bytes: int) -> int:
    """Validate geometry and return the number of bytes to walk."""
    if stride_bytes <= 0 or stride_bytes % 4 != 0:
        raise ValueError(f"stride_bytes must be a positive multiple of 4, got {stride_bytes}")
    if width < 0 or height < 0:
        raise DecodeError(f"Invalid image size: {width}x{height}")
    expected = width * height * 4
    if buf.size < expected:
        raise DecodeError(f"Pixel buffer too short: {buf.size} < {expected} bytes for {width}x{height} RGBA")
    return expected


def sample_pixels(pixels: PixelBuffer, width: int, height: int,
                  stride_bytes: int = DEFAULT_STRIDE_BYTES,
                  alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD) -> Iterator[RGB]:
    """
    Walk an RGBA buffer and yield opaque RGB samples lazily.

    Args:
        pixels: Row-major RGBA bytes, 4 per pixel
        width: Image width in pixels
        height: Image height in pixels
        stride_bytes: Advance between samples; 4 samples every pixel
        alpha_threshold: Samples with alpha <= this value are dropped

    Returns:
        Single-pass iterator of (r, g, b) tuples. Empty for a fully
        transparent or empty buffer.

    Raises:
        DecodeError: If the buffer is shorter than width*height*4
        ValueError: If the stride is not a positive multiple of 4
    """
    buf = _as_bytes_view(pixels)
    end = _check_buffer(buf, width, height, stride_bytes)
    return _walk(buf, end, stride_bytes, alpha_threshold)


def _walk(buf: np.ndarray, end: int, stride_bytes: int, alpha_threshold: int) -> Iterator[RGB]:
    for offset in range(0, end, stride_bytes):
        if buf[offset + 3] > alpha_threshold:
            yield int(buf[offset]), int(buf[offset + 1]), int(buf[offset + 2])


def sample_array(pixels: PixelBuffer, width: int, height: int,
                 stride_bytes: int = DEFAULT_STRIDE_BYTES,
                 alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD) -> np.ndarray:
    """
    Same selection as sample_pixels, materialized as an (N, 3) uint8 array.

    Used by the centroid and quantizer paths, which need the whole sample
    set at once.
    """
    buf = _as_bytes_view(pixels)
    end = _check_buffer(buf, width, height, stride_bytes)
    rgba = buf[:end].reshape(-1, 4)[::stride_bytes // 4]
    return np.ascontiguousarray(rgba[rgba[:, 3] > alpha_threshold, :3])
