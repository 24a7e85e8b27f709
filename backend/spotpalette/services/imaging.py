"""
SpotPalette Imaging Utilities
Handles image decoding, mime validation and size checks.
"""
import io
from dataclasses import dataclass
from typing import Optional

import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image

from spotpalette.config import config
from spotpalette.services.palette.errors import DecodeError, ImageTooLargeError, UnsupportedFormatError


# Pillow decoder names per accepted mime type
_PIL_FORMATS = {
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}


@dataclass
class DecodedImage:
    """Row-major RGBA pixels with their dimensions."""
    rgba: bytes
    width: int
    height: int

    def as_array(self) -> np.ndarray:
        """View the buffer as an (H, W, 4) uint8 array."""
        return np.frombuffer(self.rgba, dtype=np.uint8).reshape(self.height, self.width, 4)


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """
    Canonicalize a mime type, folding image/jpeg into image/jpg.

    Raises:
        UnsupportedFormatError: If the type is not accepted
    """
    normalized = (mime_type or "").split(";")[0].strip().lower().replace("jpeg", "jpg")
    if normalized not in _PIL_FORMATS:
        raise UnsupportedFormatError(mime_type or "")
    return normalized


def detect_mime_type(file_bytes: bytes) -> Optional[str]:
    """Sniff the mime type from magic bytes, None when unrecognized."""
    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpg"
    if file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    if len(file_bytes) >= 12 and file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    return None


def decode_image(file_bytes: bytes, mime_type: str, max_pixels: Optional[int] = None) -> DecodedImage:
    """
    Decode image bytes into an RGBA buffer.

    Args:
        file_bytes: Encoded image
        mime_type: Declared mime type; selects the decoder
        max_pixels: Pixel budget, config.MAX_PIXELS when omitted

    Returns:
        DecodedImage with 4 bytes per pixel

    Raises:
        UnsupportedFormatError: If the mime type is not accepted
        DecodeError: If the bytes are not a valid image of that type
        ImageTooLargeError: If width*height exceeds the pixel budget
    """
    normalized = normalize_mime_type(mime_type)
    if max_pixels is None:
        max_pixels = config.MAX_PIXELS

    if not file_bytes:
        raise DecodeError("Empty image data")

    try:
        image = Image.open(io.BytesIO(file_bytes), formats=[_PIL_FORMATS[normalized]])
    except Exception as e:
        raise DecodeError(f"Failed to decode image: {str(e)}") from e

    width, height = image.size
    if width * height > max_pixels:
        raise ImageTooLargeError(f"Image too large: {width}x{height} exceeds {max_pixels} pixels")

    try:
        rgba = image.convert("RGBA").tobytes()
    except Exception as e:
        raise DecodeError(f"Failed to decode image: {str(e)}") from e

    return DecodedImage(rgba=rgba, width=width, height=height)


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded file, enforcing the configured size limit.

    Raises:
        HTTPException: 400 if the file can't be read, 413 if it is too large
    """
    # Check declared size first (file.size might be None for some clients)
    max_bytes = config.MAX_FILE_MB * 1024 * 1024
    if file.size and file.size > max_bytes:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    check_payload_size(file_bytes)
    return file_bytes


def check_payload_size(file_bytes: bytes) -> None:
    """
    Raises:
        HTTPException: 413 if the payload exceeds MAX_FILE_MB
    """
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB")
