"""
Illustration classifier.

Two independent analyses run over the full decoded buffer. An image is
treated as SpotColor only when both complete and both lean towards
illustration; any failure falls back to FullColor.
"""
import asyncio
from typing import Optional

import numpy as np
from loguru import logger

from spotpalette.config import config
from spotpalette.services.imaging import DecodedImage
from spotpalette.services.palette.models import ImageType

# Grayscale luma weights
LUMA_WEIGHTS = np.array([0.2989, 0.587, 0.114])


def _rgba_pixels(image: DecodedImage) -> np.ndarray:
    pixels = np.frombuffer(image.rgba, dtype=np.uint8).reshape(-1, 4)
    if len(pixels) == 0 or len(pixels) != image.width * image.height:
        raise ValueError(f"Cannot analyze {image.width}x{image.height} image with {len(pixels)} pixels")
    return pixels


def unique_color_ratio(image: DecodedImage) -> float:
    """Number of distinct RGB values divided by the pixel count."""
    pixels = _rgba_pixels(image)
    packed = (pixels[:, 0].astype(np.uint32) << 16) | (pixels[:, 1].astype(np.uint32) << 8) | pixels[:, 2]
    return len(np.unique(packed)) / len(pixels)


def grayscale_entropy(image: DecodedImage) -> float:
    """Shannon entropy (bits) of rounded grayscale intensity."""
    pixels = _rgba_pixels(image)
    intensity = np.round(pixels[:, :3].astype(np.float64) @ LUMA_WEIGHTS).astype(np.int64)
    _, counts = np.unique(intensity, return_counts=True)
    probabilities = counts / len(intensity)
    return float(-(probabilities * np.log2(probabilities)).sum())


def analyze_histogram(image: DecodedImage, max_ratio: Optional[float] = None) -> bool:
    """True when few distinct colors suggest an illustration."""
    max_ratio = config.UNIQUE_COLOR_RATIO_MAX if max_ratio is None else max_ratio
    return unique_color_ratio(image) < max_ratio


def analyze_entropy(image: DecodedImage, max_entropy: Optional[float] = None) -> bool:
    """True when low intensity entropy suggests an illustration."""
    max_entropy = config.ENTROPY_MAX if max_entropy is None else max_entropy
    return grayscale_entropy(image) < max_entropy


def combine_analyses(*results) -> ImageType:
    """SpotColor only if every analysis completed and returned True."""
    for result in results:
        if isinstance(result, BaseException):
            logger.warning(f"Image analysis failed, defaulting to FullColor: {str(result)}")
            return ImageType.FULL_COLOR
    return ImageType.SPOT_COLOR if all(results) else ImageType.FULL_COLOR


async def classify_image(image: DecodedImage) -> ImageType:
    """
    Decide the extraction mode for a decoded image.

    The entropy and histogram-ratio analyses run concurrently in worker
    threads; a failure in one does not cancel the other.
    """
    results = await asyncio.gather(
        asyncio.to_thread(analyze_entropy, image),
        asyncio.to_thread(analyze_histogram, image),
        return_exceptions=True,
    )
    image_type = combine_analyses(*results)
    logger.debug(f"Classified {image.width}x{image.height} image as {image_type.value}")
    return image_type
