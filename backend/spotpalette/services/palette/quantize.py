"""
Full-color quantization.

Photographic images are not snapped onto spot colors. Their samples are
pre-filtered in HSL space and reduced with Pillow's median-cut quantizer.
"""

from typing import List

import numpy as np
from loguru import logger
from PIL import Image

from .colorspace import rgb_to_hex, saturation_lightness
from .errors import ClusteringError
from .models import ColorCluster


PREFILTER_MIN_SATURATION = 0.30
PREFILTER_NEAR_WHITE = 0.90
PREFILTER_NEAR_BLACK = 0.10
# Pillow palettes hold at most 256 entries
MAX_QUANTIZE_COLORS = 256


def prefilter_samples(samples: np.ndarray) -> np.ndarray:
    """Keep saturated samples plus near-white and near-black ones."""
    samples = np.asarray(samples, dtype=np.uint8).reshape(-1, 3)
    saturation, lightness = saturation_lightness(samples)
    keep = (saturation >= PREFILTER_MIN_SATURATION) | (lightness > PREFILTER_NEAR_WHITE) | (lightness < PREFILTER_NEAR_BLACK)
    logger.debug(f"HSL prefilter: kept {int(keep.sum())}/{len(samples)} samples")
    return samples[keep]


def quantize_full_color(samples: np.ndarray, num_colors: int = 12, prefilter: bool = True) -> List[ColorCluster]:
    """
    Median-cut quantize RGB samples.

    Args:
        samples: (N, 3) uint8 RGB samples
        num_colors: Palette size; 0 means the quantizer maximum
        prefilter: Apply the HSL prefilter first

    Returns:
        Clusters ordered by population descending, ties by key

    Raises:
        ClusteringError: If the quantizer fails
    """
    samples = np.asarray(samples, dtype=np.uint8).reshape(-1, 3)
    if prefilter:
        samples = prefilter_samples(samples)
    if len(samples) == 0:
        return []

    colors = num_colors if num_colors and num_colors > 0 else MAX_QUANTIZE_COLORS
    colors = min(colors, MAX_QUANTIZE_COLORS)

    try:
        strip = Image.fromarray(np.ascontiguousarray(samples.reshape(1, -1, 3)))
        quantized = strip.quantize(colors=colors, method=Image.Quantize.MEDIANCUT)
        palette = quantized.getpalette() or []
        counts = quantized.getcolors(maxcolors=MAX_QUANTIZE_COLORS) or []
    except Exception as e:
        logger.error(f"Median-cut quantization failed: {str(e)}")
        raise ClusteringError(f"Quantization failed: {str(e)}") from e

    totals = {}
    for count, index in counts:
        rgb = palette[index * 3:index * 3 + 3]
        if len(rgb) != 3:
            raise ClusteringError(f"Quantizer returned palette index {index} out of range")
        key = rgb_to_hex(rgb)
        totals[key] = totals.get(key, 0) + count

    clusters = [ColorCluster(hex=key, population=count) for key, count in totals.items()]
    clusters.sort(key=lambda c: (-c.population, c.hex))
    return clusters[:colors]
