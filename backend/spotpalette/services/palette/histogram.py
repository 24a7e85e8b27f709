"""
Exact-match color histogram.
"""

from collections import Counter
from typing import Iterable

from loguru import logger

from .colorspace import RGB, rgb_to_hex
from .models import Histogram


def build_histogram(samples: Iterable[RGB]) -> Histogram:
    """
    Count samples by color key.

    Drains the sample sequence once. total_count is the number of samples
    consumed and is the denominator for every percentage threshold
    downstream.
    """
    counts = Counter(rgb_to_hex(rgb) for rgb in samples)
    total = sum(counts.values())
    logger.debug(f"Histogram built: {len(counts)} unique colors from {total} samples")
    return Histogram(counts=dict(counts), total_count=total)
