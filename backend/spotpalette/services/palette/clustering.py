"""
Noise clustering for the histogram path.

Anti-aliasing and JPEG artifacts scatter a flat color over many nearby
keys. Each histogram entry is snapped onto the first already-seen parent
it resembles, so the most frequent color of a smear becomes its parent.
"""

from typing import List

import numpy as np
from loguru import logger

from .colorspace import (
    DistanceWeights,
    LEGACY_WEIGHTS,
    hex_to_rgb,
    perceptual_distances,
    rgb_to_lab,
    within_threshold,
)
from .models import ColorCluster, Histogram


DEFAULT_NOISE_THRESHOLD = 12


def cluster_histogram(histogram: Histogram, threshold: float = DEFAULT_NOISE_THRESHOLD,
                      weights: DistanceWeights = LEGACY_WEIGHTS) -> List[ColorCluster]:
    """
    Snap histogram entries onto parents.

    Entries are visited by count descending, ties by key ascending. Parents
    are scanned in creation order and the first one whose floored distance
    is <= threshold absorbs the entry's count, even if a later parent would
    be closer. An entry matching no parent becomes a new parent that keeps
    its own key.

    Args:
        histogram: Exact-match color counts
        threshold: Maximum floored perceptual distance for a snap
        weights: CIEDE2000 weights

    Returns:
        Parents in creation order
    """
    entries = histogram.sorted_entries()
    if not entries:
        return []

    labs = rgb_to_lab(np.array([hex_to_rgb(entry.hex) for entry in entries], dtype=np.float64))
    parents: List[ColorCluster] = []
    parent_rows: List[int] = []

    for row, entry in enumerate(entries):
        if parent_rows:
            distances = perceptual_distances(labs[row], labs[parent_rows], weights)
            hits = np.flatnonzero(within_threshold(distances, threshold))
            if hits.size:
                parents[hits[0]].population += entry.population
                continue
        parents.append(ColorCluster(hex=entry.hex, population=entry.population))
        parent_rows.append(row)

    logger.debug(f"Noise clustering: {len(entries)} entries → {len(parents)} parents (threshold={threshold})")
    return parents
