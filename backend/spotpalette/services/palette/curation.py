"""
Final palette curation and design palette snapping.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from .colorspace import (
    DistanceWeights,
    LEGACY_WEIGHTS,
    STANDARD_WEIGHTS,
    hex_to_lab,
    hex_to_rgb,
    perceptual_distances,
    rgb_to_lab,
    within_threshold,
)
from .models import ColorCluster, DesignColor, DesignMatch


DEFAULT_FINAL_THRESHOLD = 15


def curate(kept: List[ColorCluster], final_threshold: float = DEFAULT_FINAL_THRESHOLD,
           num_colors: Optional[int] = None,
           weights: DistanceWeights = LEGACY_WEIGHTS) -> List[ColorCluster]:
    """
    Order kept clusters by dominance and drop near-duplicates.

    A cluster whose floored distance to an already accepted cluster is
    <= final_threshold is discarded outright; its population was already
    aggregated upstream. A positive num_colors truncates the result, which
    is never re-sorted or padded.

    Args:
        kept: Clusters that passed the tier filter
        final_threshold: Floored distance at or below which colors are duplicates
        num_colors: Optional cap, ignored unless positive
        weights: CIEDE2000 weights

    Returns:
        Curated clusters, most dominant first
    """
    ordered = sorted(kept, key=lambda c: (-c.population, c.hex))
    accepted: List[ColorCluster] = []
    accepted_labs: List[np.ndarray] = []

    for cluster in ordered:
        lab = hex_to_lab(cluster.hex)
        if accepted_labs:
            distances = perceptual_distances(lab, np.array(accepted_labs), weights)
            if np.any(within_threshold(distances, final_threshold)):
                continue
        accepted.append(ColorCluster(hex=cluster.hex, population=cluster.population))
        accepted_labs.append(lab)

    if num_colors is not None and num_colors > 0:
        accepted = accepted[:num_colors]

    logger.debug(f"Curated palette: {len(ordered)} → {len(accepted)} colors")
    return accepted


def snap_to_design(curated: List[ColorCluster], design_colors: Sequence[DesignColor],
                   total_count: int,
                   weights: DistanceWeights = STANDARD_WEIGHTS) -> List[DesignMatch]:
    """
    Replace each curated color with its nearest design color.

    Populations of colors snapping onto the same design color add up.
    Ties go to the earlier design color.

    Returns:
        Matches sorted by percent descending, percent rounded to 2 places
    """
    if not curated or not design_colors:
        return []

    design_labs = rgb_to_lab(np.array([hex_to_rgb(dc.hex) for dc in design_colors], dtype=np.float64))
    totals: Dict[str, int] = {}

    for cluster in curated:
        distances = perceptual_distances(hex_to_lab(cluster.hex), design_labs, weights)
        nearest = design_colors[int(np.argmin(distances))].hex.lower()
        totals[nearest] = totals.get(nearest, 0) + cluster.population

    matches = [
        DesignMatch(
            hex=hex_code,
            count=count,
            percent=round(count / total_count * 100, 2) if total_count > 0 else 0.0,
        )
        for hex_code, count in totals.items()
    ]
    matches.sort(key=lambda m: -m.percent)
    return matches
