"""
Saturation/frequency tier policies.

Two mutually exclusive policies decide which clustered colors survive:

- ``three_tier``: vivid accents may be tiny, muted colors need moderate
  support and achromatic colors must be a major feature of the image.
- ``dominant_accent``: every dominant cluster is kept, plus a few of the
  largest saturated accents from the remainder.

The policy is selected by name and its thresholds are overridable.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from loguru import logger

from .colorspace import hex_saturation
from .models import ColorCluster


@dataclass(frozen=True)
class ThreeTierPolicy:
    """Keep a cluster if it passes tier 1, tier 2 or tier 3, checked in that order."""
    vibrant_saturation: float = 0.35
    vibrant_min_fraction: float = 0.0001
    natural_saturation: float = 0.10
    natural_min_fraction: float = 0.005
    achromatic_min_fraction: float = 0.015

    name = "three_tier"

    def tier_of(self, cluster: ColorCluster, total_count: int) -> Optional[int]:
        """Return the first tier the cluster satisfies, or None."""
        if total_count <= 0:
            return None
        fraction = cluster.population / total_count
        saturation = hex_saturation(cluster.hex)

        if saturation >= self.vibrant_saturation and fraction >= self.vibrant_min_fraction:
            return 1
        if saturation >= self.natural_saturation and fraction >= self.natural_min_fraction:
            return 2
        if fraction >= self.achromatic_min_fraction:
            return 3
        return None

    def select(self, clusters: List[ColorCluster], total_count: int) -> List[ColorCluster]:
        return [c for c in clusters if self.tier_of(c, total_count) is not None]


@dataclass(frozen=True)
class DominantAccentPolicy:
    """Keep dominant clusters, then up to max_accents saturated extras."""
    dominant_min_fraction: float = 0.015
    accent_saturation: float = 0.30
    max_accents: int = 3

    name = "dominant_accent"

    def select(self, clusters: List[ColorCluster], total_count: int) -> List[ColorCluster]:
        if total_count <= 0:
            return []

        dominant = []
        remainder = []
        for cluster in clusters:
            if cluster.population / total_count >= self.dominant_min_fraction:
                dominant.append(cluster)
            else:
                remainder.append(cluster)

        candidates = [c for c in remainder if hex_saturation(c.hex) >= self.accent_saturation]
        candidates.sort(key=lambda c: -c.population)
        accents = candidates[:max(self.max_accents, 0)]
        return dominant + accents


TierPolicy = Union[ThreeTierPolicy, DominantAccentPolicy]


def filter_tiers(clusters: List[ColorCluster], total_count: int,
                 policy: Optional[TierPolicy] = None) -> List[ColorCluster]:
    """
    Apply a tier policy to clustered colors.

    Args:
        clusters: Output of the noise clusterer
        total_count: Number of samples behind the histogram
        policy: Tier policy, three-tier when omitted

    Returns:
        Kept clusters
    """
    policy = policy or ThreeTierPolicy()
    kept = policy.select(clusters, total_count)
    logger.debug(f"Tier filter ({policy.name}): kept {len(kept)}/{len(clusters)} clusters")
    return kept
