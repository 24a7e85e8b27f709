"""
Spot-color extraction strategies.

Both strategies take a decoded RGBA buffer and return palette clusters
with the number of samples they were computed from.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Type

from loguru import logger

from .centroids import FALLBACK_K, cluster_centroids
from .clustering import cluster_histogram
from .colorspace import rgb_to_lab
from .curation import curate
from .errors import ClusteringError, DecodeError
from .histogram import build_histogram
from .models import ColorCluster
from .options import PaletteOptions
from .sampling import PixelBuffer, sample_array, sample_pixels
from .tiers import filter_tiers


class PaletteStrategy(ABC):
    """Pixels in, dominance-ordered clusters out."""

    name: str = ""

    @abstractmethod
    def extract(self, pixels: PixelBuffer, width: int, height: int,
                options: PaletteOptions) -> Tuple[List[ColorCluster], int]:
        """Return (clusters, total_count)."""


class HistogramStrategy(PaletteStrategy):
    """Sampler → Histogram → NoiseClusterer → TierFilter → PaletteCurator."""

    name = "histogram"

    def extract(self, pixels, width, height, options):
        samples = sample_pixels(pixels, width, height, options.stride_bytes, options.alpha_threshold)
        histogram = build_histogram(samples)
        if histogram.total_count == 0:
            return [], 0

        weights = options.distance_weights()
        parents = cluster_histogram(histogram, options.noise_threshold, weights)
        kept = filter_tiers(parents, histogram.total_count, options.tier_filter())
        curated = curate(kept, options.final_threshold, options.num_colors, weights)
        return curated, histogram.total_count


class CentroidStrategy(PaletteStrategy):
    """Sampler → LAB → k-means → population filter → merge → truncate."""

    name = "centroid"

    def extract(self, pixels, width, height, options):
        try:
            samples = sample_array(pixels, width, height, options.stride_bytes, options.alpha_threshold)
        except DecodeError as e:
            logger.warning(f"Centroid path could not read pixels: {str(e)}")
            return [], 0

        total = len(samples)
        if total == 0:
            return [], 0

        labs = rgb_to_lab(samples)
        for k in (options.centroid_k, FALLBACK_K):
            try:
                clusters = cluster_centroids(
                    labs,
                    k=k,
                    pop_threshold=options.centroid_pop_threshold,
                    merge_threshold=options.centroid_merge_threshold,
                    num_colors=options.num_colors,
                    random_state=options.random_state,
                )
                return clusters, total
            except ClusteringError as e:
                logger.warning(f"Centroid clustering failed with k={k}: {str(e)}")

        return [], total


_STRATEGIES: Dict[str, Type[PaletteStrategy]] = {
    HistogramStrategy.name: HistogramStrategy,
    CentroidStrategy.name: CentroidStrategy,
}


def get_strategy(name: str) -> PaletteStrategy:
    """Look up a strategy by its configured name."""
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown palette strategy: {name}") from None
