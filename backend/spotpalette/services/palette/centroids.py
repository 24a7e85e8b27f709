"""
Centroid path: k-means in CIE-LAB.

Samples are partitioned with k-means++ seeding, small centroids are dropped
and perceptually close centroids are merged into a population-weighted LAB
center.
"""

from typing import List, Optional

import numpy as np
from loguru import logger
from sklearn.cluster import KMeans

from .colorspace import DistanceWeights, STANDARD_WEIGHTS, lab_to_hex, perceptual_distances
from .errors import ClusteringError
from .models import ColorCluster


DEFAULT_K = 32
DEFAULT_POP_THRESHOLD = 0.01
DEFAULT_MERGE_THRESHOLD = 10
FALLBACK_K = 2


def run_kmeans(lab_samples: np.ndarray, k: int, random_state: int = 42):
    """
    Partition LAB samples into k clusters.

    Returns:
        (centers (k, 3), populations (k,))

    Raises:
        ClusteringError: If k is degenerate or k-means fails
    """
    n_samples = len(lab_samples)
    k = min(k, n_samples)
    if k < 1:
        raise ClusteringError(f"Cannot cluster {n_samples} samples into {k} centroids")

    try:
        kmeans = KMeans(n_clusters=k, init="k-means++", n_init=1, random_state=random_state)
        labels = kmeans.fit_predict(lab_samples)
    except Exception as e:
        logger.error(f"K-means failed: {str(e)}")
        raise ClusteringError(f"K-means clustering failed: {str(e)}") from e

    populations = np.bincount(labels, minlength=k)
    return kmeans.cluster_centers_, populations


def _merge_pass(labs: List[np.ndarray], pops: List[int], merge_threshold: float,
                weights: DistanceWeights):
    order = sorted(range(len(pops)), key=lambda i: -pops[i])
    merged_labs: List[np.ndarray] = []
    merged_pops: List[int] = []

    for idx in order:
        lab, pop = labs[idx], pops[idx]
        if merged_labs:
            distances = perceptual_distances(lab, np.array(merged_labs), weights)
            hits = np.flatnonzero(np.floor(distances) < merge_threshold)
            if hits.size:
                target = int(hits[0])
                total = merged_pops[target] + pop
                merged_labs[target] = (merged_labs[target] * merged_pops[target] + lab * pop) / total
                merged_pops[target] = total
                continue
        merged_labs.append(lab)
        merged_pops.append(pop)

    return merged_labs, merged_pops


def merge_centroids(centers: np.ndarray, populations: np.ndarray, merge_threshold: float,
                    weights: DistanceWeights = STANDARD_WEIGHTS):
    """
    Greedily merge close centroids, most populous first.

    A centroid whose floored distance to an accepted centroid is below
    merge_threshold is folded into the first such centroid; the merged
    center is the population-weighted LAB average. A merge moves the
    accepted center, so passes repeat until one completes without merging.
    No two returned centroids are then closer than merge_threshold.

    Returns:
        List of (lab, population) pairs sorted by population descending
    """
    labs = [np.asarray(center, dtype=np.float64) for center in centers]
    pops = [int(pop) for pop in populations]

    while True:
        merged_labs, merged_pops = _merge_pass(labs, pops, merge_threshold, weights)
        if len(merged_pops) == len(pops):
            break
        labs, pops = merged_labs, merged_pops

    pairs = list(zip(merged_labs, merged_pops))
    pairs.sort(key=lambda pair: -pair[1])
    return pairs


def cluster_centroids(lab_samples: np.ndarray, k: int = DEFAULT_K,
                      pop_threshold: float = DEFAULT_POP_THRESHOLD,
                      merge_threshold: float = DEFAULT_MERGE_THRESHOLD,
                      num_colors: Optional[int] = None,
                      random_state: int = 42,
                      weights: DistanceWeights = STANDARD_WEIGHTS) -> List[ColorCluster]:
    """
    Build a palette from LAB samples.

    Args:
        lab_samples: (N, 3) LAB array
        k: Configured centroid count, reduced to the sample count
        pop_threshold: Minimum population fraction for a centroid to survive
        merge_threshold: Floored distance below which centroids merge
        num_colors: Optional cap, ignored unless positive
        random_state: k-means++ seed
        weights: CIEDE2000 weights, plain CIE2000 by default

    Returns:
        Palette clusters, most populous first

    Raises:
        ClusteringError: If k-means cannot run on the samples
    """
    lab_samples = np.asarray(lab_samples, dtype=np.float64).reshape(-1, 3)
    n_samples = len(lab_samples)
    if n_samples == 0:
        return []

    centers, populations = run_kmeans(lab_samples, k, random_state)

    keep = (populations > 0) & (populations / n_samples >= pop_threshold)
    logger.debug(f"Population filter: kept {int(keep.sum())}/{len(populations)} centroids")
    if not keep.any():
        return []

    pairs = merge_centroids(centers[keep], populations[keep], merge_threshold, weights)
    clusters = [ColorCluster(hex=lab_to_hex(lab), population=pop) for lab, pop in pairs]

    if num_colors is not None and num_colors > 0:
        clusters = clusters[:num_colors]

    logger.info(f"Centroid path: {len(clusters)} colors from {n_samples} samples (k={min(k, n_samples)})")
    return clusters
