"""
Palette extraction entry point.

This module ties the pipeline stages together for both image types:
SpotColor images go through the configured strategy, FullColor images are
median-cut quantized (or rejected). An optional design palette snaps the
result onto a fixed set of reference colors.
"""

import time
from typing import Optional, Sequence

from loguru import logger

from .centroids import FALLBACK_K
from .curation import snap_to_design
from .errors import ClusteringError
from .models import DesignColor, ImageType, PaletteResult
from .options import PaletteOptions
from .quantize import quantize_full_color
from .sampling import PixelBuffer, sample_array
from .strategies import get_strategy


def _full_color_clusters(pixels: PixelBuffer, width: int, height: int,
                         options: PaletteOptions):
    samples = sample_array(pixels, width, height, options.stride_bytes, options.alpha_threshold)
    total = len(samples)
    if total == 0:
        return [], 0

    if options.full_color_policy == "reject":
        logger.info("FullColor image rejected by full_color_policy")
        return [], total

    for num_colors in (options.num_colors, FALLBACK_K):
        try:
            return quantize_full_color(samples, num_colors, options.full_color_prefilter), total
        except ClusteringError as e:
            logger.warning(f"Full-color quantization failed with {num_colors} colors: {str(e)}")
    return [], total


def extract_palette(pixels: PixelBuffer, width: int, height: int,
                    mode: ImageType = ImageType.SPOT_COLOR,
                    options: Optional[PaletteOptions] = None,
                    design_colors: Optional[Sequence[DesignColor]] = None) -> PaletteResult:
    """
    Extract an ordered palette from a decoded RGBA buffer.

    Args:
        pixels: Row-major RGBA bytes
        width: Image width in pixels
        height: Image height in pixels
        mode: SpotColor or FullColor, as decided by the classifier
        options: Extraction options, defaults when omitted
        design_colors: Design table; when given, the palette is also
            snapped onto it

    Returns:
        PaletteResult. Empty (not an error) when no opaque samples exist or
        nothing passes the filters.

    Raises:
        DecodeError: If the buffer does not match width/height on the
            histogram or FullColor paths; the centroid path returns an
            empty palette instead
        ValueError: If the stride is invalid
    """
    options = options or PaletteOptions()
    mode = ImageType(mode)
    start_time = time.time()

    if mode == ImageType.SPOT_COLOR:
        strategy_name = options.strategy
        clusters, total = get_strategy(strategy_name).extract(pixels, width, height, options)
    else:
        strategy_name = "median_cut"
        clusters, total = _full_color_clusters(pixels, width, height, options)

    if total == 0:
        logger.info(f"No opaque samples in {width}x{height} image, returning empty palette")
        return PaletteResult.empty(mode, strategy_name)

    design_matches = None
    if design_colors is not None:
        design_matches = snap_to_design(clusters, design_colors, total)

    elapsed_ms = (time.time() - start_time) * 1000
    logger.bind(
        mode=mode.value,
        strategy=strategy_name,
        colors=len(clusters),
        samples=total,
    ).info(f"Palette extraction completed in {elapsed_ms:.1f}ms")

    return PaletteResult(
        colors=[c.hex for c in clusters],
        clusters=clusters,
        total_count=total,
        image_type=mode,
        strategy=strategy_name,
        design_matches=design_matches,
    )
