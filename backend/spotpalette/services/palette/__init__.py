"""
SpotPalette Palette Pipeline

Sampling, histogram, noise clustering, tier filtering and curation for
spot-color images, plus the k-means centroid path and median-cut
quantization for full-color images.
"""

from .errors import ClusteringError, DecodeError, ImageTooLargeError, PaletteError, UnsupportedFormatError
from .extraction import extract_palette
from .models import ColorCluster, DesignColor, DesignMatch, ImageType, PaletteResult
from .options import PaletteOptions

__all__ = [
    "ClusteringError",
    "ColorCluster",
    "DecodeError",
    "DesignColor",
    "DesignMatch",
    "ImageTooLargeError",
    "ImageType",
    "PaletteError",
    "PaletteOptions",
    "PaletteResult",
    "UnsupportedFormatError",
    "extract_palette",
]
