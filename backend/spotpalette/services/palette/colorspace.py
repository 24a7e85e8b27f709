"""
Color space conversions and perceptual distance.

HSL goes through colorsys; CIE-LAB conversion and the CIEDE2000 metric come
from scikit-image (D65 white point, sRGB companding). Distances that are
compared against integer thresholds are floored first so that threshold
crossings are reproducible across floating point implementations.
"""

import colorsys
import math
import warnings
from typing import NamedTuple, Sequence, Tuple, Union

import numpy as np
from skimage.color import deltaE_ciede2000, lab2rgb, rgb2lab


RGB = Tuple[int, int, int]
LAB = Tuple[float, float, float]


class DistanceWeights(NamedTuple):
    """CIEDE2000 parametric weights for lightness, chroma and hue."""
    kl: float = 1.0
    kc: float = 1.0
    kh: float = 1.0


# Weighted variant used by the histogram path
LEGACY_WEIGHTS = DistanceWeights(1.5, 1.5, 1.8)
# Plain CIE2000 used by the centroid path
STANDARD_WEIGHTS = DistanceWeights(1.0, 1.0, 1.0)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to the lowercase #rrggbb color key."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert a #rrggbb (or rrggbb) string to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: #{hex_color}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert 8-bit RGB to HSL.

    Returns:
        (hue in degrees 0..360, saturation 0..1, lightness 0..1). Saturation
        is 0 for achromatic input.
    """
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    if math.isnan(s):
        s = 0.0
    return h * 360.0, s, l


def hex_saturation(hex_color: str) -> float:
    """HSL saturation of a color key."""
    return rgb_to_hsl(*hex_to_rgb(hex_color))[1]


def saturation_lightness(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized HSL saturation and lightness for an (N, 3) uint8 array.

    Matches rgb_to_hsl element-wise, with 0 saturation for grays.
    """
    rgb = np.asarray(rgb, dtype=np.float64).reshape(-1, 3) / 255.0
    c_max = rgb.max(axis=1)
    c_min = rgb.min(axis=1)
    lightness = (c_max + c_min) / 2.0
    delta = c_max - c_min

    denom = np.where(lightness <= 0.5, c_max + c_min, 2.0 - c_max - c_min)
    saturation = np.zeros_like(lightness)
    chromatic = delta > 0
    saturation[chromatic] = delta[chromatic] / denom[chromatic]
    return saturation, lightness


def rgb_to_lab(rgb: Union[Sequence[int], np.ndarray]) -> np.ndarray:
    """
    Convert RGB to CIE-LAB.

    Accepts a single triple (returns shape (3,)) or an (N, 3) array
    (returns shape (N, 3)).
    """
    arr = np.asarray(rgb, dtype=np.float64)
    single = arr.ndim == 1
    lab = rgb2lab(arr.reshape(-1, 3) / 255.0)
    return lab[0] if single else lab


def hex_to_lab(hex_color: str) -> np.ndarray:
    """Convert a color key to LAB."""
    return rgb_to_lab(hex_to_rgb(hex_color))


def lab_to_rgb(lab: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """
    Convert CIE-LAB back to 8-bit RGB.

    Out-of-gamut values are clamped to 0..255 rather than raising.
    """
    arr = np.asarray(lab, dtype=np.float64)
    single = arr.ndim == 1
    with warnings.catch_warnings():
        # lab2rgb warns when it clips negative Z values
        warnings.simplefilter("ignore")
        rgb = lab2rgb(arr.reshape(-1, 3))
    rgb_u8 = np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)
    return rgb_u8[0] if single else rgb_u8


def lab_to_hex(lab: Union[Sequence[float], np.ndarray]) -> str:
    """Convert a LAB triple to its color key."""
    return rgb_to_hex(lab_to_rgb(lab))


def perceptual_distance(lab1, lab2, weights: DistanceWeights = LEGACY_WEIGHTS) -> float:
    """
    CIEDE2000 distance between two LAB colors.

    Args:
        lab1: First color in LAB
        lab2: Second color in LAB
        weights: Parametric weights (kL, kC, kH)

    Returns:
        Non-negative, symmetric distance
    """
    a = np.asarray(lab1, dtype=np.float64).reshape(1, 3)
    b = np.asarray(lab2, dtype=np.float64).reshape(1, 3)
    distance = deltaE_ciede2000(a, b, kL=weights.kl, kC=weights.kc, kH=weights.kh)
    return float(distance[0])


def perceptual_distances(lab, labs: np.ndarray, weights: DistanceWeights = LEGACY_WEIGHTS) -> np.ndarray:
    """CIEDE2000 distance from one LAB color to each row of an (N, 3) array."""
    labs = np.asarray(labs, dtype=np.float64).reshape(-1, 3)
    if labs.shape[0] == 0:
        return np.empty(0, dtype=np.float64)
    origin = np.broadcast_to(np.asarray(lab, dtype=np.float64).reshape(1, 3), labs.shape)
    return deltaE_ciede2000(origin, labs, kL=weights.kl, kC=weights.kc, kH=weights.kh)


def hex_distance(hex1: str, hex2: str, weights: DistanceWeights = LEGACY_WEIGHTS) -> float:
    """CIEDE2000 distance between two color keys."""
    return perceptual_distance(hex_to_lab(hex1), hex_to_lab(hex2), weights)


def within_threshold(distance, threshold: float):
    """True when the floored distance is at most the threshold; elementwise for arrays."""
    return np.floor(distance) <= threshold
