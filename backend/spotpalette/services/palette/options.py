"""
Recognized extraction options.

Every threshold of the pipeline is overridable per call; the defaults below
are the values the pipeline runs with when an option is omitted.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from spotpalette.config import config
from .colorspace import DistanceWeights
from .tiers import DominantAccentPolicy, ThreeTierPolicy, TierPolicy


class PaletteOptions(BaseModel):
    """Options accepted by extract_palette and the HTTP API."""
    model_config = ConfigDict(extra="forbid")

    strategy: Literal["histogram", "centroid"] = Field(
        default=config.STRATEGY_DEFAULT,
        description="Spot-color strategy: exact histogram with noise snapping, or k-means in LAB"
    )
    num_colors: int = Field(
        default=config.NUM_COLORS_DEFAULT,
        ge=0,
        le=256,
        description="Maximum palette size; 0 disables the cap"
    )

    # Sampling
    stride_bytes: int = Field(
        default=40,
        ge=4,
        multiple_of=4,
        description="Byte advance between samples (4 = every pixel, 40 = every 10th pixel)"
    )
    alpha_threshold: int = Field(
        default=128,
        ge=0,
        le=255,
        description="Samples with alpha at or below this value are treated as transparent"
    )

    # Perceptual distance
    noise_threshold: float = Field(
        default=12,
        ge=0,
        description="Floored CIEDE2000 distance at or below which a color snaps onto an earlier parent"
    )
    final_threshold: float = Field(
        default=15,
        ge=0,
        description="Floored CIEDE2000 distance at or below which curated colors count as duplicates"
    )
    weight_lightness: float = Field(default=1.5, gt=0, description="CIEDE2000 kL for the histogram path")
    weight_chroma: float = Field(default=1.5, gt=0, description="CIEDE2000 kC for the histogram path")
    weight_hue: float = Field(default=1.8, gt=0, description="CIEDE2000 kH for the histogram path")

    # Tier filter
    tier_policy: Literal["three_tier", "dominant_accent"] = Field(
        default=config.TIER_POLICY_DEFAULT,
        description="Which saturation/frequency policy decides the kept colors"
    )
    vibrant_saturation: float = Field(default=0.35, ge=0, le=1, description="Tier 1 minimum HSL saturation")
    vibrant_min_fraction: float = Field(default=0.0001, ge=0, le=1, description="Tier 1 minimum population fraction")
    natural_saturation: float = Field(default=0.10, ge=0, le=1, description="Tier 2 minimum HSL saturation")
    natural_min_fraction: float = Field(default=0.005, ge=0, le=1, description="Tier 2 minimum population fraction")
    achromatic_min_fraction: float = Field(default=0.015, ge=0, le=1, description="Tier 3 minimum population fraction")
    dominant_min_fraction: float = Field(
        default=0.015, ge=0, le=1,
        description="dominant_accent: clusters at or above this fraction are always kept"
    )
    accent_saturation: float = Field(
        default=0.30, ge=0, le=1,
        description="dominant_accent: minimum saturation of an accent"
    )
    max_accents: int = Field(default=3, ge=0, description="dominant_accent: accents kept beyond the dominant colors")

    # Centroid path
    centroid_k: int = Field(default=32, ge=1, le=256, description="Initial number of k-means centroids")
    centroid_pop_threshold: float = Field(
        default=0.01, ge=0, le=1,
        description="Centroids holding less than this fraction of samples are dropped"
    )
    centroid_merge_threshold: float = Field(
        default=10, ge=0,
        description="Centroids whose floored plain CIE2000 distance is below this are merged"
    )
    random_state: int = Field(default=42, description="Seed for k-means++ initialization")

    # Full-color mode
    full_color_policy: Literal["quantize", "reject"] = Field(
        default=config.FULL_COLOR_POLICY,
        description="FullColor images are median-cut quantized, or rejected with an empty palette"
    )
    full_color_prefilter: bool = Field(
        default=True,
        description="Keep only saturated, near-white or near-black samples before quantizing"
    )

    # Design palette
    design_snap: bool = Field(
        default=False,
        description="Snap curated colors onto the configured design palette"
    )

    def distance_weights(self) -> DistanceWeights:
        return DistanceWeights(self.weight_lightness, self.weight_chroma, self.weight_hue)

    def tier_filter(self) -> TierPolicy:
        """Build the configured tier policy."""
        if self.tier_policy == "dominant_accent":
            return DominantAccentPolicy(
                dominant_min_fraction=self.dominant_min_fraction,
                accent_saturation=self.accent_saturation,
                max_accents=self.max_accents,
            )
        return ThreeTierPolicy(
            vibrant_saturation=self.vibrant_saturation,
            vibrant_min_fraction=self.vibrant_min_fraction,
            natural_saturation=self.natural_saturation,
            natural_min_fraction=self.natural_min_fraction,
            achromatic_min_fraction=self.achromatic_min_fraction,
        )
