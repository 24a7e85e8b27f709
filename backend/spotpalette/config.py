"""
SpotPalette Configuration
Manages environment variables and defaults for the palette service.
"""
import os
from typing import Literal, Optional


class Config:
    """Configuration class for SpotPalette services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("SPOTPALETTE_MAX_FILE_MB", "10"))
    MAX_PIXELS: int = int(os.environ.get("SPOTPALETTE_MAX_PIXELS", str(4096 * 4096)))

    # Logging
    LOG_LEVEL: str = os.environ.get("SPOTPALETTE_LOG_LEVEL", "INFO")

    # Pipeline defaults
    STRATEGY_DEFAULT: Literal["histogram", "centroid"] = os.environ.get("SPOTPALETTE_STRATEGY", "histogram")
    TIER_POLICY_DEFAULT: Literal["three_tier", "dominant_accent"] = os.environ.get(
        "SPOTPALETTE_TIER_POLICY", "three_tier"
    )
    FULL_COLOR_POLICY: Literal["quantize", "reject"] = os.environ.get("SPOTPALETTE_FULL_COLOR_POLICY", "quantize")
    NUM_COLORS_DEFAULT: int = int(os.environ.get("SPOTPALETTE_NUM_COLORS", "12"))

    # Design palette table (JSON list of {"id", "hex"}); built-in table when unset
    DESIGN_PALETTE_PATH: Optional[str] = os.environ.get("SPOTPALETTE_DESIGN_PALETTE_PATH")

    # Illustration classifier thresholds
    UNIQUE_COLOR_RATIO_MAX: float = float(os.environ.get("SPOTPALETTE_UNIQUE_COLOR_RATIO_MAX", "0.25"))
    ENTROPY_MAX: float = float(os.environ.get("SPOTPALETTE_ENTROPY_MAX", "6.0"))

    # Metrics
    METRICS_ENABLED: bool = bool(int(os.environ.get("SPOTPALETTE_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]


# Global config instance
config = Config()
