"""
Unit tests for saturation/frequency tier policies.
"""
import pytest

from spotpalette.services.palette.colorspace import hex_saturation
from spotpalette.services.palette.models import ColorCluster
from spotpalette.services.palette.options import PaletteOptions
from spotpalette.services.palette.tiers import DominantAccentPolicy, ThreeTierPolicy, filter_tiers


# HSL saturation close to 0.5
RED_HALF = "#c04040"
GREEN_HALF = "#40c040"
BLUE_HALF = "#4040c0"
# Saturation about 0.2 and 0.04
MUTED_RED = "#966464"
NEAR_GRAY = "#7d7d87"


class TestThreeTierPolicy:
    """Test the default three-tier policy"""

    def test_fixture_saturations(self):
        for hex_color in (RED_HALF, GREEN_HALF, BLUE_HALF):
            assert hex_saturation(hex_color) == pytest.approx(0.5, abs=0.01)
        assert hex_saturation(MUTED_RED) == pytest.approx(0.2, abs=0.01)
        assert hex_saturation(NEAR_GRAY) < 0.10

    def test_ninety_nine_one_all_saturated(self):
        """90/9/1% at saturation 0.5: the 1% color survives via tier 1."""
        clusters = [
            ColorCluster(RED_HALF, 900),
            ColorCluster(GREEN_HALF, 90),
            ColorCluster(BLUE_HALF, 10),
        ]
        kept = filter_tiers(clusters, 1000, ThreeTierPolicy())
        assert [c.hex for c in kept] == [RED_HALF, GREEN_HALF, BLUE_HALF]
        assert ThreeTierPolicy().tier_of(clusters[2], 1000) == 1

    def test_one_percent_low_saturation_is_dropped(self):
        """Below tier 1 and tier 2 saturation, 1% is under the 1.5% achromatic floor."""
        clusters = [
            ColorCluster(RED_HALF, 900),
            ColorCluster(GREEN_HALF, 90),
            ColorCluster(NEAR_GRAY, 10),
        ]
        kept = filter_tiers(clusters, 1000)
        assert [c.hex for c in kept] == [RED_HALF, GREEN_HALF]

    def test_one_percent_muted_kept_by_tier_two(self):
        cluster = ColorCluster(MUTED_RED, 10)
        assert ThreeTierPolicy().tier_of(cluster, 1000) == 2

    def test_tiny_vivid_accent_kept(self):
        """0.01% of a vivid color is enough for tier 1."""
        assert ThreeTierPolicy().tier_of(ColorCluster("#ff0000", 1), 10000) == 1
        assert ThreeTierPolicy().tier_of(ColorCluster("#ff0000", 1), 20000) is None

    def test_achromatic_needs_major_share(self):
        policy = ThreeTierPolicy()
        assert policy.tier_of(ColorCluster("#ffffff", 15), 1000) == 3
        assert policy.tier_of(ColorCluster("#ffffff", 14), 1000) is None

    def test_thresholds_overridable(self):
        policy = ThreeTierPolicy(achromatic_min_fraction=0.01)
        assert policy.tier_of(ColorCluster("#ffffff", 10), 1000) == 3

    def test_zero_total(self):
        assert filter_tiers([ColorCluster("#ff0000", 1)], 0) == []


class TestDominantAccentPolicy:
    """Test the dominant + accent policy"""

    def test_keeps_dominant_regardless_of_saturation(self):
        clusters = [ColorCluster("#ffffff", 500), ColorCluster("#000000", 20)]
        kept = filter_tiers(clusters, 1000, DominantAccentPolicy())
        assert [c.hex for c in kept] == ["#ffffff", "#000000"]

    def test_accents_limited_and_ranked_by_population(self):
        clusters = [
            ColorCluster("#ffffff", 900),
            ColorCluster("#ff0000", 5),
            ColorCluster("#00ff00", 9),
            ColorCluster("#0000ff", 7),
            ColorCluster("#ffff00", 3),
            ColorCluster("#808080", 10),
        ]
        kept = filter_tiers(clusters, 1000, DominantAccentPolicy())
        assert [c.hex for c in kept] == ["#ffffff", "#00ff00", "#0000ff", "#ff0000"]

    def test_low_saturation_accent_rejected(self):
        clusters = [ColorCluster("#ffffff", 990), ColorCluster(MUTED_RED, 10)]
        kept = filter_tiers(clusters, 1000, DominantAccentPolicy())
        assert [c.hex for c in kept] == ["#ffffff"]

    def test_max_accents_zero(self):
        clusters = [ColorCluster("#ffffff", 990), ColorCluster("#ff0000", 10)]
        kept = filter_tiers(clusters, 1000, DominantAccentPolicy(max_accents=0))
        assert [c.hex for c in kept] == ["#ffffff"]


class TestPolicyFromOptions:
    """Test selecting the policy by name"""

    def test_default_is_three_tier(self):
        assert isinstance(PaletteOptions(tier_policy="three_tier").tier_filter(), ThreeTierPolicy)

    def test_dominant_accent_with_overrides(self):
        policy = PaletteOptions(tier_policy="dominant_accent", max_accents=1, accent_saturation=0.5).tier_filter()
        assert policy == DominantAccentPolicy(dominant_min_fraction=0.015, accent_saturation=0.5, max_accents=1)
