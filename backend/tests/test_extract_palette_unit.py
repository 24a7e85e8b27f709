"""
Unit tests for the extract_palette entry point.

Covers both image types, both spot-color strategies and the pipeline-wide
properties: determinism, empty input, population bounds and the cap.
"""
import itertools
import math

import pytest

from spotpalette.services.palette import (
    DesignColor,
    ImageType,
    PaletteOptions,
    PaletteResult,
    extract_palette,
)
from spotpalette.services.palette.colorspace import STANDARD_WEIGHTS, hex_distance, hex_to_rgb, lab_to_hex
from spotpalette.services.palette.errors import DecodeError


LOGO_RUNS = [
    ((255, 0, 0), 600),
    ((254, 1, 1), 5),      # anti-aliasing noise around the red
    ((0, 0, 255), 300),
    ((255, 255, 255), 100),
]


@pytest.fixture
def logo(make_rgba):
    return make_rgba(LOGO_RUNS)


@pytest.fixture
def dense():
    return PaletteOptions(stride_bytes=4)


class TestSpotColorHistogram:
    """Test the default histogram strategy end to end"""

    def test_logo_palette(self, logo, dense):
        pixels, width, height = logo
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense)

        assert result.colors == ["#ff0000", "#0000ff", "#ffffff"]
        assert [c.population for c in result.clusters] == [605, 300, 100]
        assert result.total_count == 1005
        assert result.image_type == ImageType.SPOT_COLOR
        assert result.strategy == "histogram"
        assert result.design_matches is None

    def test_default_stride_samples_every_tenth_pixel(self, logo):
        pixels, width, height = logo
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, PaletteOptions(strategy="histogram"))
        assert result.total_count == math.ceil(width / 10)

    def test_deterministic(self, logo, dense):
        pixels, width, height = logo
        first = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense)
        second = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense)
        assert first == second

    def test_population_bounded_by_total(self, logo, dense):
        pixels, width, height = logo
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense)
        assert sum(c.population for c in result.clusters) <= result.total_count
        assert all(c.population <= result.total_count for c in result.clusters)

    def test_no_near_duplicates(self, make_rgba, dense):
        runs = [((255, 0, 0), 300), ((235, 20, 20), 200), ((0, 0, 255), 150),
                ((20, 20, 230), 120), ((255, 255, 255), 100), ((245, 245, 245), 90)]
        pixels, width, height = make_rgba(runs)
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense)
        for a, b in itertools.combinations(result.colors, 2):
            assert math.floor(hex_distance(a, b)) > dense.final_threshold

    def test_cap_keeps_most_dominant(self, logo):
        pixels, width, height = logo
        uncapped = extract_palette(pixels, width, height, ImageType.SPOT_COLOR,
                                   PaletteOptions(stride_bytes=4, num_colors=0))
        capped = extract_palette(pixels, width, height, ImageType.SPOT_COLOR,
                                 PaletteOptions(stride_bytes=4, num_colors=2))
        assert capped.colors == uncapped.colors[:2]

    def test_dominant_accent_policy(self, make_rgba):
        runs = [((255, 255, 255), 900), ((0, 0, 0), 90), ((255, 0, 0), 5), ((0, 160, 0), 4),
                ((0, 0, 255), 3), ((255, 200, 0), 2)]
        pixels, width, height = make_rgba(runs)
        options = PaletteOptions(stride_bytes=4, tier_policy="dominant_accent")
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, options)
        assert result.colors == ["#ffffff", "#000000", "#ff0000", "#00a000", "#0000ff"]


class TestSpotColorCentroid:
    """Test the centroid strategy end to end"""

    def test_logo_palette(self, make_rgba):
        pixels, width, height = make_rgba([((255, 0, 0), 700), ((0, 0, 255), 300)])
        options = PaletteOptions(strategy="centroid", stride_bytes=4)
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, options)
        assert result.strategy == "centroid"
        assert result.colors == ["#ff0000", "#0000ff"]
        assert result.total_count == 1000

    def test_chained_grays_collapse(self, make_rgba):
        runs = [(hex_to_rgb(lab_to_hex([lightness, 0.0, 0.0])), count)
                for lightness, count in ((50.0, 100), (63.0, 99), (58.0, 98))]
        pixels, width, height = make_rgba(runs)
        options = PaletteOptions(strategy="centroid", stride_bytes=4)
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, options)
        assert len(result.colors) == 1
        assert result.clusters[0].population == 297

    def test_no_near_duplicates(self, make_rgba):
        runs = [((255, 0, 0), 300), ((235, 20, 20), 200), ((0, 0, 255), 150),
                ((20, 20, 230), 120), ((255, 255, 255), 100), ((245, 245, 245), 90)]
        pixels, width, height = make_rgba(runs)
        options = PaletteOptions(strategy="centroid", stride_bytes=4)
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, options)
        assert result.colors
        for a, b in itertools.combinations(result.colors, 2):
            # hex rounding can shave a fraction off the LAB-space distance
            assert hex_distance(a, b, STANDARD_WEIGHTS) > options.centroid_merge_threshold - 1


class TestFullColor:
    """Test FullColor mode"""

    def test_quantized(self, noise_array):
        height, width = noise_array.shape[:2]
        result = extract_palette(noise_array.tobytes(), width, height, ImageType.FULL_COLOR,
                                 PaletteOptions(stride_bytes=4))
        assert result.strategy == "median_cut"
        assert result.image_type == ImageType.FULL_COLOR
        assert 0 < len(result.colors) <= 12
        assert sum(c.population for c in result.clusters) <= result.total_count

    def test_reject_policy(self, noise_array):
        height, width = noise_array.shape[:2]
        result = extract_palette(noise_array.tobytes(), width, height, ImageType.FULL_COLOR,
                                 PaletteOptions(stride_bytes=4, full_color_policy="reject"))
        assert result.colors == []
        assert result.total_count == width * height

    def test_mode_accepts_string(self, logo, dense):
        pixels, width, height = logo
        result = extract_palette(pixels, width, height, "FullColor", dense)
        assert result.image_type == ImageType.FULL_COLOR


class TestEmptyAndInvalid:
    """Test empty and malformed input"""

    @pytest.mark.parametrize("mode", [ImageType.SPOT_COLOR, ImageType.FULL_COLOR])
    @pytest.mark.parametrize("strategy", ["histogram", "centroid"])
    def test_transparent_buffer_is_empty(self, make_rgba, mode, strategy):
        pixels, width, height = make_rgba([((255, 0, 0), 500)], alpha=100)
        result = extract_palette(pixels, width, height, mode, PaletteOptions(strategy=strategy))
        assert result == PaletteResult.empty(mode, result.strategy)
        assert result.is_empty

    def test_zero_size_image(self):
        result = extract_palette(b"", 0, 0)
        assert result.colors == []
        assert result.total_count == 0

    @pytest.mark.parametrize("mode", [ImageType.SPOT_COLOR, ImageType.FULL_COLOR])
    def test_short_buffer_raises(self, mode):
        with pytest.raises(DecodeError):
            extract_palette(b"\xff" * 8, 4, 4, mode, PaletteOptions(strategy="histogram", stride_bytes=4))

    def test_short_buffer_on_centroid_path_is_empty(self):
        options = PaletteOptions(strategy="centroid", stride_bytes=4)
        result = extract_palette(b"\xff" * 8, 4, 4, ImageType.SPOT_COLOR, options)
        assert result == PaletteResult.empty(ImageType.SPOT_COLOR, "centroid")

    def test_nothing_passes_filters(self, make_rgba):
        """Achromatic colors under the achromatic floor: normal empty palette."""
        pixels, width, height = make_rgba([((0, 0, 0), 50), ((255, 255, 255), 50)])
        options = PaletteOptions(stride_bytes=4, achromatic_min_fraction=0.6)
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, options)
        assert result.colors == []
        assert result.total_count == 100


class TestDesignSnap:
    """Test the optional design palette snap"""

    def test_design_matches(self, logo, dense):
        pixels, width, height = logo
        design = [DesignColor("crimson", "#e00000"), DesignColor("navy", "#000080"), DesignColor("snow", "#fafafa")]
        result = extract_palette(pixels, width, height, ImageType.SPOT_COLOR, dense, design_colors=design)

        assert [(m.hex, m.count) for m in result.design_matches] == [
            ("#e00000", 605), ("#000080", 300), ("#fafafa", 100)
        ]
        assert result.design_matches[0].percent == round(605 / 1005 * 100, 2)
        # Curated colors are kept alongside the snap
        assert result.colors == ["#ff0000", "#0000ff", "#ffffff"]
