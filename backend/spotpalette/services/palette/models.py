"""
Value types shared by the palette pipeline stages.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ImageType(str, Enum):
    """Extraction mode chosen by the illustration classifier."""
    FULL_COLOR = "FullColor"
    SPOT_COLOR = "SpotColor"


@dataclass(frozen=True)
class DesignColor:
    """Entry of the fixed reference palette."""
    id: str
    hex: str


@dataclass
class ColorCluster:
    """A representative color and the number of samples it stands for."""
    hex: str
    population: int


@dataclass
class DesignMatch:
    """A design color with the aggregated population snapped onto it."""
    hex: str
    count: int
    percent: float


@dataclass
class Histogram:
    """Exact-match color counts keyed by lowercase #rrggbb."""
    counts: Dict[str, int]
    total_count: int

    def sorted_entries(self) -> List[ColorCluster]:
        """Entries by count descending, ties broken by key ascending."""
        ordered = sorted(self.counts.items(), key=lambda item: (-item[1], item[0]))
        return [ColorCluster(hex=key, population=count) for key, count in ordered]


@dataclass
class PaletteResult:
    """Output of a single extraction call."""
    colors: List[str]
    clusters: List[ColorCluster]
    total_count: int
    image_type: ImageType
    strategy: str
    design_matches: Optional[List[DesignMatch]] = None

    @property
    def is_empty(self) -> bool:
        return not self.colors

    @classmethod
    def empty(cls, image_type: ImageType, strategy: str, total_count: int = 0) -> "PaletteResult":
        return cls(colors=[], clusters=[], total_count=total_count, image_type=image_type, strategy=strategy)
