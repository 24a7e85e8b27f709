"""
Design palette table.

The table is read-only for the life of the process. It is loaded once,
either from the built-in list below or from a JSON file named by
SPOTPALETTE_DESIGN_PALETTE_PATH, and handed to the curator by the caller.
"""
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from spotpalette.config import config
from .models import DesignColor


_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

DEFAULT_DESIGN_PALETTE: Tuple[DesignColor, ...] = (
    DesignColor("black", "#000000"),
    DesignColor("white", "#ffffff"),
    DesignColor("cool-gray", "#8a8d8f"),
    DesignColor("warm-gray", "#a59c94"),
    DesignColor("charcoal", "#3c3c3c"),
    DesignColor("silver", "#c8c9c7"),
    DesignColor("red", "#da291c"),
    DesignColor("dark-red", "#a50e1e"),
    DesignColor("maroon", "#600018"),
    DesignColor("pink", "#ec1f80"),
    DesignColor("light-pink", "#f38da9"),
    DesignColor("magenta", "#cb007a"),
    DesignColor("orange", "#ff7f27"),
    DesignColor("burnt-orange", "#e45c1a"),
    DesignColor("peach", "#fab6a4"),
    DesignColor("gold", "#f6aa09"),
    DesignColor("yellow", "#f9dd3b"),
    DesignColor("cream", "#fffabc"),
    DesignColor("tan", "#d6b594"),
    DesignColor("brown", "#684634"),
    DesignColor("olive", "#5a944a"),
    DesignColor("kelly-green", "#13a04b"),
    DesignColor("forest-green", "#1f4e2c"),
    DesignColor("lime", "#87ff5e"),
    DesignColor("teal", "#10aea6"),
    DesignColor("cyan", "#60f7f2"),
    DesignColor("sky-blue", "#7dc7ff"),
    DesignColor("royal-blue", "#28509e"),
    DesignColor("navy", "#1b2a4a"),
    DesignColor("lavender", "#b5aef1"),
    DesignColor("purple", "#780c99"),
)


def parse_design_palette(entries: List[dict]) -> Tuple[DesignColor, ...]:
    """
    Validate a list of {"id", "hex"} objects.

    Raises:
        ValueError: If an entry is malformed or an id repeats
    """
    if not isinstance(entries, list) or not entries:
        raise ValueError("Design palette must be a non-empty list")

    colors = []
    seen = set()
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or "id" not in entry or "hex" not in entry:
            raise ValueError(f"Design palette entry {position} must have 'id' and 'hex'")
        color_id = str(entry["id"])
        hex_code = str(entry["hex"])
        if not _HEX_RE.match(hex_code):
            raise ValueError(f"Design palette entry {color_id!r} has invalid hex {hex_code!r}")
        if color_id in seen:
            raise ValueError(f"Duplicate design palette id {color_id!r}")
        seen.add(color_id)
        colors.append(DesignColor(id=color_id, hex=hex_code.lower()))
    return tuple(colors)


def load_design_palette(path: Optional[str] = None) -> Tuple[DesignColor, ...]:
    """Load the design table from a JSON file, or return the built-in one."""
    if not path:
        return DEFAULT_DESIGN_PALETTE

    with Path(path).open("r", encoding="utf-8") as fh:
        colors = parse_design_palette(json.load(fh))
    logger.info(f"Loaded {len(colors)} design colors from {path}")
    return colors


@lru_cache(maxsize=1)
def get_design_palette() -> Tuple[DesignColor, ...]:
    """Process-wide design table, loaded on first use."""
    return load_design_palette(config.DESIGN_PALETTE_PATH)
