"""
SpotPalette

Spot-color palette extraction service: samples a decoded image, snaps
anti-aliasing noise onto dominant colors and returns a compact palette.
"""

__version__ = "1.0.0"
