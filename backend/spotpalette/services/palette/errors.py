"""
Error kinds raised by the palette pipeline and its collaborators.
"""


class PaletteError(Exception):
    """Base class for palette pipeline failures."""


class DecodeError(PaletteError):
    """Image bytes could not be decoded into an RGBA buffer."""


class UnsupportedFormatError(PaletteError):
    """Mime type is not in the accepted set."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported image format: {mime_type}")


class ClusteringError(PaletteError):
    """K-means or quantizer failure on degenerate input.

    Recovered inside the pipeline; never surfaced to API callers.
    """


class ImageTooLargeError(PaletteError):
    """Decoded image exceeds the configured pixel budget."""
