"""
SpotPalette API Schemas
Pydantic models for palette request/response validation.
"""
import base64
import binascii
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, model_validator

from spotpalette.services.palette.options import PaletteOptions


class PaletteRequest(BaseModel):
    """JSON palette request carrying the encoded image."""
    data: Optional[List[Annotated[int, Field(ge=0, le=255)]]] = Field(
        None,
        description="Encoded image bytes as an array of integers 0-255"
    )
    data_b64: Optional[str] = Field(
        None,
        description="Encoded image bytes as base64 (a data URL prefix is allowed)"
    )
    mimetype: str = Field(
        ...,
        min_length=1,
        description="Mime type of the encoded image: image/png, image/jpeg or image/webp"
    )
    options: Optional[PaletteOptions] = Field(None, description="Extraction options; defaults when omitted")

    @model_validator(mode="after")
    def check_single_payload(self):
        if (self.data is None) == (self.data_b64 is None):
            raise ValueError("Provide exactly one of 'data' or 'data_b64'")
        return self

    def image_bytes(self) -> bytes:
        """Raw encoded bytes of the request image."""
        if self.data is not None:
            return bytes(self.data)

        b64_data = self.data_b64
        # Remove data URL prefix if present
        if ',' in b64_data:
            b64_data = b64_data.split(',', 1)[1]
        try:
            return base64.b64decode(b64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data: {str(e)}") from e


class ClusterEntry(BaseModel):
    """Palette color with the number of samples behind it."""
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Color key in format #rrggbb")
    population: int = Field(..., ge=0, description="Number of samples represented by this color")


class DesignMatchEntry(BaseModel):
    """Design color with the aggregated population snapped onto it."""
    hex_code: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Design color hex")
    count: int = Field(..., ge=0, description="Aggregated sample count")
    percent: float = Field(..., ge=0.0, le=100.0, description="Share of all samples, rounded to 2 places")


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    request_id: str = Field(..., description="Request ID for tracing")
    image_type: str = Field(..., description="'SpotColor' or 'FullColor'")
    strategy: str = Field(..., description="Strategy that produced the palette")
    palette: List[str] = Field(..., description="Hex colors, most dominant first")
    clusters: List[ClusterEntry] = Field(..., description="Palette colors with populations")
    total_count: int = Field(..., ge=0, description="Number of opaque samples")
    width: int = Field(..., description="Decoded image width in pixels")
    height: int = Field(..., description="Decoded image height in pixels")
    design_matches: Optional[List[DesignMatchEntry]] = Field(
        None,
        description="Design palette snap, present when requested"
    )
    processing_time_ms: float = Field(..., description="Processing time in milliseconds")


class DesignColorEntry(BaseModel):
    """Entry of the design palette table."""
    id: str = Field(..., description="Design color identifier")
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Design color hex")


class DesignPaletteResponse(BaseModel):
    """Configured design palette."""
    colors: List[DesignColorEntry] = Field(..., description="Design colors in table order")


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("spotpalette", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")
