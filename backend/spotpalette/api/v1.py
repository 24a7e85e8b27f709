"""
SpotPalette v1 API Routes
Implements /v1/palette and supporting routes.
"""
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from pydantic import ValidationError

from spotpalette.config import config
from spotpalette.schemas import (
    DesignColorEntry,
    DesignPaletteResponse,
    ErrorResponse,
    PaletteRequest,
    PaletteResponse,
)
from spotpalette.services.imaging import detect_mime_type, read_upload
from spotpalette.services.palette import PaletteOptions
from spotpalette.services.palette.design_palette import get_design_palette
from spotpalette.services.palette_api import handle_palette
from spotpalette.utils.metrics import get_metrics


router = APIRouter(prefix="/v1", tags=["Palette"])

PALETTE_ERRORS = {
    400: {"model": ErrorResponse, "description": "Image bytes could not be decoded"},
    413: {"model": ErrorResponse, "description": "Image exceeds the size limits"},
    415: {"model": ErrorResponse, "description": "Unsupported image format"},
}


def _request_bytes(body: PaletteRequest) -> bytes:
    try:
        return body.image_bytes()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/palette",
             response_model=PaletteResponse,
             responses=PALETTE_ERRORS,
             summary="Extract Palette",
             description="Classify an encoded image and extract its palette")
async def extract_palette_json(body: PaletteRequest) -> PaletteResponse:
    """
    Extract a palette from an image sent as JSON.

    The image goes in `data` (array of byte values) or `data_b64`, with its
    `mimetype`. Every pipeline threshold can be overridden in `options`.
    """
    return await handle_palette(_request_bytes(body), body.mimetype, body.options)


@router.post("/palette/design",
             response_model=PaletteResponse,
             responses=PALETTE_ERRORS,
             summary="Extract Design Palette",
             description="Extract a palette and snap it onto the design palette")
async def extract_design_palette(body: PaletteRequest) -> PaletteResponse:
    """Same input as /v1/palette; the response always carries design_matches."""
    return await handle_palette(_request_bytes(body), body.mimetype, body.options, force_design=True)


@router.post("/palette/upload",
             response_model=PaletteResponse,
             responses=PALETTE_ERRORS,
             summary="Extract Palette From Upload",
             description="Multipart variant of /v1/palette")
async def extract_palette_upload(
    file: UploadFile = File(..., description="Image file (PNG, JPEG or WebP)"),
    strategy: Optional[Literal["histogram", "centroid"]] = Query(None, description="Spot-color strategy"),
    num_colors: Optional[int] = Query(None, ge=0, le=256, description="Maximum palette size; 0 disables the cap"),
    tier_policy: Optional[Literal["three_tier", "dominant_accent"]] = Query(None, description="Tier filter policy"),
    stride_bytes: Optional[int] = Query(None, ge=4, description="Byte advance between samples (multiple of 4)"),
    noise_threshold: Optional[float] = Query(None, ge=0, description="Noise snapping threshold"),
    final_threshold: Optional[float] = Query(None, ge=0, description="Duplicate threshold for curation"),
    design_snap: bool = Query(False, description="Snap onto the design palette")
) -> PaletteResponse:
    """Extract a palette from a multipart upload with query-string options."""
    overrides = {
        "strategy": strategy,
        "num_colors": num_colors,
        "tier_policy": tier_policy,
        "stride_bytes": stride_bytes,
        "noise_threshold": noise_threshold,
        "final_threshold": final_threshold,
    }
    try:
        options = PaletteOptions(
            design_snap=design_snap,
            **{name: value for name, value in overrides.items() if value is not None}
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    file_bytes = await read_upload(file)
    mime_type = file.content_type
    if not mime_type or mime_type == "application/octet-stream":
        mime_type = detect_mime_type(file_bytes)
    return await handle_palette(file_bytes, mime_type, options)


@router.get("/design-palette",
            response_model=DesignPaletteResponse,
            summary="Design Palette",
            description="Configured design palette table")
async def design_palette() -> DesignPaletteResponse:
    """Return the design palette in table order."""
    return DesignPaletteResponse(
        colors=[DesignColorEntry(id=dc.id, hex=dc.hex) for dc in get_design_palette()]
    )


@router.get("/metrics",
            summary="Service Metrics",
            description="In-process counters and timing statistics")
async def metrics_summary() -> Dict[str, Any]:
    """Get the in-process metrics summary."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return get_metrics().get_summary()
