"""
Palette API Orchestrator

Coordinates a palette request from encoded bytes to response: size checks,
decoding, classification, extraction and the optional design snap.
"""

import asyncio
import time
from typing import Optional

from fastapi import HTTPException

from spotpalette.config import config
from spotpalette.schemas import ClusterEntry, DesignMatchEntry, PaletteResponse
from spotpalette.services.classifier import classify_image
from spotpalette.services.imaging import check_payload_size, decode_image
from spotpalette.services.palette import (
    DecodeError,
    ImageTooLargeError,
    PaletteOptions,
    UnsupportedFormatError,
    extract_palette,
)
from spotpalette.services.palette.design_palette import get_design_palette
from spotpalette.utils.ids import generate_request_id
from spotpalette.utils.logging import get_logger
from spotpalette.utils.metrics import get_metrics


logger = get_logger()


def _record_failure(error_type: str) -> None:
    if config.METRICS_ENABLED:
        metrics = get_metrics()
        metrics.increment_counter("palette_failed_total")
        metrics.increment_failure_count(error_type)


async def handle_palette(
    file_bytes: bytes,
    mime_type: Optional[str],
    options: Optional[PaletteOptions] = None,
    force_design: bool = False,
) -> PaletteResponse:
    """
    Run the palette pipeline for one request.

    Args:
        file_bytes: Encoded image
        mime_type: Declared mime type
        options: Extraction options, defaults when omitted
        force_design: Snap onto the design palette regardless of options

    Returns:
        PaletteResponse

    Raises:
        HTTPException: 415 unsupported format, 413 oversize, 400 undecodable
    """
    request_id = generate_request_id("pal")
    start_time = time.time()
    options = options or PaletteOptions()

    logger.info("Starting palette extraction", extra={"request_id": request_id, "mimetype": mime_type})

    try:
        check_payload_size(file_bytes)
        image = await asyncio.to_thread(decode_image, file_bytes, mime_type)
    except UnsupportedFormatError as e:
        _record_failure("unsupported_format")
        logger.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )
    except ImageTooLargeError as e:
        _record_failure("too_large")
        logger.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=413, detail=str(e))
    except DecodeError as e:
        _record_failure("decode")
        logger.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        _record_failure("too_large")
        raise
    decode_time = time.time() - start_time

    image_type = await classify_image(image)
    design_colors = get_design_palette() if (force_design or options.design_snap) else None

    result = await asyncio.to_thread(
        extract_palette, image.rgba, image.width, image.height, image_type, options, design_colors
    )
    total_time = time.time() - start_time

    design_matches = None
    if design_colors is not None:
        design_matches = [
            DesignMatchEntry(hex_code=m.hex, count=m.count, percent=m.percent)
            for m in (result.design_matches or [])
        ]

    response = PaletteResponse(
        request_id=request_id,
        image_type=result.image_type.value,
        strategy=result.strategy,
        palette=result.colors,
        clusters=[ClusterEntry(hex=c.hex, population=c.population) for c in result.clusters],
        total_count=result.total_count,
        width=image.width,
        height=image.height,
        design_matches=design_matches,
        processing_time_ms=round(total_time * 1000, 2),
    )

    logger.info("Palette extraction completed successfully",
                extra={
                    "request_id": request_id,
                    "dims": f"{image.width}x{image.height}",
                    "image_type": result.image_type.value,
                    "strategy": result.strategy,
                    "colors": len(result.colors),
                    "samples": result.total_count,
                    "ms_decode": decode_time * 1000,
                    "ms_total": total_time * 1000,
                    "result": "ok"
                })

    if config.METRICS_ENABLED:
        metrics = get_metrics()
        metrics.increment_counter("palette_requests_total")
        metrics.increment_image_type(result.image_type.value)
        metrics.increment_counter(f"palette_strategy_total_{result.strategy}")
        metrics.record_timing("palette_extract", total_time * 1000)
        metrics.record_timing("decode", decode_time * 1000)
        metrics.record_palette_size(len(result.colors))

    return response
