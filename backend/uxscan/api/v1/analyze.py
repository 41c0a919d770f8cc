"""Screenshot analysis endpoints: upload analysis and overlay layout."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile

from uxscan.core.config import get_settings
from uxscan.core.image_processing import ImageValidationError, measure_image, validate_upload
from uxscan.schemas.analysis import (
    AnalysisResult,
    OverlayRequest,
    OverlayResponse,
    Platform,
    ScreenType,
)
from uxscan.services.analysis.overlay import build_overlay
from uxscan.services.analysis.service import AnalysisRequest, analyze_screenshot

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes:
    # One extra byte is enough to tell "too large" apart from "exactly at the limit".
    return await file.read(max_bytes + 1)


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    summary="Analyze a UI screenshot and return anchored UX issues",
)
async def analyze_endpoint(
    response: Response,
    file: Optional[UploadFile] = File(None),
    platform: Platform = Form(...),
    screen_type: ScreenType = Form(...),
    width: Optional[int] = Form(None, gt=0),
    height: Optional[int] = Form(None, gt=0),
    override_provider: Optional[str] = Form(None),
    override_model: Optional[str] = Form(None),
):
    settings = get_settings()

    if (width is None) != (height is None):
        raise HTTPException(422, "width and height must be supplied together")

    content = await _read_limited(file, settings.max_upload_bytes) if file is not None else None
    try:
        validate_upload(
            content,
            file.content_type if file is not None else None,
            allowed_types=settings.allowed_image_types,
            max_bytes=settings.max_upload_bytes,
        )
        info = measure_image(content, file.filename)
    except ImageValidationError as exc:
        raise HTTPException(400, str(exc)) from exc

    if width is not None and (width, height) != (info.width, info.height):
        logger.info(
            "Client-declared size %dx%d differs from decoded %dx%d for %s",
            width,
            height,
            info.width,
            info.height,
            file.filename,
        )

    request = AnalysisRequest(
        image=content,
        content_type=info.content_type,
        file_name=file.filename or "",
        width=width if width is not None else info.width,
        height=height if height is not None else info.height,
        platform=platform.value,
        screen_type=screen_type.value,
    )
    outcome = await analyze_screenshot(
        request,
        override_provider=override_provider,
        override_model=override_model,
    )

    response.headers["X-Analysis-Source"] = outcome.source
    response.headers["X-Analysis-Provider"] = outcome.provider
    return outcome.result


@router.post(
    "/overlay",
    response_model=OverlayResponse,
    summary="Lay out heatmap overlay rectangles for a rendered result",
)
def overlay_endpoint(body: OverlayRequest):
    return build_overlay(body.result, body.display, high_only=body.high_only)
