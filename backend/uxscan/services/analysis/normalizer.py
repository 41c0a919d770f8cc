"""Coerce an untrusted (LLM-produced) analysis payload into an ``AnalysisResult``.

Nothing is rejected: every input issue survives, in order, with its geometry
forced inside the image. Content fields are passed through as given.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from uxscan.schemas.analysis import (
    AnalysisIssue,
    AnalysisMeta,
    AnalysisResult,
    BBox,
    ImageDims,
    is_low_quality,
)

logger = logging.getLogger(__name__)

MIN_BOX_SIDE = 10
DEFAULT_BOX_SIDE = 40

# Only used when a field is absent, so the issue can still be rendered.
CONTENT_DEFAULTS: dict[str, str] = {
    "severity": "medium",
    "category": "visual",
    "title": "Untitled issue",
    "rationale": "No rationale provided.",
    "recommendation": "No recommendation provided.",
}


def _number(value: Any, default: float, minimum: float) -> float:
    """Numeric value of *value*; *default* if absent, *minimum* if unusable."""
    if value is None:
        return default
    if isinstance(value, bool):
        return minimum
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return minimum
    if not math.isfinite(number):
        return minimum
    return number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _side(value: Any, start: int, limit: int) -> int:
    upper = limit - start
    if upper < MIN_BOX_SIDE:
        return upper
    return math.floor(_clamp(_number(value, DEFAULT_BOX_SIDE, MIN_BOX_SIDE), MIN_BOX_SIDE, upper))


def _normalize_bbox(raw_bbox: Any, width: int, height: int) -> BBox:
    bbox = raw_bbox if isinstance(raw_bbox, dict) else {}
    x = math.floor(_clamp(_number(bbox.get("x"), 0, 0), 0, width - 1))
    y = math.floor(_clamp(_number(bbox.get("y"), 0, 0), 0, height - 1))
    return BBox(
        x=x,
        y=y,
        w=_side(bbox.get("w"), x, width),
        h=_side(bbox.get("h"), y, height),
    )


def _text(value: Any, field: str) -> str:
    if value is None:
        return CONTENT_DEFAULTS[field]
    if isinstance(value, str):
        return value
    return str(value)


def _normalize_issue(raw_issue: Any, position: int, width: int, height: int) -> AnalysisIssue:
    issue = raw_issue if isinstance(raw_issue, dict) else {}
    raw_id = issue.get("id")
    issue_id = str(raw_id) if raw_id not in (None, "") else f"iss_{position + 1}"
    return AnalysisIssue(
        id=issue_id,
        bbox=_normalize_bbox(issue.get("bbox"), width, height),
        **{field: _text(issue.get(field), field) for field in CONTENT_DEFAULTS},
    )


def _processing_ms(raw_meta: Any) -> Optional[int]:
    if not isinstance(raw_meta, dict) or raw_meta.get("processing_ms") is None:
        return None
    value = _number(raw_meta.get("processing_ms"), 0, -1)
    if value < 0:
        return None
    return int(value)


def normalize(raw: Any, width: int, height: int) -> AnalysisResult:
    """Normalize *raw* against caller-supplied image dimensions.

    *width* and *height* must already be validated positive integers; the
    payload's own ``image`` block is ignored.
    """
    payload = raw if isinstance(raw, dict) else {}
    raw_issues = payload.get("issues")
    if not isinstance(raw_issues, list):
        if raw_issues is not None:
            logger.warning("Ignoring non-list issues payload of type %s", type(raw_issues).__name__)
        raw_issues = []

    issues = tuple(
        _normalize_issue(raw_issue, position, width, height)
        for position, raw_issue in enumerate(raw_issues)
    )
    meta = AnalysisMeta(
        low_quality_warning=is_low_quality(width, height),
        processing_ms=_processing_ms(payload.get("meta")),
    )
    return AnalysisResult(
        image=ImageDims(width=width, height=height),
        issues=issues,
        meta=meta,
    )
