"""Analysis result schemas: the canonical payload returned to the heatmap UI."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(StrEnum):
    HIERARCHY = "hierarchy"
    COPY = "copy"
    ACCESSIBILITY = "accessibility"
    FORMS = "forms"
    NAVIGATION = "navigation"
    VISUAL = "visual"
    CTA = "cta"
    LAYOUT = "layout"


class Platform(StrEnum):
    WEB = "web"
    MOBILE = "mobile"


class ScreenType(StrEnum):
    FORM = "form"
    CHECKOUT = "checkout"
    CATALOG = "catalog"
    PROMO = "promo"
    OTHER = "other"


class ImageDims(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class BBox(BaseModel):
    """Axis-aligned box in image pixel coordinates."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    w: int = Field(..., ge=0)
    h: int = Field(..., ge=0)


class AnalysisIssue(BaseModel):
    # Severity and category stay plain strings: externally produced results
    # pass content through untouched, even outside the known sets.
    model_config = ConfigDict(frozen=True)

    id: str
    bbox: BBox
    severity: str
    category: str
    title: str
    rationale: str
    recommendation: str


class AnalysisMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    low_quality_warning: Optional[bool] = None
    processing_ms: Optional[int] = None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    image: ImageDims
    issues: tuple[AnalysisIssue, ...] = ()
    meta: Optional[AnalysisMeta] = None


def is_low_quality(width: int, height: int) -> bool:
    return width < 640 or height < 400


# --- Overlay (presentation helpers) ---


class DisplayRect(BaseModel):
    """Size of the rendered image element, in display units."""

    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class ProjectedRect(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0
    visible: bool = True


class OverlayRequest(BaseModel):
    result: AnalysisResult
    display: Optional[DisplayRect] = None
    high_only: bool = False


class OverlayItem(BaseModel):
    issue_id: str
    severity: str
    title: str
    rect: ProjectedRect


class OverlayResponse(BaseModel):
    items: list[OverlayItem] = Field(default_factory=list)
    empty_state: list[str] = Field(default_factory=list)
