"""Map image-space boxes onto the rendered image element."""

from __future__ import annotations

from typing import Optional, Union

from uxscan.schemas.analysis import AnalysisIssue, BBox, DisplayRect, ImageDims, ProjectedRect

INERT_RECT = ProjectedRect(left=0.0, top=0.0, width=0.0, height=0.0, visible=False)


def project(
    issue: Union[AnalysisIssue, BBox],
    display: Optional[DisplayRect],
    reference: ImageDims,
) -> ProjectedRect:
    """Project *issue*'s bbox into display units.

    *reference* must be the ``image`` block of the result the issue came from,
    not the pixel size of whatever element renders it. Without a usable
    display target the inert rectangle is returned.
    """
    if display is None or display.width <= 0 or display.height <= 0:
        return INERT_RECT

    bbox = issue.bbox if isinstance(issue, AnalysisIssue) else issue
    scale_x = display.width / reference.width
    scale_y = display.height / reference.height
    return ProjectedRect(
        left=bbox.x * scale_x,
        top=bbox.y * scale_y,
        width=bbox.w * scale_x,
        height=bbox.h * scale_y,
    )
