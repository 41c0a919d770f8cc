"""Heatmap overlay layout: issue ordering, filtering and projected rectangles."""

from __future__ import annotations

from typing import Iterable, Optional

from uxscan.schemas.analysis import (
    AnalysisIssue,
    AnalysisResult,
    DisplayRect,
    OverlayItem,
    OverlayResponse,
    Severity,
)

from .projector import project

SEVERITY_RANK: dict[str, int] = {
    Severity.HIGH.value: 0,
    Severity.MEDIUM.value: 1,
    Severity.LOW.value: 2,
}

EMPTY_STATE_CHECKLIST: tuple[str, ...] = (
    "Check the heading hierarchy and the primary CTA.",
    "Make sure contrast meets accessibility guidelines.",
    "Reduce noise and secondary elements.",
)


def severity_rank(severity: str) -> int:
    # Unknown severities sort with "low".
    return SEVERITY_RANK.get(severity, SEVERITY_RANK[Severity.LOW.value])


def visible_issues(issues: Iterable[AnalysisIssue], high_only: bool = False) -> list[AnalysisIssue]:
    selected = [
        issue for issue in issues if not high_only or issue.severity == Severity.HIGH.value
    ]
    return sorted(selected, key=lambda issue: severity_rank(issue.severity))


def build_overlay(
    result: AnalysisResult,
    display: Optional[DisplayRect],
    high_only: bool = False,
) -> OverlayResponse:
    issues = visible_issues(result.issues, high_only)
    if not issues:
        return OverlayResponse(items=[], empty_state=list(EMPTY_STATE_CHECKLIST))

    items = [
        OverlayItem(
            issue_id=issue.id,
            severity=issue.severity,
            title=issue.title,
            rect=project(issue, display, result.image),
        )
        for issue in issues
    ]
    return OverlayResponse(items=items)
