"""Issue templates used when synthesizing a fallback analysis."""

from __future__ import annotations

from dataclasses import dataclass

from uxscan.schemas.analysis import Category


@dataclass(frozen=True)
class IssueTemplate:
    category: Category
    title: str
    rationale: str
    recommendation: str


ISSUE_TEMPLATES: tuple[IssueTemplate, ...] = (
    IssueTemplate(
        category=Category.CTA,
        title="Primary CTA lacks visual priority",
        rationale="The CTA blends with surrounding elements and loses attention.",
        recommendation="Increase contrast and size to make the CTA dominant.",
    ),
    IssueTemplate(
        category=Category.HIERARCHY,
        title="Headline hierarchy is unclear",
        rationale="Headline weight is similar to body text, reducing scanability.",
        recommendation="Boost font size/weight for the primary headline.",
    ),
    IssueTemplate(
        category=Category.ACCESSIBILITY,
        title="Low text contrast",
        rationale="Text on this background is below recommended contrast and is hard to read.",
        recommendation="Raise the contrast ratio to at least 4.5:1 for body text.",
    ),
    IssueTemplate(
        category=Category.FORMS,
        title="Form fields lack visible labels",
        rationale="Placeholder-only fields lose their meaning once the user starts typing.",
        recommendation="Add persistent labels above each input.",
    ),
    IssueTemplate(
        category=Category.NAVIGATION,
        title="Navigation items compete for attention",
        rationale="Too many items of equal weight make the main path hard to find.",
        recommendation="Group secondary links and highlight the current section.",
    ),
    IssueTemplate(
        category=Category.COPY,
        title="Copy is vague about the benefit",
        rationale="Generic wording does not explain what the user gets from acting.",
        recommendation="State the concrete outcome in the headline or button label.",
    ),
    IssueTemplate(
        category=Category.VISUAL,
        title="Visual noise around key content",
        rationale="Decorative elements pull focus away from the main task.",
        recommendation="Remove or mute secondary decoration near the focal area.",
    ),
    IssueTemplate(
        category=Category.LAYOUT,
        title="Inconsistent spacing breaks grouping",
        rationale="Uneven gaps make related elements look unrelated.",
        recommendation="Align blocks to a spacing scale and tighten related groups.",
    ),
)
