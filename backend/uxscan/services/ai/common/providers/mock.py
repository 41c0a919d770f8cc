"""Mock provider — canned analysis for tests and local demos."""

from __future__ import annotations

import json
import time

from .base import BaseProvider, ProviderResult

CANNED_ANALYSIS = {
    "image": {"width": 1440, "height": 900},
    "issues": [
        {
            "id": "iss_001",
            "bbox": {"x": 120, "y": 240, "w": 320, "h": 120},
            "severity": "high",
            "category": "cta",
            "title": "Primary CTA lacks visual priority",
            "rationale": "The CTA blends with surrounding elements and loses attention.",
            "recommendation": "Increase contrast and size to make the CTA dominant.",
        },
        {
            "id": "iss_002",
            "bbox": {"x": 40, "y": 80, "w": 240, "h": 64},
            "severity": "medium",
            "category": "hierarchy",
            "title": "Headline hierarchy is unclear",
            "rationale": "Headline weight is similar to body text, reducing scanability.",
            "recommendation": "Boost font size/weight for the primary headline.",
        },
    ],
    "meta": {"low_quality_warning": False, "processing_ms": 1820},
}


class MockProvider(BaseProvider):
    name = "mock"

    async def analyze(
        self,
        prompt: str,
        image: bytes,
        content_type: str,
        *,
        model: str = "",
        temperature: float = 0.2,
        max_tokens: int = 1500,
        timeout_seconds: float = 20.0,
    ) -> ProviderResult:
        t0 = time.monotonic()
        text = json.dumps(CANNED_ANALYSIS)
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-vision-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
