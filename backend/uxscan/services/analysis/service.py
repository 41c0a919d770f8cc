"""Screenshot analysis: external vision provider with deterministic fallback.

* An allowlisted, keyed provider is tried with budget-based retry.
* Its JSON output is normalized against the measured image size.
* Anything else (mock provider, HTTP errors, timeouts, unparseable or
  schema-violating output) falls back to the local synthesizer, seeded from
  the upload's attributes so the same file gives the same result.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from uxscan.core.config import get_settings
from uxscan.schemas.analysis import AnalysisMeta, AnalysisResult, Category

from ..ai.common import router as ai_router
from ..ai.common.json_tools import extract_json_object
from ..ai.common.providers import MockProvider
from .normalizer import normalize
from .prng import derive_seed
from .synthesizer import synthesize_result

logger = logging.getLogger(__name__)

SOURCE_EXTERNAL = "external"
SOURCE_SYNTHESIZED = "synthesized"

ANALYSIS_PROMPT_TEMPLATE = (
    "You are a senior UX reviewer. The attached image is a {platform} screenshot "
    "of a {screen_type} screen, {width}x{height} pixels.\n"
    "Find the most important UX problems. Return ONLY a JSON object:\n"
    '{{"issues": [{{"id": "iss_1", "bbox": {{"x": 0, "y": 0, "w": 0, "h": 0}}, '
    '"severity": "high|medium|low", "category": "{categories}", '
    '"title": "...", "rationale": "...", "recommendation": "..."}}]}}\n'
    "bbox is in image pixels with the origin at the top-left corner. "
    "Return an empty issues array if the screen has no notable problems."
)


class ExternalAnalysisUnavailable(Exception):
    """The provider answered, but not with a usable analysis."""


@dataclass(frozen=True)
class AnalysisRequest:
    image: bytes
    content_type: str
    file_name: str
    width: int
    height: int
    platform: str
    screen_type: str

    @property
    def file_size(self) -> int:
        return len(self.image)


@dataclass(frozen=True)
class AnalysisOutcome:
    result: AnalysisResult
    source: str
    provider: str
    model: str
    attempts: int


def build_prompt(request: AnalysisRequest) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        platform=request.platform,
        screen_type=request.screen_type,
        width=request.width,
        height=request.height,
        categories="|".join(c.value for c in Category),
    )


def _parse_payload(raw_text: str) -> dict:
    payload = extract_json_object(raw_text)
    if payload is None:
        raise ExternalAnalysisUnavailable("No JSON object in response")
    if not isinstance(payload.get("issues"), list):
        raise ExternalAnalysisUnavailable("Response has no issues array")
    return payload


def _synthesized(request: AnalysisRequest, provider: str, model: str, attempts: int) -> AnalysisOutcome:
    seed = derive_seed(
        request.file_name,
        request.file_size,
        request.width,
        request.height,
        request.platform,
    )
    result = synthesize_result(request.width, request.height, seed)
    logger.info(
        "Synthesized analysis for %s (%dx%d): %d issues",
        request.file_name,
        request.width,
        request.height,
        len(result.issues),
    )
    return AnalysisOutcome(
        result=result,
        source=SOURCE_SYNTHESIZED,
        provider=provider,
        model=model,
        attempts=attempts,
    )


async def analyze_screenshot(
    request: AnalysisRequest,
    *,
    override_provider: Optional[str] = None,
    override_model: Optional[str] = None,
) -> AnalysisOutcome:
    """Analyze *request*, never failing because of the external provider.

    Budget logic:
      - ``ai_analysis_budget_seconds`` = total wall-clock budget.
      - ``ai_analysis_timeout_seconds`` = per-call timeout.
      - Retry while attempts < ``ai_analysis_max_retries + 1`` and the
        remaining budget can still fit a call.
    """
    settings = get_settings()
    config = ai_router.resolve(
        "analysis",
        override_provider=override_provider,
        override_model=override_model,
    )

    if isinstance(config.provider, MockProvider):
        return _synthesized(request, MockProvider.name, config.model, attempts=0)

    budget = settings.ai_analysis_budget_seconds
    max_attempts = settings.ai_analysis_max_retries + 1
    prompt = build_prompt(request)

    t0 = time.monotonic()
    attempts = 0
    while attempts < max_attempts:
        remaining = budget - (time.monotonic() - t0)
        if attempts > 0 and remaining < config.timeout_seconds / 2:
            logger.info("Budget exhausted (%.2fs remaining) — stopping retries", remaining)
            break

        attempts += 1
        try:
            provider_result = await config.provider.analyze(
                prompt,
                request.image,
                request.content_type,
                model=config.model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout_seconds=min(config.timeout_seconds, max(remaining, 0.1)),
            )
            payload = _parse_payload(provider_result.raw_text)
        except Exception as exc:
            logger.warning(
                "Analysis attempt %d via %s failed: %s",
                attempts,
                config.provider.name,
                exc,
            )
            continue

        result = normalize(payload, request.width, request.height)
        if result.meta is not None and result.meta.processing_ms is None:
            elapsed_ms = int((time.monotonic() - t0) * 1000)
            result = result.model_copy(
                update={
                    "meta": AnalysisMeta(
                        low_quality_warning=result.meta.low_quality_warning,
                        processing_ms=elapsed_ms,
                    )
                }
            )
        logger.info(
            "External analysis via %s/%s: %d issues after %d attempt(s)",
            provider_result.provider,
            provider_result.model,
            len(result.issues),
            attempts,
        )
        return AnalysisOutcome(
            result=result,
            source=SOURCE_EXTERNAL,
            provider=provider_result.provider,
            model=provider_result.model,
            attempts=attempts,
        )

    logger.warning(
        "All %d analysis attempts via %s failed, using synthesized fallback",
        attempts,
        config.provider.name,
    )
    return _synthesized(request, config.provider.name, config.model, attempts)
