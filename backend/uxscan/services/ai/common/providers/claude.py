"""Anthropic / Claude vision provider."""

from __future__ import annotations

import base64
import logging
import time

from .base import BaseProvider, ProviderResult

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"


class ClaudeProvider(BaseProvider):
    name = "claude"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

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
        import httpx

        model = model or "claude-3-5-sonnet-20241022"
        t0 = time.monotonic()

        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": content_type,
                    "data": base64.b64encode(image).decode("ascii"),
                },
            },
            {"type": "text", "text": prompt},
        ]

        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            resp = await client.post(
                ANTHROPIC_MESSAGES_URL,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": "2023-06-01",
                    "content-type": "application/json",
                },
                json={
                    "model": model,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "messages": [{"role": "user", "content": content}],
                },
            )
            resp.raise_for_status()
            data = resp.json()

        elapsed = (time.monotonic() - t0) * 1000
        text = "".join(block.get("text", "") for block in data.get("content", []) if block.get("type") == "text")
        usage = data.get("usage", {})
        logger.debug("Claude analysis finished in %.0f ms (%d output tokens)", elapsed, usage.get("output_tokens", 0))

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
