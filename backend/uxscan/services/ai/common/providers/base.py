"""Abstract base for all vision providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class BaseProvider(abc.ABC):
    """Contract that every vision provider must implement."""

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* together with *image* and return a ``ProviderResult``."""
