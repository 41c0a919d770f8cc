"""Pull a JSON object out of free-form model output."""

from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def extract_json_object(text: str | None) -> dict | None:
    """Return the first JSON object found in *text*, or ``None``.

    Tries, in order: the content of a fenced code block, the whole text, and
    every brace-balanced ``{...}`` span from left to right. Arrays and
    scalars at the top level are ignored.
    """
    if not text or not text.strip():
        return None

    candidates = [m.group(1).strip() for m in _FENCE_RE.finditer(text)]
    candidates.append(text.strip())

    for candidate in candidates:
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed

    for candidate in candidates:
        for start, ch in enumerate(candidate):
            if ch != "{":
                continue
            span = _balanced_span(candidate, start)
            if span is None:
                continue
            parsed = _loads_object(span)
            if parsed is not None:
                return parsed

    logger.debug("No JSON object found in %d chars of model output", len(text))
    return None


def _loads_object(candidate: str) -> dict | None:
    try:
        parsed = json.loads(candidate)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _balanced_span(text: str, start: int) -> str | None:
    """Substring from *start* up to its matching ``}``, skipping string literals."""
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None
