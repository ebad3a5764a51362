# parsing/extraction.py
"""Locate and decode JSON payloads embedded in free-form model output."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_ANY_FENCE_RE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)
# Greedy on purpose: spans from the first opener to the last closer so an
# enclosing object wins over the arrays nested inside it.
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)

_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)(\w+)(\s*:)")


@dataclass
class JSONParseResult:
    """Outcome of ``safe_json_parse``; ``value`` is only meaningful when ``success``."""

    success: bool
    value: Any = None
    repaired: bool = False
    error: str | None = None


def _looks_like_json(text: str) -> bool:
    return text.startswith("{") or text.startswith("[")


def _first_fenced_json(pattern: re.Pattern[str], text: str) -> str | None:
    for match in pattern.finditer(text):
        candidate = match.group(1).strip()
        if _looks_like_json(candidate):
            return candidate
    return None


def extract_json(response: str | None) -> str | None:
    """Return the first JSON-shaped substring of ``response``, or ``None``.

    Search order: ```json fences, any fence holding an object/array, the whole
    trimmed text, the outermost ``{...}`` span, then the outermost ``[...]`` span.
    """
    if not response or not isinstance(response, str):
        logger.debug("extract_json received empty or invalid response")
        return None

    trimmed = response.strip()

    for pattern, source in ((_JSON_FENCE_RE, "json fence"), (_ANY_FENCE_RE, "fence")):
        fenced = _first_fenced_json(pattern, trimmed)
        if fenced is not None:
            logger.debug("Found JSON in code block", source=source, chars=len(fenced))
            return fenced

    if _looks_like_json(trimmed):
        logger.debug("Response is raw JSON", chars=len(trimmed))
        return trimmed

    for pattern, source in ((_OBJECT_RE, "object"), (_ARRAY_RE, "array")):
        match = pattern.search(trimmed)
        if match:
            extracted = match.group(0).strip()
            logger.debug("Found embedded JSON", source=source, chars=len(extracted))
            return extracted

    logger.debug("No JSON found in response")
    return None


def repair_json(json_string: str) -> str:
    """Strip trailing commas and quote bare object keys."""
    fixed = _TRAILING_COMMA_RE.sub(r"\1", json_string)
    return _UNQUOTED_KEY_RE.sub(r'\1"\2"\3', fixed)


def safe_json_parse(json_string: str) -> JSONParseResult:
    """Parse ``json_string``, retrying once after ``repair_json``. Never raises."""
    try:
        return JSONParseResult(success=True, value=json.loads(json_string))
    except (json.JSONDecodeError, TypeError) as exc:
        first_error = str(exc)
        logger.debug("Strict JSON parse failed", error=first_error)

    try:
        value = json.loads(repair_json(json_string))
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning(
            "Failed to parse JSON even after repair",
            error=str(exc),
            snippet=json_string[:200],
        )
        return JSONParseResult(success=False, error=first_error)

    logger.info("Parsed JSON after repairing trailing commas or unquoted keys")
    return JSONParseResult(success=True, value=value, repaired=True)
