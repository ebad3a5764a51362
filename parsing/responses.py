# parsing/responses.py
"""Turn raw model responses into typed results plus ``ResponseMetadata``.

Every parser walks the same states: empty input, no JSON found, unparsable
JSON, structurally valid, salvaged, or unsalvageable. None of them raises for
untrusted text; failures are reported through ``metadata.success`` and
``metadata.errors`` and the type's default value is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from models import (
    MelodyFeedback,
    QualitativeAnalysis,
    ResponseMetadata,
    Suggestion,
    create_default_melody_feedback,
    create_default_qualitative_analysis,
    create_default_response_metadata,
)
from parsing.extraction import extract_json, safe_json_parse
from parsing.validators import (
    is_melody_feedback,
    is_qualitative_analysis,
    is_suggestion,
    normalize_melody_feedback,
    normalize_qualitative_analysis,
    normalize_suggestion,
    salvage_melody_feedback,
    salvage_qualitative_analysis,
    salvage_suggestion,
)

logger = structlog.get_logger(__name__)

ResponseKind = Literal["suggestion", "analysis", "feedback"]


@dataclass
class SuggestionParseResult:
    suggestions: list[Suggestion]
    metadata: ResponseMetadata


@dataclass
class AnalysisParseResult:
    analysis: QualitativeAnalysis
    metadata: ResponseMetadata


@dataclass
class FeedbackParseResult:
    feedback: MelodyFeedback
    metadata: ResponseMetadata


@dataclass
class ResponseValidation:
    """Cheap classification of a raw response by key sniffing."""

    is_valid: bool
    has_json: bool
    estimated_content: str = "unknown"


@dataclass
class _Decoded:
    value: Any = None
    errors: list[str] = field(default_factory=list)


def _decode_response(response: str | None) -> _Decoded:
    """Run the shared empty/extract/parse prefix of every parser."""
    if not response or not response.strip():
        return _Decoded(errors=["Empty response received"])

    json_string = extract_json(response)
    if json_string is None:
        return _Decoded(errors=["No JSON found in response"])

    parsed = safe_json_parse(json_string)
    if not parsed.success:
        return _Decoded(errors=["Failed to parse JSON"])

    return _Decoded(value=parsed.value)


def _fail(metadata: ResponseMetadata, errors: list[str]) -> None:
    metadata.success = False
    metadata.errors.extend(errors)
    logger.warning("Model response rejected", errors=errors)


def deduplicate_suggestions(
    suggestions: Iterable[Suggestion], warnings: list[str] | None = None
) -> list[Suggestion]:
    """Drop repeats of ``(line_number, position, original_word)``; first wins.

    A ``"Duplicate suggestion removed: <word>"`` entry is appended to
    ``warnings`` for every dropped item.
    """
    seen: set[tuple[int, int, str]] = set()
    unique: list[Suggestion] = []
    for suggestion in suggestions:
        key = suggestion.dedup_key
        if key in seen:
            if warnings is not None:
                warnings.append(
                    f"Duplicate suggestion removed: {suggestion.original_word}"
                )
            continue
        seen.add(key)
        unique.append(suggestion)
    return unique


def _suggestion_items(parsed: Any) -> list[Any] | None:
    """Normalize an array, a ``{"suggestions": [...]}`` wrapper or a single object."""
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        wrapped = parsed.get("suggestions")
        if isinstance(wrapped, list):
            return wrapped
        if is_suggestion(parsed):
            return [parsed]
    return None


def parse_suggestion_response(response: str) -> SuggestionParseResult:
    """Parse a word-substitution response into de-duplicated suggestions.

    ``metadata.success`` is true when at least one suggestion survived or no
    top-level error occurred, so an empty list may still report success.
    """
    response = response or ""
    logger.debug("Parsing suggestion response", chars=len(response))
    metadata = create_default_response_metadata(original_length=len(response))

    decoded = _decode_response(response)
    if decoded.errors:
        _fail(metadata, decoded.errors)
        return SuggestionParseResult(suggestions=[], metadata=metadata)

    items = _suggestion_items(decoded.value)
    if items is None:
        _fail(metadata, ["Response is not a suggestion or array of suggestions"])
        return SuggestionParseResult(suggestions=[], metadata=metadata)

    suggestions: list[Suggestion] = []
    for index, item in enumerate(items, start=1):
        if is_suggestion(item):
            suggestions.append(normalize_suggestion(item))
            continue
        salvaged = salvage_suggestion(item)
        if salvaged is not None:
            suggestions.append(salvaged)
            metadata.warnings.append(f"Suggestion {index} required repair")
        else:
            metadata.warnings.append(f"Suggestion {index} could not be parsed")

    unique = deduplicate_suggestions(suggestions, metadata.warnings)
    metadata.success = len(unique) > 0 or not metadata.errors

    logger.info(
        "Parsed suggestion response",
        suggestions=len(unique),
        warnings=len(metadata.warnings),
    )
    return SuggestionParseResult(suggestions=unique, metadata=metadata)


def parse_analysis_response(response: str) -> AnalysisParseResult:
    """Parse a combined emotional/meaning analysis response."""
    response = response or ""
    logger.debug("Parsing analysis response", chars=len(response))
    metadata = create_default_response_metadata(original_length=len(response))

    decoded = _decode_response(response)
    if decoded.errors:
        _fail(metadata, decoded.errors)
        return AnalysisParseResult(
            analysis=create_default_qualitative_analysis(), metadata=metadata
        )

    if is_qualitative_analysis(decoded.value):
        logger.info("Parsed complete qualitative analysis")
        return AnalysisParseResult(
            analysis=normalize_qualitative_analysis(decoded.value),
            metadata=metadata,
        )

    salvaged = salvage_qualitative_analysis(decoded.value)
    if salvaged is not None:
        metadata.warnings.append(
            "Analysis required repair - some fields may have defaults"
        )
        logger.info("Salvaged partial qualitative analysis")
        return AnalysisParseResult(analysis=salvaged, metadata=metadata)

    _fail(metadata, ["Response does not match expected analysis structure"])
    return AnalysisParseResult(
        analysis=create_default_qualitative_analysis(), metadata=metadata
    )


def parse_melody_feedback_response(response: str) -> FeedbackParseResult:
    """Parse a melody-feedback response."""
    response = response or ""
    logger.debug("Parsing melody feedback response", chars=len(response))
    metadata = create_default_response_metadata(original_length=len(response))

    decoded = _decode_response(response)
    if decoded.errors:
        _fail(metadata, decoded.errors)
        return FeedbackParseResult(
            feedback=create_default_melody_feedback(), metadata=metadata
        )

    if is_melody_feedback(decoded.value):
        logger.info("Parsed complete melody feedback")
        return FeedbackParseResult(
            feedback=normalize_melody_feedback(decoded.value), metadata=metadata
        )

    salvaged = salvage_melody_feedback(decoded.value)
    if salvaged is not None:
        metadata.warnings.append(
            "Feedback required repair - some fields may have defaults"
        )
        logger.info("Salvaged partial melody feedback")
        return FeedbackParseResult(feedback=salvaged, metadata=metadata)

    _fail(metadata, ["Response does not match expected feedback structure"])
    return FeedbackParseResult(
        feedback=create_default_melody_feedback(), metadata=metadata
    )


def validate_response(response: str, expected_type: ResponseKind) -> ResponseValidation:
    """Guess what a response contains without fully parsing it."""
    json_string = extract_json(response)
    if json_string is None:
        return ResponseValidation(is_valid=False, has_json=False)

    if "originalWord" in json_string and "suggestedWord" in json_string:
        estimated = "suggestion"
    elif "emotional" in json_string and "meaning" in json_string:
        estimated = "analysis"
    elif "emotionalFit" in json_string or "improvements" in json_string:
        estimated = "feedback"
    else:
        estimated = "unknown"

    return ResponseValidation(
        is_valid=estimated == expected_type,
        has_json=True,
        estimated_content=estimated,
    )


def combine_metadata(metadatas: Iterable[ResponseMetadata]) -> ResponseMetadata:
    """Merge metadata of several parse calls, preserving input order."""
    combined = ResponseMetadata()
    for metadata in metadatas:
        combined.success = combined.success and metadata.success
        combined.errors.extend(metadata.errors)
        combined.warnings.extend(metadata.warnings)
        combined.original_length += metadata.original_length
    return combined
