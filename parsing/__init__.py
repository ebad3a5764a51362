# parsing/__init__.py
"""Parsing of untrusted model responses into lyricsmith result models."""

from .extraction import JSONParseResult, extract_json, repair_json, safe_json_parse
from .responses import (
    AnalysisParseResult,
    FeedbackParseResult,
    ResponseValidation,
    SuggestionParseResult,
    combine_metadata,
    deduplicate_suggestions,
    parse_analysis_response,
    parse_melody_feedback_response,
    parse_suggestion_response,
    validate_response,
)
from .validators import (
    clamp_confidence,
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

__all__ = [
    "JSONParseResult",
    "extract_json",
    "repair_json",
    "safe_json_parse",
    "AnalysisParseResult",
    "FeedbackParseResult",
    "ResponseValidation",
    "SuggestionParseResult",
    "combine_metadata",
    "deduplicate_suggestions",
    "parse_analysis_response",
    "parse_melody_feedback_response",
    "parse_suggestion_response",
    "validate_response",
    "clamp_confidence",
    "is_melody_feedback",
    "is_qualitative_analysis",
    "is_suggestion",
    "normalize_melody_feedback",
    "normalize_qualitative_analysis",
    "normalize_suggestion",
    "salvage_melody_feedback",
    "salvage_qualitative_analysis",
    "salvage_suggestion",
]
