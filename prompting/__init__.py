"""Prompt templates and builders for the out-of-process language model."""

from .builder import (
    TRUNCATION_MARKER,
    TruncationResult,
    build_analysis_context,
    build_suggestion_context,
    create_analysis_prompt,
    create_emotional_interpretation_prompt,
    create_meaning_preservation_prompt,
    create_melody_feedback_prompt,
    create_suggestion_prompt,
    create_suggestion_prompt_from_analysis,
    estimate_token_count,
    reconstruct_poem_text,
    truncate_prompt_if_needed,
)
from .templates import (
    PROMPT_TEMPLATES,
    AlignmentIssue,
    InvalidTemplateError,
    MissingTemplateVariablesError,
    TemplateError,
    TemplateValidation,
    UnknownTemplateTypeError,
    escape_for_template,
    fill_template,
    format_emotional_arc,
    format_problem_spots,
    format_stress_alignment,
    get_template,
    list_template_types,
    validate_template_variables,
)

__all__ = [
    "TRUNCATION_MARKER",
    "TruncationResult",
    "build_analysis_context",
    "build_suggestion_context",
    "create_analysis_prompt",
    "create_emotional_interpretation_prompt",
    "create_meaning_preservation_prompt",
    "create_melody_feedback_prompt",
    "create_suggestion_prompt",
    "create_suggestion_prompt_from_analysis",
    "estimate_token_count",
    "reconstruct_poem_text",
    "truncate_prompt_if_needed",
    "PROMPT_TEMPLATES",
    "AlignmentIssue",
    "InvalidTemplateError",
    "MissingTemplateVariablesError",
    "TemplateError",
    "TemplateValidation",
    "UnknownTemplateTypeError",
    "escape_for_template",
    "fill_template",
    "format_emotional_arc",
    "format_problem_spots",
    "format_stress_alignment",
    "get_template",
    "list_template_types",
    "validate_template_variables",
]
