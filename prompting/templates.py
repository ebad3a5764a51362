# prompting/templates.py
"""Registry of the prompt templates and helpers for filling them.

Template wording lives in ``prompting/prompts/*.j2`` and is loaded once into
immutable ``PromptTemplate`` records; filling goes through Jinja2 so every
occurrence of a ``{{name}}`` placeholder is substituted.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from jinja2 import TemplateSyntaxError, UndefinedError

from models import (
    AnalyzedLine,
    EmotionalArcEntry,
    ProblemSpot,
    PromptTemplate,
    PromptTemplateType,
)
from prompting.renderer import load_prompt_source, render_string

logger = structlog.get_logger(__name__)

_UNDEFINED_NAME_RE = re.compile(r"'(\w+)' is undefined")


class TemplateError(Exception):
    """Base exception for template lookup and filling errors."""


class UnknownTemplateTypeError(TemplateError):
    """Raised when a template identifier is not registered."""


class MissingTemplateVariablesError(TemplateError):
    """Raised when a template is filled without all required variables."""

    def __init__(self, template_type: PromptTemplateType, missing: list[str]) -> None:
        self.template_type = template_type
        self.missing = missing
        super().__init__(
            f"Missing required template variables: {', '.join(missing)}"
        )


class InvalidTemplateError(TemplateError):
    """Raised when template text is not a valid placeholder template."""

    def __init__(self, template_type: PromptTemplateType, detail: str) -> None:
        self.template_type = template_type
        self.detail = detail
        super().__init__(f"Invalid template text: {detail}")


@dataclass
class TemplateValidation:
    """Outcome of checking variables against a template's required set."""

    is_valid: bool
    missing: list[str] = field(default_factory=list)


@dataclass
class AlignmentIssue:
    """Medium/high singability issues of one 1-indexed line."""

    line: int
    issues: list[str]


WORD_SUBSTITUTION_TEMPLATE = PromptTemplate(
    type=PromptTemplateType.WORD_SUBSTITUTION,
    template=load_prompt_source("word_substitution.j2"),
    required_variables=(
        "poem",
        "problemSpots",
        "meterType",
        "rhymeScheme",
        "singabilityScore",
        "dominantEmotions",
    ),
    optional_variables={"maxSuggestions": "10"},
    description=(
        "Generates word substitution suggestions for problem spots in a poem "
        "to improve singability"
    ),
)

MEANING_PRESERVATION_TEMPLATE = PromptTemplate(
    type=PromptTemplateType.MEANING_PRESERVATION,
    template=load_prompt_source("meaning_preservation.j2"),
    required_variables=("poem", "dominantEmotions", "meterType", "rhymeScheme"),
    optional_variables={"title": "Untitled"},
    description=(
        "Analyzes a poem to determine what elements must be preserved during "
        "lyric adaptation"
    ),
)

EMOTIONAL_INTERPRETATION_TEMPLATE = PromptTemplate(
    type=PromptTemplateType.EMOTIONAL_INTERPRETATION,
    template=load_prompt_source("emotional_interpretation.j2"),
    required_variables=(
        "poem",
        "sentiment",
        "arousal",
        "emotionKeywords",
        "emotionalArc",
    ),
    description=(
        "Provides qualitative emotional interpretation that complements "
        "quantitative sentiment analysis"
    ),
)

MELODY_FEEDBACK_TEMPLATE = PromptTemplate(
    type=PromptTemplateType.MELODY_FEEDBACK,
    template=load_prompt_source("melody_feedback.j2"),
    required_variables=(
        "lyrics",
        "abcNotation",
        "key",
        "timeSignature",
        "tempo",
        "dominantEmotions",
        "sentiment",
        "stressAlignment",
    ),
    description=(
        "Evaluates how well a generated melody serves the lyrics and emotional content"
    ),
)

PROMPT_TEMPLATES: dict[PromptTemplateType, PromptTemplate] = {
    PromptTemplateType.WORD_SUBSTITUTION: WORD_SUBSTITUTION_TEMPLATE,
    PromptTemplateType.MEANING_PRESERVATION: MEANING_PRESERVATION_TEMPLATE,
    PromptTemplateType.EMOTIONAL_INTERPRETATION: EMOTIONAL_INTERPRETATION_TEMPLATE,
    PromptTemplateType.MELODY_FEEDBACK: MELODY_FEEDBACK_TEMPLATE,
}


def get_template(template_type: PromptTemplateType | str) -> PromptTemplate:
    """Return the registered template for ``template_type``.

    Raises:
        UnknownTemplateTypeError: If the identifier is not registered.
    """
    try:
        key = PromptTemplateType(template_type)
    except ValueError:
        raise UnknownTemplateTypeError(
            f"Unknown template type: {template_type}"
        ) from None
    return PROMPT_TEMPLATES[key]


def list_template_types() -> list[PromptTemplateType]:
    return list(PROMPT_TEMPLATES)


def validate_template_variables(
    template: PromptTemplate, variables: Mapping[str, Any]
) -> TemplateValidation:
    """Check ``variables`` against the template's required variables only."""
    missing = [
        name
        for name in template.required_variables
        if variables.get(name) is None
    ]
    return TemplateValidation(is_valid=not missing, missing=missing)


def fill_template(template: PromptTemplate, variables: Mapping[str, Any]) -> str:
    """Substitute every placeholder of ``template``.

    Optional variables fall back to their declared defaults; caller values
    take precedence.

    Raises:
        MissingTemplateVariablesError: If a required variable is absent or
            the template uses a placeholder nobody supplied.
        InvalidTemplateError: If the template text does not compile.
    """
    validation = validate_template_variables(template, variables)
    if not validation.is_valid:
        raise MissingTemplateVariablesError(template.type, validation.missing)

    merged: dict[str, Any] = dict(template.optional_variables)
    merged.update({k: v for k, v in variables.items() if v is not None})

    try:
        result = render_string(template.template, merged)
    except TemplateSyntaxError as e:
        raise InvalidTemplateError(template.type, str(e)) from e
    except UndefinedError as e:
        match = _UNDEFINED_NAME_RE.search(str(e))
        name = match.group(1) if match else str(e)
        raise MissingTemplateVariablesError(template.type, [name]) from e

    logger.debug(
        "Filled prompt template",
        template_type=template.type.value,
        variables_provided=len(variables),
        chars=len(result),
    )
    return result


def escape_for_template(text: str) -> str:
    """Escape backslashes, backticks and dollar signs in untrusted text."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def format_problem_spots(problem_spots: Sequence[ProblemSpot]) -> str:
    if not problem_spots:
        return "No specific problem spots identified."

    return "\n\n".join(
        f"{index}. Line {spot.line}, Position {spot.position}:\n"
        f"   Type: {spot.type}\n"
        f"   Severity: {spot.severity}\n"
        f"   Issue: {spot.description}"
        for index, spot in enumerate(problem_spots, start=1)
    )


def _sentiment_label(sentiment: float) -> str:
    if sentiment > 0.3:
        return "positive"
    if sentiment < -0.3:
        return "negative"
    return "neutral"


def format_emotional_arc(emotional_arc: Sequence[EmotionalArcEntry]) -> str:
    if not emotional_arc:
        return "No emotional arc data available."

    entries = []
    for entry in emotional_arc:
        text = (
            f"Stanza {entry.stanza + 1}: {_sentiment_label(entry.sentiment)} "
            f"({entry.sentiment:.2f})"
        )
        if entry.keywords:
            text += f" - Keywords: {', '.join(entry.keywords)}"
        entries.append(text)
    return "\n".join(entries)


def format_stress_alignment(
    lines: Sequence[AnalyzedLine], alignment: Sequence[AlignmentIssue]
) -> str:
    """Render one entry per line, then the alignment issues if any."""
    formatted_lines = "\n".join(
        f'Line {index}: "{line.text}"\n  Pattern: {line.stress_pattern or "N/A"}'
        for index, line in enumerate(lines, start=1)
    )

    if not alignment:
        return formatted_lines + "\n\nNo alignment issues detected."

    issues = "\n".join(f"Line {a.line}: {'; '.join(a.issues)}" for a in alignment)
    return formatted_lines + "\n\nAlignment Issues:\n" + issues
