# prompting/builder.py
"""Assemble model prompts from quantitative poem analysis.

Each builder derives the variable set for one template from domain objects,
escapes untrusted text (poem, lyrics, notation) and fills the template. The
prompts are handed to an out-of-process model; nothing here calls a model.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import structlog
from config import settings

from models import (
    AnalysisContext,
    EmotionalArcEntry,
    MelodyParameters,
    PoemAnalysis,
    ProblemSpot,
    QuantitativeData,
    SuggestionContext,
    extract_quantitative_data,
    problem_reports_to_problem_spots,
)
from prompting.renderer import render_prompt
from prompting.templates import (
    EMOTIONAL_INTERPRETATION_TEMPLATE,
    MEANING_PRESERVATION_TEMPLATE,
    MELODY_FEEDBACK_TEMPLATE,
    WORD_SUBSTITUTION_TEMPLATE,
    AlignmentIssue,
    escape_for_template,
    fill_template,
    format_emotional_arc,
    format_problem_spots,
    format_stress_alignment,
)

logger = structlog.get_logger(__name__)

TRUNCATION_MARKER = (
    "\n\n[Content truncated due to length. "
    "Please provide analysis based on the content shown above.]\n"
)


@dataclass
class TruncationResult:
    """Prompt after budgeting, with a human-readable note when it was cut."""

    prompt: str
    was_truncated: bool
    message: str = ""


def reconstruct_poem_text(analysis: PoemAnalysis) -> str:
    """Join stanza lines, separating stanzas with a blank line."""
    poem_lines: list[str] = []
    for stanza in analysis.structure.stanzas:
        poem_lines.extend(line.text for line in stanza.lines)
        poem_lines.append("")
    return "\n".join(poem_lines).strip()


def _average_singability(analysis: PoemAnalysis) -> str:
    scores = [line.singability.line_score for line in analysis.iter_lines()]
    if not scores:
        return "0.00"
    return f"{sum(scores) / len(scores):.2f}"


def _join_emotions(emotions: list[str], fallback: str) -> str:
    return ", ".join(emotions) or fallback


def create_suggestion_prompt(
    analysis: PoemAnalysis,
    issues: list[ProblemSpot],
    max_suggestions: int | None = None,
) -> str:
    """Create the word-substitution prompt for ``issues`` in ``analysis``."""
    logger.info("Creating suggestion prompt", problem_spots=len(issues))
    if max_suggestions is None:
        max_suggestions = settings.DEFAULT_MAX_SUGGESTIONS

    variables = {
        "poem": escape_for_template(reconstruct_poem_text(analysis)),
        "problemSpots": format_problem_spots(issues),
        "meterType": analysis.prosody.meter.detected_meter or "irregular",
        "rhymeScheme": analysis.prosody.rhyme.scheme or "unknown",
        "singabilityScore": f"{_average_singability(analysis)} (average across all lines)",
        "dominantEmotions": _join_emotions(
            analysis.emotion.dominant_emotions, "none detected"
        ),
        "maxSuggestions": str(max_suggestions),
    }

    prompt = fill_template(WORD_SUBSTITUTION_TEMPLATE, variables)
    logger.debug("Generated suggestion prompt", chars=len(prompt))
    return prompt


def create_suggestion_prompt_from_analysis(
    analysis: PoemAnalysis, max_suggestions: int | None = None
) -> str:
    """Create a suggestion prompt covering every problem in ``analysis``."""
    problem_spots = problem_reports_to_problem_spots(analysis.problems)
    return create_suggestion_prompt(analysis, problem_spots, max_suggestions)


def create_emotional_interpretation_prompt(
    poem: str,
    quantitative_data: QuantitativeData,
    emotional_arc: list[EmotionalArcEntry] | None = None,
) -> str:
    """Create the emotional-interpretation prompt.

    When the per-stanza arc is known it is rendered in full; otherwise the
    dominant emotions stand in for it.
    """
    scores = quantitative_data.emotional_scores
    if emotional_arc is not None:
        emotional_arc_desc = format_emotional_arc(emotional_arc)
    elif scores.dominant_emotions:
        emotional_arc_desc = (
            f"Dominant emotions detected: {', '.join(scores.dominant_emotions)}"
        )
    else:
        emotional_arc_desc = (
            "No strong emotional keywords detected in quantitative analysis"
        )

    variables = {
        "poem": escape_for_template(poem),
        "sentiment": f"{scores.sentiment:.2f}",
        "arousal": f"{scores.arousal:.2f}",
        "emotionKeywords": _join_emotions(scores.dominant_emotions, "none"),
        "emotionalArc": emotional_arc_desc,
    }
    return fill_template(EMOTIONAL_INTERPRETATION_TEMPLATE, variables)


def create_meaning_preservation_prompt(
    poem: str,
    meter_type: str,
    rhyme_scheme: str,
    dominant_emotions: list[str],
    title: str | None = None,
) -> str:
    variables = {
        "poem": escape_for_template(poem),
        "dominantEmotions": _join_emotions(dominant_emotions, "none detected"),
        "meterType": meter_type or "irregular",
        "rhymeScheme": rhyme_scheme or "unknown",
        "title": title or None,
    }
    return fill_template(MEANING_PRESERVATION_TEMPLATE, variables)


def create_analysis_prompt(
    poem: str,
    quantitative_data: QuantitativeData,
    title: str | None = None,
    emotional_arc: list[EmotionalArcEntry] | None = None,
) -> str:
    """Combine the emotional and meaning sub-prompts under one output schema."""
    logger.info("Creating qualitative analysis prompt")

    emotional_prompt = create_emotional_interpretation_prompt(
        poem, quantitative_data, emotional_arc
    )
    meaning_prompt = create_meaning_preservation_prompt(
        poem,
        quantitative_data.meter_type,
        quantitative_data.rhyme_scheme,
        quantitative_data.emotional_scores.dominant_emotions,
        title,
    )

    combined_prompt = render_prompt(
        "combined_analysis.j2",
        {"emotionalPrompt": emotional_prompt, "meaningPrompt": meaning_prompt},
    )
    logger.debug("Generated analysis prompt", chars=len(combined_prompt))
    return combined_prompt


def create_melody_feedback_prompt(
    lyrics: str,
    abc_notation: str,
    melody_params: MelodyParameters,
    analysis: PoemAnalysis,
) -> str:
    """Create the melody-feedback prompt with per-line stress alignment."""
    logger.info("Creating melody feedback prompt")

    lines = analysis.iter_lines()
    alignment: list[AlignmentIssue] = []
    for line_number, line in enumerate(lines, start=1):
        line_issues = [
            problem.issue
            for problem in line.singability.problem_spots
            if problem.severity in ("high", "medium")
        ]
        if line_issues:
            alignment.append(AlignmentIssue(line=line_number, issues=line_issues))

    variables = {
        "lyrics": escape_for_template(lyrics),
        "abcNotation": escape_for_template(abc_notation),
        "key": melody_params.key,
        "timeSignature": melody_params.time_signature,
        "tempo": str(melody_params.tempo),
        "dominantEmotions": _join_emotions(
            analysis.emotion.dominant_emotions, "none detected"
        ),
        "sentiment": f"{analysis.emotion.overall_sentiment:.2f}",
        "stressAlignment": format_stress_alignment(lines, alignment),
    }

    prompt = fill_template(MELODY_FEEDBACK_TEMPLATE, variables)
    logger.debug("Generated melody feedback prompt", chars=len(prompt))
    return prompt


def build_suggestion_context(analysis: PoemAnalysis) -> SuggestionContext:
    return SuggestionContext(
        original_poem=reconstruct_poem_text(analysis),
        analysis=analysis,
        problem_spots=problem_reports_to_problem_spots(analysis.problems),
    )


def build_analysis_context(poem: str, analysis: PoemAnalysis) -> AnalysisContext:
    return AnalysisContext(
        poem=poem, quantitative_data=extract_quantitative_data(analysis)
    )


def estimate_token_count(text: str) -> int:
    """Approximate the token count of ``text`` from its length."""
    estimated = math.ceil(len(text) / settings.FALLBACK_CHARS_PER_TOKEN)
    logger.debug("Estimated token count", chars=len(text), tokens=estimated)
    return estimated


def _find_break_point(prompt: str, keep_chars: int) -> int:
    """Return the latest paragraph, line or word boundary at or before ``keep_chars``.

    Boundaries in the first half of the kept text are ignored; the raw cutoff
    is used when none qualifies.
    """
    min_break = keep_chars * 0.5
    for separator in ("\n\n", "\n", " "):
        index = prompt.rfind(separator, 0, keep_chars + len(separator))
        if index != -1 and index >= min_break:
            return index
    return keep_chars


def truncate_prompt_if_needed(
    prompt: str, max_tokens: int | None = None
) -> TruncationResult:
    """Cut ``prompt`` to fit ``max_tokens`` and append a truncation marker.

    Raises:
        ValueError: If ``max_tokens`` is not positive.
    """
    if max_tokens is None:
        max_tokens = settings.MAX_PROMPT_TOKENS
    if max_tokens <= 0:
        raise ValueError("max_tokens must be positive")

    estimated = estimate_token_count(prompt)
    if estimated <= max_tokens:
        return TruncationResult(prompt=prompt, was_truncated=False)

    keep_ratio = max_tokens / estimated
    keep_chars = math.floor(
        len(prompt) * keep_ratio * settings.TRUNCATION_SAFETY_RATIO
    )
    break_point = _find_break_point(prompt, keep_chars)
    truncated = prompt[:break_point] + TRUNCATION_MARKER

    logger.warning(
        "Prompt truncated to fit token budget",
        original_chars=len(prompt),
        truncated_chars=len(truncated),
        max_tokens=max_tokens,
    )
    return TruncationResult(
        prompt=truncated,
        was_truncated=True,
        message=(
            f"Prompt was truncated from ~{estimated} tokens to "
            f"~{estimate_token_count(truncated)} tokens"
        ),
    )
