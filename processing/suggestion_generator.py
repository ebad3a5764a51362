# processing/suggestion_generator.py
"""Model-free suggestions derived straight from quantitative problem reports.

The generator filters and ranks ``ProblemReport`` entries, finds the offending
word and proposes a replacement from the curated substitution tables. Every
problem that does not yield a suggestion is accounted for in ``skip_reasons``
so the output can be explained without a model-written reason.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog
from config import settings

from models import (
    PROBLEM_TYPES,
    SEVERITY_ORDER,
    MeaningPreservation,
    PoemAnalysis,
    ProblemReport,
    Severity,
    Suggestion,
)
from processing.substitution_tables import SubstitutionTables, get_substitution_tables

logger = structlog.get_logger(__name__)

_NON_WORD_RE = re.compile(r"[^\w]")

DEFAULT_REASONS: dict[str, str] = {
    "stress_mismatch": "The stress pattern of this word may not align with the musical beat.",
    "syllable_variance": (
        "This line has a different syllable count than others, which may affect rhythm."
    ),
    "singability": "This word contains sounds that are difficult to sing clearly.",
    "rhyme_break": "This word breaks the rhyme scheme, consider an alternative.",
}
FALLBACK_REASON = "Consider revising this word for better singability."


@dataclass
class GeneratorOptions:
    """Filtering options; ``max_suggestions`` defaults to the configured value."""

    max_suggestions: int | None = None
    min_severity: Severity = "low"
    focus_types: Sequence[str] = PROBLEM_TYPES


@dataclass
class GeneratorResult:
    suggestions: list[Suggestion] = field(default_factory=list)
    problems_processed: int = 0
    problems_skipped: int = 0
    skip_reasons: list[str] = field(default_factory=list)


def _meets_min_severity(severity: str, min_severity: str) -> bool:
    return SEVERITY_ORDER.get(severity, 0) >= SEVERITY_ORDER.get(min_severity, 0)


def _is_generatable(problem: ProblemReport, options: GeneratorOptions) -> bool:
    return (
        _meets_min_severity(problem.severity, options.min_severity)
        and problem.type in options.focus_types
    )


def extract_word_at_position(
    analysis: PoemAnalysis, line_number: int, position: int
) -> str | None:
    """Return the lowercase word at ``position`` of the 1-indexed line.

    Analyzed words are preferred; otherwise the line text is split on
    whitespace and stripped of punctuation.
    """
    line = analysis.get_line(line_number)
    if line is None or position < 0:
        return None

    if position < len(line.words):
        return line.words[position].text.lower()

    text_words = line.text.split()
    if position < len(text_words):
        return _NON_WORD_RE.sub("", text_words[position].lower())
    return None


def _line_word_set(line_text: str | None) -> set[str]:
    if not line_text:
        return set()
    return {_NON_WORD_RE.sub("", word.lower()) for word in line_text.split()}


def find_substitution(
    word: str,
    problem_type: str,
    line_text: str | None,
    tables: SubstitutionTables,
) -> str | None:
    """Pick a replacement for ``word``, trying the problem type's table first."""
    word = word.lower()

    if problem_type == "singability" and tables.singability.get(word):
        return tables.singability[word][0]
    if problem_type == "stress_mismatch" and tables.stress.get(word):
        return tables.stress[word][0]
    if problem_type == "rhyme_break" and tables.rhyme.get(word):
        alternatives = tables.rhyme[word]
        words_in_line = _line_word_set(line_text)
        for alternative in alternatives:
            if alternative not in words_in_line:
                return alternative
        return alternatives[0]

    for table in tables.synonym_tables():
        if table.get(word):
            return table[word][0]
    return None


def determine_meaning_preservation(
    original: str, suggested: str, problem_type: str, tables: SubstitutionTables
) -> MeaningPreservation:
    """``partial`` for rhyme changes, ``yes`` for curated near-synonyms."""
    if problem_type == "rhyme_break":
        return "partial"

    original, suggested = original.lower(), suggested.lower()
    for table in tables.synonym_tables():
        for key, values in table.items():
            if key == original and suggested in values:
                return "yes"
            if original in values and (key == suggested or suggested in values):
                return "yes"
    return "partial"


def generate_reason(problem: ProblemReport) -> str:
    if problem.description:
        return problem.description
    return DEFAULT_REASONS.get(problem.type, FALLBACK_REASON)


def problem_to_suggestion(
    problem: ProblemReport, analysis: PoemAnalysis, tables: SubstitutionTables
) -> Suggestion | None:
    original_word = extract_word_at_position(analysis, problem.line, problem.position)
    if not original_word:
        logger.debug(
            "Could not extract word for problem",
            line=problem.line,
            position=problem.position,
        )
        return None

    line = analysis.get_line(problem.line)
    suggested_word = find_substitution(
        original_word, problem.type, line.text if line else None, tables
    )
    if not suggested_word:
        logger.debug("No substitution found", word=original_word, type=problem.type)
        return None

    if suggested_word.lower() == original_word.lower():
        logger.debug("Substitution equals original, skipping", word=original_word)
        return None

    return Suggestion(
        original_word=original_word,
        suggested_word=suggested_word,
        line_number=problem.line,
        position=problem.position,
        reason=generate_reason(problem),
        preserves_meaning=determine_meaning_preservation(
            original_word, suggested_word, problem.type, tables
        ),
    )


def generate_suggestions_from_analysis(
    analysis: PoemAnalysis,
    options: GeneratorOptions | None = None,
    tables: SubstitutionTables | None = None,
) -> GeneratorResult:
    """Map the problems of ``analysis`` to substitution suggestions.

    Problems are filtered by severity and focus type, ranked high severity
    first then by line, de-duplicated on ``(line, position)`` and converted
    until ``max_suggestions`` suggestions exist.
    """
    options = options or GeneratorOptions()
    if tables is None:
        tables = get_substitution_tables()
    max_suggestions = (
        options.max_suggestions
        if options.max_suggestions is not None
        else settings.DEFAULT_MAX_SUGGESTIONS
    )

    logger.info(
        "Generating heuristic suggestions",
        problems=len(analysis.problems),
        max_suggestions=max_suggestions,
        min_severity=options.min_severity,
    )

    result = GeneratorResult()
    candidates: list[ProblemReport] = []
    for problem in analysis.problems:
        if not _meets_min_severity(problem.severity, options.min_severity):
            result.problems_skipped += 1
            result.skip_reasons.append(
                f"Skipped line {problem.line}: severity {problem.severity} below threshold"
            )
        elif problem.type not in options.focus_types:
            result.problems_skipped += 1
            result.skip_reasons.append(
                f"Skipped line {problem.line}: type {problem.type} not in focus"
            )
        else:
            candidates.append(problem)

    candidates.sort(key=lambda p: (-SEVERITY_ORDER[p.severity], p.line))

    seen_positions: set[tuple[int, int]] = set()
    for problem in candidates:
        if len(result.suggestions) >= max_suggestions:
            logger.debug("Reached max suggestions, stopping", max_suggestions=max_suggestions)
            break

        position_key = (problem.line, problem.position)
        if position_key in seen_positions:
            result.problems_skipped += 1
            result.skip_reasons.append(
                f"Skipped duplicate position: {problem.line}:{problem.position}"
            )
            continue

        result.problems_processed += 1
        seen_positions.add(position_key)

        suggestion = problem_to_suggestion(problem, analysis, tables)
        if suggestion is not None:
            result.suggestions.append(suggestion)
        else:
            result.problems_skipped += 1
            result.skip_reasons.append(
                f"Could not generate suggestion for line {problem.line}"
            )

    logger.info(
        "Heuristic suggestion generation complete",
        suggestions=len(result.suggestions),
        processed=result.problems_processed,
        skipped=result.problems_skipped,
    )
    return result


def has_generatable_problems(
    analysis: PoemAnalysis, options: GeneratorOptions | None = None
) -> bool:
    options = options or GeneratorOptions()
    return any(_is_generatable(problem, options) for problem in analysis.problems)


def count_generatable_problems(
    analysis: PoemAnalysis, options: GeneratorOptions | None = None
) -> int:
    options = options or GeneratorOptions()
    return sum(1 for problem in analysis.problems if _is_generatable(problem, options))
