# models/lyric_models.py
"""Value objects exchanged between prompt construction, response parsing and
the heuristic suggestion generator.

Attribute names are snake_case; the model-facing JSON uses the camelCase
aliases (``originalWord``, ``lineNumber``, ``preservesMeaning`` ...), so dump
with ``by_alias=True`` when handing results to a consumer.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .analysis_models import PoemAnalysis, ProblemReport, ProblemType, Severity

MeaningPreservation = Literal["yes", "partial", "no"]
EmotionalFit = Literal["excellent", "good", "adequate", "poor"]

MEANING_PRESERVATION_VALUES: tuple[str, ...] = ("yes", "partial", "no")
EMOTIONAL_FIT_VALUES: tuple[str, ...] = ("excellent", "good", "adequate", "poor")


class LyricBaseModel(BaseModel):
    """Base model serializing to the camelCase keys used in prompts."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Suggestion(LyricBaseModel):
    """A single word substitution (``line_number`` 1-indexed, ``position`` 0-indexed)."""

    original_word: str = ""
    suggested_word: str = ""
    line_number: int = 0
    position: int = 0
    reason: str = ""
    preserves_meaning: MeaningPreservation = "partial"

    @property
    def dedup_key(self) -> tuple[int, int, str]:
        return (self.line_number, self.position, self.original_word)


class ProblemSpot(LyricBaseModel):
    """Reduced ``ProblemReport`` used only for prompt text."""

    line: int = 0
    position: int = 0
    type: ProblemType = "singability"
    severity: Severity = "low"
    description: str = ""


class EmotionalInterpretation(LyricBaseModel):
    primary_theme: str = ""
    secondary_themes: list[str] = Field(default_factory=list)
    emotional_journey: str = ""
    key_imagery: list[str] = Field(default_factory=list)
    mood: str = ""


class MeaningAssessment(LyricBaseModel):
    core_theme: str = ""
    essential_elements: list[str] = Field(default_factory=list)
    flexible_elements: list[str] = Field(default_factory=list)
    author_voice: str = ""


class QualitativeAnalysis(LyricBaseModel):
    """Emotional and meaning analysis; ``confidence`` always lies in [0, 1]."""

    emotional: EmotionalInterpretation = Field(default_factory=EmotionalInterpretation)
    meaning: MeaningAssessment = Field(default_factory=MeaningAssessment)
    summary: str = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class MelodyFeedback(LyricBaseModel):
    emotional_fit: EmotionalFit = "adequate"
    observations: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class ResponseMetadata(LyricBaseModel):
    """Envelope returned next to every parsed payload.

    ``success`` is False only when nothing usable could be recovered; repaired
    payloads still succeed and carry ``warnings``.
    """

    success: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    original_length: int = 0


class PromptTemplateType(str, Enum):
    """Identifiers of the prompt templates."""

    WORD_SUBSTITUTION = "word_substitution"
    MEANING_PRESERVATION = "meaning_preservation"
    EMOTIONAL_INTERPRETATION = "emotional_interpretation"
    MELODY_FEEDBACK = "melody_feedback"


class PromptTemplate(LyricBaseModel):
    """A prompt skeleton with ``{{name}}`` placeholders."""

    model_config = ConfigDict(frozen=True)

    type: PromptTemplateType
    template: str
    required_variables: tuple[str, ...] = ()
    optional_variables: dict[str, str] = Field(default_factory=dict)
    description: str = ""


class EmotionalScores(LyricBaseModel):
    sentiment: float = 0.0
    arousal: float = 0.0
    dominant_emotions: list[str] = Field(default_factory=list)


class QuantitativeData(LyricBaseModel):
    """Per-line measurements flattened out of a ``PoemAnalysis``."""

    syllable_counts: list[int] = Field(default_factory=list)
    stress_patterns: list[str] = Field(default_factory=list)
    rhyme_scheme: str = ""
    meter_type: str = ""
    emotional_scores: EmotionalScores = Field(default_factory=EmotionalScores)
    singability_scores: list[float] = Field(default_factory=list)


class SuggestionContext(LyricBaseModel):
    original_poem: str
    analysis: PoemAnalysis
    problem_spots: list[ProblemSpot] = Field(default_factory=list)


class AnalysisContext(LyricBaseModel):
    poem: str
    quantitative_data: QuantitativeData


class MelodyParameters(LyricBaseModel):
    key: str
    time_signature: str
    tempo: int


def create_default_suggestion() -> Suggestion:
    return Suggestion()


def create_default_problem_spot() -> ProblemSpot:
    return ProblemSpot()


def create_default_qualitative_analysis() -> QualitativeAnalysis:
    return QualitativeAnalysis()


def create_default_melody_feedback() -> MelodyFeedback:
    return MelodyFeedback()


def create_default_response_metadata(original_length: int = 0) -> ResponseMetadata:
    return ResponseMetadata(original_length=original_length)


def problem_report_to_problem_spot(report: ProblemReport) -> ProblemSpot:
    """Drop ``suggested_fix`` and keep the fields prompts display."""
    return ProblemSpot(
        line=report.line,
        position=report.position,
        type=report.type,
        severity=report.severity,
        description=report.description,
    )


def problem_reports_to_problem_spots(reports: list[ProblemReport]) -> list[ProblemSpot]:
    return [problem_report_to_problem_spot(report) for report in reports]


def extract_quantitative_data(analysis: PoemAnalysis) -> QuantitativeData:
    """Flatten per-line measurements of ``analysis`` in reading order."""
    lines = analysis.iter_lines()
    return QuantitativeData(
        syllable_counts=[line.syllable_count for line in lines],
        stress_patterns=[line.stress_pattern for line in lines],
        rhyme_scheme=analysis.prosody.rhyme.scheme,
        meter_type=analysis.prosody.meter.detected_meter,
        emotional_scores=EmotionalScores(
            sentiment=analysis.emotion.overall_sentiment,
            arousal=analysis.emotion.arousal,
            dominant_emotions=list(analysis.emotion.dominant_emotions),
        ),
        singability_scores=[line.singability.line_score for line in lines],
    )
