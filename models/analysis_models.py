# models/analysis_models.py
"""Read-only view of the quantitative poem analysis consumed by the pipeline.

The analysis engine itself lives elsewhere; these models only describe the
parts of its output that prompts and heuristics read. Unknown keys are ignored
so a full analysis document validates as-is.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["low", "medium", "high"]
ProblemType = Literal["stress_mismatch", "syllable_variance", "singability", "rhyme_break"]

SEVERITY_ORDER: dict[str, int] = {"low": 1, "medium": 2, "high": 3}
PROBLEM_TYPES: tuple[str, ...] = (
    "stress_mismatch",
    "syllable_variance",
    "singability",
    "rhyme_break",
)


class AnalysisBaseModel(BaseModel):
    """Base model accepting the analysis engine's camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class AnalyzedWord(AnalysisBaseModel):
    text: str


class SingabilityProblem(AnalysisBaseModel):
    """A singability problem located at a syllable of one line."""

    position: int
    issue: str
    severity: Severity


class SingabilityScore(AnalysisBaseModel):
    syllable_scores: list[float] = Field(default_factory=list)
    line_score: float = 0.0
    problem_spots: list[SingabilityProblem] = Field(default_factory=list)


class AnalyzedLine(AnalysisBaseModel):
    """One line of the poem with its prosodic measurements."""

    text: str
    words: list[AnalyzedWord] = Field(default_factory=list)
    stress_pattern: str = ""
    syllable_count: int = 0
    singability: SingabilityScore = Field(default_factory=SingabilityScore)


class AnalyzedStanza(AnalysisBaseModel):
    lines: list[AnalyzedLine] = Field(default_factory=list)


class StructuredPoem(AnalysisBaseModel):
    stanzas: list[AnalyzedStanza] = Field(default_factory=list)


class MeterAnalysis(AnalysisBaseModel):
    pattern: str = ""
    detected_meter: str = ""
    confidence: float = 0.0


class RhymeAnalysis(AnalysisBaseModel):
    scheme: str = ""


class ProsodyAnalysis(AnalysisBaseModel):
    meter: MeterAnalysis = Field(default_factory=MeterAnalysis)
    rhyme: RhymeAnalysis = Field(default_factory=RhymeAnalysis)
    regularity: float = 0.0


class EmotionalArcEntry(AnalysisBaseModel):
    """Sentiment of one stanza (``stanza`` is 0-indexed)."""

    stanza: int
    sentiment: float
    keywords: list[str] = Field(default_factory=list)


class EmotionalAnalysis(AnalysisBaseModel):
    overall_sentiment: float = 0.0
    arousal: float = 0.0
    dominant_emotions: list[str] = Field(default_factory=list)
    emotional_arc: list[EmotionalArcEntry] = Field(default_factory=list)


class MetaInfo(AnalysisBaseModel):
    title: str | None = None
    line_count: int = 0
    stanza_count: int = 0


class ProblemReport(AnalysisBaseModel):
    """A located defect in a poem line (``line`` is 1-indexed)."""

    line: int
    position: int
    type: ProblemType
    severity: Severity
    description: str = ""
    suggested_fix: str | None = None


class PoemAnalysis(AnalysisBaseModel):
    """Root of the quantitative analysis document."""

    meta: MetaInfo = Field(default_factory=MetaInfo)
    structure: StructuredPoem = Field(default_factory=StructuredPoem)
    prosody: ProsodyAnalysis = Field(default_factory=ProsodyAnalysis)
    emotion: EmotionalAnalysis = Field(default_factory=EmotionalAnalysis)
    problems: list[ProblemReport] = Field(default_factory=list)

    def iter_lines(self) -> list[AnalyzedLine]:
        """Return every line of the poem in reading order."""
        return [line for stanza in self.structure.stanzas for line in stanza.lines]

    def get_line(self, line_number: int) -> AnalyzedLine | None:
        """Return the 1-indexed line, or ``None`` when out of range."""
        lines = self.iter_lines()
        if 1 <= line_number <= len(lines):
            return lines[line_number - 1]
        return None
