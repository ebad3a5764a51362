"""Central package for lyricsmith data models."""

from .analysis_models import (
    PROBLEM_TYPES,
    SEVERITY_ORDER,
    AnalyzedLine,
    AnalyzedStanza,
    AnalyzedWord,
    EmotionalAnalysis,
    EmotionalArcEntry,
    MeterAnalysis,
    PoemAnalysis,
    ProblemReport,
    ProblemType,
    ProsodyAnalysis,
    RhymeAnalysis,
    Severity,
    SingabilityProblem,
    SingabilityScore,
    StructuredPoem,
)
from .lyric_models import (
    EMOTIONAL_FIT_VALUES,
    MEANING_PRESERVATION_VALUES,
    AnalysisContext,
    EmotionalFit,
    EmotionalInterpretation,
    EmotionalScores,
    MeaningAssessment,
    MeaningPreservation,
    MelodyFeedback,
    MelodyParameters,
    ProblemSpot,
    PromptTemplate,
    PromptTemplateType,
    QualitativeAnalysis,
    QuantitativeData,
    ResponseMetadata,
    Suggestion,
    SuggestionContext,
    create_default_melody_feedback,
    create_default_problem_spot,
    create_default_qualitative_analysis,
    create_default_response_metadata,
    create_default_suggestion,
    extract_quantitative_data,
    problem_report_to_problem_spot,
    problem_reports_to_problem_spots,
)

__all__ = [
    "PROBLEM_TYPES",
    "SEVERITY_ORDER",
    "AnalyzedLine",
    "AnalyzedStanza",
    "AnalyzedWord",
    "EmotionalAnalysis",
    "EmotionalArcEntry",
    "MeterAnalysis",
    "PoemAnalysis",
    "ProblemReport",
    "ProblemType",
    "ProsodyAnalysis",
    "RhymeAnalysis",
    "Severity",
    "SingabilityProblem",
    "SingabilityScore",
    "StructuredPoem",
    "EMOTIONAL_FIT_VALUES",
    "MEANING_PRESERVATION_VALUES",
    "AnalysisContext",
    "EmotionalFit",
    "EmotionalInterpretation",
    "EmotionalScores",
    "MeaningAssessment",
    "MeaningPreservation",
    "MelodyFeedback",
    "MelodyParameters",
    "ProblemSpot",
    "PromptTemplate",
    "PromptTemplateType",
    "QualitativeAnalysis",
    "QuantitativeData",
    "ResponseMetadata",
    "Suggestion",
    "SuggestionContext",
    "create_default_melody_feedback",
    "create_default_problem_spot",
    "create_default_qualitative_analysis",
    "create_default_response_metadata",
    "create_default_suggestion",
    "extract_quantitative_data",
    "problem_report_to_problem_spot",
    "problem_reports_to_problem_spots",
]
