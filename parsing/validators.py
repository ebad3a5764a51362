# parsing/validators.py
"""Structural checks, normalization and salvage for decoded model output.

Each result type has a type guard (``is_*``), a normalizer used when the guard
passes, and a ``salvage_*`` function used when it does not. Salvage copies every
field that is independently well-typed, defaults the rest, and returns ``None``
when nothing meaningful survives.
"""

from __future__ import annotations

import math
from typing import Any

import structlog

from models import (
    EMOTIONAL_FIT_VALUES,
    MEANING_PRESERVATION_VALUES,
    EmotionalInterpretation,
    MeaningAssessment,
    MelodyFeedback,
    QualitativeAnalysis,
    Suggestion,
)

logger = structlog.get_logger(__name__)

_EMOTIONAL_KEYS = ("primaryTheme", "secondaryThemes", "emotionalJourney", "keyImagery", "mood")
_MEANING_KEYS = ("coreTheme", "essentialElements", "flexibleElements", "authorVoice")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _as_int(value: Any) -> int:
    return int(value) if _is_integral(value) else 0


def clamp_confidence(value: Any) -> float:
    """Clamp a numeric confidence into [0, 1]; anything else becomes 0."""
    if not _is_number(value) or math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, float(value)))


# --- Suggestions -----------------------------------------------------------


def is_suggestion(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    return (
        isinstance(obj.get("originalWord"), str)
        and isinstance(obj.get("suggestedWord"), str)
        and _is_integral(obj.get("lineNumber"))
        and _is_integral(obj.get("position"))
        and isinstance(obj.get("reason"), str)
        and obj.get("preservesMeaning") in MEANING_PRESERVATION_VALUES
    )


def normalize_suggestion(obj: dict[str, Any]) -> Suggestion:
    """Build a ``Suggestion`` from a dict that passed ``is_suggestion``."""
    return Suggestion(
        original_word=obj["originalWord"],
        suggested_word=obj["suggestedWord"],
        line_number=int(obj["lineNumber"]),
        position=int(obj["position"]),
        reason=obj["reason"],
        preserves_meaning=obj["preservesMeaning"],
    )


def salvage_suggestion(obj: Any) -> Suggestion | None:
    """Repair a partial suggestion; both words must be non-empty text."""
    if not isinstance(obj, dict):
        return None

    original_word = _as_str(obj.get("originalWord"))
    suggested_word = _as_str(obj.get("suggestedWord"))
    if not original_word or not suggested_word:
        return None

    preserves_meaning = obj.get("preservesMeaning")
    if preserves_meaning not in MEANING_PRESERVATION_VALUES:
        preserves_meaning = "partial"

    return Suggestion(
        original_word=original_word,
        suggested_word=suggested_word,
        line_number=_as_int(obj.get("lineNumber")),
        position=_as_int(obj.get("position")),
        reason=_as_str(obj.get("reason")),
        preserves_meaning=preserves_meaning,
    )


# --- Qualitative analysis --------------------------------------------------


def is_qualitative_analysis(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    return (
        isinstance(obj.get("emotional"), dict)
        and isinstance(obj.get("meaning"), dict)
        and isinstance(obj.get("summary"), str)
        and _is_number(obj.get("confidence"))
    )


def _emotional_section(obj: dict[str, Any]) -> dict[str, Any]:
    section = obj.get("emotional")
    if isinstance(section, dict):
        return section
    # The emotional sub-prompt alone answers with the fields at the top level
    if any(key in obj for key in _EMOTIONAL_KEYS):
        return obj
    return {}


def _meaning_section(obj: dict[str, Any]) -> dict[str, Any]:
    section = obj.get("meaning")
    if isinstance(section, dict):
        return section
    if any(key in obj for key in _MEANING_KEYS):
        return obj
    return {}


def _build_emotional(section: dict[str, Any]) -> EmotionalInterpretation:
    return EmotionalInterpretation(
        primary_theme=_as_str(section.get("primaryTheme")),
        secondary_themes=_as_str_list(section.get("secondaryThemes")),
        emotional_journey=_as_str(section.get("emotionalJourney")),
        key_imagery=_as_str_list(section.get("keyImagery")),
        mood=_as_str(section.get("mood")),
    )


def _build_meaning(section: dict[str, Any]) -> MeaningAssessment:
    return MeaningAssessment(
        core_theme=_as_str(section.get("coreTheme")),
        essential_elements=_as_str_list(section.get("essentialElements")),
        flexible_elements=_as_str_list(section.get("flexibleElements")),
        author_voice=_as_str(section.get("authorVoice")),
    )


def normalize_qualitative_analysis(obj: dict[str, Any]) -> QualitativeAnalysis:
    """Coerce arrays, default strings and clamp ``confidence``."""
    return QualitativeAnalysis(
        emotional=_build_emotional(obj["emotional"]),
        meaning=_build_meaning(obj["meaning"]),
        summary=_as_str(obj.get("summary")),
        confidence=clamp_confidence(obj.get("confidence")),
    )


def salvage_qualitative_analysis(obj: Any) -> QualitativeAnalysis | None:
    if not isinstance(obj, dict):
        return None

    analysis = QualitativeAnalysis(
        emotional=_build_emotional(_emotional_section(obj)),
        meaning=_build_meaning(_meaning_section(obj)),
        summary=_as_str(obj.get("summary")),
        confidence=clamp_confidence(obj.get("confidence")),
    )

    emotional, meaning = analysis.emotional, analysis.meaning
    has_emotional_data = bool(
        emotional.primary_theme or emotional.secondary_themes or emotional.mood
    )
    has_meaning_data = bool(meaning.core_theme or meaning.essential_elements)
    if has_emotional_data or has_meaning_data or analysis.summary:
        return analysis

    logger.debug("Analysis salvage found no meaningful fields", keys=list(obj)[:10])
    return None


# --- Melody feedback -------------------------------------------------------


def is_melody_feedback(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    return (
        obj.get("emotionalFit") in EMOTIONAL_FIT_VALUES
        and isinstance(obj.get("observations"), list)
        and isinstance(obj.get("improvements"), list)
        and isinstance(obj.get("highlights"), list)
    )


def normalize_melody_feedback(obj: dict[str, Any]) -> MelodyFeedback:
    return MelodyFeedback(
        emotional_fit=obj["emotionalFit"],
        observations=_as_str_list(obj.get("observations")),
        improvements=_as_str_list(obj.get("improvements")),
        highlights=_as_str_list(obj.get("highlights")),
    )


def salvage_melody_feedback(obj: Any) -> MelodyFeedback | None:
    """Repair partial feedback, falling back to ``overallAssessment`` as an observation."""
    if not isinstance(obj, dict):
        return None

    emotional_fit = obj.get("emotionalFit")
    if emotional_fit not in EMOTIONAL_FIT_VALUES:
        emotional_fit = "adequate"

    feedback = MelodyFeedback(
        emotional_fit=emotional_fit,
        observations=_as_str_list(obj.get("observations")),
        improvements=_as_str_list(obj.get("improvements")),
        highlights=_as_str_list(obj.get("highlights")),
    )
    if feedback.observations or feedback.improvements or feedback.highlights:
        return feedback

    overall = obj.get("overallAssessment")
    if isinstance(overall, str) and overall:
        feedback.observations.append(overall)
        return feedback

    return None
