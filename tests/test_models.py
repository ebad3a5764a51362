import pytest
from pydantic import ValidationError

from models import (
    PoemAnalysis,
    ProblemSpot,
    QualitativeAnalysis,
    Suggestion,
    create_default_melody_feedback,
    create_default_qualitative_analysis,
    create_default_response_metadata,
    create_default_suggestion,
    extract_quantitative_data,
    problem_reports_to_problem_spots,
)


def test_suggestion_dumps_camel_case_aliases():
    suggestion = Suggestion(original_word="night", suggested_word="light", line_number=2)
    dumped = suggestion.model_dump(by_alias=True)
    assert dumped == {
        "originalWord": "night",
        "suggestedWord": "light",
        "lineNumber": 2,
        "position": 0,
        "reason": "",
        "preservesMeaning": "partial",
    }
    assert Suggestion.model_validate(dumped) == suggestion


def test_default_factories_are_neutral():
    assert create_default_suggestion().preserves_meaning == "partial"
    analysis = create_default_qualitative_analysis()
    assert analysis.confidence == 0
    assert analysis.emotional.secondary_themes == []
    assert create_default_melody_feedback().emotional_fit == "adequate"
    metadata = create_default_response_metadata(original_length=12)
    assert metadata.success and metadata.original_length == 12
    assert metadata.errors == [] and metadata.warnings == []


def test_qualitative_analysis_confidence_bounds():
    with pytest.raises(ValidationError):
        QualitativeAnalysis(confidence=1.2)


def test_poem_analysis_line_lookup(poem_analysis):
    assert [line.text for line in poem_analysis.iter_lines()][-1] == "Through the light of night"
    assert poem_analysis.get_line(2).text == "I remember the day"
    assert poem_analysis.get_line(0) is None
    assert poem_analysis.get_line(4) is None


def test_poem_analysis_rejects_unknown_problem_type(analysis_data):
    analysis_data["problems"][0]["type"] = "mystery"
    with pytest.raises(ValidationError):
        PoemAnalysis.model_validate(analysis_data)


def test_problem_reports_to_problem_spots(poem_analysis):
    spots = problem_reports_to_problem_spots(poem_analysis.problems)
    assert len(spots) == 4
    assert spots[2].model_dump() == {
        "line": 1,
        "position": 1,
        "type": "singability",
        "severity": "high",
        "description": "Consonant cluster 'str' is hard to sustain",
    }


def test_extract_quantitative_data(poem_analysis):
    data = extract_quantitative_data(poem_analysis)
    assert data.syllable_counts == [4, 6, 5]
    assert data.stress_patterns == ["0101", "101001", "10101"]
    assert data.singability_scores == [0.6, 0.8, 0.7]
    assert data.rhyme_scheme == "ABA"
    assert data.emotional_scores.dominant_emotions == ["longing", "hope"]
    assert data.emotional_scores.sentiment == 0.25


@pytest.mark.parametrize("field, value", [("severity", "critical"), ("type", "mystery")])
def test_problem_spot_rejects_unknown_labels(field, value):
    with pytest.raises(ValidationError):
        ProblemSpot(**{field: value})
