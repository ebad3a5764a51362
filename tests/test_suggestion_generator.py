from config import settings
from processing import (
    GeneratorOptions,
    SubstitutionTables,
    count_generatable_problems,
    generate_suggestions_from_analysis,
    has_generatable_problems,
)
from processing.suggestion_generator import (
    determine_meaning_preservation,
    extract_word_at_position,
    find_substitution,
)

from models import PoemAnalysis

TABLES = SubstitutionTables()


def test_generates_ranked_suggestions_with_audit_trail(poem_analysis):
    result = generate_suggestions_from_analysis(poem_analysis, tables=TABLES)

    assert [(s.original_word, s.suggested_word) for s in result.suggestions] == [
        ("strength", "power"),
        ("remember", "recall"),
        ("night", "sight"),
    ]
    assert result.problems_processed == 4
    assert result.problems_skipped == 1
    assert result.skip_reasons == ["Could not generate suggestion for line 2"]


def test_singability_substitution_preserves_meaning(poem_analysis):
    result = generate_suggestions_from_analysis(poem_analysis, tables=TABLES)
    first = result.suggestions[0]
    assert first.suggested_word == "power"
    assert first.preserves_meaning == "yes"
    assert first.line_number == 1
    assert first.position == 1
    assert first.reason == "Consonant cluster 'str' is hard to sustain"


def test_default_reason_and_rhyme_meaning(poem_analysis):
    result = generate_suggestions_from_analysis(poem_analysis, tables=TABLES)
    by_word = {s.original_word: s for s in result.suggestions}
    assert by_word["remember"].reason == (
        "The stress pattern of this word may not align with the musical beat."
    )
    assert by_word["night"].reason == (
        "This word breaks the rhyme scheme, consider an alternative."
    )
    assert by_word["night"].preserves_meaning == "partial"


def test_filters_by_severity_and_focus(poem_analysis):
    result = generate_suggestions_from_analysis(
        poem_analysis,
        GeneratorOptions(min_severity="medium", focus_types=("singability",)),
        tables=TABLES,
    )
    assert [s.original_word for s in result.suggestions] == ["strength"]
    assert result.problems_processed == 1
    assert result.problems_skipped == 3
    assert "Skipped line 3: severity low below threshold" in result.skip_reasons
    assert "Skipped line 2: type stress_mismatch not in focus" in result.skip_reasons


def test_stops_at_max_suggestions(poem_analysis):
    result = generate_suggestions_from_analysis(
        poem_analysis, GeneratorOptions(max_suggestions=1), tables=TABLES
    )
    assert len(result.suggestions) == 1
    assert result.problems_processed == 1


def test_max_suggestions_defaults_to_settings(poem_analysis, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_MAX_SUGGESTIONS", 2)
    result = generate_suggestions_from_analysis(poem_analysis, tables=TABLES)
    assert len(result.suggestions) == 2


def test_skips_duplicate_positions(analysis_data):
    analysis_data["problems"].append(
        {"line": 1, "position": 1, "type": "stress_mismatch", "severity": "low"}
    )
    analysis = PoemAnalysis.model_validate(analysis_data)
    result = generate_suggestions_from_analysis(analysis, tables=TABLES)
    assert "Skipped duplicate position: 1:1" in result.skip_reasons
    assert result.problems_processed == 4


def test_out_of_range_problem_cannot_generate(analysis_data):
    analysis_data["problems"] = [
        {"line": 9, "position": 0, "type": "singability", "severity": "high"}
    ]
    analysis = PoemAnalysis.model_validate(analysis_data)
    result = generate_suggestions_from_analysis(analysis, tables=TABLES)
    assert result.suggestions == []
    assert result.skip_reasons == ["Could not generate suggestion for line 9"]


def test_extract_word_falls_back_to_line_text(analysis_data):
    analysis_data["structure"]["stanzas"][0]["lines"][0]["words"] = []
    analysis_data["structure"]["stanzas"][0]["lines"][0]["text"] = "The Strength, of night"
    analysis = PoemAnalysis.model_validate(analysis_data)
    assert extract_word_at_position(analysis, 1, 1) == "strength"
    assert extract_word_at_position(analysis, 1, 10) is None


def test_find_substitution_fallback_tables():
    # syllable_variance has no table of its own
    assert find_substitution("because", "syllable_variance", None, TABLES) == "since"
    assert find_substitution("Strength", "rhyme_break", None, TABLES) == "power"
    assert find_substitution("unknown", "singability", None, TABLES) is None


def test_rhyme_avoids_words_already_in_line():
    line = "the light and sight of night"
    assert find_substitution("night", "rhyme_break", line, TABLES) == "bright"
    crowded = "light sight bright flight right night"
    assert find_substitution("night", "rhyme_break", crowded, TABLES) == "light"
    # "delight" contains "light" but is a different word
    assert find_substitution("night", "rhyme_break", "delight at night", TABLES) == "light"


def test_meaning_preservation_either_direction():
    assert determine_meaning_preservation("strength", "power", "singability", TABLES) == "yes"
    assert determine_meaning_preservation("power", "strength", "singability", TABLES) == "yes"
    assert determine_meaning_preservation("power", "might", "singability", TABLES) == "yes"
    assert determine_meaning_preservation("power", "cheese", "singability", TABLES) == "partial"
    assert determine_meaning_preservation("strength", "power", "rhyme_break", TABLES) == "partial"


def test_identical_substitution_is_skipped(analysis_data):
    tables = SubstitutionTables(singability={"strength": ["Strength"]})
    analysis_data["problems"] = [
        {"line": 1, "position": 1, "type": "singability", "severity": "high"}
    ]
    analysis = PoemAnalysis.model_validate(analysis_data)
    result = generate_suggestions_from_analysis(analysis, tables=tables)
    assert result.suggestions == []
    assert result.problems_skipped == 1


def test_generatable_problem_counts(poem_analysis):
    assert has_generatable_problems(poem_analysis)
    assert count_generatable_problems(poem_analysis) == 4
    high_only = GeneratorOptions(min_severity="high")
    assert count_generatable_problems(poem_analysis, high_only) == 1
    assert not has_generatable_problems(
        poem_analysis, GeneratorOptions(focus_types=())
    )
