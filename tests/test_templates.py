import pytest
from prompting.templates import (
    EMOTIONAL_INTERPRETATION_TEMPLATE,
    MEANING_PRESERVATION_TEMPLATE,
    PROMPT_TEMPLATES,
    WORD_SUBSTITUTION_TEMPLATE,
    AlignmentIssue,
    InvalidTemplateError,
    MissingTemplateVariablesError,
    TemplateError,
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

from models import (
    AnalyzedLine,
    EmotionalArcEntry,
    ProblemSpot,
    PromptTemplate,
    PromptTemplateType,
)


def test_get_template_returns_registered_singleton():
    assert get_template("word_substitution") is WORD_SUBSTITUTION_TEMPLATE
    assert get_template(PromptTemplateType.MEANING_PRESERVATION) is (
        MEANING_PRESERVATION_TEMPLATE
    )


def test_get_template_unknown_type():
    with pytest.raises(UnknownTemplateTypeError, match="Unknown template type: nope"):
        get_template("nope")


def test_list_template_types_has_all_four():
    assert set(list_template_types()) == set(PromptTemplateType)
    assert len(list_template_types()) == 4


def test_validate_template_variables_reports_missing_required_only():
    result = validate_template_variables(
        MEANING_PRESERVATION_TEMPLATE, {"poem": "p", "meterType": "iambic"}
    )
    assert not result.is_valid
    assert result.missing == ["dominantEmotions", "rhymeScheme"]

    complete = validate_template_variables(
        MEANING_PRESERVATION_TEMPLATE,
        {"poem": "p", "dominantEmotions": "joy", "meterType": "m", "rhymeScheme": "AABB"},
    )
    assert complete.is_valid
    assert complete.missing == []


def test_fill_template_raises_for_missing_required():
    with pytest.raises(MissingTemplateVariablesError) as exc_info:
        fill_template(EMOTIONAL_INTERPRETATION_TEMPLATE, {"poem": "p"})
    assert isinstance(exc_info.value, TemplateError)
    assert exc_info.value.template_type is PromptTemplateType.EMOTIONAL_INTERPRETATION
    assert "arousal" in exc_info.value.missing
    assert str(exc_info.value).startswith("Missing required template variables:")


def test_fill_template_substitutes_every_occurrence():
    template = PromptTemplate(
        type=PromptTemplateType.WORD_SUBSTITUTION,
        template="{{word}} and {{word}} again, {{extra}}",
        required_variables=("word",),
        optional_variables={"extra": "default"},
    )
    assert fill_template(template, {"word": "night"}) == "night and night again, default"
    assert fill_template(template, {"word": "x", "extra": "given"}) == "x and x again, given"


def test_fill_template_does_not_render_inserted_values():
    template = PromptTemplate(
        type=PromptTemplateType.WORD_SUBSTITUTION,
        template="Poem: {{poem}}",
        required_variables=("poem",),
    )
    assert fill_template(template, {"poem": "{{ not a placeholder }}"}) == (
        "Poem: {{ not a placeholder }}"
    )


def test_fill_template_rejects_invalid_template_text():
    template = PromptTemplate(
        type=PromptTemplateType.WORD_SUBSTITUTION,
        template="Rate it {% of 100 }}. Poem: {{poem}}",
        required_variables=("poem",),
    )
    with pytest.raises(InvalidTemplateError) as exc_info:
        fill_template(template, {"poem": "x"})
    assert isinstance(exc_info.value, TemplateError)
    assert exc_info.value.template_type is PromptTemplateType.WORD_SUBSTITUTION


def test_fill_template_reports_undeclared_placeholder():
    template = PromptTemplate(
        type=PromptTemplateType.MELODY_FEEDBACK,
        template="{{poem}} {{tone}}",
        required_variables=("poem",),
    )
    with pytest.raises(MissingTemplateVariablesError) as exc_info:
        fill_template(template, {"poem": "x"})
    assert exc_info.value.missing == ["tone"]

def test_word_substitution_uses_default_max_suggestions():
    variables = dict.fromkeys(WORD_SUBSTITUTION_TEMPLATE.required_variables, "v")
    assert "Maximum 10 suggestions" in fill_template(WORD_SUBSTITUTION_TEMPLATE, variables)
    variables["maxSuggestions"] = "3"
    assert "Maximum 3 suggestions" in fill_template(WORD_SUBSTITUTION_TEMPLATE, variables)


def test_filled_templates_leave_no_placeholders():
    for template in PROMPT_TEMPLATES.values():
        variables = dict.fromkeys(template.required_variables, "value")
        assert "{{" not in fill_template(template, variables)


def test_escape_for_template():
    assert escape_for_template("a\\b `c` $d") == "a\\\\b \\`c\\` \\$d"
    assert escape_for_template("plain") == "plain"


def test_format_problem_spots():
    assert format_problem_spots([]) == "No specific problem spots identified."
    spots = [
        ProblemSpot(line=1, position=2, type="singability", severity="high", description="cluster"),
        ProblemSpot(line=3, position=0, type="rhyme_break", severity="low", description="off"),
    ]
    formatted = format_problem_spots(spots)
    assert formatted.startswith(
        "1. Line 1, Position 2:\n   Type: singability\n   Severity: high\n   Issue: cluster"
    )
    assert "\n\n2. Line 3, Position 0:" in formatted


def test_format_emotional_arc():
    assert format_emotional_arc([]) == "No emotional arc data available."
    arc = [
        EmotionalArcEntry(stanza=0, sentiment=0.5, keywords=["dawn", "light"]),
        EmotionalArcEntry(stanza=1, sentiment=0.1),
        EmotionalArcEntry(stanza=2, sentiment=-0.35),
    ]
    assert format_emotional_arc(arc).splitlines() == [
        "Stanza 1: positive (0.50) - Keywords: dawn, light",
        "Stanza 2: neutral (0.10)",
        "Stanza 3: negative (-0.35)",
    ]


def test_format_stress_alignment():
    lines = [
        AnalyzedLine(text="First line", stress_pattern="1010"),
        AnalyzedLine(text="Second line"),
    ]
    clean = format_stress_alignment(lines, [])
    assert clean == (
        'Line 1: "First line"\n  Pattern: 1010\n'
        'Line 2: "Second line"\n  Pattern: N/A\n\n'
        "No alignment issues detected."
    )

    with_issues = format_stress_alignment(
        lines, [AlignmentIssue(line=2, issues=["clash", "cluster"])]
    )
    assert with_issues.endswith("Alignment Issues:\nLine 2: clash; cluster")
