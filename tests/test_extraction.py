from parsing.extraction import extract_json, repair_json, safe_json_parse


def test_extract_json_prefers_json_fence_over_surrounding_prose():
    response = 'Some prose {not json} and then:\n```json\n{"a": 1}\n```\nDone.'
    assert extract_json(response) == '{"a": 1}'


def test_extract_json_skips_fences_without_json():
    response = (
        "```python\nprint('hi')\n```\n"
        "and the answer:\n```\n[1, 2, 3]\n```"
    )
    assert extract_json(response) == "[1, 2, 3]"


def test_extract_json_uses_later_json_fence_when_first_is_not_json():
    response = "```json\nnot really json\n```\n```json\n{\"b\": 2}\n```"
    assert extract_json(response) == '{"b": 2}'


def test_extract_json_returns_raw_json_text():
    assert extract_json('  [{"x": 1}]  ') == '[{"x": 1}]'


def test_extract_json_finds_embedded_object_before_array():
    response = 'Here you go: {"items": [1, 2]} hope that helps'
    assert extract_json(response) == '{"items": [1, 2]}'


def test_extract_json_finds_embedded_array():
    response = "Result: [1, 2, 3] end"
    assert extract_json(response) == "[1, 2, 3]"


def test_extract_json_none_for_plain_text_and_empty():
    assert extract_json("Just some text without structure.") is None
    assert extract_json("") is None
    assert extract_json(None) is None


def test_repair_json_trailing_commas_and_unquoted_keys():
    assert repair_json('{"a": 1, "b": [1, 2,],}') == '{"a": 1, "b": [1, 2]}'
    assert repair_json("{a: 1, b: 2}") == '{"a": 1, "b": 2}'


def test_safe_json_parse_strict_success():
    result = safe_json_parse('{"a": 1}')
    assert result.success
    assert result.value == {"a": 1}
    assert not result.repaired


def test_safe_json_parse_repairs_trailing_comma():
    result = safe_json_parse('[{"originalWord": "x",}]')
    assert result.success
    assert result.repaired
    assert result.value == [{"originalWord": "x"}]


def test_safe_json_parse_failure_never_raises():
    result = safe_json_parse("{not: [valid")
    assert not result.success
    assert result.value is None
    assert result.error
