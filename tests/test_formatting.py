import json

from sibridge.formatting import format_result, to_json_text


class _Sample:
    def to_json(self):
        return "json-form"

    def to_string(self):
        return "string-form"

    def to_format(self):
        return "format-form"


def test_format_takes_priority():
    assert format_result(_Sample(), True, True) == "format-form"


def test_format_without_json_flag():
    assert format_result(_Sample(), True, False) == "format-form"


def test_json_when_not_formatted():
    assert format_result(_Sample(), False, True) == "json-form"


def test_plain_string_by_default():
    assert format_result(_Sample(), False, False) == "string-form"


def test_indented_json_uses_tabs():
    obj = {"k": [1, 2]}
    text = to_json_text(obj, indent=True)
    assert "\n\t" in text
    assert json.loads(text) == obj


def test_sorted_keys():
    text = to_json_text({"b": 1, "a": 2}, sort_keys=True)
    assert list(json.loads(text)) == ["a", "b"]