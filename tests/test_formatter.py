from dataclasses import dataclass

import pytest

from composecli.errors import ParsingFailedError, is_parsing_failed_error
from composecli.formatter import (
    JSON,
    PRETTY,
    TEMPLATE_LEGACY_JSON,
    format_errors,
    print_list,
    print_pretty_section,
    tabwrite,
    to_json,
    to_standard_json,
)
import io

TEST_LIST = [
    {"Name": "myName1", "Status": "myStatus1"},
    {"Name": "myName2", "Status": "myStatus2"},
]


def _rows(w):
    for item in TEST_LIST:
        w.write(f"{item['Name']}\t{item['Status']}\n")


def test_print_pretty():
    out = io.StringIO()
    print_list(TEST_LIST, PRETTY, out, _rows, "NAME", "STATUS")
    assert out.getvalue() == (
        "NAME                STATUS\nmyName1             myStatus1\nmyName2             myStatus2\n"
    )


def test_print_json():
    out = io.StringIO()
    print_list(TEST_LIST, JSON, out, _rows, "NAME", "STATUS")
    assert out.getvalue() == (
        '[{"Name":"myName1","Status":"myStatus1"},{"Name":"myName2","Status":"myStatus2"}]\n'
    )


def test_print_legacy_json():
    out = io.StringIO()
    print_list(TEST_LIST, TEMPLATE_LEGACY_JSON, out, _rows, "NAME", "STATUS")
    assert out.getvalue() == (
        '{"Name":"myName1","Status":"myStatus1"}\n{"Name":"myName2","Status":"myStatus2"}\n'
    )


def test_print_empty_format_is_pretty():
    out = io.StringIO()
    print_list(TEST_LIST, "", out, _rows, "NAME", "STATUS")
    assert out.getvalue().startswith("NAME                STATUS\n")


def test_print_format_is_case_insensitive():
    out = io.StringIO()
    print_list(TEST_LIST, "JSON", out, _rows)
    assert out.getvalue().startswith('[{"Name":"myName1"')


def test_print_json_single_object():
    out = io.StringIO()
    print_list({"a": 1}, JSON, out, _rows)
    assert out.getvalue() == '{\n    "a": 1\n}\n\n'


def test_print_unknown_format():
    with pytest.raises(ParsingFailedError) as info:
        print_list(TEST_LIST, "xml", io.StringIO(), _rows)
    assert is_parsing_failed_error(info.value)
    assert 'format value "xml" could not be parsed' in str(info.value)


def test_to_json_does_not_escape_html():
    assert to_json({"k": "<a&b>"}) == '{"k":"<a&b>"}\n'


def test_to_standard_json_indents_four_spaces():
    assert to_standard_json({"a": [1, 2]}) == '{\n    "a": [\n        1,\n        2\n    ]\n}\n'


def test_to_json_with_prefix():
    assert to_json({"a": 1}, ">", " ") == '{\n> "a": 1\n>}\n'


@dataclass
class _Row:
    name: str
    count: int


def test_to_json_dataclass():
    assert to_json([_Row("x", 2)]) == '[{"name":"x","count":2}]\n'


def test_tabwrite_aligns_columns():
    assert tabwrite("a\tb\nccc\td\n", 0, 1) == "a   b\nccc d\n"


def test_tabwrite_single_cell_line_breaks_block():
    assert tabwrite("a\tb\nsingle\nlonger\tc\n", 0, 1) == "a b\nsingle\nlonger c\n"


def test_tabwrite_minwidth():
    assert tabwrite("a\tb\n", 5, 1) == "a    b\n"


def test_print_pretty_section_only_headers():
    out = io.StringIO()
    print_pretty_section(out, lambda w: None, "NAME", "STATUS")
    assert out.getvalue() == "NAME                STATUS\n"


def test_format_errors():
    errors = [ValueError("first"), RuntimeError("second")]
    assert format_errors(errors) == "Error: first\nError: second"


def test_format_errors_empty():
    assert format_errors([]) == ""