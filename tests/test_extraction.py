import sys

import pytest

from pathway_graph.recovery.extraction import find_candidates, parse_direct, strip_code_fences
from pathway_graph.recovery.outcome import EXTRACTION_EMPTY, STRUCTURALLY_INVALID, is_recognized


def test_strip_code_fences_keeps_interior():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '\n{"a": 1}\n'


def test_strip_code_fences_drops_lone_marker():
    assert strip_code_fences('```json\n{"title": "T"') == '\n{"title": "T"'


def test_parse_direct_accepts_pathway_object(pathway_text):
    payload, error = parse_direct(pathway_text)
    assert error == ""
    assert payload["title"] == "Linear Algebra"


def test_parse_direct_reports_empty_text():
    assert parse_direct("   ") == (None, EXTRACTION_EMPTY)


def test_parse_direct_reports_decode_error():
    payload, error = parse_direct("{bad")
    assert payload is None
    assert error.startswith("json_decode_error")


def test_parse_direct_rejects_unrecognized_payload():
    assert parse_direct("[1, 2]") == (None, STRUCTURALLY_INVALID)
    assert parse_direct("{}") == (None, STRUCTURALLY_INVALID)


def test_is_recognized_needs_a_truthy_known_key():
    assert is_recognized({"title": "T"})
    assert is_recognized({"outline": [{}]})
    assert not is_recognized({"nodes": [], "edges": []})
    assert not is_recognized(["title"])


def test_find_candidates_longest_first_then_scan_order():
    text = 'a {"x": 1} b {"y": 2}'
    assert find_candidates(text) == ['{"x": 1} b {"y": 2}', '{"x": 1}', '{"y": 2}']


def test_find_candidates_ignores_braces_inside_strings():
    text = 'prefix {"title": "a } b", "nodes": []} suffix'
    assert find_candidates(text) == ['{"title": "a } b", "nodes": []}']


def test_find_candidates_adds_unclosed_tail_on_request():
    text = '{"a": 1} {"b": '
    assert find_candidates(text) == ['{"a": 1}']
    assert find_candidates(text, include_truncated=True) == ['{"a": 1}', '{"b": ']


def test_find_candidates_without_braces():
    assert find_candidates("no objects here") == []


def test_strip_code_fences_keeps_markers_inside_strings():
    text = '```json\n{"code": "```python\\nprint(1)\\n```", "note": "use ``` here"}\n```'
    assert strip_code_fences(text) == '\n{"code": "```python\\nprint(1)\\n```", "note": "use ``` here"}\n'


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no integer digit limit")
def test_parse_direct_reports_oversized_integer():
    payload, error = parse_direct('{"title": "T", "x": ' + "9" * 5000 + "}")
    assert payload is None
    assert error.startswith("json_decode_error")
