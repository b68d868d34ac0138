from __future__ import annotations

import re
from collections.abc import Iterator

from mesh_log_annotator.core.annotation import (
    annotate,
    extract_annotated_spans,
    format_annotation,
)
from mesh_log_annotator.core.models import AnnotatedSpan

_SPAN_SHAPE = re.compile(r"\(![0-9a-fA-F]{8}\)")


def test_annotate_returns_input_when_nothing_matches() -> None:
    text = "from: 100\nto: 200"
    assert annotate(text, [7, 300]) is text


def test_annotate_empty_inputs() -> None:
    assert annotate("", []) == ""
    assert annotate("", [1, 2]) == ""
    text = "hop_limit: 3"
    assert annotate(text, []) is text


def test_annotate_single_id() -> None:
    assert annotate("from: 2885173132", [2885173132]) == "from: 2885173132 (!abf83f8c)"


def test_format_annotation_shape() -> None:
    assert format_annotation(2885173132) == " (!abf83f8c)"


def test_annotate_searches_unsigned_decimal_for_signed_ids() -> None:
    text = "to: 2885176588"
    assert annotate(text, [-1409790708]) == "to: 2885176588 (!abf84d0c)"
    # The signed text form is never searched for.
    signed_only = "to: -1409790708"
    assert annotate(signed_only, [-1409790708]) is signed_only


def test_annotate_first_occurrence_only() -> None:
    text = "from: 100\nto: 100"
    assert annotate(text, [100]) == "from: 100 (!00000064)\nto: 100"


def test_annotate_multiple_candidates_in_order() -> None:
    assert annotate("a:100 b:200", [100, 200]) == "a:100 (!00000064) b:200 (!000000c8)"


def test_annotate_later_candidate_before_earlier_insertion() -> None:
    assert annotate("a:200 b:100", [100, 200]) == "a:200 (!000000c8) b:100 (!00000064)"


def test_annotate_duplicate_candidates_collapse() -> None:
    text = "to: 2885176588"
    out = annotate(text, [2885176588, -1409790708, 2885176588])
    assert out == "to: 2885176588 (!abf84d0c)"


def test_annotate_matches_inside_larger_numbers() -> None:
    # Plain substring search: digits inside an unrelated number are matched too.
    assert annotate("rx_time: 316400569", [6400]) == "rx_time: 316400 (!00001900)569"


def test_annotate_searches_previously_inserted_text() -> None:
    assert annotate("x: 100", [100, 64]) == "x: 100 (!00000064 (!00000040))"


def test_extract_spans_at_end_of_line() -> None:
    text = "from: 2885173132 (!abf83f8c)\nto: 5"
    spans = list(extract_annotated_spans(text))
    assert spans == [AnnotatedSpan(start=17, end=28)]
    assert spans[0].slice(text) == "(!abf83f8c)"
    assert spans[0].length == 11


def test_extract_spans_ignores_mid_line_matches() -> None:
    assert list(extract_annotated_spans("x (!abf83f8c) y")) == []
    assert list(extract_annotated_spans("x (!abf83f8c)")) == [AnnotatedSpan(start=2, end=13)]


def test_extract_spans_before_trailing_newline_and_uppercase() -> None:
    text = "num: 1 (!ABCDEF12)\n"
    spans = list(extract_annotated_spans(text))
    assert [s.slice(text) for s in spans] == ["(!ABCDEF12)"]


def test_extract_spans_rejects_wrong_width() -> None:
    assert list(extract_annotated_spans("a (!abc)\nb (!123456789)")) == []


def test_extract_spans_reverse_order_by_default() -> None:
    text = "from: 1 (!00000001)\nto: 2 (!00000002)"
    spans = list(extract_annotated_spans(text))
    assert [s.slice(text) for s in spans] == ["(!00000002)", "(!00000001)"]
    forward = list(extract_annotated_spans(text, reverse=False))
    assert forward == list(reversed(spans))


def test_extract_spans_is_lazy_and_empty_for_empty_text() -> None:
    result = extract_annotated_spans("")
    assert isinstance(result, Iterator)
    assert list(result) == []


def test_annotate_then_extract_round_trip() -> None:
    text = "from: 2885173132\nid: 1737414295\nto: 2885176588"
    out = annotate(text, [-1409794164, -1409790708, 999, 2885176588])

    spans = list(extract_annotated_spans(out, reverse=False))

    assert len(spans) == 2
    assert all(_SPAN_SHAPE.fullmatch(s.slice(out)) for s in spans)
    assert [s.slice(out) for s in spans] == ["(!abf83f8c)", "(!abf84d0c)"]


def test_extract_spans_crlf_round_trip() -> None:
    out = annotate("from: 5\r\nto: 6", [5, 6])
    assert out == "from: 5 (!00000005)\r\nto: 6 (!00000006)"

    spans = list(extract_annotated_spans(out, reverse=False))

    assert spans == [AnnotatedSpan(start=8, end=19), AnnotatedSpan(start=27, end=38)]


def test_extract_spans_other_line_terminators() -> None:
    text = "a: 1 (!00000001)\rb: 2 (!00000002)\u2028c: 3 (!00000003)\u0085d (!00000004) e\r\n"
    spans = list(extract_annotated_spans(text, reverse=False))
    assert [s.slice(text) for s in spans] == ["(!00000001)", "(!00000002)", "(!00000003)"]
