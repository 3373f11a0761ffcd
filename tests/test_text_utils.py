import pytest

from bigview.text_utils import Span, char_len, safe_substring, split_line_into_spans


def test_safe_substring():
    text = "Hello, 世界!"
    assert safe_substring(text, 0, 5) == "Hello"
    assert safe_substring(text, 7, 9) == "世界"
    assert safe_substring(text, 0, 100) == text
    assert safe_substring(text, 100, 200) == ""


def test_safe_substring_reversed_bounds_is_empty():
    assert safe_substring("Hello", 4, 2) == ""


def test_char_len():
    assert char_len("Hello") == 5
    assert char_len("世界") == 2
    assert char_len("") == 0


def test_no_ranges_gives_single_plain_span():
    assert split_line_into_spans("hello world", []) == [Span("hello world")]


def test_single_range_splits_line():
    spans = split_line_into_spans("hello world", [(0, 5, "A")])
    assert spans == [Span("hello", "A"), Span(" world", None)]


def test_range_in_middle():
    spans = split_line_into_spans("hello world", [(6, 11, "A")])
    assert spans == [Span("hello ", None), Span("world", "A")]


def test_overlapping_ranges_latest_active_wins():
    spans = split_line_into_spans("hello world", [(0, 5, "A"), (2, 4, "B")])
    assert spans == [
        Span("he", "A"),
        Span("ll", "B"),
        Span("o", "A"),
        Span(" world", None),
    ]


def test_ranges_clamped_to_line_length():
    assert split_line_into_spans("hello", [(5, 100, "A")]) == [Span("hello", None)]
    assert split_line_into_spans("hello", [(3, 100, "A")]) == [
        Span("hel", None),
        Span("lo", "A"),
    ]


def test_unicode_ranges_use_character_positions():
    spans = split_line_into_spans("Hello, 世界!", [(7, 9, "X")])
    assert spans == [Span("Hello, ", None), Span("世界", "X"), Span("!", None)]


@pytest.mark.parametrize(
    "ranges",
    [
        [(0, 3, "A")],
        [(1, 4, "A"), (2, 8, "B")],
        [(5, 2, "A"), (0, 100, "B")],
        [(3, 3, "A")],
    ],
)
def test_spans_reassemble_original_line(ranges):
    line = "abcdefghij"
    spans = split_line_into_spans(line, ranges)
    assert "".join(span.text for span in spans) == line
    assert all(span.text for span in spans)