import re

import pytest

from papermark.parser import (
    Failure,
    Match,
    NoMatch,
    Parser,
    Span,
    Stream,
    alternation,
    delimited,
    eof,
    literal,
    mapValue,
    oneOrMore,
    optional,
    preceded,
    recognize,
    regex,
    sequence,
    succeeded,
    suppress,
    takeWhile0,
    takeWhile1,
    zeroOrMore,
)
from papermark.parser.result import Fail


def boom(s: Stream, start: int) -> Failure:
    return Fail(start, "boom")


def test_literal_matches_verbatim() -> None:
    assert literal("ab").parse("abc") == Match("ab", Span(0, 2))


def test_literal_reports_nomatch_at_its_offset() -> None:
    assert literal("b").parse("abc") == NoMatch(0)
    assert literal("c").parse("abc", 2) == Match("c", Span(2, 3))


def test_regex_is_anchored_at_the_offset() -> None:
    digits = regex(r"[0-9]+")

    assert digits.parse("ab12", 2) == Match("12", Span(2, 4))
    assert digits.parse("ab12") == NoMatch(0)


def test_sequence_collects_values() -> None:
    res = sequence("a", "b").parse("abc")

    assert res == Match(["a", "b"], Span(0, 2))


def test_sequence_nomatch_if_any_part_misses() -> None:
    assert sequence("a", "x").parse("abc") == NoMatch(0)


def test_sequence_skips_suppressed_values() -> None:
    res = sequence("a", suppress("b"), "c").parse("abc")

    assert res.value == ["a", "c"]
    assert res.span == Span(0, 3)


def test_alternation_takes_the_first_match() -> None:
    assert alternation("ab", "a").parse("abc").value == "ab"
    assert alternation("a", "ab").parse("abc").value == "a"
    assert alternation("x", "y").parse("abc") == NoMatch(0)


def test_alternation_propagates_failure() -> None:
    res = alternation(Parser(boom), "a").parse("a")

    assert res == Failure(0, "boom")


def test_optional_never_misses() -> None:
    assert optional("x").parse("abc") == Match(None, Span(0, 0))
    assert optional("x", default="d").parse("abc").value == "d"
    assert optional("a").parse("abc") == Match("a", Span(0, 1))


def test_one_or_more_is_greedy() -> None:
    assert oneOrMore("ab").parse("ababx") == Match(["ab", "ab"], Span(0, 4))
    assert oneOrMore("x").parse("abc") == NoMatch(0)


def test_one_or_more_stops_on_zero_width_repetition() -> None:
    res = oneOrMore(optional("x")).parse("abc")

    assert res == Match([None], Span(0, 0))


def test_zero_or_more_returns_a_fresh_list() -> None:
    p = zeroOrMore("x")
    first = p.parse("abc")
    first.value.append("oops")

    assert first.span == Span(0, 0)
    assert p.parse("abc").value == []


def test_take_while() -> None:
    isDigit = str.isdigit

    assert takeWhile1(isDigit).parse("12a") == Match("12", Span(0, 2))
    assert takeWhile1(isDigit).parse("a") == NoMatch(0)
    assert takeWhile0(isDigit).parse("a") == Match("", Span(0, 0))


def test_map_transforms_the_value_and_keeps_the_span() -> None:
    res = literal("12").map(lambda span, val: int(val)).parse("12")

    assert res == Match(12, Span(0, 2))


def test_map_turns_exceptions_into_failures() -> None:
    res = literal("12").map(lambda span, val: int("twelve")).parse("12")

    assert isinstance(res, Failure)
    assert res.index == 0
    assert isinstance(res.error, ValueError)


def test_map_can_return_a_failure() -> None:
    res = mapValue("a", lambda span, val: Fail(span.start, "nope")).parse("a")

    assert res == Failure(0, "nope")


def test_recognize_returns_the_source_text() -> None:
    res = recognize(sequence("a", optional("x"), "b")).parse("abc")

    assert res == Match("ab", Span(0, 2))


def test_preceded_succeeded_delimited() -> None:
    assert preceded("[", "a").parse("[a]") == Match("a", Span(0, 2))
    assert succeeded("a", "]").parse("a]") == Match("a", Span(0, 2))
    assert delimited("[", "a", "]").parse("[a]") == Match("a", Span(0, 3))
    assert delimited("[", "a", "]").parse("[a") == NoMatch(0)


def test_failure_unwinds_through_sequences() -> None:
    res = sequence("a", oneOrMore(Parser(boom))).parse("ab")

    assert res == Failure(1, "boom")


def test_eof() -> None:
    assert eof().parse("") == Match(None, Span(0, 0))
    assert sequence("a", eof()).parse("a") == Match(["a", None], Span(0, 1))
    assert sequence("a", eof()).parse("ab") == NoMatch(0)


def test_arguments_are_lifted_into_parsers() -> None:
    res = sequence(re.compile(r"[a-z]+"), "1").parse("ab1")

    assert res.value == ["ab", "1"]
    assert literal("x").orElse("a").parse("a").value == "a"


def test_unusable_arguments_are_rejected() -> None:
    with pytest.raises(TypeError):
        sequence(5)


def test_parse_accepts_a_stream() -> None:
    assert literal("a").parse(Stream("ba"), 1) == Match("a", Span(1, 2))


def test_span_rejects_backwards_ranges() -> None:
    with pytest.raises(ValueError):
        Span(3, 1)
    assert Span(1, 1).width == 0
    assert Span(4, 6).join(Span(1, 2)) == Span(1, 6)


def test_stream_locations() -> None:
    s = Stream("ab\ncd", context="notes.txt")

    assert s.loc(0) == "1:1 of notes.txt"
    assert s.loc(3) == "2:1 of notes.txt"
    assert s.loc(4) == "2:2 of notes.txt"
    assert Stream("ab\ncd", startLine=10).loc(3) == "11:1"
