from __future__ import annotations

import dataclasses
import re

from .. import t
from .result import Err, Fail, Failure, Ok, ResultT, Span, isFailure, isNoMatch, isOk
from .stream import Stream

# A small parser-combinator engine, in the spirit of Rust's `nom`.
#
# Every parser is a pure function from (Stream, start index) to a result:
# * a Match, holding the value and the Span it covers,
# * a NoMatch, meaning "not here" (alternation() just tries the next option),
# * or a Failure, which unwinds the entire parse.
# Parsers hold no state, so they can be built once at import time
# and shared freely, including across threads.

ValT = t.TypeVar("ValT")
OtherValT = t.TypeVar("OtherValT")

if t.TYPE_CHECKING:
    ParseFnT: t.TypeAlias = t.Callable[[Stream, int], ResultT[t.Any]]
    ParserLikeT: t.TypeAlias = "Parser[t.Any] | str | re.Pattern | ParseFnT"
    MapFnT: t.TypeAlias = t.Callable[[Span, t.Any], t.Any]


class Parser(t.Generic[ValT]):
    __slots__ = ("fn", "name")

    def __init__(self, fn: ParseFnT, name: str | None = None) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "parser")

    def __call__(self, s: Stream, start: int) -> ResultT[ValT]:
        return self.fn(s, start)

    def parse(self, text: str | Stream, start: int = 0) -> ResultT[ValT]:
        s = text if isinstance(text, Stream) else Stream(text)
        return self.fn(s, start)

    def map(self, fn: MapFnT) -> Parser[t.Any]:
        return mapValue(self, fn)

    def orElse(self, *others: ParserLikeT) -> Parser[t.Any]:
        return alternation(self, *others)

    def named(self, name: str) -> Parser[ValT]:
        return Parser(self.fn, name)

    def __repr__(self) -> str:
        return f"<Parser {self.name}>"


def asParser(p: ParserLikeT) -> Parser[t.Any]:
    # Lifts literals and regexes into parsers.
    if isinstance(p, Parser):
        return p
    if isinstance(p, str):
        return literal(p)
    if isinstance(p, re.Pattern):
        return regex(p)
    if callable(p):
        return Parser(p)
    msg = f"Can't use {p!r} as a parser."
    raise TypeError(msg)


def literal(text: str) -> Parser[str]:
    def parseLiteral(s: Stream, start: int) -> ResultT[str]:
        return s.startsWith(start, text)

    return Parser(parseLiteral, f"literal({text!r})")


def regex(pattern: str | re.Pattern) -> Parser[str]:
    """
    Matches the pattern anchored at the current index.
    The pattern is run with Pattern.match(text, pos),
    so don't start it with ^ (which would only match at index 0).
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    def parseRegex(s: Stream, start: int) -> ResultT[str]:
        res = s.matchRe(start, pattern)
        if not isOk(res):
            return Err(start)
        return Ok(res.value.group(0), start, res.end)

    return Parser(parseRegex, f"regex({pattern.pattern!r})")


def sequence(*parsers: ParserLikeT) -> Parser[list[t.Any]]:
    ps = [asParser(p) for p in parsers]

    def parseSequence(s: Stream, start: int) -> ResultT[list[t.Any]]:
        vals = []
        i = start
        for p in ps:
            res = p(s, i)
            if isFailure(res):
                return res
            if isNoMatch(res):
                return Err(start)
            if not res.suppressed:
                vals.append(res.value)
            i = res.end
        return Ok(vals, start, i)

    return Parser(parseSequence, "sequence")


def alternation(*parsers: ParserLikeT) -> Parser[t.Any]:
    # Order matters: the first parser that matches wins.
    ps = [asParser(p) for p in parsers]

    def parseAlternation(s: Stream, start: int) -> ResultT[t.Any]:
        for p in ps:
            res = p(s, start)
            if not isNoMatch(res):
                return res
        return Err(start)

    return Parser(parseAlternation, "alternation")


def optional(parser: ParserLikeT, default: t.Any = None) -> Parser[t.Any]:
    p = asParser(parser)

    def parseOptional(s: Stream, start: int) -> ResultT[t.Any]:
        res = p(s, start)
        if isNoMatch(res):
            return Ok(default, start, start)
        return res

    return Parser(parseOptional, f"optional({p.name})")


def oneOrMore(parser: ParserLikeT) -> Parser[list[t.Any]]:
    p = asParser(parser)

    def parseOneOrMore(s: Stream, start: int) -> ResultT[list[t.Any]]:
        vals = []
        i = start
        while True:
            res = p(s, i)
            if isFailure(res):
                return res
            if isNoMatch(res):
                break
            vals.append(res.value)
            advanced = res.end > i
            i = res.end
            # A zero-width match would repeat forever.
            if s.eof(i) or not advanced:
                break
        if not vals:
            return Err(start)
        return Ok(vals, start, i)

    return Parser(parseOneOrMore, f"oneOrMore({p.name})")


def zeroOrMore(parser: ParserLikeT) -> Parser[list[t.Any]]:
    # optional(oneOrMore(p), []), but with a fresh list every time.
    p = oneOrMore(parser)

    def parseZeroOrMore(s: Stream, start: int) -> ResultT[list[t.Any]]:
        res = p(s, start)
        if isNoMatch(res):
            return Ok([], start, start)
        return res

    return Parser(parseZeroOrMore, f"zeroOrMore({p.name})")


def takeWhile1(pred: t.Callable[[str], bool]) -> Parser[str]:
    def parseTakeWhile1(s: Stream, start: int) -> ResultT[str]:
        end = s.takeWhile(start, pred)
        if end == start:
            return Err(start)
        return Ok(s.slice(start, end), start, end)

    return Parser(parseTakeWhile1, f"takeWhile1({getattr(pred, '__name__', 'pred')})")


def takeWhile0(pred: t.Callable[[str], bool]) -> Parser[str]:
    def parseTakeWhile0(s: Stream, start: int) -> ResultT[str]:
        end = s.takeWhile(start, pred)
        return Ok(s.slice(start, end), start, end)

    return Parser(parseTakeWhile0, f"takeWhile0({getattr(pred, '__name__', 'pred')})")


def mapValue(parser: ParserLikeT, fn: MapFnT) -> Parser[t.Any]:
    """
    Transforms a successful match's value with fn(span, value).

    If fn returns a Failure, or raises,
    that becomes a hard failure of the whole parse.
    """
    p = asParser(parser)

    def parseMap(s: Stream, start: int) -> ResultT[t.Any]:
        res = p(s, start)
        if not isOk(res):
            return res
        try:
            val = fn(res.span, res.value)
        except Exception as e:  # noqa: BLE001
            return Fail(start, e)
        if isinstance(val, Failure):
            return val
        return res.withValue(val)

    return Parser(parseMap, f"map({p.name})")


def recognize(parser: ParserLikeT) -> Parser[str]:
    p = asParser(parser)

    def parseRecognize(s: Stream, start: int) -> ResultT[str]:
        res = p(s, start)
        if not isOk(res):
            return res
        return Ok(s.slice(res.start, res.end), res.start, res.end)

    return Parser(parseRecognize, f"recognize({p.name})")


def _pick(parsers: t.Sequence[ParserLikeT], index: int, name: str) -> Parser[t.Any]:
    # Runs all the parsers in order,
    # keeping the value of parsers[index] but the span of the whole run.
    ps = [asParser(p) for p in parsers]

    def parsePick(s: Stream, start: int) -> ResultT[t.Any]:
        i = start
        val = None
        for n, p in enumerate(ps):
            res = p(s, i)
            if isFailure(res):
                return res
            if isNoMatch(res):
                return Err(start)
            if n == index:
                val = res.value
            i = res.end
        return Ok(val, start, i)

    return Parser(parsePick, name)


def preceded(a: ParserLikeT, b: ParserLikeT) -> Parser[t.Any]:
    return _pick([a, b], 1, "preceded")


def succeeded(a: ParserLikeT, b: ParserLikeT) -> Parser[t.Any]:
    return _pick([a, b], 0, "succeeded")


def delimited(a: ParserLikeT, b: ParserLikeT, c: ParserLikeT) -> Parser[t.Any]:
    return _pick([a, b, c], 1, "delimited")


def suppress(parser: ParserLikeT) -> Parser[t.Any]:
    # The match still advances a sequence(), but its value is left out.
    p = asParser(parser)

    def parseSuppress(s: Stream, start: int) -> ResultT[t.Any]:
        res = p(s, start)
        if not isOk(res):
            return res
        return dataclasses.replace(res, suppressed=True)

    return Parser(parseSuppress, f"suppress({p.name})")


def eof() -> Parser[None]:
    def parseEof(s: Stream, start: int) -> ResultT[None]:
        if s.eof(start):
            return Ok(None, start, start)
        return Err(start)

    return Parser(parseEof, "eof")
