from __future__ import annotations

from dataclasses import dataclass

from .. import t

ResultValT_co = t.TypeVar("ResultValT_co", covariant=True)
ResultValT = t.TypeVar("ResultValT")


@dataclass(frozen=True)
class Span:
    # Half-open range of character offsets into the source text.
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            msg = f"Span start ({self.start}) is after its end ({self.end})."
            raise ValueError(msg)

    @property
    def width(self) -> int:
        return self.end - self.start

    @staticmethod
    def empty(index: int) -> Span:
        return Span(index, index)

    def join(self, other: Span) -> Span:
        return Span(min(self.start, other.start), max(self.end, other.end))


@dataclass(frozen=True)
class Match(t.Generic[ResultValT_co]):
    value: ResultValT_co
    span: Span
    # Suppressed matches still advance the parse,
    # but sequence() leaves their value out of its list.
    suppressed: bool = False

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def withValue(self, value: ResultValT) -> Match[ResultValT]:
        return Match(value, self.span, self.suppressed)


@dataclass(frozen=True)
class NoMatch:
    # The parser didn't match at this index.
    # Not an error; alternation() moves on to its next option.
    index: int


@dataclass(frozen=True)
class Failure:
    # A hard failure, which unwinds the entire parse.
    index: int
    error: BaseException | str


ResultT: t.TypeAlias = "Match[ResultValT_co] | NoMatch | Failure"


def Ok(val: ResultValT, start: int, end: int, suppressed: bool = False) -> Match[ResultValT]:
    return Match(val, Span(start, end), suppressed)


def Err(index: int) -> NoMatch:
    return NoMatch(index)


def Fail(index: int, error: BaseException | str) -> Failure:
    return Failure(index, error)


def isOk(res: ResultT[ResultValT_co]) -> t.TypeIs[Match[ResultValT_co]]:
    return isinstance(res, Match)


def isNoMatch(res: ResultT[ResultValT_co]) -> t.TypeIs[NoMatch]:
    return isinstance(res, NoMatch)


def isFailure(res: ResultT[ResultValT_co]) -> t.TypeIs[Failure]:
    return isinstance(res, Failure)
