from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field

from .. import t
from .result import Err, Ok, ResultT
from .tags import DEFAULT_TAGS, TagRegistry


@dataclass
class ParseConfig:
    tags: TagRegistry = field(default_factory=lambda: DEFAULT_TAGS)
    context: str | None = None
    startLine: int = 1


DEFAULT_PARSE_CONFIG = ParseConfig()


@dataclass
class Stream:
    _chars: str
    _len: int
    _lineBreaks: list[int]
    startLine: int
    context: str | None

    def __init__(self, chars: str, context: str | None = None, startLine: int = 1) -> None:
        self._chars = chars
        self._len = len(chars)
        self._lineBreaks = []
        self.startLine = startLine
        self.context = context
        for i, char in enumerate(chars):
            if char == "\n":
                self._lineBreaks.append(i)

    @staticmethod
    def fromConfig(chars: str, config: ParseConfig) -> Stream:
        return Stream(chars, context=config.context, startLine=config.startLine)

    def slice(self, start: int | None, stop: int | None) -> str:
        if start is not None and start < 0:
            start = 0
        if stop is not None and stop < 0:
            stop = 0
        return self._chars[start:stop]

    def eof(self, index: int) -> bool:
        return index >= self._len

    def __len__(self) -> int:
        return self._len

    def __str__(self) -> str:
        return self._chars

    def line(self, index: int) -> int:
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        return lineIndex + self.startLine

    def col(self, index: int) -> int:
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        if lineIndex == 0:
            return index + 1
        startOfCol = self._lineBreaks[lineIndex - 1]
        return index - startOfCol

    def loc(self, index: int) -> str:
        rc = f"{self.line(index)}:{self.col(index)}"
        if self.context is None:
            return rc
        return f"{rc} of {self.context}"

    def startsWith(self, start: int, text: str) -> ResultT[str]:
        end = start + len(text)
        if self._chars.startswith(text, start):
            return Ok(text, start, end)
        return Err(start)

    def matchRe(self, start: int, pattern: re.Pattern) -> ResultT[re.Match]:
        match = pattern.match(self._chars, start)
        if match:
            return Ok(match, start, match.end())
        else:
            return Err(start)

    def takeWhile(self, start: int, pred: t.Callable[[str], bool]) -> int:
        # Index just past the run of chars matching `pred`.
        i = start
        while i < self._len and pred(self._chars[i]):
            i += 1
        return i
