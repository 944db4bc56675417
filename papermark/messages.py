from __future__ import annotations

import contextlib
import dataclasses
import io
import json
import os
import sys
from collections import Counter

from . import t

if t.TYPE_CHECKING:
    from .parser import Diagnostic, Stream

MESSAGE_LEVELS = {
    "everything": 0,
    "message": 1,
    "warning": 2,
    "fatal": 3,
    "nothing": 4,
}

DEATH_TIMING = [
    "early",  # die as soon as the first disallowed error occurs
    "late",  # die once the whole input has been processed
]

PRINT_MODES = [
    "plain",
    "console",
    "markup",
    "json",
]

# Categories that count as a problem with the input.
PROBLEM_LEVELS = ("warning", "fatal")

CONSOLE_COLORS = {
    "red": 31,
    "green": 32,
    "light cyan": 96,
}

CONSOLE_STYLES = {
    "bold": 1,
    "invert": 7,
}

MARKUP_TAGS = {
    "fatal": "fatal",
    "warning": "warning",
    "message": "message",
    "success": "final-success",
    "failure": "final-failure",
}

# Plain-text headings; the second is the ASCII-only fallback.
FINAL_HEADINGS = {
    "success": (" ✔ ", "YAY", "green"),
    "failure": (" ✘ ", "ERR", "red"),
}


@dataclasses.dataclass()
class MessagesState:
    # Lowest message category that stops processing
    dieOn: str = "fatal"
    # Whether that happens at the first such message, or at the end
    dieWhen: str = "late"
    # Lowest message category that gets printed
    printOn: str = "everything"
    # Suppresses every category, including the final success/failure line
    silent: bool = False
    printMode: str = "console"
    asciiOnly: bool = False
    fh: t.TextIO = t.cast("t.TextIO", sys.stdout)  # noqa: RUF009
    seenMessages: set[str | tuple[str, str]] = dataclasses.field(default_factory=set)
    categoryCounts: Counter[str] = dataclasses.field(default_factory=Counter)

    def record(self, category: str, message: str | tuple[str, str]) -> None:
        self.categoryCounts[category] += 1
        self.seenMessages.add(message)

    def replace(self, **kwargs: t.Any) -> MessagesState:
        return dataclasses.replace(self, seenMessages=set(), categoryCounts=Counter(), **kwargs)

    def problemCount(self) -> int:
        return sum(self.categoryCounts[level] for level in PROBLEM_LEVELS)

    def shouldDie(self, category: str, timing: str = "early") -> bool:
        if self.dieWhen == "late" and timing == "early":
            return False
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.dieOn]

    def shouldPrint(self, category: str) -> bool:
        if self.silent:
            return False
        if category in FINAL_HEADINGS:
            return True
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.printOn]

    @staticmethod
    def categoryName(categoryNum: int) -> str:
        assert categoryNum >= 0
        if categoryNum >= len(MESSAGE_LEVELS):
            return "nothing"
        return list(MESSAGE_LEVELS.keys())[categoryNum]


state = MessagesState()


def p(msg: str | tuple[str, str], sep: str | None = None, end: str | None = None) -> None:
    if isinstance(msg, tuple):
        msg, ascii = msg
    else:
        ascii = msg.encode("ascii", "replace").decode()
    if state.asciiOnly:
        msg = ascii
    try:
        print(msg, sep=sep, end=end, file=state.fh)
    except UnicodeEncodeError:
        print(ascii, sep=sep, end=end, file=state.fh)


def report(category: str, msg: str, lineNum: str | int | None = None, span: tuple[int, int] | None = None) -> None:
    formattedMsg = formatMessage(category, msg, lineNum=lineNum, span=span)
    if formattedMsg not in state.seenMessages:
        state.record(category, formattedMsg)
        if state.shouldPrint(category):
            p(formattedMsg)
    if state.shouldDie(category):
        errorAndExit()


def die(msg: str, lineNum: str | int | None = None) -> None:
    report("fatal", msg, lineNum=lineNum)


def warn(msg: str, lineNum: str | int | None = None) -> None:
    report("warning", msg, lineNum=lineNum)


def diagnose(diag: Diagnostic, stream: Stream | None = None) -> None:
    """
    Reports a markup diagnostic as a warning.

    With the stream the diagnostic came from,
    the message is located at the start of the diagnostic's span
    (line:col, plus the stream's context name if it has one).
    JSON output carries the raw character offsets as well.
    """
    lineNum = stream.loc(diag.span.start) if stream is not None else None
    report("warning", diag.message, lineNum=lineNum, span=(diag.span.start, diag.span.end))


def say(msg: str) -> None:
    if state.shouldPrint("message"):
        p(formatMessage("message", msg))


def success(msg: str) -> None:
    if state.shouldPrint("success"):
        p(formatMessage("success", msg))


def failure(msg: str) -> None:
    if state.shouldPrint("failure"):
        p(formatMessage("failure", msg))


def retroactivelyCheckErrorLevel(timing: str = "late") -> bool:
    for levelName, msgCount in state.categoryCounts.items():
        if msgCount > 0 and state.shouldDie(levelName, timing):
            errorAndExit()
    return True


def printColor(text: str, color: str, *styles: str) -> str:
    if state.printMode != "console":
        return text
    styleNum = ";".join(str(CONSOLE_STYLES[style]) for style in styles)
    return f"\033[{styleNum};{CONSOLE_COLORS[color]}m{text}\033[0m"


def formatMessage(
    type: str,
    text: str,
    lineNum: str | int | None = None,
    span: tuple[int, int] | None = None,
) -> str | tuple[str, str]:
    if state.printMode == "markup":
        tag = MARKUP_TAGS[type]
        text = text.replace("<", "&lt;")
        return f"<{tag}>{text}</{tag}>"
    if state.printMode == "json":
        jsonText = "[\n" if not state.seenMessages else ""
        msg: dict[str, t.Any] = {"lineNum": lineNum, "messageType": type, "text": text}
        if span is not None:
            msg["span"] = list(span)
        jsonText += "  " + json.dumps(msg)
        jsonText += "\n]" if type in FINAL_HEADINGS else ", "
        return jsonText

    if type == "message":
        return text
    if type in FINAL_HEADINGS:
        heading, asciiHeading, color = FINAL_HEADINGS[type]
        return (
            printColor(heading, color, "invert") + " " + text,
            printColor(asciiHeading, color, "invert") + " " + text,
        )
    if lineNum is not None:
        headingText = f"LINE {lineNum}"
    elif type == "fatal":
        headingText = "FATAL ERROR"
    else:
        headingText = "WARNING"
    color = "red" if type == "fatal" else "light cyan"
    return printColor(headingText + ":", color, "bold") + " " + text


def errorAndExit() -> None:
    failure("Did not generate, due to errors exceeding the allowed error level.")
    sys.exit(2)


@contextlib.contextmanager
def withMessageState(
    fh: str | t.TextIO,
    **kwargs: t.Any,
) -> t.Iterator[t.TextIO]:
    if isinstance(fh, str):
        fhIsTemporary = True
        fh = open(fh, "w", encoding="utf-8")
    else:
        fhIsTemporary = False
    global state
    oldState = state
    state = oldState.replace(fh=fh, **kwargs)
    try:
        yield fh
    finally:
        state = oldState
        if fhIsTemporary:
            fh.close()


@contextlib.contextmanager
def messagesSilent() -> t.Iterator[io.TextIOWrapper]:
    fh = open(os.devnull, "w", encoding="utf-8")
    global state
    oldState = state
    state = oldState.replace(fh=fh)
    try:
        yield fh
    finally:
        state = oldState
        fh.close()
