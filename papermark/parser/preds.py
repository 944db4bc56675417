from __future__ import annotations


def isASCIIAlpha(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def isDigit(ch: str) -> bool:
    return "0" <= ch <= "9"


def isASCIIAlphanum(ch: str) -> bool:
    return isASCIIAlpha(ch) or isDigit(ch)


def isWhitespace(ch: str) -> bool:
    # Horizontal and vertical whitespace allowed inside tags.
    return ch in " \t\n\r"


def isTextChar(ch: str) -> bool:
    # Anything that can't start a tag or an escape.
    return ch not in ("[", "\\")


def isColorNameStart(ch: str) -> bool:
    return isASCIIAlpha(ch) or ch == "#"


def isColorNameChar(ch: str) -> bool:
    return isASCIIAlphanum(ch) or ch == "#"


def isStringChar(ch: str) -> bool:
    return ch != '"'
