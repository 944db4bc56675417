from __future__ import annotations

from .. import constants, t
from . import preds
from .combinators import (
    alternation,
    delimited,
    oneOrMore,
    optional,
    preceded,
    recognize,
    regex,
    sequence,
    succeeded,
    takeWhile0,
    takeWhile1,
    zeroOrMore,
)
from .nodes import KeyValuePair, Node, Parameter
from .result import Span
from .tags import isKnownColorName

# The markup grammar, built out of the combinators.
# Every parser here is a module-level constant;
# the ones that produce nodes produce a *list* of them,
# since a self-closed tag expands into an open/close pair.

whitespace0 = takeWhile0(preds.isWhitespace).named("whitespace0")

# \[, \], and \/ produce the escaped char.
escapeSequence = preceded("\\", alternation("/", "[", "]")).named("escapeSequence")

textRun = takeWhile1(preds.isTextChar).named("textRun")


def textNodes(span: Span, parts: list[str]) -> list[Node]:
    return [Node.text("".join(parts), span)]


# Escapes are tried first, so an escaped [ never starts a tag.
text = oneOrMore(alternation(escapeSequence, textRun)).map(textNodes).named("text")

identifier = regex(r"[A-Za-z][A-Za-z0-9]*").named("identifier")


def stringParam(span: Span, val: str) -> Parameter:
    return Parameter.text(val)


paramString = delimited('"', takeWhile0(preds.isStringChar), '"').map(stringParam).named("paramString")

# Six digits are tried before three, so #abcdef isn't cut short.
hexColor = recognize(
    sequence(
        "#",
        alternation(regex(r"[0-9A-Fa-f]{6}"), regex(r"[0-9A-Fa-f]{3}")),
    ),
).named("hexColor")


def normalizeColorName(span: Span, name: str) -> Parameter:
    # Unknown color names don't fail the parse,
    # they just turn into the fallback color.
    # (The tag registry re-checks the source text and complains.)
    color = name.lower()
    if not isKnownColorName(color):
        color = constants.fallbackColor
    return Parameter.color(color, source=name)


colorName = recognize(
    sequence(
        takeWhile1(preds.isColorNameStart),
        takeWhile0(preds.isColorNameChar),
    ),
).named("colorName")

paramColor = alternation(
    hexColor.map(lambda span, val: Parameter.color(val)),
    colorName.map(normalizeColorName),
).named("paramColor")

paramNumber = regex(r"[0-9]+").map(lambda span, val: Parameter.number(int(val), source=val)).named("paramNumber")

# String, then color, then number; first match wins.
paramValue = alternation(paramString, paramColor, paramNumber).named("paramValue")

param = preceded(sequence("=", whitespace0), paramValue).named("param")


def keyValuePair(span: Span, kv: list[t.Any]) -> KeyValuePair:
    key, value = kv
    return KeyValuePair(key, value, span)


kvPair = delimited(
    whitespace0,
    sequence(succeeded(identifier, whitespace0), optional(param)),
    whitespace0,
).map(keyValuePair).named("kvPair")

closingTag = delimited("/", delimited(whitespace0, identifier, whitespace0), "]").named("closingTag")

# Produces (isSelfClosing, span of the terminator).
tagEnd = alternation("/]", "]").map(lambda span, val: (val == "/]", span)).named("tagEnd")

openTag = sequence(kvPair, zeroOrMore(kvPair), tagEnd).named("openTag")


def tagNodes(span: Span, body: str | list[t.Any]) -> list[Node]:
    if isinstance(body, str):
        return [Node.close(body, span)]
    first, rest, (selfClosing, endSpan) = body
    if not selfClosing:
        return [Node.open(first.key, span, first.value, rest)]
    # [name/] is an open node immediately followed by its close node;
    # the close node covers the /].
    return [
        Node.open(first.key, Span(span.start, endSpan.start), first.value, rest, selfClosing=True),
        Node.close(first.key, endSpan),
    ]


# Closing tags go first; the / makes them unambiguous.
tag = preceded("[", alternation(closingTag, openTag)).map(tagNodes).named("tag")

# A [ that doesn't start a valid tag, or a \ that doesn't start an escape,
# is kept as plain text rather than ending the document early.
stray = alternation("[", "\\").map(lambda span, ch: [Node.text(ch, span)]).named("stray")


def flattenNodes(span: Span, nodeLists: list[list[Node]]) -> list[Node]:
    return [node for nodeList in nodeLists for node in nodeList]


document = zeroOrMore(alternation(text, tag, stray)).map(flattenNodes).named("document")


def isStray(node: Node) -> bool:
    return node.isText and node.span.width == 1 and node.value in ("[", "\\")
