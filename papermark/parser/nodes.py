from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from .. import t
from .result import Span


class NodeKind(enum.Enum):
    Text = "text"
    Open = "open"
    Close = "close"


class ParamType(enum.Enum):
    Text = "text"
    Color = "color"
    Number = "number"


@dataclass(frozen=True)
class Parameter:
    type: ParamType
    value: str | int
    # The value as it was written in the source (quotes stripped),
    # before any normalization.
    source: str = ""

    def toStr(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        if self.type is ParamType.Text:
            return f'"{self.value}"'
        return self.toStr()

    @classmethod
    def text(cls, value: str) -> Parameter:
        return cls(ParamType.Text, value, value)

    @classmethod
    def color(cls, value: str, source: str | None = None) -> Parameter:
        return cls(ParamType.Color, value, value if source is None else source)

    @classmethod
    def number(cls, value: int, source: str | None = None) -> Parameter:
        return cls(ParamType.Number, value, str(value) if source is None else source)


@dataclass(frozen=True)
class KeyValuePair:
    key: str
    value: Parameter | None
    span: Span = field(default=Span(0, 0), compare=False)

    def __str__(self) -> str:
        if self.value is None:
            return self.key
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class Node:
    kind: NodeKind
    value: str
    span: Span = field(compare=False)
    param: Parameter | None = None
    attrs: tuple[KeyValuePair, ...] = ()
    # Open nodes written as [name/]
    selfClosing: bool = False

    @classmethod
    def text(cls, value: str, span: Span) -> Node:
        return cls(NodeKind.Text, value, span)

    @classmethod
    def open(
        cls,
        name: str,
        span: Span,
        param: Parameter | None = None,
        attrs: t.Iterable[KeyValuePair] = (),
        selfClosing: bool = False,
    ) -> Node:
        return cls(NodeKind.Open, name, span, param, tuple(attrs), selfClosing)

    @classmethod
    def close(cls, name: str, span: Span) -> Node:
        return cls(NodeKind.Close, name, span)

    @property
    def isText(self) -> bool:
        return self.kind is NodeKind.Text

    @property
    def isOpen(self) -> bool:
        return self.kind is NodeKind.Open

    @property
    def isClose(self) -> bool:
        return self.kind is NodeKind.Close

    def __str__(self) -> str:
        # Serializes back to markup source.
        if self.kind is NodeKind.Text:
            return escapeMarkup(self.value)
        if self.kind is NodeKind.Close:
            return f"[/{self.value}]"
        s = "[" + self.value
        if self.param is not None:
            s += f"={self.param}"
        for attr in self.attrs:
            s += f" {attr}"
        if self.selfClosing:
            return s + "/]"
        return s + "]"


@dataclass(frozen=True)
class TextRun:
    text: str
    span: Span = field(compare=False)

    def lines(self) -> list[str]:
        return self.text.split("\n")


@dataclass
class TreeNode:
    tag: str
    param: Parameter | None
    openSpan: Span = field(compare=False)
    closeSpan: Span | None = field(default=None, compare=False)
    children: list[TreeNode | TextRun] = field(default_factory=list)

    @property
    def isRoot(self) -> bool:
        return self.tag == ROOT_TAG

    @property
    def isClosed(self) -> bool:
        return self.closeSpan is not None

    def append(self, child: TreeNode | TextRun) -> None:
        self.children.append(child)

    def childNodes(self) -> list[TreeNode]:
        return [x for x in self.children if isinstance(x, TreeNode)]

    def textContent(self) -> str:
        return "".join(x.text if isinstance(x, TextRun) else x.textContent() for x in self.children)

    def iter(self) -> t.Iterator[TreeNode]:
        yield self
        for child in self.childNodes():
            yield from child.iter()

    def __str__(self) -> str:
        s = f"{self.tag}"
        if self.param is not None:
            s += f"={self.param}"
        return s


ROOT_TAG = "root"


@dataclass(frozen=True)
class Diagnostic:
    span: Span
    message: str

    def __str__(self) -> str:
        return self.message


def escapeMarkup(text: str) -> str:
    # Backslash only escapes [, ] and /,
    # so a literal backslash before a slash needs the slash escaped too.
    return re.sub(r"[\[\]]|(?<=\\)/", lambda m: "\\" + m.group(0), text)


def debugNode(node: Node | TreeNode | TextRun, depth: int = 0) -> str:
    indent = "  " * depth
    if isinstance(node, Node):
        return f"{indent}{node.kind.value.upper()} {node.span.start}-{node.span.end}: {node}"
    if isinstance(node, TextRun):
        return f"{indent}{node.text!r}"
    lines = [f"{indent}[{node}]"]
    for child in node.children:
        lines.append(debugNode(child, depth + 1))
    return "\n".join(lines)
