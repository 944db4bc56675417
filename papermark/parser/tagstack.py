from __future__ import annotations

from dataclasses import dataclass, field

from .. import t
from .nodes import ROOT_TAG, Diagnostic, Node, NodeKind, Parameter, TextRun, TreeNode
from .result import Span


def makeRoot() -> TreeNode:
    return TreeNode(ROOT_TAG, None, Span(0, 0))


@dataclass
class TagStack:
    """
    Turns the flat node list from the grammar into a tree.

    Well-nested tags just push and pop.
    A closing tag that doesn't match the innermost open tag
    closes everything opened inside the matching tag,
    then reopens those tags right after it,
    so their styling carries on past the closing tag.
    (`[bold][italic]a[/bold]b` becomes `[bold][italic]a[/italic][/bold][italic]b`.)
    """

    tags: list[TreeNode] = field(default_factory=lambda: [makeRoot()])
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def root(self) -> TreeNode:
        return self.tags[0]

    @property
    def top(self) -> TreeNode:
        return self.tags[-1]

    @property
    def depth(self) -> int:
        return len(self.tags)

    def printOpenTags(self) -> list[str]:
        return [f"[{x}]" for x in self.tags[1:]]

    def getDeepestFromTag(self, tagName: str) -> int | None:
        # Index of the innermost open tag with that name, never the root.
        for i in range(len(self.tags) - 1, 0, -1):
            if self.tags[i].tag == tagName:
                return i
        return None

    def open(self, name: str, param: Parameter | None = None, span: Span | None = None) -> TreeNode:
        node = TreeNode(name, param, span or Span(0, 0))
        self.tags.append(node)
        return node

    def text(self, value: str, span: Span | None = None) -> None:
        self.top.append(TextRun(value, span or Span(0, 0)))

    def close(self, name: str, span: Span | None = None) -> None:
        if span is None:
            span = Span(0, 0)
        if len(self.tags) == 1:
            # Nothing's open, so there's nothing to close.
            return
        if self.top.tag == name:
            self.popEntry(span)
            return
        index = self.getDeepestFromTag(name)
        if index is None:
            # Closing a tag that was never opened is ignored.
            return

        # Close everything inside the matching tag,
        # remembering it so it can be reopened afterwards.
        implicitEnd = Span.empty(span.start)
        splitTags: list[TreeNode] = []
        while len(self.tags) > index + 1:
            splitTags.append(self.popEntry(implicitEnd))
        self.popEntry(span)
        self.diagnostics.append(
            Diagnostic(
                span,
                f"Saw [/{name}], but {', '.join(f'[{x.tag}]' for x in reversed(splitTags))} "
                f"{'was' if len(splitTags) == 1 else 'were'} still open inside it; "
                "closed and reopened them around the end tag.",
            ),
        )
        for old in reversed(splitTags):
            self.open(old.tag, old.param, old.openSpan)

    def popEntry(self, closeSpan: Span | None) -> TreeNode:
        node = self.tags.pop()
        node.closeSpan = closeSpan
        self.top.append(node)
        return node

    def finish(self) -> TreeNode:
        while len(self.tags) > 1:
            node = self.top
            self.diagnostics.append(Diagnostic(node.openSpan, f"Tag [{node.tag}] was not properly closed."))
            self.popEntry(None)
        self.root.closeSpan = Span(0, 0)
        return self.root

    def update(self, node: Node) -> None:
        if node.kind is NodeKind.Text:
            self.text(node.value, node.span)
        elif node.kind is NodeKind.Open:
            self.open(node.value, node.param, node.span)
        elif node.kind is NodeKind.Close:
            self.close(node.value, node.span)
        else:
            t.assert_never(node.kind)

    def feed(self, nodes: t.Iterable[Node]) -> TagStack:
        for node in nodes:
            self.update(node)
        return self

    def toTree(self) -> TreeNode:
        return self.finish()
