from __future__ import annotations

from dataclasses import dataclass

from .. import t
from ..errors import MarkupParseError
from . import grammar
from .nodes import Diagnostic, Node, TreeNode, debugNode
from .result import Span, isFailure, isOk
from .stream import DEFAULT_PARSE_CONFIG, ParseConfig, Stream
from .tagstack import TagStack


@dataclass
class MarkupDocument:
    tree: TreeNode
    diagnostics: list[Diagnostic]
    nodes: list[Node]
    stream: Stream

    def toTree(self) -> TreeNode:
        return self.tree

    def loc(self, span: Span) -> str:
        return self.stream.loc(span.start)

    @property
    def hasDiagnostics(self) -> bool:
        return bool(self.diagnostics)


def nodesFromStream(s: Stream, config: ParseConfig) -> tuple[list[Node], list[Diagnostic]]:
    res = grammar.document(s, 0)
    if isFailure(res):
        cause = res.error if isinstance(res.error, BaseException) else None
        raise MarkupParseError(res.index, res.error) from cause
    assert isOk(res)

    diagnostics: list[Diagnostic] = []
    for node in res.value:
        if grammar.isStray(node):
            diagnostics.append(
                Diagnostic(
                    node.span,
                    f"Saw a '{node.value}' that doesn't start a tag or an escape; treating it as text.",
                ),
            )
        elif node.isOpen:
            diagnostics.extend(config.tags.verifyTag(node))
    return list(mergeTextNodes(res.value)), diagnostics


def mergeTextNodes(nodes: t.Iterable[Node]) -> t.Generator[Node, None, None]:
    # Stray chars come out as their own text nodes;
    # fold them into their neighbors.
    lastNode: Node | None = None
    for node in nodes:
        if lastNode is not None and lastNode.isText and node.isText:
            lastNode = Node.text(lastNode.value + node.value, lastNode.span.join(node.span))
            continue
        if lastNode is not None:
            yield lastNode
        lastNode = node
    if lastNode is not None:
        yield lastNode


def parseMarkup(text: str, config: ParseConfig | None = None) -> tuple[list[Node], list[Diagnostic]]:
    """
    Parses markup into its flat list of nodes,
    plus any diagnostics from checking the tags against the tag registry.

    Raises MarkupParseError on a hard parse failure;
    malformed markup never does that, it just gets diagnostics.
    """
    if config is None:
        config = DEFAULT_PARSE_CONFIG
    return nodesFromStream(Stream.fromConfig(text, config), config)


def treeFromNodes(
    nodes: t.Iterable[Node],
    diagnostics: list[Diagnostic] | None = None,
) -> tuple[TreeNode, list[Diagnostic]]:
    stack = TagStack(diagnostics=list(diagnostics or []))
    tree = stack.feed(nodes).toTree()
    return tree, stack.diagnostics


def parseDocument(text: str, config: ParseConfig | None = None) -> MarkupDocument:
    if config is None:
        config = DEFAULT_PARSE_CONFIG
    s = Stream.fromConfig(text, config)
    nodes, diagnostics = nodesFromStream(s, config)
    tree, diagnostics = treeFromNodes(nodes, diagnostics)
    return MarkupDocument(tree=tree, diagnostics=diagnostics, nodes=nodes, stream=s)


def strFromNodes(nodes: t.Iterable[Node]) -> str:
    # Serializes nodes back into markup source.
    strs = []
    lastNode: Node | None = None
    for node in nodes:
        if node.isClose and lastNode is not None and lastNode.selfClosing and lastNode.value == node.value:
            # Already printed as part of the [name/] open node.
            lastNode = node
            continue
        strs.append(str(node))
        lastNode = node
    return "".join(strs)


def debugNodes(nodes: t.Iterable[Node]) -> str:
    return "\n".join(debugNode(node) for node in nodes)
