from __future__ import annotations

from . import constants, t
from .dom import E, addClass, appendChild, outerHTML
from .parser import MarkupDocument, ParseConfig, TextRun, TreeNode, parseDocument

if t.TYPE_CHECKING:
    # (class, inline style), given the tag's parameter as a string
    StyleFnT: t.TypeAlias = t.Callable[[str | None], tuple[str | None, str | None]]


STYLES: dict[str, StyleFnT] = {
    "color": lambda param: (None, f"color: {param}" if param is not None else None),
    "head": lambda param: (f"mu-head-{param}" if param is not None else None, None),
    "bold": lambda param: ("mu-bold", None),
    "italic": lambda param: ("mu-italic", None),
    "bolditalic": lambda param: ("mu-bold-italic", None),
    "bullet": lambda param: ("mu-bullet", None),
}

# Tags whose content gets a prefix ahead of it.
PREFIXES: dict[str, str] = {
    "bullet": constants.bulletPrefix,
}


def styleForNode(node: TreeNode) -> tuple[str | None, str | None]:
    styleFn = STYLES.get(node.tag)
    if styleFn is None:
        # Unknown tags (already diagnosed) render as plain spans.
        return None, None
    param = node.param.toStr() if node.param is not None else None
    return styleFn(param)


def htmlFromText(run: TextRun) -> list[t.NodeT]:
    nodes: list[t.NodeT] = []
    for i, line in enumerate(run.lines()):
        if i > 0:
            nodes.append(E.br())
        if line:
            nodes.append(line)
    return nodes


def htmlFromTree(node: TreeNode) -> t.ElementT:
    """
    Converts a reconciled tree into nested <span>s,
    one per tree node (the root included).
    """
    el = E.span()
    className, style = styleForNode(node)
    if className is not None:
        addClass(el, className)
    if style is not None:
        el.set("style", style)
    prefix = PREFIXES.get(node.tag)
    if prefix:
        appendChild(el, prefix)
    for child in node.children:
        if isinstance(child, TextRun):
            appendChild(el, htmlFromText(child), allowEmpty=True)
        else:
            appendChild(el, htmlFromTree(child))
    return el


def htmlFromDocument(doc: MarkupDocument) -> t.ElementT:
    return htmlFromTree(doc.tree)


def htmlFromMarkup(text: str, config: ParseConfig | None = None) -> tuple[t.ElementT, MarkupDocument]:
    doc = parseDocument(text, config)
    return htmlFromDocument(doc), doc


def renderMarkup(text: str, config: ParseConfig | None = None) -> str:
    el, _ = htmlFromMarkup(text, config)
    return outerHTML(el)
