from __future__ import annotations

import collections.abc

from lxml import etree
from lxml.html import tostring

from . import t


def flatten(arr: t.Iterable) -> t.Iterator:
    for el in arr:
        if isinstance(el, collections.abc.Iterable) and not isinstance(el, str) and not etree.iselement(el):
            yield from flatten(el)
        else:
            yield el


def isElement(node: t.Any) -> t.TypeIs[t.ElementT]:
    # Comments and processing instructions are "elements" to lxml too.
    return etree.iselement(node) and isinstance(node.tag, str)


def isNode(node: t.Any) -> t.TypeIs[t.NodeT]:
    return isElement(node) or isinstance(node, str)


def isNodes(nodes: t.Any) -> t.TypeIs[t.NodesT]:
    if isNode(nodes):
        return True
    if not isinstance(nodes, list):
        return False
    return all(isNodes(child) for child in nodes)


def outerHTML(el: t.NodesT | None, with_tail: bool = False) -> str:
    if el is None:
        return ""
    if isinstance(el, str):
        return el
    if isinstance(el, list):
        return "".join(outerHTML(x) for x in el)
    return t.cast(str, tostring(el, with_tail=with_tail, encoding="unicode"))


@t.overload
def appendChild(parent: t.ElementT, *els: t.NodesT, allowEmpty: t.Literal[False] = False) -> t.ElementT: ...


@t.overload
def appendChild(parent: t.ElementT, *els: t.NodesT, allowEmpty: bool) -> t.ElementT | None: ...


def appendChild(parent: t.ElementT, *els: t.NodesT, allowEmpty: bool = False) -> t.ElementT | None:
    # Appends either text or an element.
    child: t.NodeT | None = None
    for child in flatten(els):
        assert child is not None
        if isinstance(child, str):
            if len(parent) > 0:
                parent[-1].tail = (parent[-1].tail or "") + child
            else:
                parent.text = (parent.text or "") + child
        else:
            if len(parent) == 0 and parent.text is not None:
                # lxml moves existing text into the new child's tail
                # when appending to a childless element, so put it back.
                text, parent.text = parent.text, None
                parent.append(child)
                parent.text = text
            else:
                parent.append(child)
    if child is None and not allowEmpty:
        msg = "Empty child list appended without allowEmpty=True"
        raise Exception(msg)
    if isElement(child):
        return child
    else:
        return None


def addClass(el: t.ElementT, cls: str) -> t.ElementT:
    oldClass = el.get("class", "")
    if oldClass:
        el.set("class", f"{oldClass} {cls}")
    else:
        el.set("class", cls)
    return el


def createElement(tag: str, attrs: t.Mapping[str, str | None] | None = None, *children: t.NodesT | None) -> t.ElementT:
    if attrs is None:
        attrs = {}
    el: t.ElementT = etree.Element(tag, {n: v for n, v in attrs.items() if v is not None})
    if children:
        appendChild(el, *(x for x in children if x is not None), allowEmpty=True)
    return el


if t.TYPE_CHECKING:

    class ElementCreatorFnT(t.Protocol):
        def __call__(
            self,
            attrsOrChild: t.Mapping[str, str | None] | t.NodesT | None = None,
            *children: t.NodesT | None,
        ) -> t.ElementT: ...


class ElementCreationHelper:
    def __getattr__(self, name: str) -> ElementCreatorFnT:
        def _creater(
            attrsOrChild: t.Mapping[str, str | None] | t.NodesT | None = None,
            *children: t.NodesT | None,
        ) -> t.ElementT:
            if isNodes(attrsOrChild):
                return createElement(name, None, attrsOrChild, *children)
            else:
                assert isinstance(attrsOrChild, dict) or attrsOrChild is None
                return createElement(name, attrsOrChild, *children)

        return _creater


E = ElementCreationHelper()
