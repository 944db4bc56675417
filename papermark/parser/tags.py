from __future__ import annotations

import enum
import json
import re
from dataclasses import dataclass, field

from .. import constants, t
from ..errors import RegistryError
from .nodes import Diagnostic, Node, Parameter, ParamType

HEX_COLOR_RE = re.compile(r"#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})")
INT_RE = re.compile(r"[0-9]+")


class ParamKind(enum.Enum):
    none = "none"
    color = "color"
    int = "int"

    @property
    def description(self) -> str:
        if self is ParamKind.color:
            return "color (#rgb, #rrggbb, or a color name)"
        if self is ParamKind.int:
            return "non-negative integer"
        return "nothing"


def isKnownColorName(text: str) -> bool:
    return text.lower() in constants.namedColors


def isValidColor(text: str) -> bool:
    return bool(HEX_COLOR_RE.fullmatch(text)) or isKnownColorName(text)


def isValidInt(text: str) -> bool:
    return bool(INT_RE.fullmatch(text))


@dataclass(frozen=True)
class TagDef:
    name: str
    selfClosing: bool = False
    param: ParamKind = ParamKind.none

    def checkParam(self, param: Parameter | None) -> str | None:
        # Returns an error message, or None if the param is fine.
        if self.param is ParamKind.none:
            if param is not None:
                return f"[{self.name}] doesn't take a parameter, but got '{param}'."
            return None
        if param is None:
            return f"[{self.name}] requires a {self.param.value} parameter, like [{self.name}=...]."
        if self.param is ParamKind.color:
            valid = isValidColor(param.source)
        else:
            valid = isValidInt(param.source)
        if not valid:
            written = str(param) if param.type is ParamType.Text else param.source
            return f"[{self.name}={written}] has an invalid parameter; expected a {self.param.description}."
        return None


@dataclass(frozen=True)
class TagRegistry:
    tags: dict[str, TagDef] = field(default_factory=dict)

    @classmethod
    def fromRows(cls, rows: t.Iterable[TagDef]) -> TagRegistry:
        return cls({row.name: row for row in rows})

    @classmethod
    def fromJson(cls, text: str, base: TagRegistry | None = None) -> TagRegistry:
        """
        Builds a registry from a JSON array of
        {"name": ..., "selfClosing": ..., "param": "none"|"color"|"int"} objects.
        If `base` is passed, the rows extend (and can override) it.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Tag registry isn't valid JSON: {e}"
            raise RegistryError(msg) from e
        if not isinstance(data, list):
            msg = "Tag registry must be a JSON array of tag rows."
            raise RegistryError(msg)
        rows = [tagDefFromJson(row) for row in data]
        if base is None:
            return cls.fromRows(rows)
        return base.extend(rows)

    def extend(self, rows: t.Iterable[TagDef]) -> TagRegistry:
        tags = dict(self.tags)
        for row in rows:
            tags[row.name] = row
        return TagRegistry(tags)

    def get(self, name: str) -> TagDef | None:
        return self.tags.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.tags

    def __iter__(self) -> t.Iterator[TagDef]:
        return iter(self.tags.values())

    def __len__(self) -> int:
        return len(self.tags)

    def verifyTag(self, node: Node) -> list[Diagnostic]:
        assert node.isOpen
        tagDef = self.get(node.value)
        if tagDef is None:
            return [Diagnostic(node.span, f"Unknown tag [{node.value}].")]
        diags = []
        if tagDef.selfClosing and not node.selfClosing:
            diags.append(
                Diagnostic(node.span, f"[{node.value}] must be self-closing; write it as [{node.value}/]."),
            )
        paramError = tagDef.checkParam(node.param)
        if paramError is not None:
            diags.append(Diagnostic(node.span, paramError))
        return diags


def tagDefFromJson(row: t.Any) -> TagDef:
    if not isinstance(row, dict) or not isinstance(row.get("name"), str):
        msg = "Every tag row needs a string 'name'."
        raise RegistryError(msg, row)
    name = row["name"]
    if not re.fullmatch(r"[A-Za-z][A-Za-z0-9]*", name):
        msg = f"Tag name '{name}' isn't a valid identifier."
        raise RegistryError(msg, row)
    selfClosing = row.get("selfClosing", False)
    if not isinstance(selfClosing, bool):
        msg = f"'selfClosing' for tag '{name}' must be true or false."
        raise RegistryError(msg, row)
    try:
        param = ParamKind(row.get("param", "none"))
    except ValueError as e:
        msg = f"'param' for tag '{name}' must be one of {', '.join(x.value for x in ParamKind)}."
        raise RegistryError(msg, row) from e
    return TagDef(name, selfClosing, param)


DEFAULT_TAGS = TagRegistry.fromRows(
    [
        TagDef("color", param=ParamKind.color),
        TagDef("head", param=ParamKind.int),
        TagDef("bold"),
        TagDef("italic"),
        TagDef("bolditalic"),
        TagDef("bullet", selfClosing=True),
    ],
)
