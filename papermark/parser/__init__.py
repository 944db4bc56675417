from . import combinators, grammar, result
from .combinators import (
    Parser,
    alternation,
    delimited,
    eof,
    literal,
    mapValue,
    oneOrMore,
    optional,
    preceded,
    recognize,
    regex,
    sequence,
    succeeded,
    suppress,
    takeWhile0,
    takeWhile1,
    zeroOrMore,
)
from .main import (
    MarkupDocument,
    debugNodes,
    parseDocument,
    parseMarkup,
    strFromNodes,
    treeFromNodes,
)
from .nodes import (
    Diagnostic,
    KeyValuePair,
    Node,
    NodeKind,
    Parameter,
    ParamType,
    TextRun,
    TreeNode,
    debugNode,
)
from .result import Failure, Match, NoMatch, Span, isFailure, isNoMatch, isOk
from .stream import (
    DEFAULT_PARSE_CONFIG,
    ParseConfig,
    Stream,
)
from .tags import DEFAULT_TAGS, ParamKind, TagDef, TagRegistry
from .tagstack import TagStack
