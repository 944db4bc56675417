# pylint: skip-file
# Module for holding types, for easy importing into the rest of the codebase
from __future__ import annotations

import sys

# The only things that should be available during runtime.
from typing import TYPE_CHECKING, Generic, TypeVar, cast, overload

# Only available in 3.11, so stub them out for earlier versions
if sys.version_info >= (3, 11):
    from typing import assert_never
else:
    from typing_extensions import assert_never


if TYPE_CHECKING:
    from typing import (
        Any,
        Callable,
        Generator,
        Iterable,
        Iterator,
        Literal,
        Mapping,
        Protocol,
        Sequence,
        TextIO,
        TypeAlias,
    )

    from lxml import etree
    from typing_extensions import TypeIs

    ElementT: TypeAlias = etree._Element
    NodeT: TypeAlias = str | ElementT

    # Can't actually do recursive types yet :(
    # Get as close as possible, but let lists be Any
    NodesT: TypeAlias = list[Any] | NodeT
