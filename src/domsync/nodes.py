"""Node model adapter for BeautifulSoup trees.

The live and source trees are plain ``bs4`` trees. This module gives them the
three-way kind discriminant the reconciler works with:

Node kinds:
├── ELEMENT  bs4.Tag (tag name, attributes, ordered children)
├── TEXT     bs4.NavigableString (and CData, Doctype, ...)
└── COMMENT  bs4.Comment

Identity is structural: two nodes are the same logical node when they have the
same kind and, for elements, the same tag name. There are no keys, so
reordering same-tag siblings looks like in-place modification.

"""

import copy
from enum import Enum

from bs4 import Comment, NavigableString, PageElement, Tag


class NodeKind(Enum):
    """Discriminant for the three node kinds."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"


def node_kind(node: PageElement) -> NodeKind:
    """Classify a bs4 node.

    Raises:
        TypeError: If ``node`` is not a bs4 tag or string.

    """
    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, Comment):
        return NodeKind.COMMENT
    if isinstance(node, NavigableString):
        return NodeKind.TEXT
    msg = f"Not a tree node: {type(node).__name__}"
    raise TypeError(msg)


def tag_name(tag: Tag) -> str:
    """Lowercased tag name, used for all tag comparisons."""
    return (tag.name or "").lower()


def is_same_node(a: PageElement, b: PageElement) -> bool:
    """Whether ``a`` and ``b`` may be updated in place rather than replaced."""
    kind = node_kind(a)
    if kind is not node_kind(b):
        return False
    if kind is NodeKind.ELEMENT:
        return tag_name(a) == tag_name(b)  # type: ignore[arg-type]
    return True


def is_whitespace(node: PageElement) -> bool:
    """True for text nodes containing only whitespace."""
    return node_kind(node) is NodeKind.TEXT and not str(node).strip()


def element_children(tag: Tag) -> list[Tag]:
    """Element children of ``tag`` in document order."""
    return [child for child in tag.contents if isinstance(child, Tag)]


def clone_node(node: PageElement) -> PageElement:
    """Deep, detached copy of a node.

    Copying a Tag copies its whole subtree; copying a string keeps its
    NavigableString subclass (a Comment stays a Comment).

    """
    return copy.copy(node)


__all__ = [
    "NodeKind",
    "clone_node",
    "element_children",
    "is_same_node",
    "is_whitespace",
    "node_kind",
    "tag_name",
]
