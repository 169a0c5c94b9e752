"""Tree serialization: JSON snapshots of bs4 trees.

Converts live or source trees to/from JSON-compatible dicts. Useful for:
- Comparing two trees structurally (tag, attributes, children, text)
- Snapshotting a live tree before a reconcile that may fail part-way
- Debugging and inspection

All output is deterministic (sorted keys) for stable comparison.

Example:
    from domsync.serialization import to_json, from_json

    snapshot = to_json(element)
    restored = from_json(snapshot)
    assert to_json(restored) == snapshot

"""

import json
from typing import Any

from bs4 import Comment, NavigableString, PageElement, Tag

from domsync.attributes import attribute_value
from domsync.nodes import NodeKind, node_kind


def to_dict(node: PageElement) -> dict[str, Any]:
    """Convert a bs4 node to a JSON-compatible dict.

    Includes a ``_kind`` discriminator field for deserialization. Attribute
    values are normalized to strings.

    Args:
        node: Any bs4 tag or string.

    Returns:
        Dict with ``_kind`` and ``tag``/``attrs``/``children`` or ``content``.

    """
    kind = node_kind(node)
    if kind is NodeKind.ELEMENT:
        return {
            "_kind": kind.value,
            "tag": node.name,
            "attrs": {name: attribute_value(value) for name, value in node.attrs.items()},
            "children": [to_dict(child) for child in node.contents],
        }
    return {"_kind": kind.value, "content": str(node)}


def from_dict(data: dict[str, Any]) -> PageElement:
    """Build a detached bs4 node from a dict produced by to_dict.

    Raises:
        ValueError: If ``_kind`` is missing or unknown.

    """
    kind_name = data.get("_kind")
    if kind_name is None:
        msg = "Missing '_kind' field in serialized node"
        raise ValueError(msg)
    try:
        kind = NodeKind(kind_name)
    except ValueError:
        msg = f"Unknown node kind: {kind_name!r}"
        raise ValueError(msg) from None

    if kind is NodeKind.TEXT:
        return NavigableString(data.get("content", ""))
    if kind is NodeKind.COMMENT:
        return Comment(data.get("content", ""))

    tag = Tag(name=data["tag"], attrs=dict(data.get("attrs", {})))
    for child in data.get("children", ()):
        tag.append(from_dict(child))
    return tag


def to_json(node: PageElement, *, indent: int | None = None) -> str:
    """Serialize a node to a JSON string (sorted keys)."""
    return json.dumps(to_dict(node), sort_keys=True, indent=indent)


def from_json(data: str) -> PageElement:
    """Deserialize a node from a JSON string produced by to_json."""
    return from_dict(json.loads(data))
