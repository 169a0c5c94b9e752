"""Attribute reconciliation for a single element pair.

Attributes present only on the live element are removed unless their name
carries a reserved, host-managed prefix (``data-`` by default): those hold
runtime state the markup does not control. Attributes from the source element
are written only when the value differs, so an unchanged element sees no
mutation at all.
"""

from collections.abc import Sequence

from bs4 import Tag

from domsync.mutations import remove_attribute, set_attribute

DEFAULT_RESERVED_PREFIXES: tuple[str, ...] = ("data-",)


def attribute_value(value: object) -> str:
    """String form of a bs4 attribute value.

    Trees parsed with bs4's default settings store multi-valued attributes
    such as ``class`` as lists; those compare as their space-joined text.
    """
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def is_reserved(name: str, reserved_prefixes: Sequence[str]) -> bool:
    return any(name.startswith(prefix) for prefix in reserved_prefixes)


def reconcile_attributes(
    live: Tag,
    source: Tag,
    *,
    reserved_prefixes: Sequence[str] = DEFAULT_RESERVED_PREFIXES,
) -> None:
    """Merge ``source``'s attributes into ``live``.

    Args:
        live: Element in the live tree (mutated)
        source: Element in the source tree (read-only)
        reserved_prefixes: Name prefixes never removed from ``live``
    """
    for name in list(live.attrs):
        if name not in source.attrs and not is_reserved(name, reserved_prefixes):
            remove_attribute(live, name)

    for name, value in source.attrs.items():
        new_value = attribute_value(value)
        current = live.attrs.get(name)
        if current is None or attribute_value(current) != new_value:
            set_attribute(live, name, new_value)
