"""Mutation primitives on the live tree.

Every change the reconciler makes goes through one of these functions, so
they are the single place where mutations are counted (see
``domsync.tracking``). All of them are synchronous and assumed to succeed.
"""

from bs4 import NavigableString, PageElement, Tag

from domsync.tracking import get_mutation_accumulator


def _record(kind: str) -> None:
    acc = get_mutation_accumulator()
    if acc is not None:
        acc.record(kind)


def append_child(parent: Tag, child: PageElement) -> None:
    parent.append(child)
    _record("appended")


def insert_before(reference: PageElement, child: PageElement) -> None:
    """Insert ``child`` as the previous sibling of ``reference``."""
    reference.insert_before(child)
    _record("inserted")


def remove_child(child: PageElement) -> None:
    child.extract()
    _record("removed")


def set_attribute(element: Tag, name: str, value: str) -> None:
    element[name] = value
    _record("attributes_set")


def remove_attribute(element: Tag, name: str) -> None:
    del element[name]
    _record("attributes_removed")


def set_text(node: NavigableString, content: str) -> NavigableString:
    """Replace the content of a text or comment node.

    bs4 strings are immutable, so the node is swapped for a new string of the
    same class at the same position.

    Returns:
        The replacement node now in the tree.

    """
    replacement = type(node)(content)
    node.replace_with(replacement)
    _record("text_updated")
    return replacement
