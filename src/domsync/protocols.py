"""Protocols for domsync.

Defines the contracts for the collaborators the reconciler consumes: a tree
builder that turns markup into a tree and a selector engine that matches and
queries nodes. Default implementations live in ``domsync.builder`` and
``domsync.css``.
"""

from __future__ import annotations

from typing import Protocol

from bs4 import PageElement, Tag


class TreeBuilder(Protocol):
    """Protocol for turning markup text into a source tree.

    Malformed markup is the builder's concern; it either recovers or raises
    ``InvalidInputError``.

    """

    def parse(self, markup: str) -> Tag:
        """Parse markup into a neutral container element.

        Args:
            markup: Markup text (a fragment or a single root element)

        Returns:
            Container whose children are the parsed top-level nodes.
        """
        ...


class SelectorEngine(Protocol):
    """Protocol for selector matching.

    Selector syntax is opaque to the reconciler. Invalid selectors raise
    ``SelectorError``.

    """

    def matches(self, node: PageElement, selector: str) -> bool:
        """Whether ``node`` matches ``selector`` (False for non-elements)."""
        ...

    def query_all(self, root: Tag, selector: str) -> list[Tag]:
        """All descendants of ``root`` matching ``selector``, in document order."""
        ...
