"""Default selector engine backed by soupsieve.

soupsieve is the CSS selector implementation behind ``Tag.select``; using it
directly gives compiled, cached selectors and a typed syntax error.
"""

from __future__ import annotations

from functools import lru_cache

import soupsieve
from bs4 import PageElement, Tag

from domsync.errors import SelectorError


@lru_cache(maxsize=256)
def compile_selector(selector: str) -> soupsieve.SoupSieve:
    """Compile a CSS selector, caching the result.

    Raises:
        SelectorError: If the selector is syntactically invalid.

    """
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise SelectorError(selector, str(exc)) from exc


class SoupSelectorEngine:
    """CSS selector engine for bs4 trees.

    Stateless; a single instance can serve any number of reconciliations.

    """

    __slots__ = ()

    def matches(self, node: PageElement, selector: str) -> bool:
        if not isinstance(node, Tag):
            return False
        return compile_selector(selector).match(node)

    def query_all(self, root: Tag, selector: str) -> list[Tag]:
        return list(compile_selector(selector).select(root))
