"""Selector scoping for reconciliation.

Two policies, composed:

Ignore:
    Any live or source element matching an ignore selector is excluded along
    with its subtree. Ignored live subtrees are never mutated; ignored source
    subtrees are never copied.

Update:
    A non-empty list of update selectors pairs up live and source matches
    selector by selector, position by position, so those nodes are reconciled
    directly instead of through the positional child walk. Everything not
    visited that way is still reconciled positionally afterwards, so update
    scoping adds to the default algorithm and never narrows it. Without
    ignore selectors the result equals an unrestricted run. With them, ignored
    live nodes may end up at a different position among their siblings.

"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from bs4 import PageElement, Tag

from domsync.nodes import element_children, tag_name
from domsync.protocols import SelectorEngine


@dataclass(frozen=True, slots=True)
class ScopedMatch:
    """One position in the pairing of live and source matches for a selector.

    Either side is None when that side has fewer matches.

    """

    selector: str
    position: int
    live: Tag | None
    source: Tag | None


class VisitedSet:
    """Identity set of live elements already reconciled in this run.

    Each member remembers the source element it was reconciled against, so a
    later positional pass pairs it with that element only. A member's subtree
    already matches its counterpart and is not mutated again. Keeps references
    to its members so that an id cannot be reused by a node created later in
    the same run.

    """

    __slots__ = ("_nodes",)

    def __init__(self) -> None:
        self._nodes: dict[int, tuple[PageElement, PageElement]] = {}

    def add(self, node: PageElement, counterpart: PageElement) -> None:
        self._nodes[id(node)] = (node, counterpart)

    def counterpart(self, node: PageElement) -> PageElement | None:
        entry = self._nodes.get(id(node))
        return entry[1] if entry is not None else None

    def __contains__(self, node: object) -> bool:
        return id(node) in self._nodes

    def covers(self, node: PageElement, anchor: Tag) -> bool:
        """Whether ``node`` or one of its ancestors up to ``anchor`` is a member."""
        current: PageElement | None = node
        while current is not None:
            if id(current) in self._nodes:
                return True
            if current is anchor:
                break
            current = current.parent
        return False

    def __len__(self) -> int:
        return len(self._nodes)


class ScopeFilter:
    """Apply ignore and update selectors through a SelectorEngine."""

    __slots__ = ("_engine", "ignore", "update")

    def __init__(
        self,
        engine: SelectorEngine,
        *,
        ignore: Sequence[str] = (),
        update: Sequence[str] | None = None,
    ) -> None:
        self._engine = engine
        self.ignore = tuple(ignore)
        self.update = tuple(update or ())

    @property
    def restricted(self) -> bool:
        """True when update selectors are in effect."""
        return bool(self.update)

    def is_ignored(self, node: PageElement) -> bool:
        if not self.ignore or not isinstance(node, Tag):
            return False
        return any(self._engine.matches(node, selector) for selector in self.ignore)

    def is_excluded(self, node: PageElement, anchor: Tag) -> bool:
        """Whether ``node`` lies in an ignored subtree below ``anchor``.

        ``anchor`` itself is checked too; ancestors above it are not.
        """
        if not self.ignore:
            return False
        current: PageElement | None = node
        while current is not None:
            if self.is_ignored(current):
                return True
            if current is anchor:
                break
            current = current.parent
        return False

    def matched_pairs(self, live_anchor: Tag, source_anchor: Tag) -> Iterator[ScopedMatch]:
        """Pair live and source matches of each update selector by position."""
        for selector in self.update:
            live_matches = [
                node
                for node in self._engine.query_all(live_anchor, selector)
                if not self.is_excluded(node, live_anchor)
            ]
            source_matches = [
                node
                for node in self._engine.query_all(source_anchor, selector)
                if not self.is_excluded(node, source_anchor)
            ]
            for position in range(max(len(live_matches), len(source_matches))):
                yield ScopedMatch(
                    selector=selector,
                    position=position,
                    live=live_matches[position] if position < len(live_matches) else None,
                    source=source_matches[position] if position < len(source_matches) else None,
                )


def is_attached(node: PageElement, anchor: Tag) -> bool:
    """Whether ``node`` is still ``anchor`` or one of its descendants."""
    current: PageElement | None = node
    while current is not None:
        if current is anchor:
            return True
        current = current.parent
    return False


def resolve_parent(
    live_anchor: Tag,
    source_anchor: Tag,
    source_node: PageElement,
    fallback: Tag,
) -> Tag:
    """Find the live counterpart of ``source_node``'s parent.

    Follows the element-index path from ``source_anchor`` down to the parent,
    taking the same steps from ``live_anchor`` and requiring matching tag
    names along the way. Returns ``fallback`` when the path does not resolve.

    """
    path: list[Tag] = []
    current = source_node.parent
    while current is not None and current is not source_anchor:
        path.append(current)
        current = current.parent
    if current is None:
        return fallback

    live = live_anchor
    source_parent = source_anchor
    for step in reversed(path):
        index = next(i for i, el in enumerate(element_children(source_parent)) if el is step)
        live_elements = element_children(live)
        if index >= len(live_elements) or tag_name(live_elements[index]) != tag_name(step):
            return fallback
        live = live_elements[index]
        source_parent = step
    return live
