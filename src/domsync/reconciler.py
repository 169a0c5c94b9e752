"""Depth-first reconciliation of a live tree against a source tree.

A Reconciler is created for a single call and discarded afterwards. It owns
the per-call state (scope policy, visited set) and walks the trees
depth-first, pre-order: attributes of an element are reconciled before its
children, and each child pair is fully resolved before the walk moves on.

Modes:
    Root-collapsing: the source container holds exactly one element with the
        live root's tag, so that element describes the root itself (its
        attributes and its children).
    Children-only: anything else; the container's children become the live
        root's children and the root's own attributes are left alone.

"""

from bs4 import PageElement, Tag

from domsync.attributes import attribute_value, reconcile_attributes
from domsync.children import reconcile_children
from domsync.config import ReconcileConfig
from domsync.mutations import append_child, insert_before, remove_child, set_attribute, set_text
from domsync.nodes import (
    NodeKind,
    clone_node,
    element_children,
    is_same_node,
    node_kind,
    tag_name,
)
from domsync.protocols import SelectorEngine
from domsync.scope import ScopeFilter, VisitedSet, is_attached, resolve_parent
from domsync.utils.logger import get_logger

logger = get_logger(__name__)


class Reconciler:
    """Single-use reconciliation run.

    Usage:
        >>> Reconciler(config, engine).run(live_root, container)

    """

    __slots__ = ("_config", "_scope", "_visited")

    def __init__(self, config: ReconcileConfig, engine: SelectorEngine) -> None:
        self._config = config
        self._scope = ScopeFilter(engine, ignore=config.ignore, update=config.update)
        self._visited: VisitedSet | None = None

    def run(self, live_root: Tag, container: Tag) -> None:
        """Reconcile ``live_root`` against the parsed ``container``."""
        if self._scope.is_ignored(live_root):
            logger.debug("live root <%s> is ignored, nothing to do", tag_name(live_root))
            return

        roots = element_children(container)
        collapse = len(roots) == 1 and tag_name(roots[0]) == tag_name(live_root)
        source_anchor = roots[0] if collapse else container
        logger.debug(
            "reconciling <%s>: mode=%s update=%d ignore=%d",
            tag_name(live_root),
            "root" if collapse else "children",
            len(self._scope.update),
            len(self._scope.ignore),
        )

        # The root's own attributes only follow the markup when it describes the root.
        original = None if collapse else dict(live_root.attrs)

        if self._scope.restricted:
            self._visited = VisitedSet()
            self._apply_update_scope(live_root, source_anchor, self._visited)

        if collapse:
            self.reconcile_element(live_root, source_anchor)
        else:
            self._reconcile_children(live_root, container)

        if original is not None:
            _restore_attributes(live_root, original)

    # -- Node reconciliation ---------------------------------------------------

    def reconcile_node(self, live: PageElement, source: PageElement) -> None:
        """Reconcile a pair that ``is_same_node`` accepted."""
        match node_kind(live):
            case NodeKind.ELEMENT:
                self.reconcile_element(live, source)  # type: ignore[arg-type]
            case NodeKind.TEXT | NodeKind.COMMENT:
                if str(live) != str(source):
                    set_text(live, str(source))  # type: ignore[arg-type]

    def reconcile_element(self, live: Tag, source: Tag) -> None:
        if self._scope.is_ignored(live) or self._scope.is_ignored(source):
            return
        if self._visited is not None:
            if live in self._visited:
                return
            self._visited.add(live, source)
        reconcile_attributes(live, source, reserved_prefixes=self._config.reserved_prefixes)
        self._reconcile_children(live, source)

    def _is_pair(self, live: PageElement, source: PageElement) -> bool:
        """Same logical node, and for visited elements their recorded counterpart."""
        if not is_same_node(live, source):
            return False
        if self._visited is None or live not in self._visited:
            return True
        return self._visited.counterpart(live) is source

    def _reconcile_children(self, live: Tag, source: Tag) -> None:
        reconcile_children(
            live,
            source,
            scope=self._scope,
            reconcile_pair=self.reconcile_node,
            is_pair=self._is_pair,
            strip_whitespace=self._config.strip_whitespace,
        )

    # -- Update scope ----------------------------------------------------------

    def _apply_update_scope(
        self, live_anchor: Tag, source_anchor: Tag, visited: VisitedSet
    ) -> None:
        """Reconcile update-selector matches directly, pairing them by position."""
        last_live: dict[str, Tag] = {}

        for match in self._scope.matched_pairs(live_anchor, source_anchor):
            live, source = match.live, match.source
            # A visited subtree already matches its counterpart; nothing inside it moves.
            if live is not None:
                if not is_attached(live, live_anchor) or visited.covers(live, live_anchor):
                    continue
                last_live[match.selector] = live
                if source is None:
                    logger.debug("removing stale <%s> for %r", tag_name(live), match.selector)
                    remove_child(live)
                elif is_same_node(live, source):
                    self.reconcile_element(live, source)
                else:
                    clone = clone_node(source)
                    insert_before(live, clone)
                    remove_child(live)
                    visited.add(clone, source)
                    last_live[match.selector] = clone  # type: ignore[assignment]
            elif source is not None:
                previous = last_live.get(match.selector)
                fallback = live_anchor
                if previous is not None and previous.parent is not None:
                    fallback = previous.parent
                parent = resolve_parent(live_anchor, source_anchor, source, fallback)
                if visited.covers(parent, live_anchor) or self._scope.is_excluded(
                    parent, live_anchor
                ):
                    continue
                clone = clone_node(source)
                append_child(parent, clone)
                visited.add(clone, source)
                last_live[match.selector] = clone  # type: ignore[assignment]


def _restore_attributes(live_root: Tag, original: dict[str, object]) -> None:
    """Put back root attributes that changed during a children-only run."""
    for name, value in original.items():
        current = live_root.attrs.get(name)
        if current is None or attribute_value(current) != attribute_value(value):
            set_attribute(live_root, name, attribute_value(value))
