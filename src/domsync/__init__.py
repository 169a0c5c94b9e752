"""
domsync: in-place reconciliation of live HTML trees

Brings an existing BeautifulSoup tree (the live tree) in line with new markup
by patching it node by node instead of replacing it. Nodes that are unchanged
or merely modified keep their identity, so anything attached to them survives.

Quick Start:
    >>> from bs4 import BeautifulSoup
    >>> from domsync import reconcile
    >>> soup = BeautifulSoup('<ul id="todo"><li>x</li></ul>', "html.parser")
    >>> ul = soup.ul
    >>> first = ul.li
    >>> reconcile(ul, '<ul id="todo"><li>x</li><li>y</li></ul>')
    >>> str(ul)
    '<ul id="todo"><li>x</li><li>y</li></ul>'
    >>> ul.li is first
    True

Scoping:
    >>> # Leave a widget alone, whatever the markup says
    >>> reconcile(page, markup, ignore=[".widget"])
    >>>
    >>> # Reconcile matched nodes first, then everything else positionally
    >>> reconcile(page, markup, update=".row")

Installation:
    pip install domsync
"""

from collections.abc import Iterable

from bs4 import Tag

from domsync.attributes import reconcile_attributes
from domsync.builder import SoupTreeBuilder
from domsync.children import reconcile_children
from domsync.config import (
    ReconcileConfig,
    get_reconcile_config,
    reconcile_config_context,
    reset_reconcile_config,
    set_reconcile_config,
)
from domsync.css import SoupSelectorEngine
from domsync.errors import ConfigError, DomsyncError, InvalidInputError, SelectorError
from domsync.nodes import NodeKind, is_same_node, node_kind
from domsync.protocols import SelectorEngine, TreeBuilder
from domsync.reconciler import Reconciler
from domsync.scope import ScopeFilter
from domsync.serialization import from_dict, from_json, to_dict, to_json
from domsync.tracking import MutationAccumulator, get_mutation_accumulator, track_mutations
from domsync.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


def markup_is_identical(live_root: Tag, markup: str) -> bool:
    """Default identity check for the early return.

    True when the live root serializes to exactly ``markup``. A full run on
    such markup would root-collapse onto identical content and change nothing.
    """
    return str(live_root) == markup


class DomUpdater:
    """Reconciles live trees against markup.

    Usage:
        >>> updater = DomUpdater()
        >>> updater.update(element, "<p>new</p>", ignore=[".live"])

        >>> # Shared settings for every call
        >>> updater = DomUpdater(ReconcileConfig(strip_whitespace=True))
        >>> updater(element, markup)

        >>> # Different collaborators
        >>> updater = DomUpdater(builder=SoupTreeBuilder("lxml"))

    Thread Safety:
        Holds no per-call state. Safe to share, as long as no two calls
        reconcile the same live tree at the same time.

    """

    __slots__ = ("_builder", "_config", "_engine")

    def __init__(
        self,
        config: ReconcileConfig | None = None,
        *,
        builder: TreeBuilder | None = None,
        engine: SelectorEngine | None = None,
    ) -> None:
        """Initialize updater.

        Args:
            config: Settings for every call (uses the context config if None)
            builder: Tree builder for new markup (BeautifulSoup html.parser if None)
            engine: Selector engine for update/ignore (soupsieve if None)
        """
        self._config = config
        self._builder = builder or SoupTreeBuilder()
        self._engine = engine or SoupSelectorEngine()

    @property
    def config(self) -> ReconcileConfig:
        """Config in effect for the next call."""
        return self._config if self._config is not None else get_reconcile_config()

    def update(
        self,
        element: Tag,
        markup: str,
        *,
        update: str | Iterable[str] | None = None,
        ignore: str | Iterable[str] | None = None,
    ) -> None:
        """Reconcile ``element`` in place so it matches ``markup``.

        Args:
            element: Live root element (mutated)
            markup: New content, either the element itself or its children
            update: Selector(s) reconciled first, by position among matches
            ignore: Selector(s) whose subtrees are left untouched

        Raises:
            InvalidInputError: ``element`` is not a Tag, or ``markup`` is not
                a string or is rejected by the builder. Nothing is mutated.
            SelectorError: A selector is invalid. Nothing is mutated.
            ConfigError: A selector option is not a string or strings.

        """
        if not isinstance(element, Tag):
            raise InvalidInputError("Live root must be a bs4 Tag", value=element)
        if not isinstance(markup, str):
            raise InvalidInputError("Markup must be a string", value=markup)

        config = self.config.with_selectors(update=update, ignore=ignore)

        # Every selector is checked before the early return, so an invalid one
        # raises whether or not the markup is identical.
        for selector in (*(config.update or ()), *config.ignore):
            self._engine.matches(element, selector)

        acc = get_mutation_accumulator()
        if acc is not None:
            acc.reconcile_calls += 1

        if config.skip_identical:
            identical = config.identical or markup_is_identical
            if identical(element, markup):
                logger.debug("markup identical to <%s>, skipping", element.name)
                return

        container = self._builder.parse(markup)
        Reconciler(config, self._engine).run(element, container)

    def __call__(
        self,
        element: Tag,
        markup: str,
        *,
        update: str | Iterable[str] | None = None,
        ignore: str | Iterable[str] | None = None,
    ) -> None:
        """Alias for update()."""
        self.update(element, markup, update=update, ignore=ignore)


_default_updater = DomUpdater()


def reconcile(
    live_root: Tag,
    markup: str,
    *,
    update: str | Iterable[str] | None = None,
    ignore: str | Iterable[str] | None = None,
    config: ReconcileConfig | None = None,
) -> None:
    """Reconcile a live tree with new markup, mutating it in place.

    Args:
        live_root: Live root element (mutated)
        markup: New content, either the element itself or its children
        update: Selector(s) reconciled first, by position among matches
        ignore: Selector(s) whose subtrees are left untouched
        config: Settings for this call (uses the context config if None)

    Example:
        >>> soup = BeautifulSoup('<p class="a">t</p>', "html.parser")
        >>> reconcile(soup.p, '<p class="b">t</p>')
        >>> soup.p["class"]
        'b'
    """
    updater = _default_updater if config is None else DomUpdater(config)
    updater.update(live_root, markup, update=update, ignore=ignore)


__all__ = [  # noqa: RUF022: grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "reconcile",
    "DomUpdater",
    "markup_is_identical",
    # Algorithm pieces
    "Reconciler",
    "ScopeFilter",
    "reconcile_attributes",
    "reconcile_children",
    # Node model
    "NodeKind",
    "is_same_node",
    "node_kind",
    # Collaborators
    "SelectorEngine",
    "SoupSelectorEngine",
    "SoupTreeBuilder",
    "TreeBuilder",
    # Configuration (ContextVar-based)
    "ReconcileConfig",
    "get_reconcile_config",
    "set_reconcile_config",
    "reset_reconcile_config",
    "reconcile_config_context",
    # Mutation tracking
    "MutationAccumulator",
    "get_mutation_accumulator",
    "track_mutations",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Errors
    "DomsyncError",
    "InvalidInputError",
    "SelectorError",
    "ConfigError",
]
