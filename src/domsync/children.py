"""Child list alignment.

Aligns the children of a live element with the children of a source element
using a single two-pointer pass, ``i`` over live children and ``j`` over
source children:

1. Live exhausted: append a copy of the source child (unless ignored).
2. Source exhausted: remove the live child (unless ignored).
3. Same logical node: reconcile the pair in place, advance both.
4. Different nodes: skip an ignored live child, else skip an ignored source
   child, else insert a copy of the source child before the live child and
   compare the same live child again on the next step.

There is no lookahead. Swapping two unlike siblings is rendered as an insert
plus a remove, never as a move.

Complexity: O(len(live) + len(source)) per parent, excluding recursion.

"""

from collections.abc import Callable, Sequence
from typing import TypeAlias

from bs4 import PageElement, Tag

from domsync.mutations import append_child, insert_before, remove_child
from domsync.nodes import clone_node, is_same_node, is_whitespace
from domsync.scope import ScopeFilter

PairReconciler: TypeAlias = Callable[[PageElement, PageElement], None]
PairPredicate: TypeAlias = Callable[[PageElement, PageElement], bool]


def _alignable(children: Sequence[PageElement], strip_whitespace: bool) -> list[PageElement]:
    if strip_whitespace:
        return [child for child in children if not is_whitespace(child)]
    return list(children)


def reconcile_children(
    live_parent: Tag,
    source_parent: Tag,
    *,
    scope: ScopeFilter,
    reconcile_pair: PairReconciler,
    is_pair: PairPredicate = is_same_node,
    strip_whitespace: bool = False,
) -> None:
    """Converge ``live_parent``'s children to ``source_parent``'s.

    Args:
        live_parent: Element whose children are mutated
        source_parent: Element whose children are the desired state (read-only)
        scope: Ignore policy for skipping nodes
        reconcile_pair: Called for every same-node pair to recurse into it
        is_pair: Decides whether two nodes are the same logical node
        strip_whitespace: Leave whitespace-only text out of the alignment
    """
    live = _alignable(live_parent.contents, strip_whitespace)
    source = _alignable(source_parent.contents, strip_whitespace)

    i = j = 0
    while i < len(live) or j < len(source):
        if i >= len(live):
            if not scope.is_ignored(source[j]):
                append_child(live_parent, clone_node(source[j]))
            j += 1
        elif j >= len(source):
            if not scope.is_ignored(live[i]):
                remove_child(live[i])
            i += 1
        elif is_pair(live[i], source[j]):
            reconcile_pair(live[i], source[j])
            i += 1
            j += 1
        elif scope.is_ignored(live[i]):
            i += 1
        elif scope.is_ignored(source[j]):
            j += 1
        else:
            insert_before(live[i], clone_node(source[j]))
            j += 1
