"""Opt-in mutation tracking for reconciliation.

Counts every mutation the reconciler applies to a live tree:
- Children appended, inserted and removed
- Attributes set and removed
- Text/comment content replaced

Zero overhead when disabled (get_mutation_accumulator() returns None).

Example:
    from domsync import reconcile
    from domsync.tracking import track_mutations

    with track_mutations() as mutations:
        reconcile(element, "<p>Hello</p>")

    print(mutations.summary())
    # {"total": 1, "appended": 0, ..., "text_updated": 1, "reconcile_calls": 1}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class MutationAccumulator:
    """Accumulated mutation counts during reconciliation.

    Attributes:
        start_time: Tracking start timestamp.
        appended: Children appended to the end of a parent.
        inserted: Children inserted before an existing sibling.
        removed: Children removed from the live tree.
        attributes_set: Attribute values written.
        attributes_removed: Attributes deleted.
        text_updated: Text or comment nodes whose content was replaced.
        reconcile_calls: Number of reconcile() calls recorded.

    """

    start_time: float = field(default_factory=perf_counter)
    appended: int = 0
    inserted: int = 0
    removed: int = 0
    attributes_set: int = 0
    attributes_removed: int = 0
    text_updated: int = 0
    reconcile_calls: int = 0

    def record(self, kind: str) -> None:
        """Increment the counter named ``kind``."""
        setattr(self, kind, getattr(self, kind) + 1)

    @property
    def total(self) -> int:
        """Total number of mutations (reconcile calls excluded)."""
        return (
            self.appended
            + self.inserted
            + self.removed
            + self.attributes_set
            + self.attributes_removed
            + self.text_updated
        )

    @property
    def total_duration_ms(self) -> float:
        """Total tracking duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of mutation counts."""
        return {
            "total": self.total,
            "appended": self.appended,
            "inserted": self.inserted,
            "removed": self.removed,
            "attributes_set": self.attributes_set,
            "attributes_removed": self.attributes_removed,
            "text_updated": self.text_updated,
            "reconcile_calls": self.reconcile_calls,
            "total_ms": round(self.total_duration_ms, 2),
        }


_accumulator: ContextVar[MutationAccumulator | None] = ContextVar(
    "mutation_accumulator",
    default=None,
)


def get_mutation_accumulator() -> MutationAccumulator | None:
    """Get current accumulator (None if tracking disabled)."""
    return _accumulator.get()


@contextmanager
def track_mutations() -> Iterator[MutationAccumulator]:
    """Context manager for tracked reconciliation.

    Creates a MutationAccumulator and makes it available via
    get_mutation_accumulator() for the duration of the with block.

    Yields:
        MutationAccumulator populated by every mutation in the block.

    """
    acc = MutationAccumulator()
    token: Token[MutationAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = [
    "MutationAccumulator",
    "get_mutation_accumulator",
    "track_mutations",
]
