"""ContextVar-based reconcile configuration for domsync.

Provides thread-local configuration using Python's ContextVars (PEP 567).
``reconcile()`` reads the active config and overlays per-call selectors on
top of it.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed. The live tree itself is never protected; callers
    must not reconcile the same tree from two threads at once.

Usage:
    # Per call
    reconcile(element, markup, ignore=[".keep"])

    # For a block of calls
    with reconcile_config_context(ReconcileConfig(strip_whitespace=True)):
        reconcile(element, markup)

"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from domsync.errors import ConfigError

if TYPE_CHECKING:
    from bs4 import Tag


def normalize_selectors(
    value: str | Iterable[str] | None, *, field: str = "selector"
) -> tuple[str, ...] | None:
    """Normalize a selector (or other string) option to a tuple.

    A bare string is one item; ``None`` stays ``None``. ``field`` names the
    option in error messages.

    Raises:
        ConfigError: If the value or any item is not a string.

    """
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    try:
        selectors = tuple(value)
    except TypeError:
        msg = (
            f"{field.capitalize()} values must be a string or an iterable of strings, "
            f"got {type(value).__name__}"
        )
        raise ConfigError(msg) from None
    for selector in selectors:
        if not isinstance(selector, str):
            msg = f"{field.capitalize()} must be a string, got {type(selector).__name__}"
            raise ConfigError(msg)
    return selectors


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    """Immutable reconcile configuration.

    Attributes:
        update: Update selectors; None or empty reconciles everything positionally
        ignore: Ignore selectors; matching subtrees are left untouched
        strip_whitespace: Leave whitespace-only text nodes out of child alignment
        reserved_prefixes: Attribute name prefixes never removed from live elements
        skip_identical: Return early when the markup already matches the live tree
        identical: Custom identity check (live_root, markup) -> bool for the early return

    """

    update: tuple[str, ...] | None = None
    ignore: tuple[str, ...] = ()
    strip_whitespace: bool = False
    reserved_prefixes: tuple[str, ...] = ("data-",)
    skip_identical: bool = True
    identical: Callable[["Tag", str], bool] | None = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ReconcileConfig":
        """Create ReconcileConfig from dictionary.

        Only includes keys that are valid ReconcileConfig fields; unknown keys
        are silently ignored. Selector and prefix values may be lists or bare
        strings.

        Example:
            >>> config = ReconcileConfig.from_dict({
            ...     "ignore": ".sidebar",
            ...     "strip_whitespace": True,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.ignore
            ('.sidebar',)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "update" in filtered:
            filtered["update"] = normalize_selectors(filtered["update"])
        if "ignore" in filtered:
            filtered["ignore"] = normalize_selectors(filtered["ignore"]) or ()
        if "reserved_prefixes" in filtered:
            filtered["reserved_prefixes"] = (
                normalize_selectors(filtered["reserved_prefixes"], field="reserved prefix") or ()
            )
        return cls(**filtered)

    def with_selectors(
        self,
        *,
        update: str | Iterable[str] | None = None,
        ignore: str | Iterable[str] | None = None,
    ) -> "ReconcileConfig":
        """Copy of this config with per-call selectors applied.

        Arguments left as None keep the configured value.
        """
        changes: dict[str, object] = {}
        if update is not None:
            changes["update"] = normalize_selectors(update)
        if ignore is not None:
            changes["ignore"] = normalize_selectors(ignore)
        return replace(self, **changes) if changes else self


_DEFAULT_CONFIG: ReconcileConfig = ReconcileConfig()

_reconcile_config: ContextVar[ReconcileConfig] = ContextVar(
    "reconcile_config",
    default=_DEFAULT_CONFIG,
)


def get_reconcile_config() -> ReconcileConfig:
    """Get current reconcile configuration (thread-local)."""
    return _reconcile_config.get()


def set_reconcile_config(config: ReconcileConfig) -> None:
    """Set reconcile configuration for current context."""
    _reconcile_config.set(config)


def reset_reconcile_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _reconcile_config.set(_DEFAULT_CONFIG)


@contextmanager
def reconcile_config_context(config: ReconcileConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with reconcile_config_context(ReconcileConfig(ignore=(".live",))):
        ...     reconcile(element, markup)

    """
    previous = _reconcile_config.get()
    _reconcile_config.set(config)
    try:
        yield
    finally:
        _reconcile_config.set(previous)


__all__ = [
    "ReconcileConfig",
    "get_reconcile_config",
    "normalize_selectors",
    "reconcile_config_context",
    "reset_reconcile_config",
    "set_reconcile_config",
]
