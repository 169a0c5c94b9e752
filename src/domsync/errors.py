"""Exception classes for domsync.

Provides standardized exceptions for error handling throughout domsync.
Only invalid input and invalid selectors are errors; missing attributes,
absent children and empty selector results are ordinary outcomes.
"""

from __future__ import annotations


class DomsyncError(Exception):
    """Base exception for all domsync errors.

    Subclass this for specific error categories.
    """

    pass


class InvalidInputError(DomsyncError):
    """The live root or the new markup cannot be reconciled.

    Raised before any mutation of the live tree has happened.
    """

    def __init__(self, message: str, *, value: object = None) -> None:
        """Initialize invalid input error.

        Args:
            message: Error description
            value: The offending value (optional, used in the message)
        """
        self.value = value
        if value is not None:
            message = f"{message} (got {type(value).__name__})"
        super().__init__(message)


class SelectorError(DomsyncError):
    """A selector expression could not be compiled.

    Propagated from the selector engine. Every update and ignore selector is
    checked against the live root before anything else happens, so the live
    tree is never touched when this is raised.
    """

    def __init__(self, selector: str, message: str) -> None:
        """Initialize selector error.

        Args:
            selector: The selector that failed to compile
            message: Description from the selector engine
        """
        self.selector = selector
        super().__init__(f"Invalid selector {selector!r}: {message}")


class ConfigError(DomsyncError, ValueError):
    """Invalid reconciliation configuration value."""

    pass
