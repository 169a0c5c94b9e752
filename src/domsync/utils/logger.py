"""Logging for domsync.

Loggers live under the ``domsync`` namespace and the library installs no
handlers; applications configure output through the standard ``logging``
module.
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` under the ``domsync.`` namespace.

    Module names inside the package (``__name__``) are used as they are;
    anything else is prefixed.
    """
    if not (name == "domsync" or name.startswith("domsync.")):
        name = f"domsync.{name}"
    return logging.getLogger(name)
