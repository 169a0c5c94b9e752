"""Default tree builder backed by BeautifulSoup.

Parses markup with the stdlib ``html.parser`` backend unless another bs4
feature (``"lxml"``, ``"html5lib"``) is requested. Attribute values are kept
as plain strings (``multi_valued_attributes=None``) so that ``class`` compares
as text, not as a list.

Example:
    >>> from domsync.builder import SoupTreeBuilder
    >>> container = SoupTreeBuilder().parse("<p>a</p><p>b</p>")
    >>> [child.name for child in container.contents]
    ['p', 'p']
"""

from __future__ import annotations

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.builder import builder_registry

from domsync.errors import ConfigError, InvalidInputError

DEFAULT_FEATURES = "html.parser"


class SoupTreeBuilder:
    """Build source trees with BeautifulSoup.

    The returned container is the ``BeautifulSoup`` object itself for
    ``html.parser``. Backends that always produce a full document
    (``lxml``, ``html5lib``) get their ``<body>`` used as the container.

    """

    __slots__ = ("_features",)

    def __init__(self, features: str = DEFAULT_FEATURES) -> None:
        if builder_registry.lookup(features) is None:
            msg = f"No BeautifulSoup tree builder for features {features!r}"
            raise ConfigError(msg)
        self._features = features

    @property
    def features(self) -> str:
        return self._features

    def parse(self, markup: str) -> Tag:
        if not isinstance(markup, str):
            raise InvalidInputError("Markup must be a string", value=markup)
        try:
            soup = BeautifulSoup(markup, self._features, multi_valued_attributes=None)
        except ParserRejectedMarkup as exc:
            raise InvalidInputError(f"Markup rejected by {self._features}: {exc}") from exc

        if self._features != DEFAULT_FEATURES and soup.body is not None:
            return soup.body
        return soup
