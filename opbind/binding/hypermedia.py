"""HAL-style hypermedia links for representers.

    class AlbumHypermedia(Hypermedia, AlbumRepresenter):
        @link("self")
        def self_link(self) -> str:
            return f"//album/{self.represented.title}"

renders ``..., "_links": {"self": {"href": "//album/After The War"}}`` after
the declared properties. Links are computed at render time only; an incoming
``_links`` key is ignored when parsing.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any, ClassVar

from opbind.binding.representer import Representer, is_selected
from opbind.core.types import JsonObject

LINKS_KEY = "_links"

type LinkMethod = Callable[[Any], str | None]


def link(rel: str) -> Callable[[LinkMethod], LinkMethod]:
    """Register a representer method as the href of the ``rel`` link."""

    def decorator(method: LinkMethod) -> LinkMethod:
        method.__link_rel__ = rel  # type: ignore[attr-defined]
        return method

    return decorator


class Hypermedia(Representer):
    """Representer mixin rendering ``@link`` methods under ``_links``."""

    link_definitions: ClassVar[dict[str, LinkMethod]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        links: dict[str, LinkMethod] = {}
        for base in reversed(cls.__mro__):
            for value in vars(base).values():
                rel = getattr(value, "__link_rel__", None)
                if rel is not None:
                    links[rel] = value
        cls.link_definitions = links

    def links(self) -> dict[str, dict[str, str]]:
        """Evaluate every link against the represented object.

        Returns:
            dict[str, dict[str, str]]: ``{rel: {"href": href}}``, skipping links
                that resolved to None.
        """
        rendered: dict[str, dict[str, str]] = {}
        for rel, method in self.link_definitions.items():
            href = method(self)
            if href is not None:
                rendered[rel] = {"href": href}
        return rendered

    def to_dict(
        self,
        include: Collection[str] | None = None,
        exclude: Collection[str] | None = None,
    ) -> JsonObject:
        document = super().to_dict(include=include, exclude=exclude)
        if is_selected(LINKS_KEY, include, exclude) and (links := self.links()):
            document[LINKS_KEY] = links
        return document
