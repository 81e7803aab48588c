"""Declarative JSON representers.

A representer decorates an object and maps its attributes to JSON keys in
both directions. Properties are declared as class attributes and keep their
declaration order, base classes first:

    class ArtistRepresenter(Representer):
        name = Property()

    class AlbumRepresenter(Representer):
        title = Property()
        artist = Property(representer=ArtistRepresenter, instance=Artist)

    AlbumRepresenter(album).to_json()
    AlbumRepresenter(Album()).from_json('{"title": "Run For Cover"}')

Encoding and decoding go through orjson, which emits compact JSON and keeps
dict insertion order.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from typing import Any, ClassVar

import orjson

from opbind.core.config import get_settings
from opbind.core.exceptions import ConfigurationError, RepresenterParseError
from opbind.core.types import JsonObject


def is_selected(
    key: str,
    include: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
) -> bool:
    """Check a JSON key against ``include``/``exclude`` render options."""
    if include is not None and key not in include:
        return False
    return exclude is None or key not in exclude


class Property:
    """A single representer field.

    Args:
        key: JSON key. Defaults to the attribute name the property is bound to.
        representer: Representer class for a nested object.
        instance: Class, or callable taking the parent object, that builds the
            nested object when it is empty during parsing.
        getter: Callable taking the represented object, replaces attribute reads.
        setter: Callable taking the represented object and the parsed value,
            replaces attribute writes.
        readable: Render this property.
        writeable: Parse this property.
    """

    def __init__(
        self,
        key: str | None = None,
        *,
        representer: type[Representer] | None = None,
        instance: Callable[..., Any] | None = None,
        getter: Callable[[Any], Any] | None = None,
        setter: Callable[[Any, Any], None] | None = None,
        readable: bool = True,
        writeable: bool = True,
    ) -> None:
        self.name = ""
        self.key = key or ""
        self.representer = representer
        self.instance = instance
        self.getter = getter
        self.setter = setter
        self.readable = readable
        self.writeable = writeable

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        if not self.key:
            self.key = name

    def __repr__(self) -> str:
        return f"Property(name={self.name!r}, key={self.key!r})"

    def read(self, represented: object) -> Any:  # noqa: ANN401
        """Return the value to render, through ``getter`` when one is set."""
        if self.getter is not None:
            return self.getter(represented)
        return getattr(represented, self.name, None)

    def write(self, represented: object, value: object) -> None:
        """Store a parsed value, through ``setter`` when one is set."""
        if self.setter is not None:
            self.setter(represented, value)
        else:
            setattr(represented, self.name, value)

    def build_instance(self, parent: object) -> Any:  # noqa: ANN401
        """Create the nested object for an empty attribute."""
        if self.instance is None:
            msg = f"Property {self.name!r} is empty and declares no instance"
            raise ConfigurationError(msg, context={"property": self.name})
        if isinstance(self.instance, type):
            return self.instance()
        return self.instance(parent)


class Representer:
    """Base class for declarative representers."""

    definitions: ClassVar[dict[str, Property]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        definitions: dict[str, Property] = {}
        for base in reversed(cls.__mro__):
            for attr, value in vars(base).items():
                if isinstance(value, Property):
                    definitions[attr] = value
        cls.definitions = definitions

    def __init__(self, represented: object) -> None:
        self.represented = represented

    def to_dict(
        self,
        include: Collection[str] | None = None,
        exclude: Collection[str] | None = None,
    ) -> JsonObject:
        """Render the represented object into a JSON-ready dict.

        Args:
            include: If given, only these keys are rendered.
            exclude: Keys that are never rendered.

        Returns:
            JsonObject: Keys in declaration order.
        """
        render_none = get_settings().representer_config.render_none
        document: JsonObject = {}

        for prop in self.definitions.values():
            if not prop.readable or not is_selected(prop.key, include, exclude):
                continue

            value = prop.read(self.represented)
            if value is None:
                if render_none:
                    document[prop.key] = None
                continue

            if prop.representer is not None:
                value = prop.representer(value).to_dict()
            document[prop.key] = value

        return document

    def to_json(
        self,
        include: Collection[str] | None = None,
        exclude: Collection[str] | None = None,
    ) -> str:
        """Render the represented object as a compact JSON string."""
        return orjson.dumps(self.to_dict(include=include, exclude=exclude)).decode()

    def from_dict(self, data: Mapping[str, Any]) -> Any:  # noqa: ANN401
        """Write a decoded document onto the represented object.

        Keys without a writeable property are ignored. Nested objects are
        reused when present and built through the property's ``instance``
        otherwise.

        Returns:
            Any: The represented object.
        """
        for prop in self.definitions.values():
            if not prop.writeable or prop.key not in data:
                continue

            value = data[prop.key]
            if prop.representer is not None and value is not None:
                if not isinstance(value, Mapping):
                    msg = f"Expected an object for {prop.key!r}"
                    raise RepresenterParseError(msg, context={"key": prop.key})
                target = prop.read(self.represented)
                if target is None:
                    target = prop.build_instance(self.represented)
                value = prop.representer(target).from_dict(value)

            prop.write(self.represented, value)

        return self.represented

    def from_json(self, raw: str | bytes) -> Any:  # noqa: ANN401
        """Decode a JSON document and write it onto the represented object.

        Raises:
            RepresenterParseError: If the document is malformed or not an object.
        """
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise RepresenterParseError(
                "Malformed JSON document",
                context={"representer": type(self).__name__},
                cause=exc,
            ) from exc

        if not isinstance(data, dict):
            raise RepresenterParseError(
                "Expected a JSON object",
                context={"representer": type(self).__name__},
            )
        return self.from_dict(data)
