"""Contracts: validated form objects wrapping a domain model.

A contract is a pydantic model whose fields mirror the domain model it wraps.
Every field defaults to ``None`` so a contract can be built from an empty model
and populated incrementally from input. Constraints are declared with
``Annotated`` metadata:

    class ArtistContract(Contract):
        name: Annotated[str | None, Presence()] = None

    class AlbumContract(Contract):
        title: Annotated[str | None, Presence()] = None
        artist: Annotated[ArtistContract | None, PopulateIfEmpty(Artist)] = None

Type and pydantic field constraints are checked by pydantic itself; presence
is checked here, since a field that may be empty before validation cannot be
declared required to pydantic.
"""

from __future__ import annotations

import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Self, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from opbind.core.exceptions import ConfigurationError
from opbind.core.types import ErrorMap

BLANK_MESSAGE = "can't be blank"


@dataclass(frozen=True)
class Presence:
    """Marks a contract field that must not be blank after population."""

    message: str = BLANK_MESSAGE


@dataclass(frozen=True)
class PopulateIfEmpty:
    """Names the domain factory used when input arrives for an empty nested field."""

    factory: Callable[[], Any]

    def build(self) -> Any:  # noqa: ANN401 - domain models are arbitrary objects
        """Instantiate a fresh domain object."""
        return self.factory()


def is_blank(value: object) -> bool:
    """Return True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


def nested_contract_class(annotation: object) -> type[Contract] | None:
    """Extract the contract class from a field annotation such as ``X | None``.

    Args:
        annotation: The field annotation with ``Annotated`` metadata stripped.

    Returns:
        type[Contract] | None: The nested contract class, if the field holds one.
    """
    if get_origin(annotation) in (Union, types.UnionType):
        candidates: tuple[object, ...] = get_args(annotation)
    else:
        candidates = (annotation,)

    for candidate in candidates:
        if isinstance(candidate, type) and issubclass(candidate, Contract):
            return candidate
    return None


class Contract(BaseModel):
    """Validated view over a domain model.

    The base class declares no fields and serves as the default contract of
    operations that only render.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="ignore",
        revalidate_instances="never",
    )

    _model: Any = PrivateAttr(default=None)
    _errors: ErrorMap = PrivateAttr(default_factory=dict)

    @classmethod
    def from_model(cls, model: object) -> Self:
        """Wrap a domain object, wrapping nested objects in nested contracts.

        Args:
            model: The domain object to read field values from. May be None.

        Returns:
            Self: An unvalidated contract holding the model's current values.
        """
        values: dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            value = getattr(model, name, None)
            nested = nested_contract_class(info.annotation)
            if nested is not None and value is not None:
                value = nested.from_model(value)
            values[name] = value

        contract = cls.model_construct(**values)
        contract._model = model
        return contract

    @property
    def model(self) -> Any:  # noqa: ANN401 - domain models are arbitrary objects
        """The domain object this contract wraps."""
        return self._model

    @property
    def errors(self) -> ErrorMap:
        """Field errors from the last validation, keyed by dotted path."""
        return self._errors

    def build_nested(self, name: str) -> Contract:
        """Build an empty nested contract for ``name`` during parsing.

        The nested contract wraps a fresh domain object when the field declares
        ``PopulateIfEmpty``, and no model otherwise.

        Raises:
            ConfigurationError: If ``name`` is not a nested contract field.
        """
        info = type(self).model_fields.get(name)
        nested = nested_contract_class(info.annotation) if info else None
        if info is None or nested is None:
            msg = f"{type(self).__name__}.{name} is not a nested contract field"
            raise ConfigurationError(msg, context={"field": name})

        populate = next(
            (meta for meta in info.metadata if isinstance(meta, PopulateIfEmpty)),
            None,
        )
        return nested.from_model(populate.build() if populate else None)

    def is_valid(self) -> bool:
        """Run field validations and record the errors.

        Returns:
            bool: True when no field produced an error.
        """
        fields = type(self).model_fields
        values = {name: getattr(self, name) for name in fields}
        errors: ErrorMap = {}

        try:
            validated = type(self).model_validate(values)
        except PydanticValidationError as exc:
            for error in exc.errors():
                path = ".".join(str(part) for part in error["loc"])
                errors.setdefault(path, []).append(error["msg"])
        else:
            # Keep pydantic's coerced values; nested contracts validate themselves
            for name in fields:
                if not isinstance(values[name], Contract):
                    values[name] = getattr(validated, name)
                    setattr(self, name, values[name])

        for name, info in fields.items():
            value = values[name]
            for meta in info.metadata:
                if isinstance(meta, Presence) and is_blank(value):
                    errors.setdefault(name, []).append(meta.message)

            if isinstance(value, Contract) and not value.is_valid():
                for path, messages in value.errors.items():
                    errors.setdefault(f"{name}.{path}", []).extend(messages)

        self._errors = errors
        return not errors

    def sync(self) -> Any:  # noqa: ANN401 - domain models are arbitrary objects
        """Write field values back onto the wrapped model.

        Nested contracts are synced first and their models attached to the
        parent model.

        Returns:
            Any: The wrapped model, or None if the contract wraps nothing.
        """
        if self._model is None:
            return None

        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, Contract):
                value = value.sync()
                if value is None:
                    continue
            setattr(self._model, name, value)
        return self._model
