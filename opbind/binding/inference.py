"""Build representers from contract field declarations.

Each contract class maps to exactly one inferred representer class, built the
first time it is requested and cached afterwards. Customizing an inferred
representer is done by subclassing it:

    class AlbumHypermedia(Hypermedia, infer_representer(AlbumContract)):
        @link("self")
        def self_link(self) -> str:
            return f"//album/{self.represented.title}"
"""

from collections.abc import Callable
from functools import lru_cache
from typing import Any

from opbind.binding.contract import Contract, nested_contract_class
from opbind.binding.representer import Property, Representer
from opbind.core.exceptions import ConfigurationError

# Contracts whose representer is being built; a repeat means the contract nests itself
_in_progress: set[type[Contract]] = set()


def _nested_builder(name: str) -> Callable[[Any], Contract]:
    def build(parent: object) -> Contract:
        if not isinstance(parent, Contract):
            msg = f"Cannot populate {name!r} on {type(parent).__name__}"
            raise ConfigurationError(msg, context={"property": name})
        return parent.build_nested(name)

    return build


@lru_cache(maxsize=None)
def infer_representer(contract_class: type[Contract]) -> type[Representer]:
    """Return the representer mirroring ``contract_class``'s fields.

    Nested contract fields become nested representers. While parsing, an empty
    nested field is populated through ``Contract.build_nested``.

    Args:
        contract_class: The contract to mirror.

    Returns:
        type[Representer]: A representer with one property per contract field.

    Raises:
        ConfigurationError: If ``contract_class`` is not a contract, or one of
            its fields collides with a representer attribute, or the contract
            nests itself directly or through another contract.
    """
    if not (isinstance(contract_class, type) and issubclass(contract_class, Contract)):
        msg = f"Cannot infer a representer from {contract_class!r}"
        raise ConfigurationError(msg)

    if contract_class in _in_progress:
        name = contract_class.__name__
        msg = f"Cannot infer a representer for self-referencing {name}"
        raise ConfigurationError(msg, context={"contract": name})

    _in_progress.add(contract_class)
    try:
        return _build_representer(contract_class)
    finally:
        _in_progress.discard(contract_class)


def _build_representer(contract_class: type[Contract]) -> type[Representer]:
    namespace: dict[str, Any] = {
        "__module__": contract_class.__module__,
        "__doc__": f"Representer inferred from {contract_class.__qualname__}.",
    }
    for name, info in contract_class.model_fields.items():
        if hasattr(Representer, name):
            msg = f"Contract field {name!r} collides with a representer attribute"
            raise ConfigurationError(msg, context={"contract": contract_class.__name__})

        nested = nested_contract_class(info.annotation)
        if nested is None:
            namespace[name] = Property()
        else:
            namespace[name] = Property(
                representer=infer_representer(nested),
                instance=_nested_builder(name),
            )

    return type(f"{contract_class.__name__}Representer", (Representer,), namespace)
