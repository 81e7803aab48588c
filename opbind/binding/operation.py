"""Request-handling operations binding a contract to a representer.

An operation is created per request, builds its model, runs ``process`` once
and is then discarded:

    class CreateAlbum(Operation):
        contract_class = AlbumContract

        def process(self, params: Params) -> None:
            self.model = Album()
            self.validate(params.get("album"), self.model)

    valid, operation = CreateAlbum.run({"album": '{"title": "Run For Cover"}'})
    operation.contract.title  # "Run For Cover"

``contract_class``, ``representer_class`` and ``model_class`` are write-once
class declarations. An ``OperationConfig`` passed at construction overrides
the contract and representer classes for that instance only.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Self

from loguru import logger
from pydantic import BaseModel, ConfigDict

from opbind.binding.contract import Contract, nested_contract_class
from opbind.binding.inference import infer_representer
from opbind.binding.representer import Representer
from opbind.core.error_context import sanitize_dict
from opbind.core.exceptions import ConfigurationError, ContractInvalidError
from opbind.core.types import ErrorMap, JsonObject, Params


def check_writeable(
    representer_class: type[Representer],
    contract_class: type[Contract],
) -> None:
    """Ensure every parsed property of a representer has a contract field.

    Properties with a custom setter are skipped, since they decide themselves
    where the value goes. Nested representers are checked against the nested
    contract of the matching field.

    Raises:
        ConfigurationError: If a writeable property has no contract field.
    """
    fields = contract_class.model_fields
    for prop in representer_class.definitions.values():
        if not prop.writeable or prop.setter is not None:
            continue
        info = fields.get(prop.name)
        if info is None:
            msg = (
                f"{representer_class.__name__}.{prop.name} has no field "
                f"on {contract_class.__name__}"
            )
            raise ConfigurationError(
                msg,
                context={
                    "representer": representer_class.__name__,
                    "contract": contract_class.__name__,
                    "property": prop.name,
                },
            )

        nested = nested_contract_class(info.annotation)
        if prop.representer is not None and nested is not None:
            check_writeable(prop.representer, nested)


class OperationConfig(BaseModel):
    """Per-instance overrides of an operation's class declarations."""

    model_config = ConfigDict(frozen=True)

    contract_class: type[Contract] | None = None
    representer_class: type[Representer] | None = None


class Operation:
    """Base class for request-handling operations.

    Args:
        params: Input parameters. One value may be a raw JSON document.
        config: Overrides for the class-level declarations.
    """

    contract_class: ClassVar[type[Contract]] = Contract
    representer_class: ClassVar[type[Representer] | None] = None
    model_class: ClassVar[Callable[[], Any] | None] = None

    def __init__(
        self,
        params: Params | None = None,
        config: OperationConfig | None = None,
    ) -> None:
        self.params: dict[str, Any] = dict(params or {})
        self.config = config or OperationConfig()
        self.model: Any = None
        self.valid = True
        self._contract: Contract | None = None

    @classmethod
    def run(
        cls,
        params: Params | None = None,
        config: OperationConfig | None = None,
    ) -> tuple[bool, Self]:
        """Build the model and process ``params``.

        Validation failures are reported through the returned flag and
        ``errors``. A document that cannot be parsed is not a validation
        failure and propagates.

        Returns:
            tuple[bool, Self]: Whether the operation ended valid, and the
                operation itself.

        Raises:
            RepresenterParseError: If a document is malformed, is not an object,
                or holds a non-object where a nested object is declared.
        """
        operation = cls(params, config)
        with logger.contextualize(operation=cls.__name__):
            logger.debug("Running operation", params=sanitize_dict(operation.params))
            operation.model = operation.build_model(operation.params)
            operation.process(operation.params)
            logger.debug("Operation finished", valid=operation.valid)
        return operation.valid, operation

    @classmethod
    def present(
        cls,
        params: Params | None = None,
        config: OperationConfig | None = None,
    ) -> Self:
        """Build the model for rendering without processing or validating."""
        operation = cls(params, config)
        with logger.contextualize(operation=cls.__name__):
            logger.debug("Presenting operation", params=sanitize_dict(operation.params))
            operation.model = operation.build_model(operation.params)
        return operation

    @classmethod
    def call(
        cls,
        params: Params | None = None,
        config: OperationConfig | None = None,
    ) -> Self:
        """Run the operation and raise if it ended invalid.

        Raises:
            ContractInvalidError: If the contract did not validate.
        """
        valid, operation = cls.run(params, config)
        if not valid:
            raise ContractInvalidError(cls.__name__, operation.errors)
        return operation

    def build_model(self, params: Params) -> Any:  # noqa: ANN401, ARG002
        """Return the model for this request.

        The default instantiates ``model_class`` without arguments.
        """
        model_class = type(self).model_class
        return model_class() if model_class is not None else None

    def process(self, params: Params) -> None:
        """Handle the request. Subclasses override this."""

    @property
    def resolved_contract_class(self) -> type[Contract]:
        """The contract class from the config, else the class declaration."""
        return self.config.contract_class or type(self).contract_class

    @property
    def resolved_representer_class(self) -> type[Representer]:
        """The representer class used to render and parse.

        Resolution order: the config, the class declaration, then the
        representer inferred from the resolved contract class.
        """
        return (
            self.config.representer_class
            or type(self).representer_class
            or infer_representer(self.resolved_contract_class)
        )

    @property
    def contract(self) -> Contract:
        """The contract over ``model``, built on first access."""
        if self._contract is None:
            self._contract = self.resolved_contract_class.from_model(self.model)
        return self._contract

    @property
    def errors(self) -> ErrorMap:
        """Errors of the last validation. Empty before any validation ran."""
        return self._contract.errors if self._contract is not None else {}

    def build_contract(self, model: object) -> Contract:
        """Replace the current contract with a fresh one over ``model``."""
        self._contract = self.resolved_contract_class.from_model(model)
        return self._contract

    def validate(
        self,
        params: str | bytes | Mapping[str, Any] | None,
        model: object = None,
    ) -> bool:
        """Parse ``params`` into a contract over ``model`` and validate it.

        Args:
            params: A raw JSON document or an already decoded mapping. None
                leaves the contract unpopulated.
            model: The object to wrap. Defaults to the operation's model.

        Returns:
            bool: Whether the contract validated. Also stored in ``valid``.

        Raises:
            RepresenterParseError: If ``params`` is malformed JSON.
            ConfigurationError: If the representer parses a property the
                contract does not declare.
        """
        representer_class = self.resolved_representer_class
        check_writeable(representer_class, self.resolved_contract_class)

        contract = self.build_contract(self.model if model is None else model)
        representer = representer_class(contract)

        if isinstance(params, (str, bytes)):
            representer.from_json(params)
        elif params is not None:
            representer.from_dict(params)

        self.valid = contract.is_valid()
        if not self.valid:
            logger.info(
                "Contract validation failed",
                operation=type(self).__name__,
                errors=sanitize_dict(contract.errors),
            )
        return self.valid

    def represented(self) -> Any:  # noqa: ANN401
        """The object rendered by ``to_json``. Defaults to the model."""
        return self.model

    def to_dict(self, **options: Any) -> JsonObject:
        """Render the represented object to a dict, see ``to_json``."""
        return self.resolved_representer_class(self.represented()).to_dict(**options)

    def to_json(self, **options: Any) -> str:
        """Render the represented object.

        Args:
            **options: ``include`` and ``exclude`` key lists.
        """
        return self.resolved_representer_class(self.represented()).to_json(**options)
