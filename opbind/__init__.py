"""Bind validated contracts to JSON representers inside request operations."""

from opbind.binding.contract import Contract, PopulateIfEmpty, Presence
from opbind.binding.hypermedia import Hypermedia, link
from opbind.binding.inference import infer_representer
from opbind.binding.operation import Operation, OperationConfig
from opbind.binding.representer import Property, Representer

__all__ = [
    "Contract",
    "Hypermedia",
    "Operation",
    "OperationConfig",
    "PopulateIfEmpty",
    "Presence",
    "Property",
    "Representer",
    "infer_representer",
    "link",
]
