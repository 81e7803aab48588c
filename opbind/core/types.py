"""Type aliases for dynamic data structures throughout opbind.

All JSON types defined here must round-trip through orjson.
"""

from collections.abc import Mapping
from typing import Any

# Decoded JSON object, as produced by a representer's to_dict
type JsonObject = dict[str, Any]

# Input parameters handed to an operation
type Params = Mapping[str, Any]

# Field errors keyed by dotted path, e.g. {"artist.name": ["can't be blank"]}
type ErrorMap = dict[str, list[str]]
