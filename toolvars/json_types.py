"""
JSON value model shared by the store and the resolvers.

Stored tool outputs are plain JSON data: null, booleans, numbers, strings,
lists of JSON values and string-keyed mappings of JSON values.
"""

from typing import Any, Dict, List, Union


JSONScalar = Union[None, bool, int, float, str]
JSONValue = Union[JSONScalar, List[Any], Dict[str, Any]]


class Sentinel:
    """Named marker object that is distinct from every JSON value."""

    __slots__ = ("_name", "_text")

    def __init__(self, name: str, text: str):
        self._name = name
        self._text = text

    def __repr__(self) -> str:
        return self._name

    def __str__(self) -> str:
        return self._text

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return self._name


# Returned by store lookups for names that were never written.
MISSING = Sentinel("MISSING", "<missing>")

# Result of walking a field path through null, a scalar or an absent key.
UNDEFINED = Sentinel("UNDEFINED", "undefined")
