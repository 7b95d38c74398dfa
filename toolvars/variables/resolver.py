"""
Variable resolution against a session store.

Handles $name and $name.field.sub references in three shapes:
- exact: the whole string is one reference, the stored value is returned
  with its original type
- embedded: references inside longer text are replaced by their string form
- deep: every string inside a nested tool input is resolved
"""

import json
import logging
from typing import Any, Dict, List, Union

from ..json_types import MISSING, Sentinel, UNDEFINED
from ..store.variable_store import VariableStore, format_scalar
from .references import (
    EXACT_REFERENCE_PATTERN,
    REFERENCE_PATTERN,
    get_nested_value,
    parse_reference,
)


logger = logging.getLogger(__name__)


def _integral_floats_as_ints(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _integral_floats_as_ints(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_integral_floats_as_ints(item) for item in value]
    return value


def coerce_to_text(value: Any) -> str:
    """
    Convert a resolved value to its interpolated string form.

    null -> "null", UNDEFINED -> "undefined", booleans -> "true"/"false",
    objects and arrays -> compact JSON, integral floats print without a
    fraction at any depth, everything else -> str().
    """
    if isinstance(value, Sentinel):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(_integral_floats_as_ints(value), separators=(',', ':'), ensure_ascii=False, default=str)
    return format_scalar(value)


class VariableResolver:
    """
    Resolves variable references in strings and data structures.

    The store is passed in explicitly; a resolver never looks it up from
    ambient state. Every method is total: unknown names are left in place
    character for character.
    """

    def __init__(self, store: VariableStore):
        """
        Initialize the resolver.

        Args:
            store: Session store that references are resolved against
        """
        self.store = store

    def resolve_deep(self, value: Union[str, List, Dict, Any]) -> Union[str, List, Dict, Any]:
        """
        Resolve references in a value (string, list, or dict), recursively.

        Args:
            value: Tool input or any JSON value

        Returns:
            A new value with references resolved; the input is not modified
        """
        if isinstance(value, str):
            return self.resolve_string(value)
        elif isinstance(value, list):
            return [self.resolve_deep(item) for item in value]
        elif isinstance(value, dict):
            return {k: self.resolve_deep(v) for k, v in value.items()}
        else:
            # Numbers, booleans, None pass through unchanged
            return value

    def resolve_string(self, text: str) -> Any:
        """
        Resolve a single string.

        If the string is exactly one reference the stored value is returned
        as-is (object, list, number...). Otherwise each embedded reference
        is replaced by its string form.

        Args:
            text: String that may contain references

        Returns:
            Stored value for an exact reference, otherwise a string
        """
        if EXACT_REFERENCE_PATTERN.match(text):
            resolved = self._lookup(text)
            if resolved is MISSING:
                return text
            return resolved

        return self.resolve_text(text)

    def resolve_text(self, text: str) -> str:
        """
        Replace every embedded reference in text with its string form.

        Args:
            text: Text containing zero or more references

        Returns:
            Text with known references interpolated
        """
        if '$' not in text:
            return text

        def replace_reference(match):
            token = match.group(0)
            resolved = self._lookup(token)
            if resolved is MISSING:
                return token
            return coerce_to_text(resolved)

        return REFERENCE_PATTERN.sub(replace_reference, text)

    def _lookup(self, token: str) -> Any:
        """
        Resolve one reference token.

        Returns:
            Resolved value, UNDEFINED for a broken path, MISSING for an
            unknown name
        """
        reference = parse_reference(token)
        value = self.store.get(reference.name)

        if value is MISSING:
            logger.debug(f"Unresolved reference left in place: {token}")
            return MISSING

        if reference.path:
            resolved = get_nested_value(value, reference.path)
            if resolved is UNDEFINED:
                logger.debug(f"Reference path did not resolve: {token}")
            return resolved
        return value
