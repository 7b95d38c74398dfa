"""
Reference parsing for tool output variables.

Grammar:
    reference   := "$" identifier ("." identifier)*
    identifier  := [A-Za-z_][A-Za-z0-9_]*

A reference names a stored variable and, optionally, a dotted path of
fields inside its value: $weather_nyc or $weather_nyc.current.temperature.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Sequence, Tuple

from ..json_types import UNDEFINED


IDENTIFIER = r'[A-Za-z_][A-Za-z0-9_]*'

# Any reference occurrence inside a longer string
REFERENCE_PATTERN = re.compile(rf'\$({IDENTIFIER})((?:\.{IDENTIFIER})*)')

# The whole string is exactly one reference
EXACT_REFERENCE_PATTERN = re.compile(rf'\$({IDENTIFIER})((?:\.{IDENTIFIER})*)\Z')

# Trailing text that could still grow into a longer reference:
# a bare "$", or "$name(.field)*" optionally followed by a dangling "."
INCOMPLETE_SUFFIX_PATTERN = re.compile(rf'\$(?:{IDENTIFIER}(?:\.{IDENTIFIER})*\.?)?\Z')


@dataclass(frozen=True)
class Reference:
    """
    Parsed variable reference.

    Attributes:
        name: Variable name (store key)
        path: Field names to follow inside the stored value
    """
    name: str
    path: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def token(self) -> str:
        """Surface syntax for this reference."""
        return "$" + ".".join((self.name,) + self.path)


def parse_reference(token: str) -> Reference:
    """
    Parse a reference token like "$weather_nyc.temperature.value".

    Callers only hand over strings that already matched REFERENCE_PATTERN,
    so parsing is a plain split.

    Args:
        token: Reference token including the leading "$"

    Returns:
        Reference with name "weather_nyc" and path ("temperature", "value")
    """
    parts = token[1:].split('.')
    return Reference(name=parts[0], path=tuple(parts[1:]))


def get_nested_value(root: Any, path: Sequence[str]) -> Any:
    """
    Walk a field path through a JSON value.

    Args:
        root: Value to start from
        path: Field names to follow

    Returns:
        The value at the end of the path, or UNDEFINED as soon as the walk
        reaches null, a scalar, a list, or an absent key
    """
    current = root
    for key in path:
        if isinstance(current, dict):
            current = current.get(key, UNDEFINED)
        else:
            # null, scalars, lists (identifiers are never list indices)
            # and UNDEFINED itself all stop the walk
            return UNDEFINED
    return current


def is_exact_reference(text: str) -> bool:
    """Check whether the entire string is one reference and nothing else."""
    return EXACT_REFERENCE_PATTERN.match(text) is not None


def find_references(text: str) -> List[Reference]:
    """Return every reference occurring in text, in order of appearance."""
    return [parse_reference(match.group(0)) for match in REFERENCE_PATTERN.finditer(text)]


def find_incomplete_suffix(text: str) -> int:
    """
    Locate a trailing partial reference.

    Args:
        text: Accumulated stream text

    Returns:
        Index where a reference that may still be growing starts, or -1
    """
    match = INCOMPLETE_SUFFIX_PATTERN.search(text)
    if match is None:
        return -1
    return match.start()


def _iter_strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from _iter_strings(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _iter_strings(item)


def contains_reference(value: Any) -> bool:
    """Check whether any string inside a JSON value contains a reference."""
    return any(REFERENCE_PATTERN.search(text) for text in _iter_strings(value))


def extract_variable_names(value: Any) -> List[str]:
    """
    Collect the variable names referenced anywhere inside a JSON value.

    Returns:
        Names in order of first appearance, without duplicates
    """
    names: List[str] = []
    for text in _iter_strings(value):
        for reference in find_references(text):
            if reference.name not in names:
                names.append(reference.name)
    return names
