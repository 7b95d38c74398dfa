"""
Variable reference module.
Implements reference parsing and resolution for tool output variables.
"""

from .references import (
    Reference,
    parse_reference,
    get_nested_value,
    is_exact_reference,
    find_references,
    find_incomplete_suffix,
    contains_reference,
    extract_variable_names,
)
from .resolver import VariableResolver, coerce_to_text

__all__ = [
    'Reference',
    'parse_reference',
    'get_nested_value',
    'is_exact_reference',
    'find_references',
    'find_incomplete_suffix',
    'contains_reference',
    'extract_variable_names',
    'VariableResolver',
    'coerce_to_text',
]
