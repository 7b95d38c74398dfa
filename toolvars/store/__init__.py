"""
Session-scoped storage of tool output variables.
"""

from .variable_store import (
    VariableStore,
    StoredVariable,
    VariableInfo,
    generate_preview,
)

__all__ = [
    'VariableStore',
    'StoredVariable',
    'VariableInfo',
    'generate_preview',
]
