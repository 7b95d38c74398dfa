"""
Tool interception module.

Provides tool types, naming strategies, wrappers and a registry for
variable-aware tool execution.
"""

from .types import ToolDefinition, NamingStrategy
from .wrapper import (
    DEFAULT_IDENTIFIER_FIELDS,
    VariableToolWrapper,
    default_naming,
    make_naming_strategy,
    wrap_tool,
    wrap_tools,
)
from .registry import ToolRegistry


__all__ = [
    "ToolDefinition",
    "NamingStrategy",
    "DEFAULT_IDENTIFIER_FIELDS",
    "VariableToolWrapper",
    "default_naming",
    "make_naming_strategy",
    "wrap_tool",
    "wrap_tools",
    "ToolRegistry",
]
