"""
Tool output variables for tool-calling agents.

Tool outputs are stored per session under short names; later tool inputs
and streamed text can refer to them as $name or $name.field.sub.
"""

from .json_types import JSONValue, MISSING, UNDEFINED
from .exceptions import ConfigValidationError, ValidationError
from .store import VariableStore, StoredVariable, VariableInfo, generate_preview
from .variables import (
    Reference,
    VariableResolver,
    coerce_to_text,
    contains_reference,
    extract_variable_names,
    find_references,
    get_nested_value,
    is_exact_reference,
    parse_reference,
)
from .stream import (
    StreamChunk,
    StreamResult,
    VariableStreamTransform,
    atransform_chunk_stream,
    atransform_text_stream,
    resolve_stream_result,
    transform_chunk_stream,
    transform_text_stream,
)
from .tools import (
    ToolDefinition,
    ToolRegistry,
    VariableToolWrapper,
    default_naming,
    make_naming_strategy,
    wrap_tool,
    wrap_tools,
)
from .prompts import InstructionStyle, get_variable_instructions
from .config import ConfigLoader, VariableConfig, configure_logging, load_config
from .session import VariableSession

__version__ = "0.1.0"

__all__ = [
    "JSONValue",
    "MISSING",
    "UNDEFINED",
    "ConfigValidationError",
    "ValidationError",
    "VariableStore",
    "StoredVariable",
    "VariableInfo",
    "generate_preview",
    "Reference",
    "VariableResolver",
    "coerce_to_text",
    "contains_reference",
    "extract_variable_names",
    "find_references",
    "get_nested_value",
    "is_exact_reference",
    "parse_reference",
    "StreamChunk",
    "StreamResult",
    "VariableStreamTransform",
    "atransform_chunk_stream",
    "atransform_text_stream",
    "resolve_stream_result",
    "transform_chunk_stream",
    "transform_text_stream",
    "ToolDefinition",
    "ToolRegistry",
    "VariableToolWrapper",
    "default_naming",
    "make_naming_strategy",
    "wrap_tool",
    "wrap_tools",
    "InstructionStyle",
    "get_variable_instructions",
    "ConfigLoader",
    "VariableConfig",
    "configure_logging",
    "load_config",
    "VariableSession",
]
