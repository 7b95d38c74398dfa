"""
Tool type definitions.

A tool definition is owned by the agent runtime; the variable layer only
needs its identity, its schemas (carried through untouched) and its
execute operation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


# (tool_id, raw_input, result) -> variable name
NamingStrategy = Callable[[str, Any, Any], str]


@dataclass
class ToolDefinition:
    """
    Tool definition as provided by the agent runtime.

    Attributes:
        id: Tool identifier (e.g., 'get-weather')
        execute: Callable taking the tool input; may return an awaitable
        description: Human-readable description for the model
        input_schema: Input schema, opaque to this package
        output_schema: Output schema, opaque to this package
    """
    id: str
    execute: Callable[[Any], Any]
    description: str = ""
    input_schema: Optional[Dict[str, Any]] = None
    output_schema: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> List[str]:
        """
        Validate the tool definition.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.id or not isinstance(self.id, str):
            errors.append("Tool id must be a non-empty string")

        if not callable(self.execute):
            errors.append(f"Tool '{self.id}': execute must be callable")

        return errors
