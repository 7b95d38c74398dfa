"""
Tool registry.

Holds the tool definitions of one agent and produces variable-aware
wrappers for a given session store.
"""

import logging
from typing import Dict, List, Optional

from ..store.variable_store import VariableStore
from .types import NamingStrategy, ToolDefinition
from .wrapper import wrap_tools


logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of tool definitions keyed by tool id."""

    def __init__(self, tools: Optional[List[ToolDefinition]] = None):
        """
        Initialize the registry.

        Args:
            tools: Tools to register right away
        """
        self._tools: Dict[str, ToolDefinition] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool definition.

        Raises:
            ValueError: If the definition is invalid
        """
        errors = tool.validate()
        if errors:
            raise ValueError(f"Invalid tool definition: {'; '.join(errors)}")

        if tool.id in self._tools:
            logger.debug(f"Replacing tool: {tool.id}")
        self._tools[tool.id] = tool
        logger.debug(f"Registered tool: {tool.id}")

    def get(self, tool_id: str) -> Optional[ToolDefinition]:
        """Get a tool definition by id, or None."""
        return self._tools.get(tool_id)

    def exists(self, tool_id: str) -> bool:
        """Check if a tool is registered."""
        return tool_id in self._tools

    def list_tools(self) -> List[str]:
        """Registered tool ids in registration order."""
        return list(self._tools.keys())

    def wrapped(
        self,
        store: VariableStore,
        naming: Optional[NamingStrategy] = None
    ) -> Dict[str, ToolDefinition]:
        """
        Wrap every registered tool for a session store.

        Returns:
            Mapping of tool id to wrapped definition
        """
        return wrap_tools(self._tools, store, naming=naming)
