"""
Variable session.

One session owns one store. Everything that reads or writes variables
(tool wrappers, input resolution, stream substitution, instruction text)
is obtained from the session so they all share that store explicitly.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .config import VariableConfig
from .prompts import get_variable_instructions
from .store.variable_store import VariableStore
from .stream.transform import VariableStreamTransform, resolve_stream_result
from .stream.types import StreamResult
from .tools.types import NamingStrategy, ToolDefinition
from .tools.wrapper import make_naming_strategy, wrap_tools
from .variables.resolver import VariableResolver


logger = logging.getLogger(__name__)


InstructionsSource = Union[str, Callable[[], Optional[str]], None]
ToolsSource = Union[Mapping[str, ToolDefinition], Callable[[], Optional[Mapping[str, ToolDefinition]]], None]


class VariableSession:
    """Per-session controller for tool output variables."""

    def __init__(
        self,
        config: Optional[VariableConfig] = None,
        naming: Optional[NamingStrategy] = None
    ):
        """
        Start a session with an empty store.

        Args:
            config: Session settings (defaults when omitted)
            naming: Naming strategy overriding the configured default
        """
        self.config = config or VariableConfig()
        self.store = VariableStore(preview_max_length=self.config.preview_max_length)
        self.resolver = VariableResolver(self.store)
        self.naming = naming or make_naming_strategy(self.config.identifier_fields)

    def wrap_tools(self, tools: Mapping[str, ToolDefinition]) -> Dict[str, ToolDefinition]:
        """Wrap tools so they read from and write to this session's store."""
        return wrap_tools(tools, self.store, naming=self.naming)

    def tool_provider(self, tools: ToolsSource) -> Callable[[], Dict[str, ToolDefinition]]:
        """
        Build a callable that wraps the current tool set on every call.

        Args:
            tools: Tool mapping, or a callable returning one per agent turn

        Returns:
            Callable returning freshly wrapped tools bound to this session
        """
        def provide() -> Dict[str, ToolDefinition]:
            current = tools() if callable(tools) else tools
            return self.wrap_tools(current or {})

        return provide

    def resolve_input(self, value: Any) -> Any:
        """Deep-resolve references in a tool input."""
        return self.resolver.resolve_deep(value)

    def build_instructions(self, base: InstructionsSource = None) -> str:
        """
        Append the current store summary to base instructions.

        Args:
            base: Agent instructions to extend, or a callable producing them
                on each build

        Returns:
            base, a blank line, then the variable summary
        """
        if callable(base):
            base = base()
        summary = get_variable_instructions(self.store, self.config.instruction_style)
        return f"{base or ''}\n\n{summary}"

    def instructions_provider(self, base: InstructionsSource = None) -> Callable[[], str]:
        """Callable that rebuilds the instructions from the live store on each call."""
        return lambda: self.build_instructions(base)

    def stream_transform(self) -> VariableStreamTransform:
        """New transform for one stream of this session."""
        return VariableStreamTransform(self.resolver)

    def resolve_stream(self, result: StreamResult) -> StreamResult:
        """Substitute references in a streaming result's text streams."""
        return resolve_stream_result(result, self.resolver)

    def reset(self) -> None:
        """Drop every stored variable."""
        logger.debug("Resetting variable session")
        self.store.clear()
