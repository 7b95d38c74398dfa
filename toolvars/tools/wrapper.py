"""
Tool interception for variable support.

Wraps a tool so that references in its input are resolved before it runs,
and its successful output is saved as a variable afterwards.
"""

import inspect
import logging
import re
import time
from typing import Any, Dict, Iterable, Mapping, Optional

from ..store.variable_store import VariableStore
from ..variables.resolver import VariableResolver
from .types import NamingStrategy, ToolDefinition


logger = logging.getLogger(__name__)


DEFAULT_IDENTIFIER_FIELDS = ('location', 'name', 'id', 'query', 'city', 'symbol', 'ticker')

_NON_ALNUM = re.compile(r'[^a-z0-9]+')
_NON_IDENTIFIER = re.compile(r'[^A-Za-z0-9_]')

_last_stamp = 0


def _unique_millis() -> int:
    """Millisecond timestamp that never repeats within the process."""
    global _last_stamp
    stamp = time.time_ns() // 1_000_000
    if stamp <= _last_stamp:
        stamp = _last_stamp + 1
    _last_stamp = stamp
    return stamp


def tool_prefix(tool_id: str) -> str:
    """Turn a tool id like 'get-weather' into a name prefix 'get_weather'."""
    return _NON_IDENTIFIER.sub('_', tool_id)


def make_naming_strategy(identifier_fields: Iterable[str] = DEFAULT_IDENTIFIER_FIELDS) -> NamingStrategy:
    """
    Build a naming strategy that looks for identifier-like input fields.

    The first listed field holding a non-empty string is lowercased and
    slugged onto the tool prefix: get-weather + {"location": "New York"}
    becomes get_weather_new_york. Without such a field the name falls back
    to the tool prefix plus a unique millisecond timestamp.

    Args:
        identifier_fields: Input keys to inspect, in priority order

    Returns:
        Naming strategy callable
    """
    fields = tuple(identifier_fields)

    def naming(tool_id: str, raw_input: Any, result: Any) -> str:
        prefix = tool_prefix(tool_id)
        if isinstance(raw_input, dict):
            for key in fields:
                value = raw_input.get(key)
                if isinstance(value, str):
                    slug = _NON_ALNUM.sub('_', value.lower()).strip('_')
                    if slug:
                        return f"{prefix}_{slug}"
        return f"{prefix}_{_unique_millis()}"

    return naming


default_naming = make_naming_strategy()


class VariableToolWrapper:
    """
    Execute operation of a wrapped tool.

    Resolves the raw input against the store, delegates to the original
    execute operation, then stores the result under a name chosen by the
    naming strategy. The result itself is returned unmodified. Failures
    propagate unchanged and leave the store untouched.
    """

    def __init__(
        self,
        tool: ToolDefinition,
        store: VariableStore,
        naming: Optional[NamingStrategy] = None,
        resolver: Optional[VariableResolver] = None
    ):
        """
        Initialize the wrapper.

        Args:
            tool: Tool to wrap
            store: Session store for inputs and outputs
            naming: Naming strategy (default: default_naming)
            resolver: Resolver bound to the same store (created if omitted)
        """
        self.tool = tool
        self.store = store
        self.naming = naming or default_naming
        self.resolver = resolver or VariableResolver(store)
        self.last_variable_name: Optional[str] = None

    def __call__(self, raw_input: Any) -> Any:
        if inspect.iscoroutinefunction(self.tool.execute):
            return self.ainvoke(raw_input)
        return self.invoke(raw_input)

    def invoke(self, raw_input: Any) -> Any:
        """
        Run a synchronous tool with variable support.

        Args:
            raw_input: Tool input as written by the model, may hold references

        Returns:
            The tool's own result
        """
        resolved_input = self._resolve_input(raw_input)
        try:
            result = self.tool.execute(resolved_input)
        except Exception as e:
            logger.warning(f"Tool '{self.tool.id}' failed, no variable stored: {e}")
            raise

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(f"Tool '{self.tool.id}' returned an awaitable; use ainvoke()")

        self._store_result(raw_input, result)
        return result

    async def ainvoke(self, raw_input: Any) -> Any:
        """
        Run a tool whose execute operation may be asynchronous.

        Args:
            raw_input: Tool input as written by the model, may hold references

        Returns:
            The tool's own result
        """
        resolved_input = self._resolve_input(raw_input)
        try:
            result = self.tool.execute(resolved_input)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning(f"Tool '{self.tool.id}' failed, no variable stored: {e}")
            raise

        self._store_result(raw_input, result)
        return result

    def _resolve_input(self, raw_input: Any) -> Any:
        resolved = self.resolver.resolve_deep(raw_input)
        logger.debug(f"Invoking tool '{self.tool.id}'")
        return resolved

    def _store_result(self, raw_input: Any, result: Any) -> str:
        # Naming sees the raw input so names follow what the model wrote
        name = self.naming(self.tool.id, raw_input, result)
        self.store.set(name, result, self.tool.id)
        self.last_variable_name = name
        logger.debug(f"Tool '{self.tool.id}' output saved as ${name}")
        return name


def wrap_tool(
    tool: ToolDefinition,
    store: VariableStore,
    naming: Optional[NamingStrategy] = None,
    resolver: Optional[VariableResolver] = None
) -> ToolDefinition:
    """
    Wrap a single tool with variable support.

    Args:
        tool: Tool to wrap
        store: Session store
        naming: Optional naming strategy
        resolver: Optional resolver bound to the same store

    Returns:
        New ToolDefinition with the same id, description and schemas whose
        execute operation is a VariableToolWrapper, or its ainvoke coroutine
        function when the tool is asynchronous
    """
    wrapper = VariableToolWrapper(tool, store, naming=naming, resolver=resolver)
    execute = wrapper.ainvoke if inspect.iscoroutinefunction(tool.execute) else wrapper
    return ToolDefinition(
        id=tool.id,
        execute=execute,
        description=tool.description,
        input_schema=tool.input_schema,
        output_schema=tool.output_schema,
        metadata=dict(tool.metadata),
    )


def wrap_tools(
    tools: Mapping[str, ToolDefinition],
    store: VariableStore,
    naming: Optional[NamingStrategy] = None
) -> Dict[str, ToolDefinition]:
    """
    Wrap a mapping of tools at once, sharing one store and naming strategy.

    Returns:
        Mapping with the same keys holding wrapped tools
    """
    resolver = VariableResolver(store)
    return {
        key: wrap_tool(tool, store, naming=naming, resolver=resolver)
        for key, tool in tools.items()
    }
