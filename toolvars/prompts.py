"""
Instruction text describing the variable store to the agent.

Regenerated from the live store on every instruction build, so the agent
always sees the variables that exist right now.
"""

from enum import Enum
from typing import List, Union

from .store.variable_store import VariableInfo, VariableStore


class InstructionStyle(str, Enum):
    """How much explanation to include with the variable listing."""
    FULL = "full"
    MINIMAL = "minimal"


FULL_HEADER = """## Tool Output Variables

Tool outputs are saved automatically as variables. Reference them in later
tool calls instead of repeating the data.

### How to use:
- Whole output: `"$variable_name"`
- One field: `"$variable_name.field"`
- Nested field: `"$variable_name.field.subfield"`

### Example:
If get-weather for NYC was saved as `$get_weather_nyc`, call another tool with:
```json
{ "weatherData": "$get_weather_nyc", "temperature": "$get_weather_nyc.temperature" }
```

References are replaced with the stored values before the tool runs.

### Important:
- Use variables in tool call arguments
- A reference that matches no variable is passed through as written
"""

NO_VARIABLES_FULL = "No variables saved yet. Call a tool to create one."

NO_VARIABLES_MINIMAL = (
    "Tool outputs are saved as variables (e.g., `$tool_result`). "
    "Use them in subsequent tool calls."
)


def format_full(variables: List[VariableInfo]) -> str:
    """Explanatory header, usage examples and the full variable listing."""
    if not variables:
        listing = NO_VARIABLES_FULL
    else:
        listing = "\n".join(
            f"- `${info.name}` (from {info.producer_id}): {info.preview}"
            for info in variables
        )
    return f"{FULL_HEADER}\n### Available Variables:\n{listing}\n"


def format_minimal(variables: List[VariableInfo]) -> str:
    """One line listing the variable names."""
    if not variables:
        return NO_VARIABLES_MINIMAL

    names = ", ".join(f"`${info.name}`" for info in variables)
    return f'Available variables: {names}. Use in tool calls like: `{{ "data": "$variable_name" }}`'


def get_variable_instructions(
    store: VariableStore,
    style: Union[InstructionStyle, str] = InstructionStyle.FULL
) -> str:
    """
    Render the store summary for the agent's instructions.

    Args:
        store: Session store to summarize
        style: "full" or "minimal"

    Returns:
        Instruction text

    Raises:
        ValueError: If style is not a known instruction style
    """
    style = InstructionStyle(style)
    variables = store.list()

    if style == InstructionStyle.MINIMAL:
        return format_minimal(variables)
    return format_full(variables)
