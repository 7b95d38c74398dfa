"""Variable configuration loading and strict validation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union
import yaml

from .exceptions import ConfigValidationError, ValidationError
from .prompts import InstructionStyle
from .store.variable_store import PREVIEW_MAX_LENGTH
from .tools.wrapper import DEFAULT_IDENTIFIER_FIELDS


LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'error': logging.ERROR,
}


@dataclass
class VariableConfig:
    """
    Settings for a variable session.

    Attributes:
        instruction_style: Store summary style for agent instructions
        preview_max_length: Character budget for value previews
        identifier_fields: Input keys the default naming strategy inspects
        log_level: One of debug, info, warn, error
    """
    instruction_style: InstructionStyle = InstructionStyle.FULL
    preview_max_length: int = PREVIEW_MAX_LENGTH
    identifier_fields: List[str] = field(default_factory=lambda: list(DEFAULT_IDENTIFIER_FIELDS))
    log_level: str = 'info'


class ConfigLoader:
    """Loads and validates variable configuration YAML."""

    KNOWN_FIELDS = {'instruction_style', 'preview_max_length', 'identifier_fields', 'log_level'}

    def __init__(self):
        """Initialize loader."""
        self.errors: List[ValidationError] = []

    def load(self, config_path: Union[str, Path]) -> VariableConfig:
        """
        Load and validate a YAML configuration file.

        Raises:
            ConfigValidationError: If the file cannot be read or is invalid
        """
        self.errors = []
        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load configuration: {e}")
            self._raise_validation_errors()

        if data is None:
            return VariableConfig()

        return self.from_dict(data)

    def from_dict(self, data: Any) -> VariableConfig:
        """
        Validate an in-memory configuration mapping.

        Raises:
            ConfigValidationError: Listing every problem found
        """
        self.errors = []

        if not isinstance(data, dict):
            self._add_error("Configuration must be a YAML object/dictionary")
            self._raise_validation_errors()

        for key in data.keys():
            if key not in self.KNOWN_FIELDS:
                self._add_error(f"Unknown field '{key}'", str(key))

        config = VariableConfig()

        if 'instruction_style' in data:
            style = data['instruction_style']
            try:
                config.instruction_style = InstructionStyle(style)
            except ValueError:
                allowed = ', '.join(s.value for s in InstructionStyle)
                self._add_error(f"must be one of: {allowed}; got {style!r}", 'instruction_style')

        if 'preview_max_length' in data:
            length = data['preview_max_length']
            if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
                self._add_error(f"must be a positive integer, got {length!r}", 'preview_max_length')
            else:
                config.preview_max_length = length

        if 'identifier_fields' in data:
            fields = data['identifier_fields']
            if not isinstance(fields, list) or not all(isinstance(f, str) and f for f in fields):
                self._add_error("must be a list of non-empty strings", 'identifier_fields')
            else:
                config.identifier_fields = list(fields)

        if 'log_level' in data:
            level = data['log_level']
            if not isinstance(level, str) or level.lower() not in LOG_LEVELS:
                self._add_error(f"must be one of: {', '.join(LOG_LEVELS)}; got {level!r}", 'log_level')
            else:
                config.log_level = level.lower()

        if self.errors:
            self._raise_validation_errors()

        return config

    def _add_error(self, message: str, path: str = ""):
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_validation_errors(self):
        raise ConfigValidationError(self.errors)


def load_config(config_path: Optional[Union[str, Path]] = None) -> VariableConfig:
    """Load configuration from a YAML file, or defaults when no path is given."""
    if config_path is None:
        return VariableConfig()
    return ConfigLoader().load(config_path)


def configure_logging(level: str = 'info') -> None:
    """Set up root logging at the given level name."""
    logging.basicConfig(
        level=LOG_LEVELS.get(level.lower(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
