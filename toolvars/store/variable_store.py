"""Variable Store for tool outputs.

Session-scoped mapping from variable name to a stored tool output plus the
metadata needed to summarize it for the agent: which tool produced it and
when. One store exists per session and is dropped with it.
"""

import itertools
import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Union

from ..json_types import JSONValue, MISSING, Sentinel


logger = logging.getLogger(__name__)


PREVIEW_MAX_LENGTH = 100
NESTED_ITEM_PREVIEW_LENGTH = 30
NESTED_VALUE_PREVIEW_LENGTH = 20
OBJECT_PREVIEW_ENTRIES = 2
OBJECT_PREVIEW_KEYS = 3
MAX_PREVIEW_DEPTH = 3
OBJECT_PREVIEW_KEY_LENGTH = NESTED_VALUE_PREVIEW_LENGTH


@dataclass
class StoredVariable:
    """A tool output held in the store."""
    value: JSONValue
    producer_id: str
    created_at: datetime
    sequence: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dict with an ISO timestamp."""
        result = asdict(self)
        result["created_at"] = self.created_at.isoformat()
        return result


@dataclass
class VariableInfo:
    """Listing entry used for human-facing summaries."""
    name: str
    producer_id: str
    created_at: datetime
    preview: str


def format_scalar(value: Any) -> str:
    """Render a JSON scalar the way it reads in JSON text."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _preview_key(key: Any) -> str:
    text = str(key)
    if len(text) > OBJECT_PREVIEW_KEY_LENGTH:
        return text[:OBJECT_PREVIEW_KEY_LENGTH] + '...'
    return text


def generate_preview(value: Any, max_length: int = PREVIEW_MAX_LENGTH, depth: int = 0) -> str:
    """
    Build a short, human-readable preview of a stored value.

    Nested values are previewed with a smaller budget, and containers below
    MAX_PREVIEW_DEPTH collapse to a marker, so the result stays bounded for
    any JSON input.

    Args:
        value: Value to summarize
        max_length: Approximate character budget
        depth: Nesting level of value inside the previewed root

    Returns:
        Preview text
    """
    if value is None:
        return 'null'
    if isinstance(value, Sentinel):
        return str(value)

    if isinstance(value, str):
        if len(value) > max_length:
            return value[:max_length] + '...'
        return value

    if isinstance(value, (bool, int, float)):
        return format_scalar(value)

    if isinstance(value, list):
        preview = f"Array({len(value)})"
        if value and depth < MAX_PREVIEW_DEPTH:
            first_item = generate_preview(value[0], min(max_length, NESTED_ITEM_PREVIEW_LENGTH), depth + 1)
            return f"{preview} [{first_item}, ...]"
        return preview

    if isinstance(value, dict):
        if value and depth >= MAX_PREVIEW_DEPTH:
            return "{...}"
        keys = [str(key) for key in value.keys()]

        entries = list(value.items())[:OBJECT_PREVIEW_ENTRIES]
        entries_suffix = ', ...' if len(keys) > len(entries) else ''
        value_preview = ', '.join(
            f"{key}: {generate_preview(item, min(max_length, NESTED_VALUE_PREVIEW_LENGTH), depth + 1)}"
            for key, item in entries
        )
        if len(value_preview) < max_length:
            return f"{{{value_preview}{entries_suffix}}}"

        keys_suffix = ', ...' if len(keys) > OBJECT_PREVIEW_KEYS else ''
        key_names = ', '.join(_preview_key(key) for key in keys[:OBJECT_PREVIEW_KEYS])
        fallback = f"{{{key_names}{keys_suffix}}}"
        if len(fallback) > max_length:
            return fallback[:max_length] + '...'
        return fallback

    # Anything that slipped past the JSON model still gets a bounded preview
    try:
        text = json.dumps(value, default=str)
    except (TypeError, ValueError):
        text = repr(value)
    return text[:max_length]


class VariableStore:
    """
    Session-scoped store of tool output variables.

    Writes are synchronous and single-writer; the store is owned by one
    session and needs no locking.
    """

    def __init__(self, preview_max_length: int = PREVIEW_MAX_LENGTH):
        """
        Initialize an empty store.

        Args:
            preview_max_length: Character budget for list() previews
        """
        self._variables: Dict[str, StoredVariable] = {}
        self._sequence = itertools.count(1)
        self.preview_max_length = preview_max_length

    def set(self, name: str, value: JSONValue, producer_id: str) -> None:
        """
        Insert or fully overwrite a variable, stamping the current time.

        Args:
            name: Variable name
            value: Tool output to store
            producer_id: Identifier of the tool that produced it
        """
        overwritten = self._variables.pop(name, None) is not None
        self._variables[name] = StoredVariable(
            value=value,
            producer_id=producer_id,
            created_at=datetime.now(timezone.utc),
            sequence=next(self._sequence),
        )
        if overwritten:
            logger.debug(f"Overwrote variable ${name} (from {producer_id})")
        else:
            logger.debug(f"Stored variable ${name} (from {producer_id})")

    def get(self, name: str) -> Union[JSONValue, Sentinel]:
        """
        Get a variable's value.

        Returns:
            Stored value, or MISSING when the name was never written
        """
        stored = self._variables.get(name)
        if stored is None:
            return MISSING
        return stored.value

    def get_with_meta(self, name: str) -> Union[StoredVariable, Sentinel]:
        """
        Get a variable together with its metadata.

        Returns:
            StoredVariable, or MISSING when the name was never written
        """
        return self._variables.get(name, MISSING)

    def has(self, name: str) -> bool:
        """Check if a variable exists."""
        return name in self._variables

    def list(self) -> List[VariableInfo]:
        """
        List variables with previews, most recently written first.

        Returns:
            Listing entries sorted by write order descending
        """
        ordered = sorted(
            self._variables.items(),
            key=lambda item: item[1].sequence,
            reverse=True,
        )
        return [
            VariableInfo(
                name=name,
                producer_id=stored.producer_id,
                created_at=stored.created_at,
                preview=generate_preview(stored.value, self.preview_max_length),
            )
            for name, stored in ordered
        ]

    def names(self) -> List[str]:
        """Variable names, most recently written first."""
        return [info.name for info in self.list()]

    def clear(self) -> None:
        """Remove every variable."""
        count = len(self._variables)
        self._variables.clear()
        logger.debug(f"Cleared {count} variables")

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)
