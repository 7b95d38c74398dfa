"""
Stream type definitions.

Models the two stream shapes an agent runtime hands over: plain text
fragments, and structured chunks where only text-delta chunks carry text.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union, AsyncIterable


TEXT_DELTA = "text-delta"


@dataclass
class StreamChunk:
    """
    One event of a structured model output stream.

    Attributes:
        type: Event type; "text-delta" for text, anything else is a
            structural or control marker (tool call, step finish, ...)
        text_delta: Text carried by a text-delta chunk
        payload: Remaining event fields, passed through untouched
    """
    type: str
    text_delta: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_text(self) -> bool:
        """True for text-delta chunks that carry a string."""
        return self.type == TEXT_DELTA and isinstance(self.text_delta, str)

    @classmethod
    def text(cls, text: str) -> "StreamChunk":
        """Build a text-delta chunk."""
        return cls(type=TEXT_DELTA, text_delta=text)


TextStream = Union[Iterable[str], AsyncIterable[str]]
ChunkStream = Union[Iterable[StreamChunk], AsyncIterable[StreamChunk]]


@dataclass
class StreamResult:
    """
    Result of a streaming agent call.

    The text streams are the only fields the variable layer substitutes;
    everything else is carried over as-is.

    Attributes:
        text_stream: Plain text fragments for the consumer
        full_stream: Structured chunk stream, when the runtime provides one
        tool_calls: Tool calls made during the call
        usage: Token usage reported by the runtime
        metadata: Any other runtime fields
    """
    text_stream: Optional[TextStream] = None
    full_stream: Optional[ChunkStream] = None
    tool_calls: list = field(default_factory=list)
    usage: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
