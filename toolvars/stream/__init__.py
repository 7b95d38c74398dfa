"""
Streaming module.
Resolves variable references in incrementally delivered model output.
"""

from .types import StreamChunk, StreamResult, TEXT_DELTA
from .transform import (
    VariableStreamTransform,
    transform_text_stream,
    transform_chunk_stream,
    atransform_text_stream,
    atransform_chunk_stream,
    resolve_stream_result,
)

__all__ = [
    "StreamChunk",
    "StreamResult",
    "TEXT_DELTA",
    "VariableStreamTransform",
    "transform_text_stream",
    "transform_chunk_stream",
    "atransform_text_stream",
    "atransform_chunk_stream",
    "resolve_stream_result",
]
