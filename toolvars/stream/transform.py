"""
Incremental variable substitution for streamed model output.

Upstream chunking can split a reference anywhere ("$weath" + "er_nyc.tempera"
+ "ture"). The transform holds back any trailing text that could still grow
into a longer reference and only resolves it once the next fragment shows
where the reference ends, or the stream finishes.
"""

import dataclasses
import logging
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, List, Optional

from ..variables.references import find_incomplete_suffix
from ..variables.resolver import VariableResolver
from .types import StreamChunk, StreamResult


logger = logging.getLogger(__name__)


class VariableStreamTransform:
    """
    Resolves references in a sequence of text fragments.

    One instance serves exactly one stream; independent streams need
    independent instances because the pending buffer is per stream.
    """

    def __init__(self, resolver: VariableResolver):
        """
        Initialize the transform.

        Args:
            resolver: Resolver bound to the session store
        """
        self.resolver = resolver
        self._buffer = ""
        self._last_text_chunk: Optional[StreamChunk] = None

    @property
    def pending(self) -> str:
        """Text held back because it may be the start of a reference."""
        return self._buffer

    def push(self, fragment: str) -> str:
        """
        Feed one text fragment.

        Args:
            fragment: Next piece of upstream text

        Returns:
            Resolved text that is safe to emit now (may be empty)
        """
        combined = self._buffer + fragment
        split = find_incomplete_suffix(combined)

        if split >= 0:
            complete = combined[:split]
            self._buffer = combined[split:]
            logger.debug(f"Holding back possible partial reference: {self._buffer!r}")
        else:
            complete = combined
            self._buffer = ""

        if not complete:
            return ""
        return self.resolver.resolve_text(complete)

    def flush(self) -> str:
        """
        Resolve whatever is still buffered, treating it as complete.

        Returns:
            Resolved remaining text (empty when nothing was pending)
        """
        remaining = self._buffer
        self._buffer = ""
        if not remaining:
            return ""
        return self.resolver.resolve_text(remaining)

    def push_chunk(self, chunk: StreamChunk) -> List[StreamChunk]:
        """
        Feed one structured chunk.

        Text-delta chunks are resolved like fragments. Any other chunk first
        flushes pending text, then passes through unchanged, so ordering
        relative to the text is preserved.

        Returns:
            Chunks to emit now, in order
        """
        if not chunk.is_text:
            emitted = self.flush_chunks()
            emitted.append(chunk)
            return emitted

        self._last_text_chunk = chunk
        text = self.push(chunk.text_delta)
        if not text:
            return []
        return [dataclasses.replace(chunk, text_delta=text)]

    def flush_chunks(self) -> List[StreamChunk]:
        """
        Flush pending text as a text-delta chunk, if there is any.

        The chunk carries the payload of the text-delta chunk that last fed
        the buffer.
        """
        text = self.flush()
        source = self._last_text_chunk
        self._last_text_chunk = None
        if not text:
            return []
        if source is None:
            return [StreamChunk.text(text)]
        return [dataclasses.replace(source, text_delta=text)]


def transform_text_stream(fragments: Iterable[str], resolver: VariableResolver) -> Iterator[str]:
    """Resolve references in a plain text fragment stream."""
    transform = VariableStreamTransform(resolver)
    for fragment in fragments:
        text = transform.push(fragment)
        if text:
            yield text
    text = transform.flush()
    if text:
        yield text


def transform_chunk_stream(chunks: Iterable[StreamChunk], resolver: VariableResolver) -> Iterator[StreamChunk]:
    """Resolve references in the text-delta chunks of a structured stream."""
    transform = VariableStreamTransform(resolver)
    for chunk in chunks:
        yield from transform.push_chunk(chunk)
    yield from transform.flush_chunks()


async def atransform_text_stream(fragments: AsyncIterable[str], resolver: VariableResolver) -> AsyncIterator[str]:
    """Async variant of transform_text_stream."""
    transform = VariableStreamTransform(resolver)
    async for fragment in fragments:
        text = transform.push(fragment)
        if text:
            yield text
    text = transform.flush()
    if text:
        yield text


async def atransform_chunk_stream(
    chunks: AsyncIterable[StreamChunk],
    resolver: VariableResolver
) -> AsyncIterator[StreamChunk]:
    """Async variant of transform_chunk_stream."""
    transform = VariableStreamTransform(resolver)
    async for chunk in chunks:
        for emitted in transform.push_chunk(chunk):
            yield emitted
    for emitted in transform.flush_chunks():
        yield emitted


def _wrap_text(stream, resolver: VariableResolver):
    if stream is None:
        return None
    if hasattr(stream, "__aiter__"):
        return atransform_text_stream(stream, resolver)
    return transform_text_stream(stream, resolver)


def _wrap_chunks(stream, resolver: VariableResolver):
    if stream is None:
        return None
    if hasattr(stream, "__aiter__"):
        return atransform_chunk_stream(stream, resolver)
    return transform_chunk_stream(stream, resolver)


def resolve_stream_result(result: StreamResult, resolver: VariableResolver) -> StreamResult:
    """
    Build a copy of a stream result whose text streams resolve references.

    Each stream gets its own transform. Fields other than the streams are
    copied unchanged.

    Args:
        result: Result returned by the agent runtime
        resolver: Resolver bound to the session store

    Returns:
        New StreamResult with substituted text_stream and full_stream
    """
    return dataclasses.replace(
        result,
        text_stream=_wrap_text(result.text_stream, resolver),
        full_stream=_wrap_chunks(result.full_stream, resolver),
    )
