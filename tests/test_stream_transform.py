"""
Tests for incremental variable substitution in streamed output.

References may be split anywhere by upstream chunking; the transform must
resolve each one exactly once, as a whole.
"""

import asyncio

import pytest
from hypothesis import given, settings, strategies as st

from toolvars.store import VariableStore
from toolvars.stream import (
    StreamChunk,
    StreamResult,
    VariableStreamTransform,
    atransform_chunk_stream,
    atransform_text_stream,
    resolve_stream_result,
    transform_chunk_stream,
    transform_text_stream,
)
from toolvars.variables import VariableResolver


REPORT = "Report: $weather_nyc.current.temperature F and $stock_aapl.price."
REPORT_RESOLVED = "Report: 72 F and 187.5."


def run_fragments(resolver, fragments):
    return list(transform_text_stream(fragments, resolver))


async def _aiter(items):
    for item in items:
        yield item


async def _collect(stream):
    return [item async for item in stream]


class TestVariableStreamTransform:
    """Test the per-fragment transform."""

    def test_reference_split_across_fragments(self, weather_store, resolver):
        """A reference split mid-token is emitted once, resolved."""
        emitted = run_fragments(resolver, ["Temp is $weath", "er_nyc.tempera", "ture F"])

        assert "".join(emitted) == "Temp is 72 F"
        assert emitted == ["Temp is ", "72 F"]
        assert not any("$" in piece for piece in emitted)

    def test_push_holds_back_partial_reference(self, weather_store, resolver):
        transform = VariableStreamTransform(resolver)

        assert transform.push("Temp is $weath") == "Temp is "
        assert transform.pending == "$weath"
        assert transform.push("er_nyc.") == ""
        assert transform.pending == "$weather_nyc."
        assert transform.push("temperature") == ""
        assert transform.push(" F") == "72 F"
        assert transform.pending == ""
        assert transform.flush() == ""

    def test_complete_reference_at_end_waits_for_more(self, weather_store, resolver):
        """A reference at the end of a fragment might still grow a path."""
        transform = VariableStreamTransform(resolver)

        assert transform.push("It is $weather_nyc") == "It is "
        assert transform.push(".conditions today") == "sunny today"

    def test_flush_resolves_trailing_reference(self, weather_store, resolver):
        assert run_fragments(resolver, ["Price: $stock_aapl.pri", "ce"]) == ["Price: ", "187.5"]

    def test_flush_passes_unknown_reference_literally(self, weather_store, resolver):
        emitted = run_fragments(resolver, ["See $mis", "sing.fie", "ld"])
        assert "".join(emitted) == "See $missing.field"

    def test_bare_dollar_at_end_of_stream(self, resolver):
        assert "".join(run_fragments(resolver, ["Price: $"])) == "Price: $"

    def test_dollar_followed_by_digit_is_released(self, resolver):
        transform = VariableStreamTransform(resolver)

        assert transform.push("costs $") == "costs "
        assert transform.push("5 total") == "$5 total"

    @pytest.mark.parametrize("fragments", [
        ["plain ", "text ", "only"],
        ["a", "", "b"],
        [""],
        ["unicode: café ✓"],
    ])
    def test_text_without_references_unchanged(self, resolver, fragments):
        emitted = run_fragments(resolver, fragments)
        assert "".join(emitted) == "".join(fragments)
        assert all(emitted)

    def test_every_two_way_split(self, weather_store, resolver):
        """Any single cut point yields the fully resolved text."""
        for i in range(len(REPORT) + 1):
            emitted = run_fragments(resolver, [REPORT[:i], REPORT[i:]])
            assert "".join(emitted) == REPORT_RESOLVED, f"cut at {i}"
            assert not any("$" in piece for piece in emitted), f"cut at {i}"

    def test_every_three_way_split(self, weather_store, resolver):
        """Any pair of cut points yields the fully resolved text."""
        for i in range(len(REPORT) + 1):
            for j in range(i, len(REPORT) + 1):
                fragments = [REPORT[:i], REPORT[i:j], REPORT[j:]]
                emitted = run_fragments(resolver, fragments)
                assert "".join(emitted) == REPORT_RESOLVED, f"cuts at {i}, {j}"
                assert not any("$" in piece for piece in emitted), f"cuts at {i}, {j}"

    def test_one_character_per_fragment(self, weather_store, resolver):
        emitted = run_fragments(resolver, list(REPORT))
        assert "".join(emitted) == REPORT_RESOLVED
        assert not any("$" in piece for piece in emitted)

    def test_adjacent_references_in_one_fragment(self, weather_store, resolver):
        emitted = run_fragments(resolver, ["$stock_aapl.symbol$stock_aapl.pr", "ice!"])
        assert "".join(emitted) == "AAPL187.5!"

    def test_independent_streams(self, weather_store, resolver):
        """Each stream has its own buffer."""
        first = VariableStreamTransform(resolver)
        second = VariableStreamTransform(resolver)

        assert first.push("A: $weather_nyc.temp") == "A: "
        assert second.push("B: $stock_aapl.pr") == "B: "
        assert first.push("erature.") == ""
        assert second.push("ice!") == "187.5!"
        assert first.flush() == "72."


class TestFragmentationProperty:
    """Property tests: output never depends on where the stream was cut."""

    @staticmethod
    def _resolver():
        store = VariableStore()
        store.set("a", {"b": {"c": 1}, "x": "X"}, "tool")
        store.set("ab", [1, 2], "tool")
        store.set("a_1", None, "tool")
        return VariableResolver(store)

    @settings(max_examples=300, deadline=None)
    @given(data=st.data())
    def test_any_fragmentation_matches_whole_text(self, data):
        text = data.draw(st.text(alphabet="$.ab_1cx !", max_size=40))
        cuts = sorted(data.draw(st.lists(st.integers(0, len(text)), max_size=10)))
        bounds = [0] + cuts + [len(text)]
        fragments = [text[start:end] for start, end in zip(bounds, bounds[1:])]

        resolver = self._resolver()
        emitted = list(transform_text_stream(fragments, resolver))

        assert "".join(emitted) == resolver.resolve_text(text)

    @settings(max_examples=200, deadline=None)
    @given(fragments=st.lists(st.text(alphabet="abc .,!?", max_size=8), max_size=10))
    def test_text_without_dollar_passes_through(self, fragments):
        emitted = list(transform_text_stream(fragments, self._resolver()))
        assert "".join(emitted) == "".join(fragments)


class TestChunkStream:
    """Test structured chunk streams."""

    def test_non_text_chunk_forces_flush(self, weather_store, resolver):
        tool_call = StreamChunk(type="tool-call", payload={"toolName": "get-weather"})
        chunks = [
            StreamChunk.text("Temp $weath"),
            tool_call,
            StreamChunk.text("er_nyc"),
        ]

        emitted = list(transform_chunk_stream(chunks, resolver))

        assert [c.type for c in emitted] == ["text-delta", "text-delta", "tool-call", "text-delta"]
        assert [c.text_delta for c in emitted] == ["Temp ", "$weath", None, "er_nyc"]
        assert emitted[2] is tool_call

    def test_text_chunks_resolved_across_boundaries(self, weather_store, resolver):
        chunks = [
            StreamChunk(type="step-start"),
            StreamChunk.text("It is $weather_nyc.cond"),
            StreamChunk.text("itions and $stock_aapl"),
            StreamChunk.text(".price"),
            StreamChunk(type="finish", payload={"reason": "stop"}),
        ]

        emitted = list(transform_chunk_stream(chunks, resolver))

        assert [c.type for c in emitted] == ["step-start", "text-delta", "text-delta", "text-delta", "finish"]
        text = "".join(c.text_delta for c in emitted if c.is_text)
        assert text == "It is sunny and 187.5"

    def test_text_chunk_payload_preserved(self, weather_store, resolver):
        chunk = StreamChunk(type="text-delta", text_delta="Temp $weather_nyc.temperature F", payload={"id": "t1"})

        emitted = list(transform_chunk_stream([chunk], resolver))

        assert emitted[0].text_delta == "Temp 72 F"
        assert emitted[0].payload == {"id": "t1"}

    def test_flushed_text_keeps_payload(self, weather_store, resolver):
        """Text held back at a boundary is released with its chunk's payload."""
        chunks = [
            StreamChunk(type="text-delta", text_delta="Price $stock_aapl.price", payload={"id": "t1"}),
            StreamChunk(type="finish", payload={"reason": "stop"}),
        ]

        emitted = list(transform_chunk_stream(chunks, resolver))

        assert [c.text_delta for c in emitted] == ["Price ", "187.5", None]
        assert emitted[1].payload == {"id": "t1"}
        assert emitted[2].type == "finish"

    def test_text_delta_without_text_passes_through(self, resolver):
        odd = StreamChunk(type="text-delta", text_delta=None)
        assert list(transform_chunk_stream([odd], resolver)) == [odd]


class TestAsyncStreams:
    """Test async iterator variants."""

    def test_async_text_stream(self, weather_store, resolver):
        stream = atransform_text_stream(_aiter(["Temp is $weath", "er_nyc.tempera", "ture F"]), resolver)
        emitted = asyncio.run(_collect(stream))
        assert "".join(emitted) == "Temp is 72 F"

    def test_async_chunk_stream(self, weather_store, resolver):
        chunks = [StreamChunk.text("$stock_aapl.sym"), StreamChunk.text("bol"), StreamChunk(type="finish")]
        emitted = asyncio.run(_collect(atransform_chunk_stream(_aiter(chunks), resolver)))
        assert [c.type for c in emitted] == ["text-delta", "finish"]
        assert emitted[0].text_delta == "AAPL"


class TestResolveStreamResult:
    """Test the explicit stream result wrapper."""

    def test_streams_replaced_other_fields_kept(self, weather_store, resolver):
        result = StreamResult(
            text_stream=iter(["Temp $weather_nyc.temp", "erature"]),
            full_stream=iter([StreamChunk.text("$stock_aapl.price")]),
            tool_calls=[{"toolName": "get-weather"}],
            usage={"totalTokens": 12},
            metadata={"model": "test"},
        )

        resolved = resolve_stream_result(result, resolver)

        assert resolved is not result
        assert "".join(resolved.text_stream) == "Temp 72"
        assert [c.text_delta for c in resolved.full_stream] == ["187.5"]
        assert resolved.tool_calls == [{"toolName": "get-weather"}]
        assert resolved.usage == {"totalTokens": 12}
        assert resolved.metadata == {"model": "test"}

    def test_missing_streams_stay_missing(self, resolver):
        resolved = resolve_stream_result(StreamResult(usage={"totalTokens": 1}), resolver)

        assert resolved.text_stream is None
        assert resolved.full_stream is None

    def test_async_text_stream_result(self, weather_store, resolver):
        result = StreamResult(text_stream=_aiter(["$weather_nyc.cond", "itions"]))

        resolved = resolve_stream_result(result, resolver)

        assert asyncio.run(_collect(resolved.text_stream)) == ["sunny"]
