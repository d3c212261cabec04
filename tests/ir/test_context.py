import json
from pathlib import Path

import pytest
from graphjson.ir.context import BufferContext, FileContext


def test_buffer_context_peeks_json(run):
    ctx = BufferContext("model.json", '{"a": [1, 2]}')
    assert run(ctx.peek("json")) == {"a": [1, 2]}


def test_buffer_context_accepts_bytes(run):
    ctx = BufferContext("model.json", b'[1, 2, 3]')
    assert run(ctx.peek()) == [1, 2, 3]


def test_malformed_json_raises_every_time(run):
    # given
    ctx = BufferContext("model.json", "{not json")

    # then
    with pytest.raises(ValueError):
        run(ctx.peek("json"))
    with pytest.raises(ValueError):
        run(ctx.peek("json"))


def test_invalid_utf8_raises_value_error(run):
    ctx = BufferContext("model.json", b"\xff\xfe\xfa")
    with pytest.raises(ValueError):
        run(ctx.peek("json"))


def test_deeply_nested_json_raises_value_error(run):
    # given: nesting deeper than the decoder's recursion limit
    ctx = BufferContext("model.json", '{"a":' + "[" * 100000 + "]" * 100000 + "}")

    # then
    with pytest.raises(ValueError, match="nesting too deep"):
        run(ctx.peek("json"))
    with pytest.raises(ValueError):
        run(ctx.peek("json"))


def test_decodes_once(run):
    """The content is read a single time no matter how often it is peeked."""
    class CountingContext(BufferContext):
        reads = 0

        async def read(self):
            CountingContext.reads += 1
            return await super().read()

    ctx = CountingContext("model.json", "{}")
    run(ctx.peek())
    run(ctx.peek())
    assert CountingContext.reads == 1


def test_unsupported_peek_kind(run):
    ctx = BufferContext("model.json", "{}")
    with pytest.raises(ValueError, match="Unsupported peek kind"):
        run(ctx.peek("zip"))


def test_file_context(tmp_path: Path, run):
    # given
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"model_type": "custom"}))

    # when
    ctx = FileContext(path)

    # then
    assert ctx.identifier == "graph.json"
    assert run(ctx.peek("json")) == {"model_type": "custom"}
