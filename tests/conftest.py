import asyncio
import copy
import json

import pytest

from graphjson.ir.context import BufferContext


CDS_DOCUMENT = {
    "meta_data": {"name": "m", "inputs": [{"name": "x"}]},
    "nodes": [{"name": "n1", "type": "Conv", "inputs": ["x"], "outputs": ["y"]}],
    "edges": [{"name": "x", "shape": [1, 3, 224, 224]}],
}

CUSTOM_DOCUMENT = {
    "model_type": "custom",
    "graph": {"nodes": [{"layer_type": "Dense", "params": {"units": 10}}]},
}


@pytest.fixture
def cds_document():
    """The minimal CDS document from the format notes."""
    return copy.deepcopy(CDS_DOCUMENT)


@pytest.fixture
def custom_document():
    """The minimal custom JSON document from the format notes."""
    return copy.deepcopy(CUSTOM_DOCUMENT)


@pytest.fixture
def make_context():
    """Wraps a python object (or raw text) into an in-memory context."""
    def _make(obj, identifier="model.json"):
        data = obj if isinstance(obj, (str, bytes)) else json.dumps(obj)
        return BufferContext(identifier, data)
    return _make


@pytest.fixture
def run():
    """Drives a coroutine to completion."""
    return asyncio.run
