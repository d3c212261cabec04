from __future__ import annotations
from typing import Any, Dict, Iterator, List, Tuple

from ..ir.model_ir import Argument, Attribute, Graph, Model, Node, NodeType, Tensor, Value
from ..utils.logging import get_logger
from .base import ModelFactory, as_list, first_defined, first_present, name_of, resolve_type

logger = get_logger(__name__)


def is_custom_document(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    if obj.get("model_type") == "custom":
        return True
    graph = obj.get("graph")
    return (
        isinstance(graph, dict)
        and isinstance(graph.get("nodes"), list)
        and isinstance(graph.get("layers"), list)
    )


def _declared_arguments(descriptors: Any) -> List[Argument]:
    args = []
    for desc in as_list(descriptors):
        name = name_of(desc)
        args.append(Argument(name, [Value(name, resolve_type(desc, name=name, with_dtype=True))]))
    return args


def _port_arguments(refs: Any) -> List[Argument]:
    """One argument per reference, named after it. Types stay unresolved."""
    if not isinstance(refs, list):
        return []
    args = []
    for ref in refs:
        name = name_of(ref)
        args.append(Argument(name, [Value(name)]))
    return args


def _weight_entries(weights: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(weights, dict):
        yield from weights.items()
    elif isinstance(weights, list):
        for index, entry in enumerate(weights):
            if isinstance(entry, dict):
                yield name_of(entry, str(index)), entry


class CustomJsonFactory(ModelFactory):
    name = "customjson"
    label = "Custom JSON"

    def signature(self, obj: Any) -> bool:
        return is_custom_document(obj)

    def build(self, obj: Dict[str, Any]) -> Model:
        label = self.label
        version = obj.get("version")
        if version is not None and version != "":
            label += f" v{version}"
        return Model(
            format=label,
            producer=obj.get("producer") or "",
            name=obj.get("name") or "",
            description=obj.get("description") or "",
            modules=[self.build_graph(obj)],
        )

    def build_graph(self, obj: Dict[str, Any]) -> Graph:
        graph = obj.get("graph")
        if not isinstance(graph, dict):
            graph = obj

        nodes = []
        raw_nodes = first_defined(graph, "nodes", "layers", default=[])
        if isinstance(raw_nodes, list):
            for index, raw in enumerate(raw_nodes):
                if not raw or not isinstance(raw, dict):
                    continue
                nodes.append(self.build_node(raw, index))
        logger.debug("customjson: built %d nodes", len(nodes))

        return Graph(
            name=obj.get("name") or "",
            inputs=_declared_arguments(graph.get("inputs")),
            outputs=_declared_arguments(graph.get("outputs")),
            nodes=nodes,
        )

    def build_node(self, obj: Dict[str, Any], index: int) -> Node:
        params = first_defined(obj, "params", "attributes", "config", default={})
        attributes = []
        if isinstance(params, dict):
            attributes = [Attribute(k, v) for k, v in params.items()]

        # Weights follow the regular inputs as hidden arguments
        inputs = _port_arguments(obj.get("inputs"))
        for key, data in _weight_entries(obj.get("weights")):
            tensor = Tensor.from_data(key, data, self.config.default_dtype)
            inputs.append(Argument(key, [Value(key, tensor.type, tensor)],
                                   visible=self.config.weights_visible))

        return Node(
            name=obj.get("name") or f"node_{index}",
            type=NodeType(first_present(obj, "type", "op_type", "layer_type", default="Unknown")),
            inputs=inputs,
            outputs=_port_arguments(obj.get("outputs")),
            attributes=attributes,
        )
