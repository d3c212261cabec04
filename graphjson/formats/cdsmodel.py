from __future__ import annotations
from typing import Any, Dict, List

from ..ir.model_ir import Argument, Attribute, Graph, Model, Node, NodeType, Value
from ..utils.logging import get_logger
from .base import ModelFactory, as_list, name_of, resolve_type

logger = get_logger(__name__)

EdgeMap = Dict[str, Dict[str, Any]]

# Node fields that are not carried over as attributes
_CLASSIFIED = ("name", "type", "inputs", "outputs")
_TYPE_KEYS = ("type", "op_type", "layer_type")


def is_cds_document(obj: Any) -> bool:
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("meta_data"), dict)
        and isinstance(obj.get("nodes"), list)
        and isinstance(obj.get("edges"), list)
    )


def build_edge_map(edges: Any) -> EdgeMap:
    """Name -> edge descriptor. Later duplicates overwrite earlier ones."""
    edge_map: EdgeMap = {}
    if isinstance(edges, list):
        for edge in edges:
            # keyed like references so numeric names still resolve
            name = name_of(edge)
            if isinstance(edge, dict) and name:
                edge_map[name] = edge
    return edge_map


def _declared_arguments(descriptors: Any, edge_map: EdgeMap, default_name: str) -> List[Argument]:
    args = []
    for desc in as_list(descriptors):
        name = name_of(desc, default_name)
        value = Value(name, resolve_type(desc, edge_map, name))
        args.append(Argument(name, [value]))
    return args


def _node_argument(refs: Any, edge_map: EdgeMap, arg_name: str) -> List[Argument]:
    if not isinstance(refs, list):
        return []
    values = []
    for ref in refs:
        name = name_of(ref)
        values.append(Value(name, resolve_type(ref, edge_map, name)))
    return [Argument(arg_name, values)]


def build_node(obj: Dict[str, Any], edge_map: EdgeMap) -> Node:
    type_key = next((k for k in _TYPE_KEYS if obj.get(k)), None)
    classified = _CLASSIFIED + ((type_key,) if type_key else ())
    return Node(
        name=obj.get("name") or "",
        type=NodeType(obj[type_key] if type_key else "Unknown"),
        inputs=_node_argument(obj.get("inputs"), edge_map, "inputs"),
        outputs=_node_argument(obj.get("outputs"), edge_map, "outputs"),
        attributes=[Attribute(k, v) for k, v in obj.items() if k not in classified],
    )


def build_graph(obj: Dict[str, Any]) -> Graph:
    meta = obj.get("meta_data")
    meta = meta if isinstance(meta, dict) else {}

    edge_map = build_edge_map(obj.get("edges"))
    logger.debug("cdsmodel: %d edges indexed", len(edge_map))

    nodes = []
    raw_nodes = obj.get("nodes")
    if isinstance(raw_nodes, list):
        for raw in raw_nodes:
            if not raw or not isinstance(raw, dict):
                continue
            nodes.append(build_node(raw, edge_map))
    logger.debug("cdsmodel: built %d nodes", len(nodes))

    return Graph(
        name=meta.get("name") or "graph",
        inputs=_declared_arguments(meta.get("inputs"), edge_map, "input"),
        outputs=_declared_arguments(meta.get("outputs"), edge_map, "output"),
        nodes=nodes,
    )


class CdsModelFactory(ModelFactory):
    name = "cdsmodel"
    label = "CDS Model"

    def signature(self, obj: Any) -> bool:
        return is_cds_document(obj)

    def build(self, obj: Dict[str, Any]) -> Model:
        meta = obj.get("meta_data")
        meta = meta if isinstance(meta, dict) else {}
        return Model(
            format=self.label,
            producer=meta.get("name") or "",
            description=meta.get("description") or "",
            modules=[build_graph(obj)],
        )
