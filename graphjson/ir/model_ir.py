from __future__ import annotations
from dataclasses import dataclass, field
from functools import reduce
from typing import List, Dict, Any, Optional, Union
import operator
import re

import numpy as np

DEFAULT_DTYPE = "float32"
LITTLE_ENDIAN = "<"

Dim = Union[int, str]

_DIM_SPLIT = re.compile(r"[,\s]+")
_PRODUCT_SHAPE = re.compile(r"^\d+(?:x\d+)+$")


def _parse_dims(shape: Any) -> List[Dim]:
    """Normalizes a declared shape (list, string or bare int) to a list of dims."""
    if shape is None or isinstance(shape, bool):
        return []
    if isinstance(shape, (list, tuple)):
        return list(shape)
    if isinstance(shape, int):
        return [shape]
    if isinstance(shape, str):
        text = shape.strip().strip("[]()")
        tokens = text.split("x") if _PRODUCT_SHAPE.match(text) else _DIM_SPLIT.split(text)
        return [int(t) if t.lstrip("-").isdigit() else t for t in tokens if t]
    return []


@dataclass(frozen=True)
class TensorShape:
    dimensions: List[Dim] = field(default_factory=list)

    @classmethod
    def from_declared(cls, shape: Any) -> TensorShape:
        return cls(_parse_dims(shape))

    @property
    def is_static(self) -> bool:
        return all(isinstance(d, int) and not isinstance(d, bool) and d >= 0 for d in self.dimensions)

    def __str__(self) -> str:
        if not self.dimensions:
            return ""
        return "[" + ",".join(str(d) for d in self.dimensions) + "]"


@dataclass(frozen=True)
class TensorType:
    """Element type plus shape. ``data_type`` is None for schemas without dtypes."""
    shape: TensorShape = field(default_factory=TensorShape)
    data_type: Optional[str] = None

    @property
    def itemsize(self) -> Optional[int]:
        """Bytes per element as numpy understands ``data_type``."""
        if not self.data_type:
            return None
        try:
            return np.dtype(self.data_type).itemsize
        except (TypeError, ValueError):
            return None

    def __str__(self) -> str:
        return (self.data_type or "") + str(self.shape)


@dataclass(frozen=True)
class Tensor:
    name: str
    type: Optional[TensorType] = None
    encoding: Optional[str] = None
    values: Any = field(default_factory=list)

    @classmethod
    def from_data(cls, name: str, data: Any, default_dtype: str = DEFAULT_DTYPE) -> Tensor:
        """Builds a tensor from a flat number list or a {shape, dtype, values|data} object."""
        if isinstance(data, list):
            return cls(
                name=name,
                type=TensorType(TensorShape([len(data)]), default_dtype),
                encoding=LITTLE_ENDIAN,
                values=data,
            )
        if isinstance(data, dict):
            dtype = str(data.get("dtype") or default_dtype)
            values = data.get("values")
            if values is None:
                values = data.get("data")
            return cls(
                name=name,
                type=TensorType(TensorShape.from_declared(data.get("shape")), dtype),
                values=values if values is not None else [],
            )
        return cls(name=name)

    @property
    def num_elements(self) -> int:
        """Element count from a static shape, else from the payload itself."""
        if self.type is not None and self.type.shape.dimensions and self.type.shape.is_static:
            return reduce(operator.mul, self.type.shape.dimensions)
        if self.values is None:
            return 0
        # ragged payloads collapse to their outer length
        return int(np.asarray(self.values, dtype=object).size)


@dataclass(frozen=True)
class Value:
    name: str
    type: Optional[TensorType] = None
    initializer: Optional[Tensor] = None


@dataclass(frozen=True)
class Argument:
    name: str
    value: List[Value] = field(default_factory=list)
    type: Optional[TensorType] = None
    visible: bool = True


def attribute_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "scalar"


@dataclass(frozen=True)
class Attribute:
    name: str
    value: Any = None

    @property
    def kind(self) -> str:
        return attribute_kind(self.value)


@dataclass(frozen=True)
class NodeType:
    name: str = "Unknown"


@dataclass(frozen=True)
class Node:
    name: str
    type: NodeType
    inputs: List[Argument] = field(default_factory=list)
    outputs: List[Argument] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)


@dataclass(frozen=True)
class Graph:
    name: str
    inputs: List[Argument] = field(default_factory=list)
    outputs: List[Argument] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)


def _type_str(t: Optional[TensorType]) -> Optional[str]:
    return str(t) if t is not None else None


def _argument_to_dict(arg: Argument) -> Dict[str, Any]:
    return {
        "name": arg.name,
        "visible": arg.visible,
        "value": [
            {
                "name": v.name,
                "type": _type_str(v.type),
                "initializer": v.initializer.name if v.initializer is not None else None,
            }
            for v in arg.value
        ],
    }


@dataclass(frozen=True)
class Model:
    format: str
    producer: str = ""
    name: str = ""
    description: str = ""
    modules: List[Graph] = field(default_factory=list)

    @property
    def graphs(self) -> List[Graph]:
        return self.modules

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "producer": self.producer,
            "name": self.name,
            "description": self.description,
            "graphs": [
                {
                    "name": g.name,
                    "inputs": [_argument_to_dict(a) for a in g.inputs],
                    "outputs": [_argument_to_dict(a) for a in g.outputs],
                    "nodes": [
                        {
                            "name": n.name,
                            "type": n.type.name,
                            "inputs": [_argument_to_dict(a) for a in n.inputs],
                            "outputs": [_argument_to_dict(a) for a in n.outputs],
                            "attributes": {a.name: a.value for a in n.attributes},
                        }
                        for n in g.nodes
                    ],
                }
                for g in self.modules
            ],
        }
