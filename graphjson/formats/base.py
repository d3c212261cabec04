from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import LoaderConfig
from ..errors import MissingDocumentError, ModelLoadError
from ..ir.context import Context
from ..ir.model_ir import Model, TensorShape, TensorType
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Match:
    """A factory's claim on a document."""
    format: str
    document: Any
    identifier: str = ""


class ModelFactory(ABC):
    """Detects one JSON schema family and builds Models from it."""

    name: str = ""
    label: str = ""

    def __init__(self, config: Optional[LoaderConfig] = None):
        self.config = config or LoaderConfig()

    @abstractmethod
    def signature(self, obj: Any) -> bool:
        """Pure structural check; must not raise for any JSON value."""
        raise NotImplementedError

    @abstractmethod
    def build(self, obj: Dict[str, Any]) -> Model:
        raise NotImplementedError

    async def match(self, context: Context) -> Optional[Match]:
        if not self.config.accepts(context.identifier):
            return None
        try:
            obj = await context.peek("json")
        except (ValueError, UnicodeDecodeError) as e:
            logger.debug("%s: %s is not JSON (%s)", self.name, context.identifier, e)
            return None
        if self.signature(obj):
            return Match(self.name, obj, context.identifier)
        return None

    async def open(self, match: Optional[Match]) -> Model:
        obj = match.document if match is not None else None
        if obj is None:
            raise MissingDocumentError(f"{self.label} data is undefined")
        logger.debug("%s: opening %s", self.name, match.identifier or "<document>")
        try:
            return self.build(obj)
        except (TypeError, AttributeError, KeyError, ValueError) as e:
            raise ModelLoadError(f"Error loading {self.label} model: {e}") from e


# Resolve-or-default helpers shared by both schemas

def as_list(value: Any) -> List[Any]:
    """None -> [], list -> itself, anything else -> [value]."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def name_of(ref: Any, default: str = "") -> str:
    """A reference is either a bare name or an object carrying ``name``."""
    if isinstance(ref, str):
        return ref or default
    if isinstance(ref, dict):
        name = ref.get("name")
        return str(name) if name else default
    if isinstance(ref, (int, float)) and not isinstance(ref, bool):
        return str(ref)
    return default


def first_present(obj: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First truthy value among ``keys``."""
    for key in keys:
        value = obj.get(key)
        if value:
            return value
    return default


def first_defined(obj: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First key that is present and not null, even when its value is empty."""
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return default


def resolve_type(ref: Any, edges: Optional[Dict[str, Dict[str, Any]]] = None,
                 name: str = "", with_dtype: bool = False) -> Optional[TensorType]:
    """
    Explicit shape on the reference wins, then the edge table entry for
    ``name``, else None. With ``with_dtype`` a declared ``dtype`` (or a
    string ``type``) is carried into the TensorType.
    """
    declared = ref if isinstance(ref, dict) else {}
    shape = declared.get("shape")
    if shape is None and edges:
        edge = edges.get(name)
        if edge is not None:
            shape = edge.get("shape")

    dtype = None
    if with_dtype:
        dtype = declared.get("dtype")
        if dtype is None and isinstance(declared.get("type"), str):
            dtype = declared["type"]

    if shape is None and not dtype:
        return None
    return TensorType(TensorShape.from_declared(shape), str(dtype) if dtype else None)
