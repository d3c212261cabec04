from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from ..config import LoaderConfig
from ..errors import UnsupportedModelError
from ..ir.context import Context, FileContext
from ..ir.model_ir import Model
from ..utils.logging import get_logger
from .base import Match, ModelFactory
from .cdsmodel import CdsModelFactory
from .customjson import CustomJsonFactory

logger = get_logger(__name__)

FACTORIES: Dict[str, Type[ModelFactory]] = {
    CdsModelFactory.name: CdsModelFactory,
    CustomJsonFactory.name: CustomJsonFactory,
}


def build_factories(config: Optional[LoaderConfig] = None) -> List[ModelFactory]:
    """Instantiates the factories in the configured rank order."""
    config = config or LoaderConfig()
    factories = []
    for name in config.formats:
        try:
            factories.append(FACTORIES[name](config))
        except KeyError:
            raise ValueError(f"Unknown format '{name}'. Known formats: {sorted(FACTORIES)}") from None
    return factories


async def detect(context: Context, config: Optional[LoaderConfig] = None) -> Optional[Match]:
    """
    Runs every factory in rank order and returns the first claim.

    All factories are consulted so that documents satisfying more than one
    signature are reported; the first-ranked claim still wins.
    """
    claims = []
    for factory in build_factories(config):
        match = await factory.match(context)
        if match is not None:
            claims.append((factory, match))

    if not claims:
        return None
    if len(claims) > 1:
        logger.warning("%s matches several formats %s; using '%s'", context.identifier,
                       [m.format for _, m in claims], claims[0][1].format)
    logger.info("%s detected as '%s'", context.identifier, claims[0][1].format)
    return claims[0][1]


async def open_model(context: Context, config: Optional[LoaderConfig] = None) -> Model:
    config = config or LoaderConfig()
    match = await detect(context, config)
    if match is None:
        raise UnsupportedModelError(f"Unsupported file content in '{context.identifier}'.")
    return await FACTORIES[match.format](config).open(match)


def load(path: Union[str, Path], config: Optional[LoaderConfig] = None) -> Model:
    """Synchronous convenience wrapper: detect and build a Model from a file."""
    return asyncio.run(open_model(FileContext(path), config))
