"""
Document sources handed to format factories.

A context exposes an ``identifier`` (used only to sniff the extension) and
an awaitable ``peek`` that returns the decoded document. Decoding happens
at most once per context; a failed decode is cached and re-raised so every
factory sees the same outcome.
"""

from __future__ import annotations
import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union


class Context(ABC):
    """A content source that can be peeked as JSON."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        self._json: Any = None
        self._error: Exception | None = None
        self._decoded = False

    @abstractmethod
    async def read(self) -> bytes:
        """Returns the raw content."""
        raise NotImplementedError

    async def peek(self, kind: str = "json") -> Any:
        if kind != "json":
            raise ValueError(f"Unsupported peek kind '{kind}'")
        if not self._decoded:
            self._decoded = True
            try:
                self._json = json.loads(await self.read())
            except (ValueError, UnicodeDecodeError) as e:
                self._error = e
            except RecursionError as e:
                self._error = ValueError(f"JSON nesting too deep in {self.identifier}")
                self._error.__cause__ = e
        if self._error is not None:
            raise self._error
        return self._json

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"


class FileContext(Context):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self.path.name)

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


class BufferContext(Context):
    def __init__(self, identifier: str, data: Union[str, bytes]):
        super().__init__(identifier)
        self.data = data.encode("utf-8") if isinstance(data, str) else data

    async def read(self) -> bytes:
        return self.data
