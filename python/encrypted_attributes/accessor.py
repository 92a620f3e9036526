"""
Nested attribute access by dotted path.

This module provides:
- PathAccessor: Interface used by EncryptedAttributes to read and write values
- DottedPathAccessor: Default accessor for dicts, lists and plain objects
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any, List


class PathAccessor(ABC):
    """Reads and writes a value at a path inside a record."""

    @abstractmethod
    def get(self, record: Any, path: str) -> Any:
        """Return the value at path, or None if any segment is missing."""
        ...

    @abstractmethod
    def set(self, record: Any, path: str, value: Any) -> None:
        """Write value at path."""
        ...


class DottedPathAccessor(PathAccessor):
    """
    Accessor for ``a.b.0.c`` style paths.

    Segments index mappings by key, sequences by integer position and
    anything else by attribute name. Missing intermediate containers are
    created as dicts on write.
    """

    @staticmethod
    def _split(path: str) -> List[str]:
        if not path:
            raise ValueError("Attribute path must not be empty")
        return path.split(".")

    @staticmethod
    def _child(node: Any, segment: str) -> Any:
        if isinstance(node, Mapping):
            return node.get(segment)
        if isinstance(node, (list, tuple)):
            try:
                return node[int(segment)]
            except (ValueError, IndexError):
                return None
        return getattr(node, segment, None)

    def get(self, record: Any, path: str) -> Any:
        node = record
        for segment in self._split(path):
            if node is None:
                return None
            node = self._child(node, segment)
        return node

    def set(self, record: Any, path: str, value: Any) -> None:
        segments = self._split(path)
        node = record
        for segment in segments[:-1]:
            child = self._child(node, segment)
            if child is None:
                child = {}
                self._assign(node, segment, child)
            node = child
        self._assign(node, segments[-1], value)

    @staticmethod
    def _assign(node: Any, segment: str, value: Any) -> None:
        if isinstance(node, MutableMapping):
            node[segment] = value
        elif isinstance(node, MutableSequence):
            node[int(segment)] = value
        else:
            setattr(node, segment, value)
