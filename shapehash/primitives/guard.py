"""Recursion guard for walks over untrusted value graphs.

A guard is created per call and passed down the recursion. It enforces a
depth limit and tracks the containers on the current path so a value that
refers back to an ancestor fails fast instead of looping.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Set

from shapehash.primitives.errors import CyclicStructureError, DepthExceededError

DEFAULT_MAX_DEPTH = 256

_LEAF_TYPES = (str, bytes, int, float, bool)


def join_path(path: str, key: Any) -> str:
    """Extend a dotted diagnostic path with a key or index."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)


class RecursionGuard:
    """Depth and cycle guard for one recursive walk."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.max_depth = max_depth
        self._ancestors: Set[int] = set()

    @contextmanager
    def descend(self, value: Any, depth: int, path: str = "") -> Iterator[None]:
        """Enter one level of the walk.

        Args:
            value: Value about to be recursed into.
            depth: Nesting depth of value (root is 0).
            path: Dotted path used in error messages.

        Raises:
            DepthExceededError: If depth is past the limit.
            CyclicStructureError: If value is already on the current path.
        """
        where = path or "<root>"
        if depth > self.max_depth:
            raise DepthExceededError(
                f"{where}: nesting depth {depth} exceeds limit {self.max_depth}",
                depth=depth,
                limit=self.max_depth,
                path=path,
            )

        if value is None or isinstance(value, _LEAF_TYPES):
            yield
            return

        marker = id(value)
        if marker in self._ancestors:
            raise CyclicStructureError(
                f"{where}: value refers back to one of its ancestors",
                depth=depth,
                limit=self.max_depth,
                path=path,
            )

        self._ancestors.add(marker)
        try:
            yield
        finally:
            self._ancestors.discard(marker)
