"""Tests for the recursion guard."""

import pytest

from shapehash.primitives.errors import CyclicStructureError, DepthExceededError
from shapehash.primitives.guard import RecursionGuard, join_path


class TestJoinPath:
    def test_keys_and_indexes(self):
        """Keys are dotted, indexes bracketed."""
        assert join_path("", "a") == "a"
        assert join_path("a", "b") == "a.b"
        assert join_path("a.b", 0) == "a.b[0]"


class TestRecursionGuard:
    """Depth and cycle detection."""

    def test_depth_limit(self):
        """Depth past the limit raises with details."""
        guard = RecursionGuard(max_depth=1)
        with pytest.raises(DepthExceededError) as exc_info:
            with guard.descend({}, 2, "a.b"):
                pass
        assert exc_info.value.depth == 2
        assert exc_info.value.limit == 1
        assert exc_info.value.path == "a.b"

    def test_depth_at_limit_allowed(self):
        """Depth equal to the limit is fine."""
        guard = RecursionGuard(max_depth=1)
        with guard.descend({}, 1):
            pass

    def test_cycle(self):
        """Re-entering an ancestor raises CyclicStructureError."""
        guard = RecursionGuard()
        value = []
        with guard.descend(value, 0):
            with pytest.raises(CyclicStructureError):
                with guard.descend(value, 1, "[0]"):
                    pass

    def test_cycle_is_depth_error(self):
        """Cycles are a kind of depth error."""
        assert issubclass(CyclicStructureError, DepthExceededError)

    def test_shared_sibling_allowed(self):
        """The same container may appear twice as siblings."""
        guard = RecursionGuard()
        shared = {"x": 1}
        with guard.descend([shared, shared], 0):
            with guard.descend(shared, 1, "[0]"):
                pass
            with guard.descend(shared, 1, "[1]"):
                pass

    def test_leaves_untracked(self):
        """Interned leaves never count as cycles."""
        guard = RecursionGuard()
        with guard.descend("a", 0):
            with guard.descend("a", 1):
                pass

    def test_negative_limit_rejected(self):
        """Negative limits are rejected."""
        with pytest.raises(ValueError):
            RecursionGuard(max_depth=-1)
