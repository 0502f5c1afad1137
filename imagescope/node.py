"""Tree nodes identified by a string ID, and helpers for comparing node collections."""

from __future__ import annotations

from collections.abc import Iterable


class Node:
    """A tree node identified by a string ID.

    Subclasses carry their own payload and should override :meth:`copy`
    so that copies keep it.
    """

    def __init__(self, node_id: str) -> None:
        self._id = str(node_id)

    def id(self) -> str:
        """Return the node's identifier."""
        return self._id

    def copy(self) -> Node:
        """Return a new node with the same identifier."""
        return type(self)(self._id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"


def nodes_equal(first: Iterable[Node], second: Iterable[Node]) -> bool:
    """Tell whether two node collections hold the very same node objects, ignoring order."""
    left = sorted(first, key=lambda n: n.id())
    right = sorted(second, key=lambda n: n.id())
    if len(left) != len(right):
        return False
    return all(a is b for a, b in zip(left, right))