"""Stateful depth-first traversal over a tree."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from imagescope.node import Node

NodePredicate = Callable[[Node], bool]


@dataclass
class WalkConditions:
    """Hooks that steer a depth-first walk.

    should_terminate: return True to stop the walk before visiting the node.
    should_visit: return True to visit the node (its children are still walked).
    should_continue_branch: return True to descend into the node's children.
    """

    should_terminate: NodePredicate | None = None
    should_visit: NodePredicate | None = None
    should_continue_branch: NodePredicate | None = None


class DepthFirstWalker:
    """Walks a tree depth-first, visiting children in ascending ID order.

    ``reader`` is any object with ``children(node)`` and ``roots()`` methods.
    Nodes already visited are not visited again across walks.
    """

    def __init__(
        self,
        reader: Any,
        visitor: Callable[[Node], None] | None,
        conditions: WalkConditions | None = None,
    ) -> None:
        self._reader = reader
        self._visitor = visitor
        self._conditions = conditions or WalkConditions()
        self._visited: set[str] = set()

    def walk(self, start: Node) -> Node | None:
        """Walk from ``start``; return the node where the walk was terminated, if any."""
        conditions = self._conditions
        stack = [start]
        while stack:
            current = stack.pop()
            if conditions.should_terminate is not None and conditions.should_terminate(current):
                return current

            current_id = current.id()
            if self._visitor is not None and current_id not in self._visited:
                if conditions.should_visit is None or conditions.should_visit(current):
                    self._visitor(current)
                    self._visited.add(current_id)

            if (
                conditions.should_continue_branch is not None
                and not conditions.should_continue_branch(current)
            ):
                continue

            children = sorted(self._reader.children(current), key=lambda n: n.id(), reverse=True)
            stack.extend(children)
        return None

    def walk_all(self) -> None:
        """Walk from every root of the tree."""
        for root in self._reader.roots():
            self.walk(root)

    def visited(self, node: Node) -> bool:
        return node.id() in self._visited