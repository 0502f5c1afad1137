"""A simple rooted tree (forest) of nodes keyed by their IDs."""

from __future__ import annotations

from imagescope.node import Node


class TreeError(Exception):
    """Raised when a tree operation cannot be performed."""


class Tree:
    """A forest of nodes where each node has at most one parent."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._children: dict[str, dict[str, None]] = {}
        self._parent: dict[str, str | None] = {}

    def copy(self) -> Tree:
        """Return a deep copy of the tree, copying every node."""
        duplicate = Tree()
        duplicate._nodes = {nid: n.copy() for nid, n in self._nodes.items()}
        duplicate._children = {nid: dict(kids) for nid, kids in self._children.items()}
        duplicate._parent = dict(self._parent)
        return duplicate

    def roots(self) -> list[Node]:
        """Return all nodes without a parent."""
        return [n for nid, n in self._nodes.items() if self._parent.get(nid) is None]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def _add_node(self, node: Node) -> None:
        nid = node.id()
        if nid in self._nodes:
            raise TreeError(f"node ID collision: {nid}")
        self._nodes[nid] = node
        self._children[nid] = {}
        self._parent[nid] = None

    def replace(self, old: Node, new: Node) -> None:
        """Put ``new`` in the place of ``old``, keeping its parent and children."""
        old_id, new_id = old.id(), new.id()
        if old_id not in self._nodes:
            raise TreeError("cannot replace node not in the tree")

        if old_id == new_id:
            self._nodes[new_id] = new
            return

        self._add_node(new)
        parent_id = self._parent[old_id]
        self._parent[new_id] = parent_id

        for child_id in self._children[old_id]:
            self._parent[child_id] = new_id
            self._children[new_id][child_id] = None

        if parent_id is not None:
            siblings = self._children[parent_id]
            siblings.pop(old_id, None)
            siblings[new_id] = None

        del self._children[old_id]
        del self._nodes[old_id]
        del self._parent[old_id]

    def add_root(self, node: Node) -> None:
        """Add a node without a parent."""
        self._add_node(node)

    def add_child(self, parent: Node, child: Node) -> None:
        """Add ``child`` under ``parent``, adding either node if it is new."""
        pid, cid = parent.id(), child.id()
        if pid == cid:
            raise TreeError("should not add self edge")

        for node in (parent, child):
            if node.id() in self._nodes:
                self._nodes[node.id()] = node
            else:
                self._add_node(node)

        self._children[pid][cid] = None
        self._parent[cid] = pid

    def remove_node(self, node: Node) -> list[Node]:
        """Remove a node and its whole subtree, returning the removed nodes."""
        nid = node.id()
        if nid not in self._nodes:
            raise TreeError(f"unable to remove node: {nid}")

        removed: list[Node] = []
        for child_id in list(self._children[nid]):
            child = self._nodes.get(child_id)
            if child is not None:
                removed.extend(self.remove_node(child))

        removed.append(self._nodes[nid])

        del self._children[nid]
        parent_id = self._parent.pop(nid, None)
        if parent_id is not None and parent_id in self._children:
            self._children[parent_id].pop(nid, None)
        del self._nodes[nid]
        return removed

    def children(self, node: Node) -> list[Node]:
        kids = self._children.get(node.id())
        if not kids:
            return []
        return [self._nodes[cid] for cid in kids]

    def parent(self, node: Node) -> Node | None:
        """Return the parent of ``node``, or None for roots and unknown nodes."""
        parent_id = self._parent.get(node.id())
        if parent_id is None:
            return None
        return self._nodes.get(parent_id)

    def __len__(self) -> int:
        return len(self._nodes)