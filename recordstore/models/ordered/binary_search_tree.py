"""
Binary search tree implementation of OrderedIndex.

No rebalancing is performed: the shape of the tree, and therefore the cost of
every lookup, follows the order in which keys were inserted. The comparison
counter makes that cost observable.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from recordstore.interfaces.ordered_index import OrderedIndex


@dataclass
class Node:
    """Node in the binary search tree."""

    key: Any
    value: Any
    left: "Node | None" = None
    right: "Node | None" = None
    parent: "Node | None" = None


class BinarySearchTree(OrderedIndex):
    """
    Unbalanced binary search tree with a key comparison counter.

    All walks are iterative; a tree built from already sorted keys
    degenerates into a linked list whose depth equals its size.
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._size: int = 0
        self._comparisons: int = 0

    @property
    def comparisons(self) -> int:
        return self._comparisons

    def reset_metrics(self) -> None:
        self._comparisons = 0

    def insert(self, key: Any, value: Any) -> None:
        """Insert a key-value pair, replacing the value of an existing key."""
        if self._root is None:
            self._root = Node(key=key, value=value)
            self._size = 1
            return

        # Find insertion point
        parent = None
        current = self._root
        order = 0

        while current is not None:
            parent = current
            order = self._compare(key, current.key)
            if order < 0:
                current = current.left
            elif order > 0:
                current = current.right
            else:
                current.value = value
                return

        new_node = Node(key=key, value=value, parent=parent)
        if order < 0:
            parent.left = new_node
        else:
            parent.right = new_node
        self._size += 1

    def find(self, key: Any) -> Any | None:
        node = self._find_node(key)
        return node.value if node else None

    def erase(self, key: Any) -> bool:
        node = self._find_node(key)
        if node is None:
            return False

        self._delete_node(node)
        self._size -= 1
        return True

    def has(self, key: Any) -> bool:
        return self._find_node(key) is not None

    def size(self) -> int:
        return self._size

    def height(self) -> int:
        if self._root is None:
            return 0

        height = 0
        level = [self._root]
        while level:
            height += 1
            level = [
                child
                for node in level
                for child in (node.left, node.right)
                if child is not None
            ]
        return height

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return self.iterator()

    def iterator(
        self, start: Any | None = None, end: Any | None = None
    ) -> Iterator[tuple[Any, Any]]:
        return _RangeIterator(self, start, end)

    def range_apply(self, lo: Any, hi: Any, visit: Callable[[Any, Any], None]) -> None:
        for key, value in self.iterator(lo, hi):
            visit(key, value)

    def _compare(self, a: Any, b: Any) -> int:
        """Three-way compare a against b, counting it as one comparison."""
        self._comparisons += 1
        if a < b:
            return -1
        if b < a:
            return 1
        return 0

    def _find_node(self, key: Any) -> Node | None:
        current = self._root
        while current is not None:
            order = self._compare(key, current.key)
            if order < 0:
                current = current.left
            elif order > 0:
                current = current.right
            else:
                return current
        return None

    def _delete_node(self, node: Node) -> None:
        """Unlink a node, splicing in its in-order successor if needed."""
        if node.left and node.right:
            successor = node.right
            while successor.left:
                successor = successor.left

            # Move successor's entry into node, then unlink the successor
            node.key = successor.key
            node.value = successor.value
            node = successor

        # Node has at most one child
        child = node.left if node.left else node.right
        self._replace_node(node, child)

    def _replace_node(self, node: Node, child: Node | None) -> None:
        if node.parent is None:
            self._root = child
        elif node is node.parent.left:
            node.parent.left = child
        else:
            node.parent.right = child

        if child:
            child.parent = node.parent


class _RangeIterator(Iterator[tuple[Any, Any]]):
    """In-order iterator over the closed key range [start, end]."""

    def __init__(self, tree: BinarySearchTree, start: Any | None, end: Any | None) -> None:
        self._tree = tree
        self._stack: list[Node] = []
        self._end = end

        # Seed the stack with the left spine of nodes >= start
        self._push_left_path(tree._root, start)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return self

    def __next__(self) -> tuple[Any, Any]:
        if not self._stack:
            raise StopIteration

        node = self._stack.pop()

        # Every later node is larger, so the first one past end ends the walk
        if self._end is not None and self._tree._compare(node.key, self._end) > 0:
            self._stack.clear()
            raise StopIteration

        result = (node.key, node.value)
        self._push_left_path(node.right, None)
        return result

    def _push_left_path(self, node: Node | None, start: Any | None) -> None:
        while node:
            if start is not None and self._tree._compare(node.key, start) < 0:
                # Whole left subtree is below start as well
                node = node.right
            else:
                self._stack.append(node)
                node = node.left
