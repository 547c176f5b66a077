"""Pairing heap with handles that allow key updates and arbitrary removal."""

from __future__ import annotations

import operator
from collections import deque
from collections.abc import Callable
from typing import Any


class _Node:
    """Heap entry; returned by ``push`` as an opaque handle."""

    __slots__ = ("key", "parent", "child", "previous", "next", "degree", "owner")

    def __init__(self, key: Any, owner: object):
        self.key = key
        self.parent: _Node | None = None
        self.child: _Node | None = None
        self.previous: _Node | None = None
        self.next: _Node | None = None
        self.degree = 0
        self.owner: object | None = owner


class PairingHeap:
    """Heap whose top is a greatest key under ``less`` (``<`` by default).

    ``push`` returns a handle that ``update`` and ``erase`` accept while the
    entry is still in the heap.
    """

    def __init__(self, less: Callable[[Any, Any], bool] | None = None):
        self._less = less if less is not None else operator.lt
        self._root: _Node | None = None
        self._size = 0
        self._token = object()

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"PairingHeap(size={self._size})"

    @staticmethod
    def _insert_node(a: _Node, b: _Node) -> None:
        """Make ``b`` the first child of ``a``."""
        if a.child is not None:
            a.child.previous = b
        b.parent = a
        b.previous = None
        b.next = a.child
        a.child = b
        a.degree += 1

    @staticmethod
    def _remove_node(a: _Node) -> None:
        """Detach ``a`` (with its subtree) from its parent."""
        parent = a.parent
        if parent.child is a:
            parent.child = a.next
        else:
            a.previous.next = a.next
        if a.next is not None:
            a.next.previous = a.previous
        parent.degree -= 1
        a.parent = a.previous = a.next = None

    def _own(self, handle: _Node) -> None:
        if not isinstance(handle, _Node) or handle.owner is not self._token:
            raise ValueError("handle does not refer to an entry of this heap")

    def _require_root(self) -> _Node:
        if self._root is None:
            raise IndexError("heap is empty")
        return self._root

    def top(self) -> Any:
        """The greatest key."""
        return self._require_root().key

    def push(self, key: Any) -> _Node:
        """Insert ``key`` and return a handle to the new entry."""
        node = _Node(key, self._token)
        self._size += 1
        root = self._root
        if root is None:
            self._root = node
        elif not self._less(node.key, root.key):
            self._insert_node(node, root)
            self._root = node
        else:
            self._insert_node(root, node)
        return node

    def pop(self) -> Any:
        """Remove the greatest key and return it."""
        root = self._require_root()
        root.owner = None
        self._size -= 1
        if self._size == 0:
            self._root = None
            return root.key
        less = self._less

        a = root.child
        b = a
        while a is not None:
            b = a.next
            if b is None:
                a.parent = None
                b = a
                break
            if not less(a.key, b.key):
                if b.next is not None:
                    b.next.previous = a
                a.next = b.next
                a.parent = None
                self._insert_node(a, b)
                b = a
                a = a.next
            else:
                if a.previous is not None:
                    a.previous.next = b
                b.previous = a.previous
                b.parent = None
                self._insert_node(b, a)
                a = b.next

        top = b
        a = top.previous
        while a is not None:
            if not less(a.key, top.key):
                self._insert_node(a, top)
                a.next = None
                top = a
            else:
                top.previous = a.previous
                self._insert_node(top, a)
            a = top.previous
        self._root = top
        root.child = None
        root.degree = 0
        return root.key

    def clear(self) -> None:
        """Remove every entry; earlier handles become invalid."""
        self._root = None
        self._size = 0
        self._token = object()

    def update(self, handle: _Node, key: Any) -> None:
        """Replace the entry's key with one that does not precede it."""
        self._own(handle)
        if self._less(key, handle.key):
            raise ValueError("the new key must not precede the current one")
        handle.key = key
        if handle.parent is None:
            return
        self._remove_node(handle)
        root = self._root
        if not self._less(handle.key, root.key):
            self._insert_node(handle, root)
            self._root = handle
        else:
            self._insert_node(root, handle)

    def erase(self, handle: _Node) -> None:
        """Remove the entry behind ``handle``."""
        self._own(handle)
        if handle.parent is not None:
            self._remove_node(handle)
            self._insert_node(handle, self._root)
            self._root = handle
        self.pop()

    def check(self) -> None:
        """Raise RuntimeError if the heap structure is inconsistent."""
        root = self._root
        if root is None:
            if self._size:
                raise RuntimeError("empty heap reports a non-zero size")
            return
        if root.previous is not None or root.next is not None or root.parent is not None:
            raise RuntimeError("root has siblings or a parent")
        total = 0
        queue = deque([root])
        while queue:
            a = queue.popleft()
            total += 1
            if a.previous is not None and a.previous.next is not a:
                raise RuntimeError("broken sibling link")
            if a.next is not None and a.next.previous is not a:
                raise RuntimeError("broken sibling link")
            child = a.child
            if child is not None and child.previous is not None:
                raise RuntimeError("first child has a previous sibling")
            degree = 0
            while child is not None:
                if child.parent is not a:
                    raise RuntimeError("child does not point to its parent")
                if self._less(a.key, child.key):
                    raise RuntimeError("heap order violated")
                queue.append(child)
                child = child.next
                degree += 1
            if degree != a.degree:
                raise RuntimeError("stored degree does not match children")
        if total != self._size:
            raise RuntimeError("reachable entries do not match the size")