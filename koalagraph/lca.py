"""Lowest common ancestors with linear preprocessing and constant-time queries."""

from __future__ import annotations

_MIN_BLOCK_SIZE = 2


def _floor_log2(n: int) -> int:
    return max(n.bit_length() - 1, 0)


def _block_mask(depths: list[int]) -> int:
    """Bit i is set when the depth rises between positions i and i + 1."""
    mask = 0
    for i, (a, b) in enumerate(zip(depths, depths[1:])):
        if b > a:
            mask |= 1 << i
    return mask


class OptimalLCA:
    """Block-decomposed range-minimum over the Euler tour of a rooted tree.

    ``tree`` must expose a directed graph as ``tree.tree`` with edges from
    parent to child, and ``root()`` and ``parent(u)`` methods, as
    :class:`koalagraph.graph.DirectedTree` does.
    """

    def __init__(self, tree):
        self._tree = tree
        graph = tree.tree
        self._first: list[int | None] = [None] * graph.upper_node_id_bound()
        self._euler: list[int] = []
        self._depth: list[int] = []
        self._euler_tour(tree.root())
        self._block_size = _floor_log2(len(self._euler)) // 2
        if self._block_size >= _MIN_BLOCK_SIZE:
            self._build_small_blocks()
            self._build_block_arrays()
            self._build_sparse_table()

    def _euler_tour(self, root: int) -> None:
        graph = self._tree.tree

        def visit(u: int, level: int) -> None:
            if self._first[u] is None:
                self._first[u] = len(self._euler)
            self._euler.append(u)
            self._depth.append(level)

        visit(root, 1)
        stack = [(root, 1, iter(graph.neighbors(root)))]
        while stack:
            u, level, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                if stack:
                    visit(stack[-1][0], stack[-1][1])
                continue
            visit(child, level + 1)
            stack.append((child, level + 1, iter(graph.neighbors(child))))

    def _build_small_blocks(self) -> None:
        size = self._block_size
        self._small_blocks: list[list[list[int]]] = []
        for mask in range(1 << (size - 1)):
            table = []
            for left in range(size):
                row = [left]
                minimum = current = 0
                minimum_index = left
                for c in range(1, size - left):
                    current += 1 if mask & (1 << (left + c - 1)) else -1
                    if current < minimum:
                        minimum, minimum_index = current, left + c
                    row.append(minimum_index)
                table.append(row)
            self._small_blocks.append(table)

    def _build_block_arrays(self) -> None:
        size = self._block_size
        self._block_min: list[int] = []
        self._block_argmin: list[int] = []
        self._block_mask: list[int] = []
        for start in range(0, len(self._euler), size):
            block = self._depth[start:start + size]
            offset = min(range(len(block)), key=block.__getitem__)
            self._block_min.append(block[offset])
            self._block_argmin.append(start + offset)
            self._block_mask.append(_block_mask(block))

    def _build_sparse_table(self) -> None:
        minima = self._block_min
        count = len(minima)
        self._sparse: list[list[int]] = [[i] for i in range(count)]
        size = 2
        while size < count:
            for left in range(count - size):
                a = self._sparse[left][-1]
                b = self._sparse[left + size // 2][-1]
                self._sparse[left].append(a if minima[a] <= minima[b] else b)
            size *= 2

    def _query_small_block(self, block: int, left: int, right: int) -> int:
        mask = self._block_mask[block]
        return self._small_blocks[mask][left][right - left] + block * self._block_size

    def _position(self, u: int) -> int:
        if not 0 <= u < len(self._first) or self._first[u] is None:
            raise KeyError(f"node {u} is not in the tree")
        return self._first[u]

    def query(self, u: int, v: int) -> int:
        """Lowest common ancestor of ``u`` and ``v``."""
        if self._block_size < _MIN_BLOCK_SIZE:
            return self._query_naive(u, v)
        low, high = sorted((self._position(u), self._position(v)))
        size = self._block_size
        left_block, left_offset = divmod(low, size)
        right_block, right_offset = divmod(high, size)
        if left_block == right_block:
            return self._euler[self._query_small_block(left_block, left_offset, right_offset)]
        index_left = self._query_small_block(left_block, left_offset, size - 1)
        index_right = self._query_small_block(right_block, 0, right_offset)
        depth = self._depth
        arg_min = index_left if depth[index_left] <= depth[index_right] else index_right
        if left_block + 1 == right_block:
            return self._euler[arg_min]
        k = _floor_log2(right_block - left_block - 2)
        a = self._sparse[left_block + 1][k]
        b = self._sparse[right_block - (1 << k)][k]
        minima = self._block_min
        arg_min_blocks = a if minima[a] <= minima[b] else b
        if depth[arg_min] <= minima[arg_min_blocks]:
            return self._euler[arg_min]
        return self._euler[self._block_argmin[arg_min_blocks]]

    def _query_naive(self, u: int, v: int) -> int:
        self._position(u)
        self._position(v)
        visited = set()
        vertex = u
        while vertex is not None:
            visited.add(vertex)
            vertex = self._tree.parent(vertex)
        vertex = v
        while vertex not in visited:
            vertex = self._tree.parent(vertex)
            if vertex is None:
                raise ValueError(f"nodes {u} and {v} have no common ancestor")
        return vertex

    def verify(self) -> None:
        """Raise ValueError unless the Euler tour visits every tree node."""
        expected = 2 * self._tree.tree.number_of_nodes() - 1
        if len(self._euler) != expected:
            raise ValueError(
                f"Euler tour has length {len(self._euler)}, expected {expected}"
            )