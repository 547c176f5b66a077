"""Minimum spanning trees and linear-time verification of them."""

from __future__ import annotations

import heapq
import math
import random
from collections.abc import Iterable
from functools import lru_cache
from operator import itemgetter

from koalagraph.graph import Algorithm, Graph, connected_components
from koalagraph.lca import OptimalLCA

_random = random.Random()

Pair = tuple[int, int]


class _UnionFind:
    """Disjoint sets over ``0..size-1`` with union by rank and path compression."""

    def __init__(self, size: int):
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, u: int) -> int:
        root = u
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[u] != root:
            self._parent[u], u = root, self._parent[u]
        return root

    def merge(self, u: int, v: int) -> None:
        a, b = self.find(u), self.find(v)
        if a == b:
            return
        if self._rank[a] < self._rank[b]:
            self._parent[a] = b
        else:
            self._parent[b] = a
            if self._rank[a] == self._rank[b]:
                self._rank[a] += 1


def _pair(u: int, v: int) -> Pair:
    return (u, v) if u <= v else (v, u)


def _edge_origins(graph: Graph) -> dict[Pair, Pair]:
    return {_pair(u, v): (u, v) for u, v in graph.edges()}


class _BranchingTree:
    """Records the contractions of Boruvka steps as a rooted weighted tree."""

    def __init__(self, graph: Graph):
        self.graph = Graph(graph.upper_node_id_bound(), weighted=True, directed=True)
        self._node = {v: v for v in graph.nodes()}
        self._pending: dict[int, float] = {}

    def add_edge(self, v: int, weight: float) -> None:
        self._pending[v] = weight

    def update(self, contracted: Graph, union_find: _UnionFind) -> None:
        following = {v: self.graph.add_node() for v in contracted.nodes()}
        for v, weight in self._pending.items():
            self.graph.add_edge(following[union_find.find(v)], self._node[v], weight)
        self._node = following
        self._pending.clear()


def _boruvka(
    graph: Graph,
    forest: Graph | None,
    union_find: _UnionFind,
    origin: dict[Pair, Pair],
    steps: float,
    branching: bool,
) -> tuple[Graph, Graph | None]:
    """Run up to ``steps`` Boruvka contractions.

    Chosen edges go to ``forest`` under their original endpoints. Returns the
    contracted graph and, when requested, the branching tree.
    """
    tree = _BranchingTree(graph) if branching else None
    while graph.number_of_nodes() > 1 and graph.number_of_edges() > 0 and steps > 0:
        steps -= 1
        for x in list(graph.nodes()):
            neighbours = graph.weighted_neighbors(x)
            if not neighbours:
                continue
            y, weight = min(neighbours, key=itemgetter(1))
            if tree is not None:
                tree.add_edge(x, weight)
            a, b = union_find.find(x), union_find.find(y)
            if a == b:
                continue
            union_find.merge(a, b)
            if forest is not None:
                u, v = origin[_pair(x, y)]
                forest.add_edge(u, v, weight)

        lightest: dict[Pair, tuple[int, int, float]] = {}
        for u, v, weight in graph.weighted_edges():
            a, b = union_find.find(u), union_find.find(v)
            if a == b:
                continue
            key = _pair(a, b)
            best = lightest.get(key)
            if best is None or weight < best[2]:
                lightest[key] = (u, v, weight)

        contracted = graph.copy_nodes()
        for v in list(graph.nodes()):
            if union_find.find(v) != v:
                contracted.remove_node(v)
        if tree is not None:
            tree.update(contracted, union_find)
        for key in sorted(lightest):
            u, v, weight = lightest[key]
            contracted.add_edge(key[0], key[1], weight)
            origin[key] = origin[_pair(u, v)]
        graph = contracted
    return graph, (tree.graph if tree is not None else None)


@lru_cache(maxsize=None)
def _median(depths: int) -> int:
    """Median element of the set of depths encoded as bits; 0 for the empty set."""
    elements = [j for j in range(depths.bit_length()) if (depths >> j) & 1]
    return elements[len(elements) // 2] if elements else 0


def _down(a: int, b: int) -> int:
    return b & (~(a | b) ^ (a + (a | ~b)))


class AugmentedGraph:
    """Rooted tree (edges from parent to child) answering path-maximum queries.

    The root is the node with the largest id; each node's weight is that of
    the edge to its parent.
    """

    def __init__(self, graph: Graph):
        self.tree = graph

    def root(self) -> int:
        return self.tree.upper_node_id_bound() - 1

    def parent(self, v: int) -> int | None:
        parents = self.tree.in_neighbors(v)
        return parents[0] if parents else None

    def weight(self, u: int) -> float:
        if u == self.root():
            return 0.0
        parent = self.parent(u)
        if parent is None:
            raise ValueError(f"node {u} has no parent")
        return self.tree.weight(parent, u)

    def tree_path_maxima(self, lower: Iterable[int], upper: Iterable[int]) -> list[int | None]:
        """For each query, the node of heaviest weight on the path from
        ``lower[i]`` up to its ancestor ``upper[i]`` (excluding the latter)."""
        lower, upper = list(lower), list(upper)
        if len(lower) != len(upper):
            raise ValueError("lower and upper must have the same length")
        tree = self.tree
        size = tree.upper_node_id_bound()
        depth = [0] * size
        sets = [0] * size
        queries: list[list[int]] = [[] for _ in range(size)]
        for i, u in enumerate(lower):
            queries[u].append(i)

        def initialize(u: int, level: int) -> int:
            depth[u] = level
            height = level
            for i in queries[u]:
                sets[u] |= 1 << depth[upper[i]]
            for child in tree.neighbors(u):
                height = max(height, initialize(child, level + 1))
                sets[u] |= sets[child] & ~(1 << level)
            return height

        height = initialize(self.root(), 0)
        stack: list[int | None] = [None] * (height + 1)
        answer: list[int | None] = [None] * len(upper)

        def visit(v: int, ancestors: int) -> None:
            stack[depth[v]] = v
            k = self._search(stack, self.weight(v), _down(sets[v], ancestors))
            ancestors = _down(sets[v], (ancestors & ((1 << (k + 1)) - 1)) | (1 << depth[v]))
            for i in queries[v]:
                answer[i] = stack[_median(_down(1 << depth[upper[i]], ancestors))]
            for child in tree.neighbors(v):
                visit(child, ancestors)

        visit(self.root(), 0)
        return answer

    def _search(self, stack: list, weight: float, candidates: int) -> int:
        """Largest depth j in ``candidates`` whose node outweighs ``weight``, or 0."""
        if not candidates:
            return 0
        j = _median(candidates)
        while candidates and candidates != 1 << j:
            below = (1 << j) - 1
            if self.weight(stack[j]) > weight:
                candidates &= ~below
            else:
                candidates &= below
            j = _median(candidates)
        return j if candidates and self.weight(stack[j]) > weight else 0


class MinimumSpanningTree(Algorithm):
    """Base for minimum spanning forest algorithms on undirected graphs."""

    def __init__(self, graph: Graph):
        super().__init__()
        self._graph = graph.copy()
        self._tree = graph.copy_nodes()

    def forest(self) -> Graph:
        """The spanning forest found by ``run``."""
        self.assure_finished()
        return self._tree

    def check(self) -> None:
        """Raise ValueError unless the forest is a minimum spanning tree."""
        self.assure_finished()
        tree, graph = self._tree, self._graph
        if tree.number_of_nodes() != tree.number_of_edges() + 1:
            raise ValueError("forest does not have exactly n - 1 edges")
        if len(connected_components(tree)) != 1:
            raise ValueError("forest is not connected")
        _, branching = _boruvka(
            tree.copy(),
            None,
            _UnionFind(graph.upper_node_id_bound()),
            _edge_origins(tree),
            math.inf,
            True,
        )
        non_tree = [(u, v, w) for u, v, w in graph.weighted_edges() if not tree.has_edge(u, v)]
        augmented = AugmentedGraph(branching)
        lca = OptimalLCA(augmented)
        lower: list[int] = []
        upper: list[int] = []
        for u, v, _ in non_tree:
            ancestor = lca.query(u, v)
            lower.extend((u, v))
            upper.extend((ancestor, ancestor))
        for i, node in enumerate(augmented.tree_path_maxima(lower, upper)):
            if augmented.weight(node) > non_tree[i // 2][2]:
                u, v, w = non_tree[i // 2]
                raise ValueError(f"edge ({u}, {v}) of weight {w} is lighter than a tree path")


class KruskalMinimumSpanningTree(MinimumSpanningTree):
    """Kruskal's algorithm."""

    def run(self) -> None:
        union_find = _UnionFind(self._graph.upper_node_id_bound())
        for u, v, w in sorted(self._graph.weighted_edges(), key=itemgetter(2)):
            if union_find.find(u) != union_find.find(v):
                self._tree.add_edge(u, v, w)
                union_find.merge(u, v)
        super().run()


class PrimMinimumSpanningTree(MinimumSpanningTree):
    """Prim's algorithm; spans the component of the lowest node id."""

    def run(self) -> None:
        graph, tree = self._graph, self._tree
        start = next(graph.nodes(), None)
        if start is not None:
            queue = [(0.0, -start)]
            previous: dict[int, tuple[int, int, float]] = {}
            while queue:
                v = -heapq.heappop(queue)[1]
                if not tree.is_isolated(v):
                    continue
                if v in previous:
                    tree.add_edge(*previous[v])
                for u, weight in graph.weighted_neighbors(v):
                    if tree.is_isolated(u):
                        heapq.heappush(queue, (weight, -u))
                        if u not in previous or previous[u][2] > weight:
                            previous[u] = (u, v, weight)
        super().run()


class BoruvkaMinimumSpanningTree(MinimumSpanningTree):
    """Boruvka's algorithm."""

    def run(self) -> None:
        graph = self._graph.copy()
        _boruvka(
            graph,
            self._tree,
            _UnionFind(graph.upper_node_id_bound()),
            _edge_origins(graph),
            math.inf,
            False,
        )
        super().run()


def _discard_random_edges(graph: Graph, subgraph: Graph) -> None:
    for u, v, w in graph.weighted_edges():
        if _random.getrandbits(1):
            subgraph.add_edge(u, v, w)
    components = connected_components(subgraph)
    for component in components[1:]:
        subgraph.add_edge(components[0][0], component[0], math.inf)


def _remove_heavy_edges(graph: Graph, subforest: Graph) -> None:
    _, branching = _boruvka(
        subforest,
        None,
        _UnionFind(graph.upper_node_id_bound()),
        _edge_origins(subforest),
        math.inf,
        True,
    )
    augmented = AugmentedGraph(branching)
    lca = OptimalLCA(augmented)
    lower: list[int] = []
    upper: list[int] = []
    edges = list(graph.weighted_edges())
    for u, v, _ in edges:
        ancestor = lca.query(u, v)
        lower.extend((u, v))
        upper.extend((ancestor, ancestor))
    answers = augmented.tree_path_maxima(lower, upper)
    for i, (u, v, w) in enumerate(edges):
        first = augmented.weight(answers[2 * i])
        second = augmented.weight(answers[2 * i + 1])
        if w > first and w > second:
            graph.remove_edge(u, v)


def _kkt_recurse(graph: Graph, forest: Graph) -> None:
    union_find = _UnionFind(graph.upper_node_id_bound())
    origin = _edge_origins(graph)
    while True:
        graph, _ = _boruvka(graph, forest, union_find, origin, 2, False)
        if graph.number_of_edges() == 0:
            return
        subgraph = graph.copy_nodes()
        _discard_random_edges(graph, subgraph)
        subforest = subgraph.copy_nodes()
        _kkt_recurse(subgraph, subforest)
        _remove_heavy_edges(graph, subforest)


class KargerKleinTarjanMinimumSpanningTree(BoruvkaMinimumSpanningTree):
    """Randomized expected linear-time algorithm of Karger, Klein and Tarjan."""

    def run(self) -> None:
        _kkt_recurse(self._graph.copy(), self._tree)
        Algorithm.run(self)