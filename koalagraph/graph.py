"""Graph structure with stable integer node ids, and helpers built on it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Iterable, Iterator


class Graph:
    """Graph on integer node ids; ids of removed nodes stay reserved.

    Unweighted graphs report weight 1.0 for every edge. Adding an edge that
    already exists replaces its weight instead of creating a parallel edge.
    """

    def __init__(self, n: int = 0, weighted: bool = False, directed: bool = False):
        self.weighted = weighted
        self.directed = directed
        self._out: list[dict[int, float] | None] = [{} for _ in range(n)]
        self._in: list[dict[int, float] | None] = (
            [{} for _ in range(n)] if directed else self._out
        )
        self._node_count = n
        self._edge_count = 0

    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return (
            f"Graph({kind}, nodes={self._node_count}, edges={self._edge_count}, "
            f"weighted={self.weighted})"
        )

    def _adjacency(self, u: int) -> dict[int, float]:
        if 0 <= u < len(self._out):
            adjacency = self._out[u]
            if adjacency is not None:
                return adjacency
        raise KeyError(f"node {u} does not exist")

    def _incoming(self, u: int) -> dict[int, float]:
        self._adjacency(u)
        return self._in[u]

    def _drop(self, u: int) -> None:
        self._out[u] = None
        if self.directed:
            self._in[u] = None
        self._node_count -= 1

    def add_node(self) -> int:
        """Add a node and return its id."""
        self._out.append({})
        if self.directed:
            self._in.append({})
        self._node_count += 1
        return len(self._out) - 1

    def add_nodes(self, count: int) -> int:
        """Add ``count`` nodes and return the id of the last one."""
        for _ in range(count):
            self.add_node()
        return len(self._out) - 1

    def remove_node(self, u: int) -> None:
        """Remove a node together with all edges touching it."""
        for v in list(self._adjacency(u)):
            self.remove_edge(u, v)
        if self.directed:
            for v in list(self._incoming(u)):
                self.remove_edge(v, u)
        self._drop(u)

    def has_node(self, u: int) -> bool:
        return 0 <= u < len(self._out) and self._out[u] is not None

    def add_edge(self, u: int, v: int, weight: float = 1.0) -> None:
        out_u = self._adjacency(u)
        self._adjacency(v)
        w = float(weight) if self.weighted else 1.0
        if v not in out_u:
            self._edge_count += 1
        out_u[v] = w
        self._in[v][u] = w

    def remove_edge(self, u: int, v: int) -> None:
        if not self.has_edge(u, v):
            raise KeyError(f"edge ({u}, {v}) does not exist")
        del self._out[u][v]
        self._in[v].pop(u, None)
        self._edge_count -= 1

    def has_edge(self, u: int, v: int) -> bool:
        return self.has_node(u) and v in self._out[u]

    def weight(self, u: int, v: int) -> float:
        """Weight of the edge, or 0.0 when there is no such edge."""
        return self._adjacency(u).get(v, 0.0)

    def increase_weight(self, u: int, v: int, weight: float) -> None:
        """Add ``weight`` to the edge, creating it when missing."""
        if not self.weighted:
            raise ValueError("cannot change weights of an unweighted graph")
        self.add_edge(u, v, self.weight(u, v) + weight)

    def neighbors(self, u: int) -> list[int]:
        return list(self._adjacency(u))

    def weighted_neighbors(self, u: int) -> list[tuple[int, float]]:
        return list(self._adjacency(u).items())

    def in_neighbors(self, u: int) -> list[int]:
        return list(self._incoming(u))

    def degree(self, u: int) -> int:
        return len(self._adjacency(u))

    def is_isolated(self, u: int) -> bool:
        return not self._adjacency(u) and not self._incoming(u)

    def nodes(self) -> Iterator[int]:
        return (u for u, adjacency in enumerate(self._out) if adjacency is not None)

    def edges(self) -> Iterator[tuple[int, int]]:
        """Every edge once; undirected edges come as ``(u, v)`` with ``v <= u``."""
        for u, v, _ in self.weighted_edges():
            yield u, v

    def weighted_edges(self) -> Iterator[tuple[int, int, float]]:
        for u, adjacency in enumerate(self._out):
            if adjacency is None:
                continue
            for v, w in adjacency.items():
                if self.directed or v <= u:
                    yield u, v, w

    def number_of_nodes(self) -> int:
        return self._node_count

    def number_of_edges(self) -> int:
        return self._edge_count

    def upper_node_id_bound(self) -> int:
        return len(self._out)

    def copy(self) -> Graph:
        result = Graph(0, self.weighted, self.directed)
        result._out = [None if a is None else dict(a) for a in self._out]
        result._in = (
            [None if a is None else dict(a) for a in self._in]
            if self.directed
            else result._out
        )
        result._node_count = self._node_count
        result._edge_count = self._edge_count
        return result

    def copy_nodes(self) -> Graph:
        """A graph with the same node ids and no edges."""
        result = Graph(self.upper_node_id_bound(), self.weighted, self.directed)
        for u, adjacency in enumerate(self._out):
            if adjacency is None:
                result._drop(u)
        return result

    def to_undirected(self) -> Graph:
        result = Graph(self.upper_node_id_bound(), self.weighted, False)
        for u, adjacency in enumerate(self._out):
            if adjacency is None:
                result._drop(u)
        for u, v, w in self.weighted_edges():
            if not result.has_edge(u, v):
                result.add_edge(u, v, w)
        return result

    def subgraph_from_nodes(self, nodes: Iterable[int]) -> Graph:
        """Induced subgraph on ``nodes``; node ids are kept."""
        keep = set(nodes)
        for u in keep:
            self._adjacency(u)
        result = self.copy_nodes()
        for u in list(result.nodes()):
            if u not in keep:
                result._drop(u)
        for u, v, w in self.weighted_edges():
            if u in keep and v in keep:
                result.add_edge(u, v, w)
        return result


class DirectedTree:
    """Rooted tree stored as a weighted digraph; the root has the largest id."""

    def __init__(self, graph: Graph):
        self.tree = Graph(graph.upper_node_id_bound(), weighted=True, directed=True)

    def root(self) -> int:
        return self.tree.upper_node_id_bound() - 1

    def parent(self, u: int) -> int | None:
        if u == self.root():
            return None
        parents = self.tree.in_neighbors(u)
        return parents[0] if parents else None

    def edge_weight_to_parent(self, u: int) -> float:
        parent = self.parent(u)
        return 0.0 if parent is None else self.tree.weight(parent, u)


class Algorithm(ABC):
    """Base for algorithms that compute once and then expose results."""

    def __init__(self) -> None:
        self.has_run = False

    @abstractmethod
    def run(self) -> None:
        """Compute the result; overriding methods finish by calling this."""
        self.has_run = True

    def assure_finished(self) -> None:
        if not self.has_run:
            raise RuntimeError("run() must be called before reading results")


def complement(graph: Graph) -> Graph:
    """Undirected complement on the same node ids."""
    result = Graph(graph.upper_node_id_bound())
    present = list(graph.nodes())
    for u in range(graph.upper_node_id_bound()):
        if not graph.has_node(u):
            result._drop(u)
    for i, u in enumerate(present):
        for v in present[i + 1:]:
            if not graph.has_edge(u, v) and not graph.has_edge(v, u):
                result.add_edge(u, v)
    return result


def connected_components(graph: Graph) -> list[list[int]]:
    """Components of an undirected graph, each listed by ascending node id."""
    if graph.directed:
        raise ValueError("connected components need an undirected graph")
    component: dict[int, int] = {}
    count = 0
    for start in graph.nodes():
        if start in component:
            continue
        component[start] = count
        queue = deque([start])
        while queue:
            u = queue.popleft()
            for v in graph.neighbors(u):
                if v not in component:
                    component[v] = count
                    queue.append(v)
        count += 1
    result: list[list[int]] = [[] for _ in range(count)]
    for u in graph.nodes():
        result[component[u]].append(u)
    return result


NodePredicate = Callable[[int], bool]