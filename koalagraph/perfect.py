"""Recognition of perfect (Berge) graphs.

The procedure looks for simple forbidden configurations (jewels, pyramids and
three further structures) in the graph and its complement. It then searches
for odd holes that have a near-cleaner.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence
from itertools import combinations

from koalagraph.graph import Algorithm, Graph, complement, connected_components
from koalagraph.prohibited import contains_jewel, contains_pyramid
from koalagraph.traversal import PathMode, bfs, dfs_from, iter_paths

MAX_NODES = 512

_T3_EDGES = ((0, 1), (0, 3), (1, 2), (2, 3), (2, 4), (3, 5))
_T3_NON_EDGES = ((0, 2), (0, 4), (0, 5), (1, 3), (1, 4), (1, 5), (3, 4))


class State(enum.Enum):
    """Outcome of the recognition."""

    UNKNOWN = enum.auto()
    PERFECT = enum.auto()
    HAS_JEWEL = enum.auto()
    HAS_PYRAMID = enum.auto()
    HAS_T1 = enum.auto()
    HAS_T2 = enum.auto()
    HAS_T3 = enum.auto()
    HAS_NEAR_CLEANER_ODD_HOLE = enum.auto()


def is_complete(graph: Graph, nodes: Sequence[int], v: int) -> bool:
    """Whether ``v`` lies outside ``nodes`` and is adjacent to all of them."""
    return all(v != x and graph.has_edge(v, x) for x in nodes)


def all_complete_vertices(graph: Graph, nodes: Sequence[int]) -> list[int]:
    """Every vertex that is complete to ``nodes``."""
    nodes = list(nodes)
    return [v for v in graph.nodes() if is_complete(graph, nodes, v)]


def auxiliary_components(graph: Graph, nodes: Sequence[int]) -> list[list[int]]:
    """Anticomponents of the set of vertices complete to ``nodes``."""
    complete = all_complete_vertices(graph, nodes)
    auxiliary = complement(graph).subgraph_from_nodes(complete)
    return connected_components(auxiliary)


def is_path(graph: Graph, path: Sequence[int]) -> bool:
    """Whether consecutive vertices are adjacent and no other pair is."""
    path = list(path)
    for i in range(len(path) - 1):
        if not graph.has_edge(path[i], path[i + 1]):
            return False
        if any(graph.has_edge(path[i], path[j]) for j in range(i + 2, len(path))):
            return False
    return True


def contains_odd_hole(graph: Graph) -> bool:
    """Whether the graph has an induced cycle of odd length at least five."""
    if graph.number_of_nodes() == 0:
        return False
    paths = iter_paths(graph, graph.number_of_nodes(), PathMode.INDUCED_ODD_HOLE)
    return next(iter(paths), None) is not None


def contains_hole(graph: Graph, length: int) -> bool:
    """Whether the graph has an induced cycle on exactly ``length`` vertices."""
    if length <= 3 or graph.number_of_nodes() == 0:
        return False
    paths = iter_paths(graph, length, PathMode.INDUCED_CYCLE)
    return next(iter(paths), None) is not None


def contains_t1(graph: Graph) -> bool:
    """Whether the graph has a hole of length five."""
    return contains_hole(graph, 5)


def contains_t2(graph: Graph) -> bool:
    """Whether the graph contains a configuration of type T2."""
    for v1 in graph.nodes():
        for v2 in graph.neighbors(v1):
            for v3 in graph.neighbors(v2):
                if v3 == v1:
                    continue
                for v4 in graph.neighbors(v3):
                    if v4 in (v1, v2):
                        continue
                    if not is_path(graph, [v1, v2, v3, v4]):
                        continue
                    for anticomponent in auxiliary_components(graph, [v1, v2, v4]):
                        if not anticomponent:
                            continue

                        def allowed(v: int, x=anticomponent, v2=v2, v3=v3) -> bool:
                            if v in (v2, v3):
                                return False
                            if graph.has_edge(v, v2) or graph.has_edge(v, v3):
                                return False
                            return not is_complete(graph, x, v)

                        if bfs(graph, v1, v4, allowed):
                            return True
    return False


def is_t3(
    graph: Graph,
    vertices: Sequence[int],
    path: Sequence[int],
    anticomponent: Sequence[int],
) -> bool:
    """Whether the six vertices, the path and the anticomponent form a T3."""
    v, p, x = list(vertices), list(path), list(anticomponent)
    if len(v) != 6 or not p or not x or len(set(v)) != 6:
        return False
    if any(not graph.has_edge(v[a], v[b]) for a, b in _T3_EDGES):
        return False
    if any(graph.has_edge(v[a], v[b]) for a, b in _T3_NON_EDGES):
        return False
    target = sorted(x)
    if not any(sorted(c) == target for c in auxiliary_components(graph, [v[0], v[1], v[4]])):
        return False
    if is_complete(graph, x, v[2]) or is_complete(graph, x, v[3]):
        return False
    if (p[0], p[-1]) not in ((v[4], v[5]), (v[5], v[4])):
        return False
    if not is_path(graph, p):
        return False
    for inner in p[1:-1]:
        if inner in v[:4] or inner in x:
            return False
        if is_complete(graph, x, inner):
            return False
        if graph.has_edge(v[0], inner) or graph.has_edge(v[1], inner):
            return False
    return not graph.has_edge(v[4], v[5]) or not is_complete(graph, x, v[5])


def contains_t3(graph: Graph) -> bool:
    """Whether the graph contains a configuration of type T3."""
    for v1 in graph.nodes():
        for v2 in graph.neighbors(v1):
            for v5 in graph.nodes():
                if v5 in (v1, v2) or graph.has_edge(v5, v1) or graph.has_edge(v5, v2):
                    continue
                for x in auxiliary_components(graph, [v1, v2, v5]):
                    if not x:
                        continue
                    if _t3_from(graph, v1, v2, v5, x):
                        return True
    return False


def _t3_from(graph: Graph, v1: int, v2: int, v5: int, x: list[int]) -> bool:
    def allowed(v: int) -> bool:
        return (
            not graph.has_edge(v1, v)
            and not graph.has_edge(v2, v)
            and not is_complete(graph, x, v)
        )

    reached = set(dfs_from(graph, v5, allowed))
    extended = set(reached)
    for f in reached:
        for v in graph.neighbors(f):
            if v in extended or not is_complete(graph, x, v):
                continue
            if not any(graph.has_edge(v, w) for w in (v1, v2, v5)):
                extended.add(v)
    for v4 in graph.neighbors(v1):
        if graph.has_edge(v4, v2) or graph.has_edge(v4, v5):
            continue
        if not any(graph.has_edge(v4, f) for f in extended):
            continue
        if all(graph.has_edge(v4, y) for y in x):
            continue
        for v3 in graph.neighbors(v2):
            if (
                not graph.has_edge(v3, v4)
                or not graph.has_edge(v3, v5)
                or graph.has_edge(v3, v1)
            ):
                continue
            if any(not graph.has_edge(v3, y) for y in x):
                return True
    return False


def _bitset(bound: int, positions) -> int:
    if bound >= MAX_NODES:
        raise ValueError(
            f"algorithm cannot be run for graphs on more than {MAX_NODES} vertices"
        )
    mask = 0
    for i in positions:
        mask |= 1 << i
    return mask


def _shortest_paths(graph: Graph, usable) -> tuple[list[list[float]], list[list[int | None]]]:
    """Distances through usable intermediate nodes, with the penultimate node."""
    n = graph.upper_node_id_bound()
    dist = [[math.inf] * n for _ in range(n)]
    penultimate: list[list[int | None]] = [[None] * n for _ in range(n)]
    nodes = list(graph.nodes())
    for i in nodes:
        dist[i][i] = 0
    for i, j in graph.edges():
        dist[i][j] = dist[j][i] = 1
        penultimate[i][j] = i
        penultimate[j][i] = j
    for k in nodes:
        if not usable(k):
            continue
        row_k = dist[k]
        for i in nodes:
            if i == k:
                continue
            row_i = dist[i]
            through = row_i[k]
            if through == math.inf:
                continue
            for j in nodes:
                if j != i and j != k and row_i[j] > through + row_k[j]:
                    row_i[j] = through + row_k[j]
                    penultimate[i][j] = penultimate[k][j]
    return dist, penultimate


def _odd_hole_with_near_cleaner(
    graph: Graph, cleaner: int, triples: list[list[int]]
) -> bool:
    dist, penultimate = _shortest_paths(graph, lambda v: not (cleaner >> v) & 1)
    for y1 in graph.nodes():
        if (cleaner >> y1) & 1:
            continue
        for triple in triples:
            if y1 in triple[:3]:
                continue
            x1, x3, x2 = triple[0], triple[1], triple[2]
            if dist[x1][y1] == math.inf or dist[x2][y1] == math.inf:
                continue
            y2 = penultimate[x2][y1]
            n = dist[x2][y1]
            if (
                dist[x1][y1] + 1 != n
                or dist[x1][y2] != n
                or dist[x3][y1] < n
                or dist[x3][y2] < n
            ):
                continue
            return True
    return False


def _is_relevant_triple(graph: Graph, a: int, b: int, c: int) -> bool:
    return not (
        a == b
        or graph.has_edge(a, b)
        or (graph.has_edge(a, c) and graph.has_edge(b, c))
    )


def _x_for_relevant_triple(graph: Graph, a: int, b: int, c: int) -> int:
    anticomponents = auxiliary_components(graph, [a, b])

    def has_non_neighbour_of_c(component: list[int]) -> bool:
        return any(not graph.has_edge(c, v) for v in component)

    threshold = 0
    for component in anticomponents:
        if len(component) > threshold and has_non_neighbour_of_c(component):
            threshold = len(component)
    large = [v for component in anticomponents if len(component) > threshold for v in component]
    first = next((comp for comp in anticomponents if has_non_neighbour_of_c(comp)), [])
    complete = all_complete_vertices(graph, [*first, c, *large])
    bound = graph.upper_node_id_bound()
    return _bitset(bound, large) | _bitset(bound, complete)


def _possible_near_cleaners(graph: Graph) -> set[int]:
    bound = graph.upper_node_id_bound()
    edge_sets = [
        _bitset(bound, all_complete_vertices(graph, [u, v])) for u, v in graph.edges()
    ]
    triple_sets = []
    nodes = list(graph.nodes())
    for a, b in combinations(nodes, 2):
        if graph.has_edge(a, b):
            continue
        for c in nodes:
            if _is_relevant_triple(graph, a, b, c):
                triple_sets.append(_x_for_relevant_triple(graph, a, b, c))
    return {x | n for n in edge_sets for x in triple_sets}


def contains_near_cleaner_odd_hole(graph: Graph) -> bool:
    """Whether some candidate near-cleaner exposes an odd hole.

    Raises ValueError for graphs with node ids reaching ``MAX_NODES``.
    """
    triples = (
        [list(p) for p in iter_paths(graph, 3, PathMode.INDUCED_PATH)]
        if graph.number_of_nodes()
        else []
    )
    return any(
        _odd_hole_with_near_cleaner(graph, cleaner, triples)
        for cleaner in _possible_near_cleaners(graph)
    )


def _simple_prohibited(graph: Graph) -> State:
    if contains_jewel(graph):
        return State.HAS_JEWEL
    if contains_pyramid(graph):
        return State.HAS_PYRAMID
    if contains_t1(graph):
        return State.HAS_T1
    if contains_t2(graph):
        return State.HAS_T2
    if contains_t3(graph):
        return State.HAS_T3
    return State.UNKNOWN


class PerfectGraphRecognition(Algorithm):
    """Decides whether an undirected graph is perfect."""

    def __init__(self, graph: Graph):
        super().__init__()
        self._graph = graph
        self._state = State.UNKNOWN

    def run(self) -> None:
        self._state = self._recognize()
        super().run()

    def _recognize(self) -> State:
        graph = self._graph
        if graph.number_of_nodes() <= 4:
            return State.PERFECT
        state = _simple_prohibited(graph)
        if state is not State.UNKNOWN:
            return state
        graph_complement = complement(graph)
        state = _simple_prohibited(graph_complement)
        if state is not State.UNKNOWN:
            return state
        if contains_near_cleaner_odd_hole(graph):
            return State.HAS_NEAR_CLEANER_ODD_HOLE
        if contains_near_cleaner_odd_hole(graph_complement):
            return State.HAS_NEAR_CLEANER_ODD_HOLE
        return State.PERFECT

    def is_perfect(self) -> bool:
        self.assure_finished()
        return self._state is State.PERFECT

    def state(self) -> State:
        self.assure_finished()
        return self._state

    def check(self) -> None:
        """Raise ValueError if a direct odd-hole search disagrees with the result."""
        self.assure_finished()
        expected = not contains_odd_hole(self._graph) and not contains_odd_hole(
            complement(self._graph)
        )
        if expected != self.is_perfect():
            raise ValueError("recognition result disagrees with odd hole search")