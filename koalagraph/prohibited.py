"""Detection of jewels and pyramids, two configurations forbidden in Berge graphs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from itertools import combinations, product

from koalagraph.graph import Graph
from koalagraph.traversal import PathMode, bfs, bfs_path, iter_paths

_PAIRS = ((0, 1), (1, 2), (2, 0))


def is_jewel(graph: Graph, vertices: Sequence[int]) -> bool:
    """Whether the five vertices, with a suitable connecting path, form a jewel."""
    v = list(vertices)
    if len(v) != 5 or len(set(v)) != 5:
        return False
    if not all(graph.has_edge(v[i], v[(i + 1) % 5]) for i in range(5)):
        return False
    if any(graph.has_edge(v[i], v[j]) for i, j in ((0, 2), (1, 3), (0, 3))):
        return False
    blocked = {v[1], v[2], v[4]}

    def far_from_blocked(x: int) -> bool:
        return x not in blocked and blocked.isdisjoint(graph.neighbors(x))

    return bfs(graph, v[0], v[3], far_from_blocked)


def contains_jewel(graph: Graph) -> bool:
    """Whether the graph contains a jewel."""
    for path in iter_paths(graph, 4, PathMode.INDUCED_PATH):
        common = set(graph.neighbors(path[0])) & set(graph.neighbors(path[-1]))
        if any(is_jewel(graph, path + [v5]) for v5 in common):
            return True
    return False


def generate_tuples(size: int, maximum: int) -> list[list[int]]:
    """All tuples over ``range(maximum)``, the first position changing fastest."""
    if maximum <= 1:
        return [[0] * size]
    return [list(reversed(t)) for t in product(range(maximum), repeat=size)]


def _check_prerequisites(graph: Graph, a: int, b: Sequence[int], s: Sequence[int]) -> bool:
    for i in range(3):
        for j in range(3):
            if i == j:
                continue
            if b[i] == s[j]:
                return False
            if (b[j] != s[j] and graph.has_edge(b[i], s[j])) or graph.has_edge(s[i], s[j]):
                return False
    apex_adjacent = False
    for i in range(3):
        if not graph.has_edge(a, s[i]):
            return False
        if graph.has_edge(a, b[i]):
            if apex_adjacent or b[i] != s[i]:
                return False
            apex_adjacent = True
    return True


def _all_triangles(graph: Graph) -> list[tuple[int, int, int]]:
    return [
        (i, j, k)
        for i in graph.nodes()
        for j in graph.neighbors(i)
        for k in graph.neighbors(j)
        if i < j < k and graph.has_edge(i, k)
    ]


def _all_empty_star_triangles(graph: Graph) -> list[tuple[int, tuple[int, int, int]]]:
    out = []
    for a in graph.nodes():
        around = graph.neighbors(a)
        for s1 in around:
            for s2 in around:
                if s2 == s1 or graph.has_edge(s1, s2):
                    continue
                for s3 in around:
                    if s3 in (s1, s2) or graph.has_edge(s1, s3) or graph.has_edge(s2, s3):
                        continue
                    out.append((a, (s1, s2, s3)))
    return out


def _touches_others(graph: Graph, b, s, i: int, v: int) -> bool:
    return any(
        graph.has_edge(s[j], v) or graph.has_edge(v, b[j]) for j in range(3) if j != i
    )


def _no_edges_between(graph: Graph, first: list[int], second: list[int]) -> bool:
    neighbourhood: set[int] = set()
    for x in first:
        neighbourhood.update(graph.neighbors(x))
    return neighbourhood.isdisjoint(second)


def _p_paths(graph: Graph, b, s, marked: set[int]) -> list[dict[int, list[int]]]:
    """For each i and node m, a path from s[i] through m to b[i], when one fits."""
    paths: list[dict[int, list[int]]] = [{}, {}, {}]
    for i in range(3):
        if s[i] == b[i]:
            paths[i][b[i]] = [b[i]]
            continue
        for m in graph.nodes():

            def allowed(v: int, i: int = i, m: int = m) -> bool:
                if v == s[i] or v == m:
                    return True
                return v not in marked and not _touches_others(graph, b, s, i, v)

            head = bfs_path(graph, s[i], m, allowed)
            tail = bfs_path(graph, m, b[i], allowed)
            if not head or not tail:
                continue
            if m not in marked and _touches_others(graph, b, s, i, m):
                continue
            inner_head, inner_tail = head[:-1], tail[1:]
            if not set(inner_head).isdisjoint(inner_tail):
                continue
            if not _no_edges_between(graph, inner_head, inner_tail):
                continue
            paths[i][m] = head + inner_tail
    return paths


def _good_pairs(
    graph: Graph, first: dict[int, list[int]], second: dict[int, list[int]], marked: set[int]
) -> set[tuple[int, int]]:
    good = set()
    for m1, path1 in first.items():
        color: set[int] = set()
        for x in path1:
            if x in marked:
                continue
            color.add(x)
            color.update(graph.neighbors(x))
        for m2, path2 in second.items():
            if color.isdisjoint(path2):
                good.add((m1, m2))
    return good


def _has_good_triple(good: list[set[tuple[int, int]]], limit: int) -> bool:
    following = defaultdict(set)
    for x, y in good[1]:
        following[x].add(y)
    for t0, t1 in good[0]:
        if t0 >= limit or t1 >= limit:
            continue
        for t2 in following.get(t1, ()):
            if t2 < limit and (t2, t0) in good[2]:
                return True
    return False


def is_pyramid(graph: Graph, a: int, b: Sequence[int], paths: Sequence[Sequence[int]]) -> bool:
    """Whether apex ``a``, triangle ``b`` and the three paths form a pyramid."""
    b = list(b)
    paths = [list(p) for p in paths]
    if len(b) != 3 or len(paths) != 3 or any(not p for p in paths):
        return False
    for i, j in combinations(range(3), 2):
        if b[i] == b[j] or not graph.has_edge(b[i], b[j]):
            return False
        if paths[i][0] == paths[j][0] or graph.has_edge(paths[i][0], paths[j][0]):
            return False
    for i in range(3):
        if not graph.has_edge(a, paths[i][0]) or paths[i][-1] != b[i]:
            return False
    for path in paths:
        if any(not graph.has_edge(x, y) for x, y in zip(path, path[1:])):
            return False
    for i, j in combinations(range(3), 2):
        edges = sum(1 for x in paths[i] for y in paths[j] if graph.has_edge(x, y))
        if edges != 1:
            return False
    return sum(1 for v in b if graph.has_edge(a, v)) <= 1


def contains_pyramid(graph: Graph) -> bool:
    """Whether the graph contains a pyramid."""
    triangles = _all_triangles(graph)
    if not triangles:
        return False
    stars = _all_empty_star_triangles(graph)
    limit = graph.number_of_nodes()
    for b in triangles:
        for a, s in stars:
            if not _check_prerequisites(graph, a, b, s):
                continue
            marked = set(s) | set(b)
            paths = _p_paths(graph, b, s, marked)
            good = [_good_pairs(graph, paths[u], paths[v], marked) for u, v in _PAIRS]
            if _has_good_triple(good, limit):
                return True
    return False