"""Breadth- and depth-first search and enumeration of induced paths and holes."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable, Iterator

from koalagraph.graph import Graph


class PathMode(enum.Enum):
    INDUCED_PATH = enum.auto()
    INDUCED_CYCLE = enum.auto()
    INDUCED_ODD_HOLE = enum.auto()


def bfs(graph: Graph, source: int, target: int, predicate: Callable[[int], bool]) -> bool:
    """Whether ``target`` is reachable through nodes satisfying ``predicate``."""
    marked = {source}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        if u == target:
            return True
        for v in graph.neighbors(u):
            if v not in marked and (predicate(v) or v == target):
                marked.add(v)
                queue.append(v)
    return False


def bfs_path(
    graph: Graph, source: int, target: int, predicate: Callable[[int], bool]
) -> list[int]:
    """Shortest path from ``source`` to ``target`` through allowed nodes, or []."""
    parent = {source: source}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        if u == target:
            break
        for v in graph.neighbors(u):
            if v not in parent and (predicate(v) or v == target):
                parent[v] = u
                queue.append(v)
    if target not in parent:
        return []
    path = [target]
    v = target
    while parent[v] != v:
        v = parent[v]
        path.append(v)
    path.reverse()
    return path


def dfs_from(graph: Graph, source: int, predicate: Callable[[int], bool]) -> Iterator[int]:
    """Yield nodes reachable from ``source`` through nodes satisfying ``predicate``."""
    marked = {source}
    stack = [source]
    while stack:
        u = stack.pop()
        yield u
        for v in graph.neighbors(u):
            if v not in marked and predicate(v):
                marked.add(v)
                stack.append(v)


def _check_last_vertex(graph: Graph, path: list, mode: PathMode) -> bool:
    if mode is PathMode.INDUCED_CYCLE:
        if len(path) <= 2:
            return False
    elif mode is PathMode.INDUCED_ODD_HOLE:
        if len(path) <= 3 or len(path) % 2 == 0:
            return False
    elif len(path) <= 1:
        return False
    last = path[-1]
    if last is None or len(set(path)) < len(path):
        return False
    previous, first = path[-2], path[0]
    closes = mode in (PathMode.INDUCED_CYCLE, PathMode.INDUCED_ODD_HOLE)
    for v in path:
        if v == previous:
            if not graph.has_edge(previous, last):
                return False
        elif v == first:
            if graph.has_edge(v, last) != closes:
                return False
        elif v != last and graph.has_edge(v, last):
            return False
    return True


def iter_paths(graph: Graph, length: int, mode: PathMode = PathMode.INDUCED_PATH) -> Iterator[list[int]]:
    """Yield induced paths or cycles on ``length`` nodes, or odd holes.

    In odd-hole mode ``length`` bounds the hole size and only the first odd
    hole found is yielded.
    """
    length = min(length, graph.number_of_nodes())
    if length < 2:
        return
    order = list(graph.nodes())
    next_node = dict(zip(order, order[1:]))
    adjacency = {u: graph.neighbors(u) for u in order}
    position = {u: {v: i for i, v in enumerate(vs)} for u, vs in adjacency.items()}

    def first_neighbor(u):
        return adjacency[u][0] if adjacency[u] else None

    def next_neighbor(u, v):
        i = position[u][v] + 1
        return adjacency[u][i] if i < len(adjacency[u]) else None

    def check(candidate_mode):
        return _check_last_vertex(graph, path, candidate_mode)

    def advance() -> bool:
        while True:
            if path[-1] is None:
                path.pop()
                if len(path) == 1:
                    following = next_node.get(path[0])
                    if following is None:
                        return False
                    path[-1] = following
                else:
                    path[-1] = next_neighbor(path[-2], path[-1])
                continue
            if len(path) < length:
                if len(path) > 1:
                    while path[-1] is not None:
                        if mode is PathMode.INDUCED_PATH:
                            if check(PathMode.INDUCED_PATH):
                                break
                        elif mode is PathMode.INDUCED_CYCLE:
                            if path[0] < path[-1] and check(PathMode.INDUCED_PATH):
                                break
                        else:
                            if path[0] < path[-1] and check(PathMode.INDUCED_ODD_HOLE):
                                return True
                            if path[0] < path[-1] and check(PathMode.INDUCED_PATH):
                                break
                        path[-1] = next_neighbor(path[-2], path[-1])
                    if path[-1] is None:
                        continue
                path.append(first_neighbor(path[-1]))
                if (mode is PathMode.INDUCED_ODD_HOLE or len(path) == length) and check(mode):
                    return True
                continue
            while True:
                path[-1] = next_neighbor(path[-2], path[-1])
                if path[-1] is None or check(mode):
                    break
            if path[-1] is not None:
                return True

    path: list = [order[0]]
    while advance():
        yield list(path)
        if mode is PathMode.INDUCED_ODD_HOLE:
            return