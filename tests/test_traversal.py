from koalagraph.graph import Graph
from koalagraph.traversal import PathMode, bfs, bfs_path, dfs_from, iter_paths


def path_graph(n):
    g = Graph(n)
    for u in range(n - 1):
        g.add_edge(u, u + 1)
    return g


def cycle(n):
    g = path_graph(n)
    g.add_edge(n - 1, 0)
    return g


def complete(n):
    g = Graph(n)
    for u in range(n):
        for v in range(u + 1, n):
            g.add_edge(u, v)
    return g


def is_induced_path(g, p):
    if len(set(p)) != len(p):
        return False
    for i in range(len(p)):
        for j in range(i + 1, len(p)):
            if g.has_edge(p[i], p[j]) != (j == i + 1):
                return False
    return True


def test_bfs_reachable():
    assert bfs(path_graph(5), 0, 4, lambda v: True) is True


def test_bfs_blocked_by_predicate():
    assert bfs(path_graph(5), 0, 4, lambda v: v != 2) is False


def test_bfs_target_always_allowed():
    assert bfs(path_graph(2), 0, 1, lambda v: False) is True


def test_bfs_path_on_path_graph():
    assert bfs_path(path_graph(5), 0, 4, lambda v: True) == [0, 1, 2, 3, 4]


def test_bfs_path_is_shortest_and_connected():
    g = cycle(6)
    p = bfs_path(g, 0, 3, lambda v: True)
    assert p[0] == 0 and p[-1] == 3
    assert len(p) == 4
    assert all(g.has_edge(a, b) for a, b in zip(p, p[1:]))


def test_bfs_path_unreachable():
    assert bfs_path(path_graph(5), 0, 4, lambda v: v != 2) == []


def test_bfs_path_to_self():
    assert bfs_path(path_graph(3), 1, 1, lambda v: True) == [1]


def test_dfs_from_visits_allowed_component():
    g = path_graph(5)
    visited = list(dfs_from(g, 0, lambda v: v != 3))
    assert visited[0] == 0
    assert set(visited) == {0, 1, 2}


def test_induced_paths_on_small_path():
    paths = list(iter_paths(path_graph(3), 3, PathMode.INDUCED_PATH))
    assert sorted(paths) == [[0, 1, 2], [2, 1, 0]]


def test_induced_paths_are_induced_and_distinct():
    g = cycle(6)
    paths = list(iter_paths(g, 4, PathMode.INDUCED_PATH))
    assert len(paths) > 0
    assert all(len(p) == 4 and is_induced_path(g, p) for p in paths)
    assert len({tuple(p) for p in paths}) == len(paths)


def test_no_induced_three_path_in_complete_graph():
    assert list(iter_paths(complete(4), 3, PathMode.INDUCED_PATH)) == []


def test_short_length_yields_nothing():
    assert list(iter_paths(path_graph(3), 1, PathMode.INDUCED_PATH)) == []
    assert list(iter_paths(Graph(0), 3, PathMode.INDUCED_PATH)) == []


def test_induced_cycle_found_in_c5():
    g = cycle(5)
    first = next(iter_paths(g, 5, PathMode.INDUCED_CYCLE))
    assert sorted(first) == list(range(5))
    assert g.has_edge(first[0], first[-1])


def test_no_induced_cycle_in_complete_graph():
    assert list(iter_paths(complete(5), 5, PathMode.INDUCED_CYCLE)) == []


def test_odd_hole_in_c7():
    g = cycle(7)
    holes = list(iter_paths(g, g.number_of_nodes(), PathMode.INDUCED_ODD_HOLE))
    assert len(holes) == 1
    assert sorted(holes[0]) == list(range(7))


def test_no_odd_hole_in_even_cycles():
    for n in (4, 6):
        g = cycle(n)
        assert list(iter_paths(g, g.number_of_nodes(), PathMode.INDUCED_ODD_HOLE)) == []


def test_odd_hole_with_pendant_node():
    g = cycle(5)
    extra = g.add_node()
    g.add_edge(0, extra)
    holes = list(iter_paths(g, g.number_of_nodes(), PathMode.INDUCED_ODD_HOLE))
    assert len(holes) == 1
    assert sorted(holes[0]) == list(range(5))