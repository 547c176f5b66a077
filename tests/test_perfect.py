import pytest

from koalagraph.graph import Graph
from koalagraph.perfect import (
    PerfectGraphRecognition,
    State,
    all_complete_vertices,
    auxiliary_components,
    contains_hole,
    contains_near_cleaner_odd_hole,
    contains_odd_hole,
    contains_t1,
    is_complete,
    is_path,
    is_t3,
)


def make_graph(n, edges):
    graph = Graph(n)
    for u, v in edges:
        graph.add_edge(u, v)
    return graph


def cycle(n):
    return make_graph(n, [(i, (i + 1) % n) for i in range(n)])


def path_graph(n):
    return make_graph(n, [(i, i + 1) for i in range(n - 1)])


def complete_graph(n):
    return make_graph(n, [(i, j) for i in range(n) for j in range(i + 1, n)])


def test_is_complete():
    graph = make_graph(4, [(0, 1), (0, 2), (1, 2), (2, 3)])
    assert is_complete(graph, [0, 1], 2)
    assert not is_complete(graph, [0, 1], 3)
    assert not is_complete(graph, [0, 2], 2)


def test_all_complete_vertices():
    graph = make_graph(5, [(0, 2), (1, 2), (0, 3), (1, 3), (0, 4)])
    assert all_complete_vertices(graph, [0, 1]) == [2, 3]


def test_auxiliary_components_split_by_adjacency():
    # 2 and 3 are complete to {0, 1}; adjacent to each other, so separate anticomponents
    graph = make_graph(4, [(0, 2), (1, 2), (0, 3), (1, 3), (2, 3)])
    components = sorted(auxiliary_components(graph, [0, 1]))
    assert components == [[2], [3]]
    graph.remove_edge(2, 3)
    assert auxiliary_components(graph, [0, 1]) == [[2, 3]]


def test_is_path():
    graph = path_graph(4)
    assert is_path(graph, [0, 1, 2, 3])
    graph.add_edge(0, 3)
    assert not is_path(graph, [0, 1, 2, 3])
    assert not is_path(graph, [0, 2])


def test_holes():
    assert contains_hole(cycle(5), 5)
    assert not contains_hole(cycle(6), 5)
    assert contains_hole(cycle(6), 6)
    assert not contains_hole(complete_graph(5), 3)


def test_odd_holes():
    assert contains_odd_hole(cycle(5))
    assert contains_odd_hole(cycle(7))
    assert not contains_odd_hole(cycle(6))
    assert not contains_odd_hole(complete_graph(5))


def test_t1():
    assert contains_t1(cycle(5))
    assert not contains_t1(path_graph(6))


def test_is_t3_rejects_wrong_size():
    graph = cycle(6)
    assert not is_t3(graph, [0, 1, 2], [0, 1], [3])
    assert not is_t3(graph, [0, 1, 2, 3, 4, 5], [], [3])


def test_results_need_run():
    recognition = PerfectGraphRecognition(cycle(5))
    with pytest.raises(RuntimeError):
        recognition.is_perfect()


def test_small_graph_is_perfect():
    recognition = PerfectGraphRecognition(cycle(4))
    recognition.run()
    assert recognition.state() is State.PERFECT


def test_five_cycle_has_t1():
    recognition = PerfectGraphRecognition(cycle(5))
    recognition.run()
    assert recognition.state() is State.HAS_T1
    assert not recognition.is_perfect()
    recognition.check()


@pytest.mark.parametrize(
    "graph",
    [complete_graph(5), path_graph(6), cycle(6), Graph(5)],
)
def test_perfect_graphs(graph):
    recognition = PerfectGraphRecognition(graph)
    recognition.run()
    assert recognition.is_perfect()
    recognition.check()


def test_seven_cycle_is_not_perfect():
    recognition = PerfectGraphRecognition(cycle(7))
    recognition.run()
    assert not recognition.is_perfect()
    recognition.check()


def test_near_cleaner_limit():
    graph = make_graph(512, [(0, 1)])
    with pytest.raises(ValueError):
        contains_near_cleaner_odd_hole(graph)


def test_no_near_cleaner_odd_hole_in_bipartite():
    assert not contains_near_cleaner_odd_hole(cycle(6))