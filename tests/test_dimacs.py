import pytest

from koalagraph.dimacs import (
    read_dimacs,
    read_dimacs_all,
    read_dimacs_binary,
    write_dimacs,
    write_dimacs_binary,
)
from koalagraph.graph import Graph


def _undirected_edges(graph):
    return {frozenset((u, v)) for u, v in graph.edges()}


def _sample_graph():
    graph = Graph(6)
    for u, v in [(0, 1), (1, 2), (2, 3), (3, 0), (4, 5), (0, 4)]:
        graph.add_edge(u, v)
    return graph


def test_write_dimacs_exact_text(tmp_path):
    graph = Graph(3)
    graph.add_edge(0, 1)
    graph.add_edge(1, 2)
    path = tmp_path / "g.col"
    write_dimacs(graph, path)
    assert path.read_text() == "p edge 3 2\ne 2 1\ne 3 2\n"


def test_write_dimacs_directed_uses_arcs(tmp_path):
    graph = Graph(2, directed=True)
    graph.add_edge(0, 1)
    path = tmp_path / "g.col"
    write_dimacs(graph, path)
    assert path.read_text().splitlines()[1] == "a 1 2"


def test_dimacs_round_trip(tmp_path):
    graph = _sample_graph()
    path = tmp_path / "g.col"
    write_dimacs(graph, path)
    result = read_dimacs(path)
    assert result.number_of_nodes() == graph.number_of_nodes()
    assert _undirected_edges(result) == _undirected_edges(graph)


def test_read_comments_and_blank_lines(tmp_path):
    path = tmp_path / "g.col"
    path.write_text("c a comment\n\np edge 3 1\nc another\ne 1 3\n")
    graph = read_dimacs(path)
    assert graph.has_edge(0, 2)
    assert graph.number_of_edges() == 1
    assert not graph.directed


def test_read_flow_network_with_terminals(tmp_path):
    path = tmp_path / "flow.max"
    path.write_text("p max 3 2\nn 1 s\nn 3 t\na 1 2 5\na 2 3 4\n")
    graph, source, sink = read_dimacs_all(path)
    assert (source, sink) == (0, 2)
    assert graph.directed and graph.weighted
    assert graph.weight(0, 1) == 5.0
    assert graph.weight(1, 2) == 4.0
    assert graph.has_edge(1, 0)
    assert graph.weight(1, 0) == 0.0


def test_repeated_arc_accumulates_weight(tmp_path):
    path = tmp_path / "flow.max"
    path.write_text("p max 2 2\na 1 2 5\na 1 2 4\n")
    graph = read_dimacs(path)
    assert graph.weight(0, 1) == 9.0


def test_terminals_missing_are_none(tmp_path):
    path = tmp_path / "g.col"
    path.write_text("p edge 2 1\ne 1 2\n")
    _, source, sink = read_dimacs_all(path)
    assert source is None and sink is None


def test_edge_line_makes_flow_graph_undirected(tmp_path):
    path = tmp_path / "flow.sp"
    path.write_text("p sp 3 2\na 1 2 3\ne 2 3 7\n")
    graph = read_dimacs(path)
    assert not graph.directed
    assert graph.weight(2, 1) == 7.0
    assert graph.weight(1, 0) == 3.0


def test_unknown_label_raises(tmp_path):
    path = tmp_path / "g.max"
    path.write_text("p max 2 0\nn 1 x\n")
    with pytest.raises(ValueError):
        read_dimacs_all(path)


def test_unknown_line_type_raises(tmp_path):
    path = tmp_path / "g.col"
    path.write_text("p edge 2 0\nz 1 2\n")
    with pytest.raises(ValueError):
        read_dimacs(path)


@pytest.mark.parametrize("fmt", ["min", "mat"])
def test_unsupported_format_raises(tmp_path, fmt):
    path = tmp_path / "g.txt"
    path.write_text(f"p {fmt} 2 0\n")
    with pytest.raises(ValueError):
        read_dimacs(path)


def test_edge_before_problem_line_raises(tmp_path):
    path = tmp_path / "g.col"
    path.write_text("e 1 2\n")
    with pytest.raises(ValueError):
        read_dimacs(path)


def test_write_binary_exact_bytes(tmp_path):
    graph = Graph(3)
    graph.add_edge(0, 1)
    graph.add_edge(0, 2)
    graph.add_edge(1, 2)
    path = tmp_path / "g.bin"
    write_dimacs_binary(graph, path)
    assert path.read_bytes() == b"11\np edge 3 3\n\x00\x80\xc0"


def test_binary_round_trip_with_many_nodes(tmp_path):
    graph = Graph(20)
    for u in range(20):
        graph.add_edge(u, (u + 1) % 20)
        graph.add_edge(u, (u * 7 + 3) % 20)
    path = tmp_path / "g.bin"
    write_dimacs_binary(graph, path)
    result = read_dimacs_binary(path)
    assert result.number_of_nodes() == 20
    assert _undirected_edges(result) == _undirected_edges(graph)


def test_binary_round_trip_keeps_loop(tmp_path):
    graph = Graph(2)
    graph.add_edge(1, 1)
    graph.add_edge(0, 1)
    path = tmp_path / "g.bin"
    write_dimacs_binary(graph, path)
    result = read_dimacs_binary(path)
    assert result.has_edge(1, 1)
    assert _undirected_edges(result) == _undirected_edges(graph)


def test_binary_bad_preamble_raises(tmp_path):
    path = tmp_path / "g.bin"
    path.write_bytes(b"4\nq 1\n")
    with pytest.raises(ValueError):
        read_dimacs_binary(path)


def test_binary_truncated_body_raises(tmp_path):
    path = tmp_path / "g.bin"
    path.write_bytes(b"11\np edge 3 0\n\x00")
    with pytest.raises(ValueError):
        read_dimacs_binary(path)