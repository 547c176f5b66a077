"""Readers and writers for the DIMACS text and binary graph formats."""

from __future__ import annotations

import os

from koalagraph.graph import Graph

_FLOW_FORMATS = frozenset({"max", "sp"})
_UNSUPPORTED_FORMATS = frozenset({"min", "mat"})
_MASKS = tuple(0x80 >> i for i in range(8))


def _fields(tokens: list[str], count: int, line_no: int) -> list[str]:
    if len(tokens) < count:
        raise ValueError(f"line {line_no}: expected {count} fields, got {len(tokens)}")
    return tokens[:count]


def _create_graph(fmt: str) -> Graph:
    """Empty graph for the problem format; other names are read as plain edge lists."""
    if fmt in _UNSUPPORTED_FORMATS:
        raise ValueError(f"format {fmt!r} not supported")
    if fmt in _FLOW_FORMATS:
        return Graph(0, weighted=True, directed=True)
    return Graph()


def _read_edge(graph: Graph, fmt: str, tokens: list[str], line_no: int) -> None:
    if fmt in _FLOW_FORMATS:
        u, v, w = _fields(tokens, 3, line_no)
        u, v = int(u) - 1, int(v) - 1
        graph.increase_weight(u, v, float(w))
        graph.increase_weight(v, u, 0.0)
    else:
        u, v = _fields(tokens, 2, line_no)
        graph.add_edge(int(u) - 1, int(v) - 1)


def read_dimacs_all(path: str | os.PathLike) -> tuple[Graph, int | None, int | None]:
    """Read a DIMACS file; return the graph with its source and sink, if labelled.

    Node ids in the file are 1-based and become 0-based in the graph.
    """
    graph: Graph | None = None
    fmt: str | None = None
    source: int | None = None
    sink: int | None = None
    with open(path, encoding="ascii") as handle:
        for line_no, line in enumerate(handle, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            command, tokens = stripped[0], stripped[1:].split()
            if command == "c":
                continue
            if command == "p":
                fmt, nodes, _ = _fields(tokens, 3, line_no)
                graph = _create_graph(fmt)
                graph.add_nodes(int(nodes))
            elif command in ("a", "e"):
                if graph is None or fmt is None:
                    raise ValueError(f"line {line_no}: edge before the problem line")
                if command == "e" and graph.directed:
                    graph = graph.to_undirected()
                _read_edge(graph, fmt, tokens, line_no)
            elif command == "n":
                node, label = _fields(tokens, 2, line_no)
                if label == "s":
                    source = int(node) - 1
                elif label == "t":
                    sink = int(node) - 1
                else:
                    raise ValueError(f"line {line_no}: unknown label {label!r}")
            else:
                raise ValueError(f"line {line_no}: unknown line type {command!r}")
    if graph is None:
        graph = Graph()
    return graph, source, sink


def read_dimacs(path: str | os.PathLike) -> Graph:
    """Read the graph stored in a DIMACS file."""
    return read_dimacs_all(path)[0]


def write_dimacs(graph: Graph, path: str | os.PathLike) -> None:
    """Write the graph in DIMACS edge format with 1-based node ids."""
    edge_type = "a" if graph.directed else "e"
    with open(path, "w", encoding="ascii") as handle:
        handle.write(f"p edge {graph.number_of_nodes()} {graph.number_of_edges()}\n")
        for u, v in graph.edges():
            handle.write(f"{edge_type} {u + 1} {v + 1}\n")


def _parse_binary_preamble(preamble: str, graph: Graph) -> int:
    nodes = 0
    for line_no, line in enumerate(preamble.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        command, tokens = stripped[0], stripped[1:].split()
        if command == "p":
            _, count, _ = _fields(tokens, 3, line_no)
            nodes = int(count)
            graph.add_nodes(nodes)
        elif command != "c":
            raise ValueError(f"preamble line {line_no}: unknown line type {command!r}")
    return nodes


def read_dimacs_binary(path: str | os.PathLike) -> Graph:
    """Read an undirected graph from a DIMACS binary file."""
    with open(path, "rb") as handle:
        data = handle.read()
    header, newline, rest = data.partition(b"\n")
    header_fields = header.split()
    if not newline or not header_fields:
        raise ValueError("missing preamble size")
    size = int(header_fields[0])
    if len(rest) < size:
        raise ValueError("preamble is truncated")
    graph = Graph()
    nodes = _parse_binary_preamble(rest[:size].decode("ascii"), graph)
    body = memoryview(rest)[size:]
    offset = 0
    for u in range(nodes):
        width = (u >> 3) + 1
        row = body[offset:offset + width]
        if len(row) < width:
            raise ValueError("adjacency data is truncated")
        offset += width
        for v in range(u + 1):
            if row[v >> 3] & _MASKS[v & 7]:
                graph.add_edge(u, v)
    return graph


def write_dimacs_binary(graph: Graph, path: str | os.PathLike) -> None:
    """Write the graph as a lower-triangular DIMACS binary adjacency matrix."""
    preamble = f"p edge {graph.number_of_nodes()} {graph.number_of_edges()}\n"
    with open(path, "wb") as handle:
        handle.write(f"{len(preamble)}\n{preamble}".encode("ascii"))
        for v in graph.nodes():
            row = bytearray((v >> 3) + 1)
            for u in graph.neighbors(v):
                if u <= v:
                    row[u >> 3] |= _MASKS[u & 7]
            handle.write(bytes(row))