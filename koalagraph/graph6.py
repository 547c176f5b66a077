"""Readers and writers for the graph6, digraph6 and sparse6 text formats.

Each format stores one graph per line as printable characters in the range
63..126, each carrying six bits.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from itertools import product

from koalagraph.graph import Graph

_LOW = 0x3F
_HIGH = 0x7E
_WIDTH = 6
_SHORT_LIMIT = 63
_LONG_LIMIT = 258048
_MAX_NODES = 1 << 36

_D6_PREFIX = "&"
_S6_PREFIX = ":"


def _value(char: str) -> int:
    code = ord(char)
    if not _LOW <= code <= _HIGH:
        raise ValueError(f"invalid character {char!r}")
    return code - _LOW


def _decode_size(line: str, pos: int) -> tuple[int, int]:
    """Read the node count starting at ``pos``; return it and the next position."""
    if pos >= len(line):
        raise ValueError("missing node count")
    width = 1
    if ord(line[pos]) >= _HIGH:
        width = 3
        pos += 1
        if pos < len(line) and ord(line[pos]) >= _HIGH:
            width = 6
            pos += 1
    chunk = line[pos:pos + width]
    if len(chunk) < width:
        raise ValueError("node count is truncated")
    nodes = 0
    for char in chunk:
        nodes = (nodes << _WIDTH) | _value(char)
    return nodes, pos + width


def _encode_size(nodes: int) -> str:
    if nodes >= _MAX_NODES:
        raise ValueError(f"too many nodes to encode: {nodes}")
    if nodes < _SHORT_LIMIT:
        prefix, width = "", 1
    elif nodes < _LONG_LIMIT:
        prefix, width = chr(_HIGH), 3
    else:
        prefix, width = chr(_HIGH) * 2, 6
    digits = (
        chr(_LOW + ((nodes >> (_WIDTH * i)) & _LOW)) for i in reversed(range(width))
    )
    return prefix + "".join(digits)


def _data_bits(line: str, pos: int) -> Iterator[int]:
    """Bits of the data part, most significant first; characters checked lazily."""
    for char in line[pos:]:
        value = _value(char)
        for shift in range(_WIDTH - 1, -1, -1):
            yield (value >> shift) & 1


def _take(bits: Iterator[int]) -> int:
    bit = next(bits, None)
    if bit is None:
        raise ValueError("graph data ended early")
    return bit


def _read_number(bits: Iterator[int], width: int) -> int | None:
    number = 0
    for _ in range(width):
        bit = next(bits, None)
        if bit is None:
            return None
        number = (number << 1) | bit
    return number


def _pack(data: list[int]) -> str:
    return "".join(chr(byte + _LOW) for byte in data)


def _mask(position: int) -> int:
    return 0x20 >> (position % _WIDTH)


def _read_first_line(path: str | os.PathLike) -> str:
    with open(path, encoding="ascii") as handle:
        return handle.readline().rstrip("\r\n")


def _write_line(line: str, path: str | os.PathLike) -> None:
    with open(path, "w", encoding="ascii") as handle:
        handle.write(line + "\n")


def parse_g6(line: str) -> Graph:
    """Decode an undirected graph from a graph6 string."""
    nodes, pos = _decode_size(line, 0)
    graph = Graph(nodes)
    bits = _data_bits(line, pos)
    for v in range(1, nodes):
        for u in range(v):
            if _take(bits):
                graph.add_edge(u, v)
    return graph


def format_g6(graph: Graph) -> str:
    """Encode the graph as a graph6 string; edges to higher ids are used."""
    nodes = graph.number_of_nodes()
    data = [0] * ((nodes * (nodes - 1) // 2) // _WIDTH + 1)
    for index, v in enumerate(graph.nodes()):
        shift = index * (index - 1) // 2
        for u in graph.neighbors(v):
            if u < v:
                position = shift + u
                data[position // _WIDTH] |= _mask(position)
    return _encode_size(nodes) + _pack(data)


def read_g6(path: str | os.PathLike) -> Graph:
    """Read the graph stored on the first line of a graph6 file."""
    return parse_g6(_read_first_line(path))


def write_g6(graph: Graph, path: str | os.PathLike) -> None:
    _write_line(format_g6(graph), path)


def parse_d6(line: str) -> Graph:
    """Decode a directed graph from a digraph6 string."""
    if not line.startswith(_D6_PREFIX):
        raise ValueError("digraph6 string must start with '&'")
    nodes, pos = _decode_size(line, 1)
    graph = Graph(nodes, directed=True)
    bits = _data_bits(line, pos)
    for u, v in product(range(nodes), repeat=2):
        if _take(bits):
            graph.add_edge(u, v)
    return graph


def format_d6(graph: Graph) -> str:
    """Encode the graph as a digraph6 string using its out-neighbours."""
    nodes = graph.number_of_nodes()
    data = [0] * ((nodes * nodes) // _WIDTH + 1)
    for index, u in enumerate(graph.nodes()):
        shift = index * nodes
        for v in graph.neighbors(u):
            position = shift + v
            data[position // _WIDTH] |= _mask(position)
    return _D6_PREFIX + _encode_size(nodes) + _pack(data)


def read_d6(path: str | os.PathLike) -> Graph:
    """Read the graph stored on the first line of a digraph6 file."""
    return parse_d6(_read_first_line(path))


def write_d6(graph: Graph, path: str | os.PathLike) -> None:
    _write_line(format_d6(graph), path)


def parse_s6(line: str) -> Graph:
    """Decode an undirected graph, possibly with loops, from a sparse6 string."""
    if not line.startswith(_S6_PREFIX):
        raise ValueError("sparse6 string must start with ':'")
    nodes, pos = _decode_size(line, 1)
    graph = Graph(nodes)
    width = max(nodes - 1, 0).bit_length()
    bits = _data_bits(line, pos)
    v = 0
    while True:
        flag = next(bits, None)
        if flag is None:
            break
        if flag:
            v += 1
        x = _read_number(bits, width)
        if x is None or x >= nodes or v >= nodes:
            break
        if x > v:
            v = x
        else:
            graph.add_edge(x, v)
    return graph


def format_s6(graph: Graph) -> str:
    """Encode the graph as a sparse6 string."""
    nodes = graph.number_of_nodes()
    out = [_S6_PREFIX, _encode_size(nodes)]
    step = max(nodes - 1, 0).bit_length() + 1
    flag = 1 << (step - 1)
    bits = 0
    length = 0

    def emit(value: int) -> None:
        nonlocal bits, length
        bits = (bits << step) | value
        length += step
        while length >= _WIDTH:
            length -= _WIDTH
            out.append(chr((bits >> length) + _LOW))
            bits &= (1 << length) - 1

    previous = 0
    for v in graph.nodes():
        for u in graph.neighbors(v):
            if u > v:
                continue
            if v == previous:
                emit(u)
            elif v == previous + 1:
                emit(flag | u)
            else:
                emit(flag | v)
                emit(u)
            previous = v
    if length > 0:
        bound = graph.upper_node_id_bound()
        special = int(bound == flag and previous == bound - 2)
        padding = (bits << (_WIDTH - length)) + (1 << (_WIDTH - length - special)) - 1
        out.append(chr(padding + _LOW))
    return "".join(out)


def read_s6(path: str | os.PathLike) -> Graph:
    """Read the graph stored on the first line of a sparse6 file."""
    return parse_s6(_read_first_line(path))


def write_s6(graph: Graph, path: str | os.PathLike) -> None:
    _write_line(format_s6(graph), path)