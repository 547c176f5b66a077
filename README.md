# koalagraph

Graph algorithms, graph file formats and supporting data structures, written in pure Python.
The only dependency is `networkx`. It is used for the maximum matching step of one set cover
variant.

## Installation

```
pip install koalagraph
```

To run the tests:

```
pip install "koalagraph[test]"
pytest
```

## Modules

### `koalagraph.graph`

- `Graph(n=0, weighted=False, directed=False)` stores a graph on integer node ids.
  - When a node is removed, its id is never reused.
  - In an unweighted graph every edge has weight `1.0`.
  - Adding an edge that already exists replaces its weight rather than creating a parallel edge.
  - The graph has these methods:
    - changing the graph: `add_node`, `add_nodes`, `remove_node`, `add_edge`, `remove_edge` and
      `increase_weight`;
    - querying it: `has_node`, `has_edge`, `weight`, `neighbors`, `weighted_neighbors`,
      `in_neighbors`, `degree` and `is_isolated`;
    - iterating over it: `nodes`, `edges` and `weighted_edges`;
    - counting: `number_of_nodes`, `number_of_edges` and `upper_node_id_bound`;
    - deriving new graphs: `copy`, `copy_nodes`, `to_undirected` and `subgraph_from_nodes`.
- `DirectedTree(graph)` is a rooted, weighted digraph with the same node id range as `graph`.
  - The root is the node with the largest id.
  - It has the methods `root()`, `parent(u)` and `edge_weight_to_parent(u)`.
- `complement(graph)` returns the undirected complement of a graph.
- `connected_components(graph)` returns the components of an undirected graph. Each component is
  sorted by node id.
- `Algorithm` is the base class for every algorithm in the package.
  - You construct the object, call `run()`, and then read the results.
  - Reading a result before `run()` raises `RuntimeError`.

### `koalagraph.traversal`

- `bfs(graph, source, target, predicate)` tells whether `target` can be reached from `source`
  through nodes that satisfy `predicate`.
- `bfs_path(graph, source, target, predicate)` returns a shortest such path. It returns `[]` when
  there is none.
- `dfs_from(graph, source, predicate)` yields the nodes reachable from `source` through nodes that
  satisfy `predicate`.
- `iter_paths(graph, length, mode)` enumerates structures according to the `PathMode`:
  - `INDUCED_PATH` yields induced paths on `length` nodes.
  - `INDUCED_CYCLE` yields induced cycles on `length` nodes.
  - `INDUCED_ODD_HOLE` yields the first odd hole it finds.

### `koalagraph.graph6`

This module handles three line formats, one graph per line:

| Format   | Parse from a string | Format to a string | Read a file | Write a file |
|----------|---------------------|--------------------|-------------|--------------|
| graph6   | `parse_g6`          | `format_g6`        | `read_g6`   | `write_g6`   |
| digraph6 | `parse_d6`          | `format_d6`        | `read_d6`   | `write_d6`   |
| sparse6  | `parse_s6`          | `format_s6`        | `read_s6`   | `write_s6`   |

- The readers take the graph from the first line of the file.
- The writers write a single line followed by a newline.
- Malformed input raises `ValueError`.

### `koalagraph.dimacs`

- `read_dimacs(path)` reads the DIMACS text format.
  - Node ids in the file are 1-based. They become 0-based in the graph.
- `read_dimacs_all(path)` does the same and also returns the source and sink node labels, if the
  file has them. The return value is `(graph, source, sink)`.
  - Files of the `max` and `sp` problem formats are read as weighted directed graphs.
  - The `min` and `mat` formats are rejected with `ValueError`.
- `write_dimacs(graph, path)` writes a graph as a `p edge` file.
- `read_dimacs_binary(path)` and `write_dimacs_binary(graph, path)` handle the DIMACS binary
  format, which stores a lower-triangular adjacency matrix.

### `koalagraph.set_cover`

This module finds an exact minimum set cover by branch and reduce. There are three variants:

- `GrandoniSetCover` uses the unique-element and subset rules.
- `FominGrandoniKratschSetCover` adds a rule that solves instances whose sets all have at most
  two elements, using a maximum matching.
- `RooijBodlaenderSetCover` adds the subsumption rule, the counting rule and the size-two
  frequency-two rule.

`occurrences` is optional; when it is omitted, it is derived from the family.

```python
from koalagraph.set_cover import RooijBodlaenderSetCover

algorithm = RooijBodlaenderSetCover([{0, 1}, {1, 2}, {2, 3}, {0, 3}])
algorithm.run()
print(algorithm.set_cover())  # one flag per set of the family
```

### `koalagraph.lca`

`OptimalLCA(tree)` answers lowest common ancestor queries with `query(u, v)`.

- The tree must provide:
  - `tree.tree`, a directed graph whose edges point from parent to child;
  - a `root()` method;
  - a `parent(u)` method.

  `DirectedTree` provides all three.
- `verify()` checks the length of the Euler tour.

### `koalagraph.mst`

- The minimum spanning forest algorithms are:
  - `KruskalMinimumSpanningTree`;
  - `PrimMinimumSpanningTree`, which spans only the component of the lowest node id;
  - `BoruvkaMinimumSpanningTree`;
  - `KargerKleinTarjanMinimumSpanningTree`, which is randomized.
- After `run()`, `forest()` returns the result.
- `check()` verifies the result in linear time. It raises `ValueError` unless the forest is a
  minimum spanning tree.
- `AugmentedGraph` answers tree path maximum queries. The verification uses it.

### `koalagraph.pairing_heap`

`PairingHeap(less=None)` is a heap whose top is a greatest key under `less`. The default
comparison is `<`.

- `push(key)` returns a handle.
- `update(handle, key)` moves a key up. The new key must not precede the old one.
- `erase(handle)` removes an arbitrary entry.
- `top()` returns the greatest key, and `pop()` removes it and returns it.
- `clear()` empties the heap.
- `len(heap)` gives the number of entries.
- `check()` validates the internal structure.

### `koalagraph.prohibited` and `koalagraph.perfect`

- `PerfectGraphRecognition(graph)` decides whether an undirected graph is perfect.
  - `is_perfect()` gives the answer.
  - `state()` returns a `State` that names the structure that was found.
  - `check()` cross-checks the answer with a direct odd-hole search.
- The individual tests can also be called on their own:
  - `contains_jewel` and `contains_pyramid`, from `koalagraph.prohibited`;
  - `contains_t1`, `contains_t2`, `contains_t3`, `contains_odd_hole`, `contains_hole` and
    `contains_near_cleaner_odd_hole`, from `koalagraph.perfect`.
- The near-cleaner search raises `ValueError` for graphs with node ids of 512 or more.

## Example

```python
from koalagraph.graph6 import parse_g6, format_g6
from koalagraph.mst import KruskalMinimumSpanningTree
from koalagraph.perfect import PerfectGraphRecognition

graph = parse_g6("Dhc")        # the 5-cycle
print(format_g6(graph))        # Dhc

recognition = PerfectGraphRecognition(graph)
recognition.run()
print(recognition.is_perfect())  # False: C5 is an odd hole

mst = KruskalMinimumSpanningTree(graph)
mst.run()
print(mst.forest().number_of_edges())  # 4
```

## What this package does not do

- It is a library only. It has no command-line program.
- It does not include vertex colouring, dominating set, independent set or maximum flow
  algorithms.
- Of the heap structures, it provides only the pairing heap.