"""Graphs, graph6/digraph6/sparse6 and DIMACS formats, traversal, set cover, LCA,
minimum spanning trees, a pairing heap and perfect graph recognition."""

__version__ = "0.1.0"