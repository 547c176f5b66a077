[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "koalagraph"
version = "0.1.0"
description = "Graph algorithms in pure Python: graph6/digraph6/sparse6 and DIMACS I/O, minimum spanning trees, exact set cover, LCA, a pairing heap and perfect graph recognition"
requires-python = ">=3.10"
keywords = [
    "graph",
    "graph6",
    "digraph6",
    "sparse6",
    "dimacs",
    "minimum spanning tree",
    "set cover",
    "perfect graph",
    "lowest common ancestor",
    "pairing heap",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "networkx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["koalagraph"]

[tool.pytest.ini_options]
addopts = "-ra"
