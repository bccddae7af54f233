"""
graphbase - Named-vertex graph store with GraphBase (GB) file support

A small library for building directed, weighted graphs whose vertices are
identified by name, and for saving and loading them in the Stanford
GraphBase text format.

Main API:
    new_graph: Create an empty graph from a capacity hint
    Graph: The graph store (add_arc, add_vertex, n, m, queries)
    pyvertex, pyarc: Read-only vertex and arc views
    write_gb, dumps_gb: Serialize a graph
    read_gb, loads_gb: Load a serialized graph

Example:
    >>> from graphbase import new_graph, write_gb
    >>> graph = new_graph(3)
    >>> graph.add_arc("look", "feel", 1)
    0
    >>> graph.n
    2
    >>> write_gb(graph, "look.gb")
"""

__version__ = "0.1.0"

from graphbase.classes.vertex import pyvertex
from graphbase.classes.arc import pyarc
from graphbase.classes.util_types import UtilType
from graphbase.core.graph import Graph, new_graph
from graphbase.errors import (
    GBChecksumError,
    GBFormatError,
    GraphBaseError,
    SerializationError,
    UtilTypeError,
)
from graphbase.formats.export_gb import dumps_gb, write_gb
from graphbase.formats.read_gb import loads_gb, read_gb

__all__ = [
    'Graph',
    'new_graph',
    'pyvertex',
    'pyarc',
    'UtilType',
    'write_gb',
    'dumps_gb',
    'read_gb',
    'loads_gb',
    'GraphBaseError',
    'SerializationError',
    'GBFormatError',
    'GBChecksumError',
    'UtilTypeError',
]
