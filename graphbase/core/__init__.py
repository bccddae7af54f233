"""
Core graph data structures.

This module contains the graph store and the name table it interns vertex
names with.
"""

from .atom import AtomTable
from .graph import Graph, new_graph

__all__ = ['AtomTable', 'Graph', 'new_graph']
