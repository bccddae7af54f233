"""
Data classes for graph elements.

This module contains the vertex and arc views and the utility field types
shared by the graph store and the GB format.
"""

from .vertex import pyvertex
from .arc import pyarc
from .util_types import UtilType

__all__ = [
    'pyvertex',
    'pyarc',
    'UtilType',
]
