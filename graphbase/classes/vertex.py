"""Vertex view handed out by the graph store."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class pyvertex:
    """
    A named vertex.

    Attributes:
        lVertexID: Dense id assigned on first use of the name
        sName: Vertex name
        utils: Utility slot values set on the vertex
    """
    lVertexID: int
    sName: str
    utils: Dict[str, Any] = field(default_factory=dict, compare=False)
