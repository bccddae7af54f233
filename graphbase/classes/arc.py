"""Arc view handed out by the graph store."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class pyarc:
    """
    A directed, weighted arc.

    Attributes:
        lArcID: Position of the arc in insertion order
        lVertexID_tail: Id of the source vertex
        lVertexID_tip: Id of the destination vertex
        lLength: Integer weight
        utils: Utility slot values set on the arc
    """
    lArcID: int
    lVertexID_tail: int
    lVertexID_tip: int
    lLength: int
    utils: Dict[str, Any] = field(default_factory=dict, compare=False)

    def as_triple(self) -> Tuple[int, int, int]:
        """Return (tail, tip, length)."""
        return self.lVertexID_tail, self.lVertexID_tip, self.lLength
