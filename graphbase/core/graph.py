"""
Core graph data structure.

This module provides the directed, weighted graph store: named vertices
interned on first use, and an ordered list of integer-weighted arcs kept in
growable numpy columns. Serialization lives in ``graphbase.formats``.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .atom import AtomTable
from ..classes.vertex import pyvertex
from ..classes.arc import pyarc
from ..classes.util_types import (
    UtilType,
    ARC_SLOTS,
    DEFAULT_UTIL_TYPES,
    GRAPH_SLOTS,
    UTIL_SLOTS,
    UTIL_TYPES_LEN,
    VERTEX_SLOTS,
    slot_position,
)
from ..errors import UtilTypeError

logger = logging.getLogger(__name__)

MIN_CAPACITY = 4
MIN_LENGTH = int(np.iinfo(np.int64).min)
MAX_LENGTH = int(np.iinfo(np.int64).max)
DEFAULT_GRAPH_ID = "anonymous"

VertexRef = Union[str, int]


def _grow(aColumn: np.ndarray, nSize: int) -> np.ndarray:
    """Return a copy of a column zero-padded to nSize entries."""
    aGrown = np.zeros(nSize, dtype=aColumn.dtype)
    aGrown[:len(aColumn)] = aColumn
    return aGrown


def check_length(weight) -> int:
    """
    Validate an arc length before it is stored.

    Raises:
        TypeError: If weight is not an integer
        OverflowError: If weight is outside the int64 range
    """
    if isinstance(weight, bool) or not isinstance(weight, (int, np.integer)):
        raise TypeError(f"arc length must be an integer, got {weight!r}")
    lLength = int(weight)
    if not MIN_LENGTH <= lLength <= MAX_LENGTH:
        raise OverflowError(f"arc length {lLength} outside [{MIN_LENGTH}, {MAX_LENGTH}]")
    return lLength


class Graph:
    """
    Directed, weighted graph with named vertices.

    Vertices come into existence the first time their name is used, and get
    the next sequential id. Arcs are kept in insertion order; adding the same
    arc twice stores two records.

    The graph is not safe for concurrent mutation. ``add_arc`` needs
    exclusive access; readers such as the GB writer may run alongside other
    readers.
    """

    def __init__(self, capacity_hint: int = 0, sId: str = DEFAULT_GRAPH_ID):
        """
        Initialize an empty graph.

        Args:
            capacity_hint: Advisory number of vertices to allocate for. It
                never pre-populates the graph. Zero or negative values fall
                back to MIN_CAPACITY.
            sId: Graph identifier written on the GB graph line
        """
        nCapacity = int(capacity_hint)
        if nCapacity < 0:
            logger.warning(f"Invalid capacity hint {nCapacity}, clamping to 0")
            nCapacity = 0
        nCapacity = max(nCapacity, MIN_CAPACITY)

        self.id = sId
        self.atoms = AtomTable()

        # Vertex columns, indexed by vertex id
        self.in_degree = np.zeros(nCapacity, dtype=np.int64)
        self.out_degree = np.zeros(nCapacity, dtype=np.int64)
        self.adjacency_list: List[List[int]] = []

        # Arc columns, indexed by arc id
        self.m = 0
        self._arc_tail = np.zeros(nCapacity, dtype=np.int64)
        self._arc_tip = np.zeros(nCapacity, dtype=np.int64)
        self._arc_length = np.zeros(nCapacity, dtype=np.int64)

        # Utility fields
        self._util_types: List[str] = list(DEFAULT_UTIL_TYPES)
        self._vertex_utils: Dict[int, Dict[str, Any]] = {}
        self._arc_utils: Dict[int, Dict[str, Any]] = {}
        self._graph_utils: Dict[str, Any] = {}

        logger.debug(f"Initialized graph {sId!r} with capacity {nCapacity}")

    def __repr__(self) -> str:
        return f"Graph(id={self.id!r}, n={self.n}, m={self.m})"

    # ========================================================================
    # SIZE
    # ========================================================================

    @property
    def n(self) -> int:
        """Number of distinct vertices registered."""
        return len(self.atoms)

    @property
    def N(self) -> int:
        """Alias of ``n``."""
        return self.n

    @property
    def capacity(self) -> int:
        """Number of vertices the vertex columns can hold before growing."""
        return len(self.in_degree)

    @property
    def arc_capacity(self) -> int:
        """Number of arcs the arc columns can hold before growing."""
        return len(self._arc_tail)

    def get_vertex_count(self) -> int:
        """Get the total number of distinct vertices."""
        return self.n

    def get_arc_count(self) -> int:
        """Get the total number of arcs."""
        return self.m

    # ========================================================================
    # MUTATION
    # ========================================================================

    def add_vertex(self, sName: str) -> int:
        """
        Register a vertex name without adding an arc.

        Args:
            sName: Vertex name

        Returns:
            Id of the vertex, existing or new
        """
        return self._intern_vertex(sName)

    def add_arc(self, src_name: str, dst_name: str, weight: int) -> int:
        """
        Add a directed arc, creating its endpoints if their names are new.

        Args:
            src_name: Name of the tail vertex
            dst_name: Name of the tip vertex
            weight: Integer arc length between MIN_LENGTH and MAX_LENGTH

        Returns:
            Id of the new arc

        Raises:
            TypeError: If weight is not an integer
            OverflowError: If weight does not fit the length column
        """
        lLength = check_length(weight)
        for sName in (src_name, dst_name):
            if not isinstance(sName, str):
                raise TypeError(f"vertex name must be str, got {type(sName).__name__}")
        lTail = self._intern_vertex(src_name)
        lTip = self._intern_vertex(dst_name)

        lArc = self.m
        if lArc == len(self._arc_tail):
            nSize = 2 * len(self._arc_tail)
            self._arc_tail = _grow(self._arc_tail, nSize)
            self._arc_tip = _grow(self._arc_tip, nSize)
            self._arc_length = _grow(self._arc_length, nSize)

        self._arc_tail[lArc] = lTail
        self._arc_tip[lArc] = lTip
        self._arc_length[lArc] = lLength
        self.m += 1

        self.adjacency_list[lTail].append(lArc)
        self.out_degree[lTail] += 1
        self.in_degree[lTip] += 1
        return lArc

    def _intern_vertex(self, sName: str) -> int:
        if not isinstance(sName, str):
            raise TypeError(f"vertex name must be str, got {type(sName).__name__}")

        lID, created = self.atoms.intern(sName)
        if created:
            if lID == len(self.in_degree):
                nSize = 2 * len(self.in_degree)
                self.in_degree = _grow(self.in_degree, nSize)
                self.out_degree = _grow(self.out_degree, nSize)
            self.adjacency_list.append([])
        return lID

    # ========================================================================
    # QUERIES
    # ========================================================================

    def resolve_vertex(self, vertex: VertexRef) -> int:
        """
        Turn a vertex name or id into an id.

        Raises:
            KeyError: If a name is unknown
            IndexError: If an id is out of range
        """
        if isinstance(vertex, str):
            lID = self.atoms.get(vertex)
            if lID is None:
                raise KeyError(f"unknown vertex {vertex!r}")
            return lID

        lID = int(vertex)
        if lID < 0 or lID >= self.n:
            raise IndexError(f"vertex id {lID} out of range")
        return lID

    def get_vertex_id(self, sName: str) -> Optional[int]:
        """
        Get the id of a vertex name.

        Returns:
            Vertex id, or None if the name was never used
        """
        return self.atoms.get(sName)

    def get_vertex_by_id(self, vertex_id: int) -> Optional[pyvertex]:
        """
        Get a vertex by its id.

        Returns:
            The vertex, or None if not found
        """
        if vertex_id < 0 or vertex_id >= self.n:
            return None
        return self._make_vertex(vertex_id)

    def get_vertex(self, vertex: VertexRef) -> pyvertex:
        """Get a vertex by name or id, raising if it does not exist."""
        return self._make_vertex(self.resolve_vertex(vertex))

    def get_vertices(self) -> List[pyvertex]:
        """Get all vertices in id order."""
        return [self._make_vertex(lID) for lID in range(self.n)]

    def get_arc(self, arc_id: int) -> pyarc:
        """
        Get an arc by id.

        Raises:
            IndexError: If the id is out of range
        """
        return self._make_arc(self._check_arc(arc_id))

    def get_arcs(self) -> List[pyarc]:
        """Get all arcs in insertion order."""
        return [self._make_arc(lArc) for lArc in range(self.m)]

    def get_out_arcs(self, vertex: VertexRef) -> List[pyarc]:
        """Get the arcs leaving a vertex, in insertion order."""
        lID = self.resolve_vertex(vertex)
        return [self._make_arc(lArc) for lArc in self.adjacency_list[lID]]

    def get_out_arc_ids(self, vertex: VertexRef) -> List[int]:
        """Get the ids of the arcs leaving a vertex, in insertion order."""
        return self.adjacency_list[self.resolve_vertex(vertex)].copy()

    def get_in_degree(self, vertex: VertexRef) -> int:
        """Get the number of arcs entering a vertex."""
        return int(self.in_degree[self.resolve_vertex(vertex)])

    def get_out_degree(self, vertex: VertexRef) -> int:
        """Get the number of arcs leaving a vertex."""
        return int(self.out_degree[self.resolve_vertex(vertex)])

    def get_sources(self) -> List[int]:
        """Get vertices with no incoming arcs."""
        return [int(lID) for lID in np.flatnonzero(self.in_degree[:self.n] == 0)]

    def get_sinks(self) -> List[int]:
        """Get vertices with no outgoing arcs."""
        return [int(lID) for lID in np.flatnonzero(self.out_degree[:self.n] == 0)]

    def arc_triples(self) -> List[Tuple[int, int, int]]:
        """Get (tail, tip, length) for every arc in insertion order."""
        return list(zip(self._arc_tail[:self.m].tolist(),
                        self._arc_tip[:self.m].tolist(),
                        self._arc_length[:self.m].tolist()))

    def _check_arc(self, arc_id: int) -> int:
        lArc = int(arc_id)
        if lArc < 0 or lArc >= self.m:
            raise IndexError(f"arc id {lArc} out of range")
        return lArc

    def _make_vertex(self, lID: int) -> pyvertex:
        return pyvertex(lVertexID=lID,
                        sName=self.atoms.name_of(lID),
                        utils=dict(self._vertex_utils.get(lID, {})))

    def _make_arc(self, lArc: int) -> pyarc:
        return pyarc(lArcID=lArc,
                     lVertexID_tail=int(self._arc_tail[lArc]),
                     lVertexID_tip=int(self._arc_tip[lArc]),
                     lLength=int(self._arc_length[lArc]),
                     utils=dict(self._arc_utils.get(lArc, {})))

    # ========================================================================
    # UTILITY FIELDS
    # ========================================================================

    @property
    def util_types(self) -> str:
        """The 14-letter utility type string."""
        return "".join(self._util_types)

    def get_util_type(self, sSlot: str) -> UtilType:
        return UtilType(self._util_types[slot_position(sSlot)])

    def set_util_type(self, sSlot: str, util_type: Union[UtilType, str]) -> None:
        """
        Declare the type of a utility slot.

        Values already stored in the slot are dropped when its type changes.

        Raises:
            KeyError: If the slot name is unknown
            UtilTypeError: For an unknown letter or the unsupported graph type
        """
        iPosition = slot_position(sSlot)
        try:
            eType = UtilType(util_type)
        except ValueError:
            raise UtilTypeError(f"unknown utility type {util_type!r}") from None
        if eType is UtilType.GRAPH:
            raise UtilTypeError("graph-valued utility fields are not supported")

        if self._util_types[iPosition] == eType.value:
            return

        self._util_types[iPosition] = eType.value
        for aUtils in self._utils_holding(sSlot):
            aUtils.pop(sSlot, None)
        logger.debug(f"Utility slot {sSlot} set to type {eType.value}")

    def set_util_types(self, sUtil_types: str) -> None:
        """
        Replace the whole utility type string.

        Raises:
            UtilTypeError: If the string is malformed
        """
        if len(sUtil_types) != UTIL_TYPES_LEN:
            raise UtilTypeError(
                f"util types must have {UTIL_TYPES_LEN} letters, got {len(sUtil_types)}")
        for sSlot, sLetter in zip(UTIL_SLOTS, sUtil_types):
            self.set_util_type(sSlot, sLetter)

    def set_vertex_util(self, vertex: VertexRef, sSlot: str, value: Any) -> None:
        lID = self.resolve_vertex(vertex)
        self._check_slot(sSlot, VERTEX_SLOTS, value)
        self._vertex_utils.setdefault(lID, {})[sSlot] = value

    def get_vertex_util(self, vertex: VertexRef, sSlot: str) -> Any:
        """Get a vertex utility value, or None if it was never set."""
        lID = self.resolve_vertex(vertex)
        self._check_slot_name(sSlot, VERTEX_SLOTS)
        return self._vertex_utils.get(lID, {}).get(sSlot)

    def set_arc_util(self, arc_id: int, sSlot: str, value: Any) -> None:
        lArc = self._check_arc(arc_id)
        self._check_slot(sSlot, ARC_SLOTS, value)
        self._arc_utils.setdefault(lArc, {})[sSlot] = value

    def get_arc_util(self, arc_id: int, sSlot: str) -> Any:
        """Get an arc utility value, or None if it was never set."""
        lArc = self._check_arc(arc_id)
        self._check_slot_name(sSlot, ARC_SLOTS)
        return self._arc_utils.get(lArc, {}).get(sSlot)

    def set_graph_util(self, sSlot: str, value: Any) -> None:
        self._check_slot(sSlot, GRAPH_SLOTS, value)
        self._graph_utils[sSlot] = value

    def get_graph_util(self, sSlot: str) -> Any:
        """Get a graph utility value, or None if it was never set."""
        self._check_slot_name(sSlot, GRAPH_SLOTS)
        return self._graph_utils.get(sSlot)

    def _utils_holding(self, sSlot: str) -> List[Dict[str, Any]]:
        if sSlot in VERTEX_SLOTS:
            return list(self._vertex_utils.values())
        if sSlot in ARC_SLOTS:
            return list(self._arc_utils.values())
        return [self._graph_utils]

    def _check_slot_name(self, sSlot: str, aSlots: Tuple[str, ...]) -> None:
        if sSlot not in aSlots:
            raise KeyError(f"{sSlot!r} is not one of the slots {', '.join(aSlots)}")

    def _check_slot(self, sSlot: str, aSlots: Tuple[str, ...], value: Any) -> None:
        self._check_slot_name(sSlot, aSlots)
        eType = self.get_util_type(sSlot)

        if eType is UtilType.UNUSED:
            raise UtilTypeError(f"utility slot {sSlot} is unused (type Z)")
        if eType is UtilType.INTEGER:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise UtilTypeError(f"slot {sSlot} holds integers, got {value!r}")
        elif eType is UtilType.STRING:
            if not isinstance(value, str):
                raise UtilTypeError(f"slot {sSlot} holds strings, got {value!r}")
        elif eType is UtilType.VERTEX:
            # True stands for the GraphBase boolean vertex
            if value is None or value is True:
                return
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < self.n:
                raise UtilTypeError(f"slot {sSlot} holds vertex ids, got {value!r}")
        elif eType is UtilType.ARC:
            if value is None:
                return
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < self.m:
                raise UtilTypeError(f"slot {sSlot} holds arc ids, got {value!r}")

    def get_vertex_utils(self, vertex_id: int) -> Dict[str, Any]:
        return dict(self._vertex_utils.get(vertex_id, {}))

    def get_arc_utils(self, arc_id: int) -> Dict[str, Any]:
        return dict(self._arc_utils.get(arc_id, {}))

    def get_graph_utils(self) -> Dict[str, Any]:
        return dict(self._graph_utils)


def new_graph(capacity_hint: int = 0, sId: str = DEFAULT_GRAPH_ID) -> Graph:
    """
    Create an empty graph sized for capacity_hint vertices.

    Example:
        >>> graph = new_graph(3)
        >>> graph.add_arc("look", "feel", 1)
        0
        >>> graph.n
        2
    """
    return Graph(capacity_hint, sId)
