"""
Export a graph to the GraphBase (GB) text format.

Arcs are written grouped by tail vertex, in ascending vertex id and in
insertion order within a vertex, so that each vertex's arcs form a chain
linked through the ``next`` field.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional, TextIO, Union

from ..classes.util_types import UtilType, ARC_SLOTS, GRAPH_SLOTS, VERTEX_SLOTS
from ..core.graph import Graph
from ..errors import SerializationError
from .gb_format import (
    GB_SEP,
    HEADER_FORMAT,
    SECTION_ARCS,
    SECTION_CHECKSUM,
    SECTION_VERTICES,
    file_checksum,
    is_encodable_string,
    quote,
    wrap_line,
)

logger = logging.getLogger(__name__)

Destination = Union[str, "os.PathLike[str]", TextIO, None]


class GBWriter:
    """
    Encodes one graph as GB text.

    The graph is only read; the writer keeps its own arc renumbering.
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self.util_types = graph.util_types

        # Position of every graph arc in the file, and its successor in the
        # chain of its tail vertex
        self.aArc_order: List[int] = []
        self.arc_next: Dict[int, Optional[int]] = {}
        for lVertex in range(graph.n):
            aOut = graph.get_out_arc_ids(lVertex)
            for lArc, lNext in zip(aOut, aOut[1:] + [None]):
                self.arc_next[lArc] = lNext
            self.aArc_order.extend(aOut)
        self.arc_to_file: Dict[int, int] = {lArc: k for k, lArc in enumerate(self.aArc_order)}

    def encode(self) -> List[str]:
        """
        Build the physical lines of the file, checksum line included.

        Raises:
            SerializationError: If a string cannot be represented
        """
        graph = self.graph
        aLogical = [
            self._graph_line(),
            f"* {SECTION_VERTICES}",
        ]
        for lVertex in range(graph.n):
            aLogical.append(self._vertex_line(lVertex))
        aLogical.append(f"* {SECTION_ARCS}")
        for lArc in self.aArc_order:
            aLogical.append(self._arc_line(lArc))

        aBody: List[str] = []
        for sLine in aLogical:
            aBody.extend(wrap_line(sLine))

        sHeader = HEADER_FORMAT.format(self.util_types, graph.n, graph.m)
        sChecksum = f"* {SECTION_CHECKSUM} {file_checksum(aBody)}"
        return [sHeader] + aBody + [sChecksum]

    def _graph_line(self) -> str:
        graph = self.graph
        aField = [self._string(graph.id, "graph id"), str(graph.n), str(graph.m)]
        aUtils = graph.get_graph_utils()
        aField.extend(self._util_fields(GRAPH_SLOTS, aUtils))
        return GB_SEP.join(aField)

    def _vertex_line(self, lVertex: int) -> str:
        graph = self.graph
        aField = [self._string(graph.atoms.name_of(lVertex), f"name of vertex {lVertex}")]
        aOut = graph.adjacency_list[lVertex]
        aField.append(f"A{self.arc_to_file[aOut[0]]}" if aOut else "0")
        aField.extend(self._util_fields(VERTEX_SLOTS, graph.get_vertex_utils(lVertex)))
        return GB_SEP.join(aField)

    def _arc_line(self, lArc: int) -> str:
        arc = self.graph.get_arc(lArc)
        lNext = self.arc_next[lArc]
        sNext = "0" if lNext is None else f"A{self.arc_to_file[lNext]}"
        aField = [f"V{arc.lVertexID_tip}", sNext, str(arc.lLength)]
        aField.extend(self._util_fields(ARC_SLOTS, arc.utils))
        return GB_SEP.join(aField)

    def _util_fields(self, aSlots, aUtils: Dict[str, Any]) -> List[str]:
        aField = []
        for sSlot in aSlots:
            eType = self.graph.get_util_type(sSlot)
            if eType is UtilType.UNUSED:
                continue
            aField.append(self._encode_util(eType, aUtils.get(sSlot), sSlot))
        return aField

    def _encode_util(self, eType: UtilType, value: Any, sSlot: str) -> str:
        if eType is UtilType.INTEGER:
            return "0" if value is None else str(int(value))
        if eType is UtilType.STRING:
            return self._string("" if value is None else value, f"utility {sSlot}")
        if eType is UtilType.VERTEX:
            if value is None:
                return "0"
            if value is True:
                return "1"
            return f"V{value}"
        if eType is UtilType.ARC:
            return "0" if value is None else f"A{self.arc_to_file[value]}"
        raise SerializationError(f"utility slot {sSlot} has unsupported type {eType.value}")

    @staticmethod
    def _string(sValue: str, sWhat: str) -> str:
        if not is_encodable_string(sValue):
            raise SerializationError(
                f"{sWhat} {sValue!r} contains a quote, backslash or line break")
        return quote(sValue)


def dumps_gb(graph: Graph) -> str:
    """
    Encode a graph as GB text.

    Raises:
        SerializationError: If a string in the graph cannot be represented
    """
    aLine = GBWriter(graph).encode()
    return "\n".join(aLine) + "\n"


def write_gb(graph: Graph, destination: Destination = None) -> None:
    """
    Write a graph in GB format.

    Args:
        graph: Graph to write; it is not modified
        destination: File path, writable text stream, or None for stdout

    Raises:
        SerializationError: If encoding fails or the destination cannot be
            written
    """
    sText = dumps_gb(graph)

    if destination is None:
        destination = sys.stdout

    if hasattr(destination, "write"):
        sTarget = getattr(destination, "name", "<stream>")
        try:
            destination.write(sText)
        except (OSError, ValueError) as exc:
            raise SerializationError(f"cannot write GB data to {sTarget}: {exc}", cause=exc) from exc
    else:
        sTarget = os.fspath(destination)
        try:
            with open(sTarget, "w", encoding="utf-8", newline="\n") as pFile:
                pFile.write(sText)
        except OSError as exc:
            raise SerializationError(f"cannot write GB file {sTarget}: {exc}", cause=exc) from exc

    logger.debug(f"Wrote graph {graph.id!r} with {graph.n} vertices and {graph.m} arcs to {sTarget}")
