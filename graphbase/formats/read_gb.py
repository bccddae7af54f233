"""
Read graphs stored in the GraphBase (GB) text format.

The reader accepts files written by ``export_gb`` as well as hand-written
files that follow the same layout. Malformed input raises GBFormatError
with the file name and line number of the offending line.
"""

import logging
import os
from typing import Any, List, Optional, TextIO, Tuple, Union

from ..classes.util_types import UtilType, ARC_SLOTS, GRAPH_SLOTS, VERTEX_SLOTS, slot_position
from ..core.graph import Graph, check_length
from ..errors import GBChecksumError, GBFormatError, UtilTypeError
from .gb_format import (
    CHECKSUM_PATTERN,
    GB_CONTINUATION,
    GB_SECTION_MARK,
    HEADER_PATTERN,
    SECTION_ARCS,
    SECTION_CHECKSUM,
    SECTION_GRAPHBASE,
    SECTION_VERTICES,
    file_checksum,
    split_fields,
    split_physical_lines,
)

logger = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", TextIO]

UTIL_TYPE_LETTERS = frozenset(eType.value for eType in UtilType)


class GBReader:
    """
    Parses the text of one GB file into a Graph.

    Parsing is done in two passes: the lines are first split into sections
    and fields, then the graph is built once every vertex and arc is known,
    since utility fields may point forward.
    """

    def __init__(self, sText: str, sFilename: str = "<string>", iFlag_verify_checksum: int = 1):
        self.aPhysical = split_physical_lines(sText)
        self.sFilename = sFilename
        self.iFlag_verify_checksum = iFlag_verify_checksum

        self.util_types = ""
        self.nVertex = 0
        self.nArc = 0

        # (lineno, fields) per logical line
        self.graph_line: Optional[Tuple[int, List[str]]] = None
        self.aVertex_line: List[Tuple[int, List[str]]] = []
        self.aArc_line: List[Tuple[int, List[str]]] = []
        self.lChecksum: Optional[int] = None
        self.lineno_checksum = 0

    def error(self, sReason: str, lineno: int) -> GBFormatError:
        return GBFormatError(sReason, self.sFilename, lineno)

    def read(self) -> Graph:
        self._parse_header()
        self._parse_sections()
        self._check_checksum()
        graph = self._build_graph()
        logger.debug(f"Read graph {graph.id!r} with {graph.n} vertices and {graph.m} arcs from {self.sFilename}")
        return graph

    # ========================================================================
    # PASS 1: LINES AND SECTIONS
    # ========================================================================

    def _parse_header(self) -> None:
        if not self.aPhysical:
            raise self.error("empty file", 1)

        match = HEADER_PATTERN.match(self.aPhysical[0])
        if match is None:
            raise self.error("gb file seems not to obey the specs: bad header line", 1)

        self.util_types = match.group(1)
        self.nVertex = int(match.group(2))
        self.nArc = int(match.group(3))

        for sLetter in self.util_types:
            if sLetter not in UTIL_TYPE_LETTERS:
                raise self.error(f"Unrecognized util type: {sLetter}", 1)
        if UtilType.GRAPH.value in self.util_types:
            raise self.error("'G' util type handling is not implemented", 1)

    def _logical_lines(self):
        """Yield (lineno, text) with continuation lines joined."""
        aPending: List[str] = []
        lineno_start = 0
        for lineno, sLine in enumerate(self.aPhysical[1:], start=2):
            if not aPending:
                lineno_start = lineno
            if sLine.endswith(GB_CONTINUATION):
                aPending.append(sLine[:-1])
                continue
            aPending.append(sLine)
            yield lineno_start, "".join(aPending)
            aPending = []
        if aPending:
            raise self.error("file ends inside a continued line", lineno_start)

    def _parse_sections(self) -> None:
        sSection = SECTION_GRAPHBASE
        for lineno, sLine in self._logical_lines():
            if self.lChecksum is not None:
                raise self.error("text after the checksum line", lineno)

            if sLine.startswith(GB_SECTION_MARK):
                sSection = self._switch_section(sSection, sLine, lineno)
                continue

            try:
                aField = split_fields(sLine)
            except ValueError as exc:
                raise self.error(str(exc), lineno) from exc

            if sSection == SECTION_GRAPHBASE:
                if self.graph_line is not None:
                    raise self.error("more than one graph line", lineno)
                self.graph_line = (lineno, aField)
            elif sSection == SECTION_VERTICES:
                self.aVertex_line.append((lineno, aField))
            else:
                self.aArc_line.append((lineno, aField))

        nLast = len(self.aPhysical)
        if self.graph_line is None:
            raise self.error("missing graph line", nLast)
        if sSection == SECTION_GRAPHBASE:
            raise self.error(f"missing * {SECTION_VERTICES} section", nLast)
        if sSection == SECTION_VERTICES:
            raise self.error(f"missing * {SECTION_ARCS} section", nLast)
        if len(self.aVertex_line) != self.nVertex:
            raise self.error(
                f"expected {self.nVertex} vertices, found {len(self.aVertex_line)}", nLast)
        if len(self.aArc_line) != self.nArc:
            raise self.error(f"expected {self.nArc} arcs, found {len(self.aArc_line)}", nLast)

    def _switch_section(self, sSection: str, sLine: str, lineno: int) -> str:
        match = CHECKSUM_PATTERN.match(sLine)
        if match is not None:
            if sSection != SECTION_ARCS:
                raise self.error("checksum line before the arcs section", lineno)
            self.lChecksum = int(match.group(1))
            self.lineno_checksum = lineno
            return SECTION_CHECKSUM

        sExpected = {SECTION_GRAPHBASE: SECTION_VERTICES, SECTION_VERTICES: SECTION_ARCS}.get(sSection)
        if sExpected is not None and sLine == f"* {sExpected}":
            return sExpected
        raise self.error(f"gb file seems not to obey the specs: unexpected line {sLine!r}", lineno)

    def _check_checksum(self) -> None:
        if not self.iFlag_verify_checksum:
            logger.debug(f"Checksum of {self.sFilename} not verified")
            return

        if self.lChecksum is None:
            raise self.error("missing checksum line", len(self.aPhysical))

        lActual = file_checksum(self.aPhysical[1:self.lineno_checksum - 1])
        if lActual != self.lChecksum:
            raise GBChecksumError(
                f"checksum mismatch: file says {self.lChecksum}, contents give {lActual}",
                self.sFilename, self.lineno_checksum)

    # ========================================================================
    # PASS 2: GRAPH
    # ========================================================================

    def _build_graph(self) -> Graph:
        lineno_graph, aGraph_field = self.graph_line
        nGraph_util = self._count_slots(GRAPH_SLOTS)
        self._expect_fields(aGraph_field, 3 + nGraph_util, lineno_graph)

        sId = self._parse_string(aGraph_field[0], lineno_graph)
        if (self._parse_int(aGraph_field[1], lineno_graph) != self.nVertex
                or self._parse_int(aGraph_field[2], lineno_graph) != self.nArc):
            raise self.error("graph line disagrees with the header counts", lineno_graph)

        graph = Graph(self.nVertex, sId)
        try:
            graph.set_util_types(self.util_types)
        except UtilTypeError as exc:
            raise self.error(str(exc), 1) from exc

        nVertex_util = self._count_slots(VERTEX_SLOTS)
        aFirst_arc: List[Optional[int]] = []
        for lineno, aField in self.aVertex_line:
            self._expect_fields(aField, 2 + nVertex_util, lineno)
            sName = self._parse_string(aField[0], lineno)
            if graph.get_vertex_id(sName) is not None:
                raise self.error(f"duplicate vertex name {sName!r}", lineno)
            graph.add_vertex(sName)
            aFirst_arc.append(self._parse_arc_ref(aField[1], lineno))

        nArc_util = self._count_slots(ARC_SLOTS)
        aArc: List[Tuple[int, Optional[int], int]] = []
        for lineno, aField in self.aArc_line:
            self._expect_fields(aField, 3 + nArc_util, lineno)
            lTip = self._parse_vertex_ref(aField[0], lineno, iFlag_allow_flag=0)
            lNext = self._parse_arc_ref(aField[1], lineno)
            lLength = self._parse_length(aField[2], lineno)
            aArc.append((lTip, lNext, lLength))

        aTail = self._find_tails(aFirst_arc, aArc)
        for k, (lTip, _, lLength) in enumerate(aArc):
            graph.add_arc(graph.atoms.name_of(aTail[k]), graph.atoms.name_of(lTip), lLength)

        self._fill_utils(graph, GRAPH_SLOTS, aGraph_field[3:], lineno_graph,
                         lambda sSlot, value: graph.set_graph_util(sSlot, value))
        for lVertex, (lineno, aField) in enumerate(self.aVertex_line):
            self._fill_utils(graph, VERTEX_SLOTS, aField[2:], lineno,
                             lambda sSlot, value: graph.set_vertex_util(lVertex, sSlot, value))
        for lArc, (lineno, aField) in enumerate(self.aArc_line):
            self._fill_utils(graph, ARC_SLOTS, aField[3:], lineno,
                             lambda sSlot, value: graph.set_arc_util(lArc, sSlot, value))
        return graph

    def _find_tails(self, aFirst_arc: List[Optional[int]],
                    aArc: List[Tuple[int, Optional[int], int]]) -> List[int]:
        """Walk every vertex's arc chain to find the tail of each arc."""
        aTail: List[Optional[int]] = [None] * len(aArc)
        for lVertex, lArc in enumerate(aFirst_arc):
            lineno = self.aVertex_line[lVertex][0]
            while lArc is not None:
                if aTail[lArc] is not None:
                    if aTail[lArc] == lVertex:
                        raise self.error(f"arc list of vertex {lVertex} loops at A{lArc}", lineno)
                    raise self.error(
                        f"arc A{lArc} is listed by vertices {aTail[lArc]} and {lVertex}", lineno)
                aTail[lArc] = lVertex
                lArc = aArc[lArc][1]

        for lArc, lTail in enumerate(aTail):
            if lTail is None:
                raise self.error(f"arc A{lArc} belongs to no vertex", self.aArc_line[lArc][0])
        return aTail

    def _fill_utils(self, graph: Graph, aSlots, aField: List[str], lineno: int, setter) -> None:
        k = 0
        for sSlot in aSlots:
            eType = graph.get_util_type(sSlot)
            if eType is UtilType.UNUSED:
                continue
            value = self._parse_util(eType, aField[k], lineno)
            k += 1
            try:
                setter(sSlot, value)
            except UtilTypeError as exc:
                raise self.error(str(exc), lineno) from exc

    def _parse_util(self, eType: UtilType, sField: str, lineno: int) -> Any:
        if eType is UtilType.INTEGER:
            return self._parse_int(sField, lineno)
        if eType is UtilType.STRING:
            return self._parse_string(sField, lineno)
        if eType is UtilType.VERTEX:
            return self._parse_vertex_ref(sField, lineno, iFlag_allow_flag=1)
        return self._parse_arc_ref(sField, lineno)

    # ========================================================================
    # FIELDS
    # ========================================================================

    def _count_slots(self, aSlots) -> int:
        return sum(1 for sSlot in aSlots
                   if self.util_types[slot_position(sSlot)] != UtilType.UNUSED.value)

    def _expect_fields(self, aField: List[str], nExpected: int, lineno: int) -> None:
        if len(aField) != nExpected:
            raise self.error(f"expected {nExpected} fields, found {len(aField)}", lineno)

    def _parse_int(self, sField: str, lineno: int) -> int:
        try:
            return int(sField)
        except ValueError:
            raise self.error(f"expected an integer, found {sField!r}", lineno) from None

    def _parse_length(self, sField: str, lineno: int) -> int:
        try:
            return check_length(self._parse_int(sField, lineno))
        except OverflowError as exc:
            raise self.error(str(exc), lineno) from exc

    def _parse_string(self, sField: str, lineno: int) -> str:
        if len(sField) < 2 or not (sField.startswith('"') and sField.endswith('"')):
            raise self.error(f"expected a quoted string, found {sField!r}", lineno)
        return sField[1:-1]

    def _parse_vertex_ref(self, sField: str, lineno: int, iFlag_allow_flag: int):
        if iFlag_allow_flag and sField == "0":
            return None
        if iFlag_allow_flag and sField == "1":
            return True
        lID = self._parse_ref(sField, "V", lineno)
        if lID >= self.nVertex:
            raise self.error(f"Unrecognized vertex value {sField}", lineno)
        return lID

    def _parse_arc_ref(self, sField: str, lineno: int) -> Optional[int]:
        if sField == "0":
            return None
        lID = self._parse_ref(sField, "A", lineno)
        if lID >= self.nArc:
            raise self.error(f"Unrecognized util value {sField}", lineno)
        return lID

    def _parse_ref(self, sField: str, sPrefix: str, lineno: int) -> int:
        if len(sField) < 2 or sField[0] != sPrefix or not sField[1:].isdecimal():
            raise self.error(f"expected {sPrefix}<index>, found {sField!r}", lineno)
        return int(sField[1:])


def loads_gb(sText: str, iFlag_verify_checksum: int = 1, sFilename: str = "<string>") -> Graph:
    """
    Parse GB text into a graph.

    Raises:
        GBFormatError: If the text is malformed
        GBChecksumError: If the checksum does not match and verification is on
    """
    return GBReader(sText, sFilename, iFlag_verify_checksum).read()


def read_gb(source: Source, iFlag_verify_checksum: int = 1) -> Graph:
    """
    Read a graph from a GB file path or readable text stream.

    Args:
        source: Path or stream
        iFlag_verify_checksum: 1 to check the checksum line, 0 to skip it

    Returns:
        The decoded graph
    """
    if hasattr(source, "read"):
        sFilename = getattr(source, "name", "<stream>")
        sText = source.read()
    else:
        sFilename = os.fspath(source)
        with open(sFilename, "r", encoding="utf-8") as pFile:
            sText = pFile.read()
    return loads_gb(sText, iFlag_verify_checksum, sFilename)
