"""
Shared pieces of the GraphBase (GB) text format.

A GB file looks like::

    * GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,1A)
    "anonymous",2,1
    * Vertices
    "look",A0
    "feel",0
    * Arcs
    V1,0,1
    * Checksum 2372646

No physical line is longer than GB_LINE_WIDTH characters. A longer logical
line is broken into pieces, each non-final piece ending with a backslash.
"""

import re
from typing import Iterable, List

GB_LINE_WIDTH = 79
GB_SEP = ","
GB_CONTINUATION = "\\"
GB_SECTION_MARK = "*"

CHECKSUM_PRIME = (1 << 30) - 83

SECTION_GRAPHBASE = "GraphBase"
SECTION_VERTICES = "Vertices"
SECTION_ARCS = "Arcs"
SECTION_CHECKSUM = "Checksum"

HEADER_FORMAT = "* GraphBase graph (util_types {},{}V,{}A)"
HEADER_PATTERN = re.compile(
    r"^\* GraphBase graph \(util_types ([A-Z]{14}),(\d+)V,(\d+)A\)$")
CHECKSUM_PATTERN = re.compile(r"^\* Checksum (\d+)$")

# Characters a quoted string cannot carry
FORBIDDEN_STRING_CHARS = frozenset('"\\\n\r')


def line_checksum(sLine: str) -> int:
    """Fold the characters of one physical line into a checksum value."""
    a = 0
    for c in sLine:
        a = (a + a + ord(c)) % CHECKSUM_PRIME
    return a


def file_checksum(aLine: Iterable[str]) -> int:
    """Checksum of the physical lines between the header and checksum lines."""
    total = 0
    for sLine in aLine:
        total = (total + line_checksum(sLine)) % CHECKSUM_PRIME
    return total


def split_physical_lines(sText: str) -> List[str]:
    """
    Split text into physical lines at line feeds only.

    Form feeds, U+2028 and the other breaks str.splitlines() knows may appear
    inside quoted strings. A trailing carriage return is dropped from each line.
    """
    aLine = sText.split("\n")
    if aLine[-1] == "":
        aLine.pop()
    return [sLine[:-1] if sLine.endswith("\r") else sLine for sLine in aLine]


def wrap_line(sLine: str, nWidth: int = GB_LINE_WIDTH) -> List[str]:
    """Break a logical line into physical lines of at most nWidth characters."""
    if len(sLine) <= nWidth:
        return [sLine]

    aPiece = []
    nChunk = nWidth - len(GB_CONTINUATION)
    while len(sLine) > nWidth:
        aPiece.append(sLine[:nChunk] + GB_CONTINUATION)
        sLine = sLine[nChunk:]
    aPiece.append(sLine)
    return aPiece


def quote(sValue: str) -> str:
    return '"' + sValue + '"'


def is_encodable_string(sValue: str) -> bool:
    return not any(c in FORBIDDEN_STRING_CHARS for c in sValue)


def split_fields(sLine: str) -> List[str]:
    """
    Split a logical line on commas, keeping quoted strings whole.

    Quoted fields keep their quotes so callers can tell strings from
    references.

    Raises:
        ValueError: On an unterminated string or text after a closing quote
    """
    aField = []
    i = 0
    nLength = len(sLine)
    while True:
        if i < nLength and sLine[i] == '"':
            j = sLine.find('"', i + 1)
            if j < 0:
                raise ValueError("unterminated string")
            aField.append(sLine[i:j + 1])
            i = j + 1
            if i < nLength and sLine[i] != GB_SEP:
                raise ValueError(f"unexpected text after string at column {i + 1}")
        else:
            j = sLine.find(GB_SEP, i)
            if j < 0:
                j = nLength
            aField.append(sLine[i:j])
            i = j

        if i >= nLength:
            return aField
        # skip the separator
        i += 1
