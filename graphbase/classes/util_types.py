"""
Utility field slots carried by vertices, arcs and graphs.

A graph describes its utility fields with a 14-letter type string. The first
six letters type the vertex slots, the next two the arc slots and the last
six the graph slots.
"""

from enum import Enum
from typing import Tuple


class UtilType(Enum):
    """Utility field types, keyed by their letter in the type string."""
    UNUSED = "Z"
    INTEGER = "I"
    STRING = "S"
    VERTEX = "V"
    ARC = "A"
    GRAPH = "G"


VERTEX_SLOTS: Tuple[str, ...] = ("u", "v", "w", "x", "y", "z")
ARC_SLOTS: Tuple[str, ...] = ("a", "b")
GRAPH_SLOTS: Tuple[str, ...] = ("uu", "vv", "ww", "xx", "yy", "zz")

UTIL_SLOTS: Tuple[str, ...] = VERTEX_SLOTS + ARC_SLOTS + GRAPH_SLOTS
UTIL_TYPES_LEN = len(UTIL_SLOTS)
DEFAULT_UTIL_TYPES = UtilType.UNUSED.value * UTIL_TYPES_LEN


def slot_position(sSlot: str) -> int:
    """
    Get the position of a slot in the util type string.

    Raises:
        KeyError: If the slot name is unknown
    """
    try:
        return UTIL_SLOTS.index(sSlot)
    except ValueError:
        raise KeyError(f"unknown utility slot {sSlot!r}") from None
