"""
Name interning for graph vertices.

Every distinct name is stored once and bound to a dense integer id, handed
out sequentially from zero in order of first use.
"""

import logging
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class AtomTable:
    """
    Bidirectional mapping between vertex names and dense integer ids.

    Ids are never reused or renumbered, so an id obtained from the table
    stays valid for the lifetime of the table.
    """

    def __init__(self):
        self.name_to_id: Dict[str, int] = {}
        self.aName: List[str] = []

    def intern(self, sName: str) -> Tuple[int, bool]:
        """
        Look up a name, allocating the next id if it was never seen.

        Args:
            sName: Vertex name, the empty string included

        Returns:
            Tuple of (id, created) where created is True for a new name
        """
        lID = self.name_to_id.get(sName)
        if lID is not None:
            return lID, False

        lID = len(self.aName)
        self.name_to_id[sName] = lID
        self.aName.append(sName)
        return lID, True

    def get(self, sName: str) -> Optional[int]:
        """Get the id of a name, or None if it was never interned."""
        return self.name_to_id.get(sName)

    def name_of(self, lID: int) -> str:
        """
        Get the name bound to an id.

        Raises:
            IndexError: If the id was never allocated
        """
        if lID < 0 or lID >= len(self.aName):
            raise IndexError(f"atom id {lID} out of range")
        return self.aName[lID]

    def names(self) -> List[str]:
        """All interned names in id order."""
        return self.aName.copy()

    def __contains__(self, sName: object) -> bool:
        return sName in self.name_to_id

    def __len__(self) -> int:
        return len(self.aName)
