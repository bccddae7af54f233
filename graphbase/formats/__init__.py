"""
Reading and writing the GraphBase (GB) text format.
"""

from .export_gb import GBWriter, dumps_gb, write_gb
from .read_gb import GBReader, loads_gb, read_gb

__all__ = ['GBWriter', 'GBReader', 'dumps_gb', 'write_gb', 'loads_gb', 'read_gb']
