"""Core building blocks: matrix I/O, evidence windows and majority rules."""

from .consensus import consensus, is_homogeneous
from .parser import (
    MarkerMatrixParser, MarkerMatrixWriter,
    load_markers, write_markers, scaffold_index, scaffold_sort
)
from .window import surrounding_indices, is_edge

__all__ = [
    "consensus",
    "is_homogeneous",
    "MarkerMatrixParser",
    "MarkerMatrixWriter",
    "load_markers",
    "write_markers",
    "scaffold_index",
    "scaffold_sort",
    "surrounding_indices",
    "is_edge"
]
