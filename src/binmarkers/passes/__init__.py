"""Processing passes for binmarkers."""

from .binning import Binner, Merger, aggregate_markers
from .filling import Filler, BreakpointFiller
from .correction import Corrector

__all__ = [
    "Binner",
    "Merger",
    "aggregate_markers",
    "Filler",
    "BreakpointFiller",
    "Corrector"
]
