"""binmarkers.

Bin genotype markers of a genetic linkage study, fill missing genotypes,
correct misscored genotypes and merge identical adjacent markers, producing
a reduced marker matrix for linkage map construction.
"""

__version__ = "3.0.0"
__author__ = "Leiting Li"

from .config import PassMode, PassConfig, PipelineConfig, DEFAULT_PIPELINE
from .models import Genotype, Marker
from .core import (
    MarkerMatrixParser, MarkerMatrixWriter,
    load_markers, write_markers, scaffold_index, scaffold_sort,
    surrounding_indices, consensus
)
from .passes import Binner, Merger, Filler, BreakpointFiller, Corrector
from .main import run_pass, run_stages, run_pipeline

__all__ = [
    "__version__",
    "__author__",
    "PassMode",
    "PassConfig",
    "PipelineConfig",
    "DEFAULT_PIPELINE",
    "Genotype",
    "Marker",
    "MarkerMatrixParser",
    "MarkerMatrixWriter",
    "load_markers",
    "write_markers",
    "scaffold_index",
    "scaffold_sort",
    "surrounding_indices",
    "consensus",
    "Binner",
    "Merger",
    "Filler",
    "BreakpointFiller",
    "Corrector",
    "run_pass",
    "run_stages",
    "run_pipeline"
]
