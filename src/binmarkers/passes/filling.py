"""
Missing genotype imputation.

Both fillers overwrite missing cells in place and never touch a called
cell. Cells filled earlier in a pass are visible as evidence to the
markers processed after them.
"""

from typing import List, Sequence

from loguru import logger

from ..core.consensus import consensus, is_homogeneous
from ..core.window import check_window_settings, is_edge, surrounding_indices
from ..models import Genotype, Marker


class Filler:
    """Fill missing genotypes using majority rules over surrounding markers."""

    def __init__(self, half_width: int = 3, minimum: int = None, skip_edges: bool = False):
        """
        Initialize filler.

        Args:
            half_width: Markers considered on each side of the target
            minimum: Smallest block (evidence plus target) to act on;
                defaults to ``2 * half_width + 1``
            skip_edges: Leave the first and last ``half_width`` markers alone
        """
        check_window_settings(half_width, minimum)
        self.half_width = half_width
        self.minimum = minimum if minimum is not None else half_width * 2 + 1
        self.skip_edges = skip_edges

    def process(self, markers: Sequence[Marker]) -> int:
        """
        Fill one scaffold's markers in place.

        Returns:
            Number of missing cells that received a called genotype
        """
        if len(markers) < 2:
            return 0

        filled = 0
        last_index = len(markers) - 1
        for i, marker in enumerate(markers):
            if self.skip_edges and is_edge(last_index, i, self.half_width):
                continue
            evidence = surrounding_indices(last_index, i, self.half_width)
            if len(evidence) < self.minimum - 1:
                continue

            for j, gt in enumerate(marker.genotypes):
                if gt is not Genotype.MISSING:
                    continue
                value = consensus(markers[k].genotypes[j] for k in evidence)
                if value is not Genotype.MISSING:
                    filled += 1
                marker.genotypes[j] = value

        logger.debug(f"{markers[0].scaffold}: {filled} missing genotypes filled")
        return filled


class BreakpointFiller:
    """
    Fill missing genotypes sitting on a recombination breakpoint.

    A missing cell whose column is uniform (and different) over the
    ``half_width`` markers above and below it is assigned the side that
    the other samples showing a breakpoint at the same place agree with.
    """

    def __init__(self, half_width: int = 3):
        check_window_settings(half_width)
        self.half_width = half_width

    def process(self, markers: Sequence[Marker]) -> int:
        """
        Fill one scaffold's breakpoint cells in place.

        Returns:
            Number of filled cells
        """
        if len(markers) < 2:
            return 0

        w = self.half_width
        filled = 0
        for i in range(w, len(markers) - w):
            above = markers[i - w:i]
            below = markers[i + 1:i + w + 1]
            target = markers[i]

            for j, gt in enumerate(target.genotypes):
                if gt is not Genotype.MISSING:
                    continue
                j_sides = self._breakpoint(above, below, j)
                if j_sides is None:
                    continue

                prefer_above, prefer_below = 0, 0
                for k in range(len(target.genotypes)):
                    if k == j:
                        continue
                    k_sides = self._breakpoint(above, below, k)
                    if k_sides is None:
                        continue
                    k_gt = target.genotypes[k]
                    if k_gt == k_sides[0]:
                        prefer_above += 1
                    elif k_gt == k_sides[1]:
                        prefer_below += 1

                if prefer_above > prefer_below:
                    target.genotypes[j] = j_sides[0]
                    filled += 1
                elif prefer_below > prefer_above:
                    target.genotypes[j] = j_sides[1]
                    filled += 1

        logger.debug(f"{markers[0].scaffold}: {filled} breakpoint genotypes filled")
        return filled

    @staticmethod
    def _breakpoint(above: Sequence[Marker], below: Sequence[Marker], column: int):
        """Return (above, below) genotypes if ``column`` switches between two uniform blocks."""
        above_gts: List[Genotype] = [marker.genotypes[column] for marker in above]
        below_gts: List[Genotype] = [marker.genotypes[column] for marker in below]
        if not (is_homogeneous(above_gts) and is_homogeneous(below_gts)):
            return None
        if above_gts[0] == below_gts[0]:
            return None
        return above_gts[0], below_gts[0]
