"""Miscalled genotype correction with strict criteria."""

from typing import Sequence

from loguru import logger

from ..core.window import check_window_settings, is_edge, surrounding_indices
from ..models import Genotype, Marker


class Corrector:
    """
    Correct genotypes that disagree with all of their surroundings.

    A call is replaced only when every surrounding call in its column is
    present, identical, and different from it.
    """

    def __init__(self, half_width: int = 5, minimum: int = None, skip_edges: bool = False):
        check_window_settings(half_width, minimum)
        self.half_width = half_width
        self.minimum = minimum if minimum is not None else half_width * 2 + 1
        self.skip_edges = skip_edges

    def process(self, markers: Sequence[Marker]) -> int:
        """
        Correct one scaffold's markers in place.

        Returns:
            Number of corrected cells
        """
        if len(markers) < 2:
            return 0

        corrected = 0
        last_index = len(markers) - 1
        for i, marker in enumerate(markers):
            if self.skip_edges and is_edge(last_index, i, self.half_width):
                continue
            evidence = surrounding_indices(last_index, i, self.half_width)
            if len(evidence) < self.minimum - 1:
                continue
            assert evidence, f"empty evidence for index {i} of {last_index + 1}"

            for j, target in enumerate(marker.genotypes):
                if target is Genotype.MISSING:
                    continue
                surroundings = [markers[k].genotypes[j] for k in evidence]
                if Genotype.MISSING in surroundings or target in surroundings:
                    continue
                distinct = set(surroundings)
                if len(distinct) > 1:
                    continue
                assert len(distinct) == 1
                marker.genotypes[j] = distinct.pop()
                corrected += 1

        logger.debug(f"{markers[0].scaffold}: {corrected} misscored genotypes corrected")
        return corrected
