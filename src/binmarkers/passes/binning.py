"""
Block binning and identical-run merging.

Both passes walk a scaffold in position order, collect runs of markers and
replace every run by one aggregate marker spanning it.
"""

from typing import List, Sequence

from loguru import logger

from ..core.consensus import consensus
from ..core.window import check_window_settings
from ..models import Genotype, Marker


def aggregate_markers(run: Sequence[Marker], genotypes: List[Genotype]) -> Marker:
    """
    Build the marker that replaces a run.

    Args:
        run: Markers of one scaffold, in position order
        genotypes: Genotype vector for the aggregate

    Returns:
        Marker spanning from the smallest to the largest coordinate of the run
    """
    coordinates = [pos for marker in run for pos in (marker.start, marker.end)]
    start = min(coordinates)
    return Marker(
        scaffold=run[0].scaffold,
        start=start,
        width=max(coordinates) - start + 1,
        source_count=sum(marker.source_count for marker in run),
        genotypes=genotypes,
    )


class Binner:
    """Bin markers into blocks using majority rules."""

    def __init__(self, window: int = 10_000):
        """
        Initialize binner.

        Args:
            window: Largest span in bp between a block's first start and its
                last marker's end
        """
        check_window_settings(window)
        self.window = window

    def process(self, markers: Sequence[Marker]) -> List[Marker]:
        """Bin one scaffold's markers (ascending start order)."""
        binned = []
        run: List[Marker] = []
        for marker in markers:
            if run and marker.end - run[0].start > self.window:
                binned.append(self.flush(run))
                run = []
            run.append(marker)
        if run:
            binned.append(self.flush(run))

        if markers:
            logger.debug(f"{markers[0].scaffold}: {len(markers)} markers binned into {len(binned)}")
        return binned

    @staticmethod
    def flush(run: Sequence[Marker]) -> Marker:
        """Collapse a run to one marker holding the per-sample consensus."""
        columns = zip(*(marker.genotypes for marker in run))
        return aggregate_markers(run, [consensus(column) for column in columns])


class Merger:
    """Merge adjacent markers with identical genotype vectors."""

    def process(self, markers: Sequence[Marker]) -> List[Marker]:
        """Merge one scaffold's markers (ascending start order)."""
        merged = []
        run: List[Marker] = []
        for marker in markers:
            if run and marker.genotypes != run[0].genotypes:
                merged.append(self.flush(run))
                run = []
            run.append(marker)
        if run:
            merged.append(self.flush(run))
        return merged

    @staticmethod
    def flush(run: Sequence[Marker]) -> Marker:
        return aggregate_markers(run, list(run[0].genotypes))
