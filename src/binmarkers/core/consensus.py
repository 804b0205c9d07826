"""Majority-rule resolution of genotype calls."""

from collections import Counter
from typing import Iterable

from ..models import Genotype


def consensus(values: Iterable[Genotype]) -> Genotype:
    """
    Majority genotype of a set of calls.

    Missing calls do not vote. If the two most frequent called genotypes are
    equally frequent the result is missing, as it is when nothing was called.

    Args:
        values: Genotype calls in any order

    Returns:
        The majority genotype, or ``Genotype.MISSING``
    """
    tally = Counter(gt for gt in values if gt is not Genotype.MISSING)
    if not tally:
        return Genotype.MISSING

    ranked = tally.most_common(2)
    if len(ranked) == 1:
        return ranked[0][0]

    (top, top_count), (_, runner_up_count) = ranked
    assert top_count >= runner_up_count
    if top_count > runner_up_count:
        return top
    return Genotype.MISSING


def is_homogeneous(values: Iterable[Genotype]) -> bool:
    """True if all values are called and identical (and there is at least one)."""
    distinct = set(values)
    return len(distinct) == 1 and Genotype.MISSING not in distinct
