"""
Shared fixtures for binmarkers tests.
"""

import sys

import pytest
from loguru import logger

from binmarkers.models import Genotype, Marker


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks the CLI bound to captured streams."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def make_markers():
    """Build one scaffold's markers from genotype rows such as ``"abh"``."""
    def factory(rows, scaffold="scf1", starts=None, width=1, count=1):
        if starts is None:
            starts = [(i + 1) * 100 for i in range(len(rows))]
        return [
            Marker(
                scaffold=scaffold,
                start=start,
                width=width,
                source_count=count,
                genotypes=[Genotype.from_code(code) for code in row]
            )
            for start, row in zip(starts, rows)
        ]
    return factory


@pytest.fixture
def as_codes():
    """Genotype rows of markers in the same short form ``make_markers`` takes."""
    def codes(markers):
        return ["".join(gt.value for gt in marker.genotypes) for marker in markers]
    return codes
