"""Data models for binmarkers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class Genotype(Enum):
    """Genotype call of one sample at one marker."""
    A = "a"
    B = "b"
    H = "h"
    MISSING = "-"

    @classmethod
    def from_code(cls, code: str) -> "Genotype":
        """Fold a raw genotype code into the four-valued alphabet.

        Raises:
            KeyError: If the code is not a known spelling
        """
        return GENOTYPE_CODES[code]

    @property
    def is_missing(self) -> bool:
        return self is Genotype.MISSING


GENOTYPE_CODES: Dict[str, Genotype] = {
    "a": Genotype.A, "A": Genotype.A,
    "b": Genotype.B, "B": Genotype.B,
    "h": Genotype.H, "H": Genotype.H,
    "-": Genotype.MISSING, "u": Genotype.MISSING,
    ".": Genotype.MISSING, "..": Genotype.MISSING, "--": Genotype.MISSING,
}


@dataclass
class Marker:
    """A (possibly binned) marker with one genotype call per sample."""

    scaffold: str
    start: int
    width: int = 1
    source_count: int = 1  # number of raw markers this bin represents
    genotypes: List[Genotype] = field(default_factory=list)

    @property
    def end(self) -> int:
        """Last base covered by the marker."""
        return self.start + self.width - 1

    @property
    def name(self) -> str:
        """Marker name in ``scaffold_start:width:count`` form."""
        return f"{self.scaffold}_{self.start}:{self.width}:{self.source_count}"

    @property
    def sample_count(self) -> int:
        return len(self.genotypes)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            'scaffold': self.scaffold,
            'start': self.start,
            'width': self.width,
            'source_count': self.source_count,
            'genotypes': [gt.value for gt in self.genotypes],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Marker":
        """Create from dictionary."""
        data = dict(data)
        data['genotypes'] = [Genotype.from_code(code) for code in data.get('genotypes', [])]
        return cls(**data)


# scaffold name -> {start position -> Marker}
ScaffoldGroup = Dict[str, Dict[int, Marker]]
