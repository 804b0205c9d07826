"""Marker matrix reader and writer."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TextIO, Tuple, Union

from loguru import logger

from ..exceptions import ParseError
from ..models import Genotype, Marker, ScaffoldGroup

# scaffold[_-]start, optionally followed by :width:count
MARKER_NAME_RE = re.compile(r'([A-Za-z0-9.]+)[_\-](\d+)(?::(\d+):(\d+))?')
SCAFFOLD_NUMBER_RE = re.compile(r'([a-zA-Z]+)(\d+)')


class MarkerMatrixParser:
    """Parser for tab-separated marker matrices."""

    def __init__(self, source: Union[Path, str, TextIO], title: bool = False):
        """
        Initialize parser.

        Args:
            source: Path to the matrix file, or an open text stream
            title: Treat the first line as a title row
        """
        self.source = source
        self.title = title
        self.title_line: Optional[str] = None
        self.sample_count: Optional[int] = None
        self.marker_count = 0
        self.lines_read = 0

        if isinstance(source, (str, Path)):
            self.source = Path(source)
            if not self.source.exists():
                raise ParseError(f"Input file not found: {self.source}")

    @property
    def source_name(self) -> str:
        if isinstance(self.source, Path):
            return str(self.source)
        return getattr(self.source, 'name', '<stream>')

    def parse(self) -> ScaffoldGroup:
        """Read every row and group the markers by scaffold and start."""
        try:
            if isinstance(self.source, Path):
                with open(self.source, 'r', encoding='utf-8') as f:
                    return self.parse_lines(f)
            return self.parse_lines(self.source)
        except UnicodeDecodeError as e:
            raise ParseError(
                f"Input is not valid UTF-8 ({e.reason})",
                line_number=self.lines_read + 1
            ) from e
        except IOError as e:
            raise ParseError(f"Failed to read input file: {e}")

    def parse_lines(self, lines: Iterable[str]) -> ScaffoldGroup:
        """Group the markers of ``lines`` by scaffold and start."""
        data: ScaffoldGroup = {}
        seen_at: Dict[Tuple[str, int], int] = {}
        self.marker_count = 0
        self.lines_read = 0

        for line_number, line in enumerate(lines, start=1):
            self.lines_read = line_number
            line = line.rstrip('\n').replace('\r', '')

            if self.title and line_number == 1:
                self.title_line = line
                continue
            if not line.strip():
                continue

            marker = self.parse_line(line, line_number)
            self.marker_count += 1

            if self.sample_count is None:
                self.sample_count = marker.sample_count
            elif marker.sample_count != self.sample_count:
                raise ParseError(
                    f"Expected {self.sample_count} genotypes, got {marker.sample_count}",
                    line_number=line_number,
                    marker=marker.name
                )

            key = (marker.scaffold, marker.start)
            if key in seen_at:
                logger.warning(
                    f"Duplicate start position {marker.start} on {marker.scaffold}: "
                    f"line {line_number} replaces line {seen_at[key]}"
                )
            seen_at[key] = line_number
            data.setdefault(marker.scaffold, {})[marker.start] = marker

        return data

    @staticmethod
    def parse_line(line: str, line_number: int = None) -> Marker:
        """Parse a single matrix row into a Marker."""
        fields = line.split('\t')
        # trailing tabs from spreadsheet exports
        while len(fields) > 1 and fields[-1] == '':
            fields.pop()
        scaffold, start, width, count = MarkerMatrixParser.parse_marker_name(
            fields[0], line_number
        )

        genotypes = []
        for column, code in enumerate(fields[1:], start=2):
            try:
                genotypes.append(Genotype.from_code(code))
            except KeyError:
                raise ParseError(
                    f"Undefined genotype `{code}` in column {column}",
                    line_number=line_number,
                    marker=fields[0]
                ) from None

        return Marker(
            scaffold=scaffold,
            start=start,
            width=width,
            source_count=count,
            genotypes=genotypes
        )

    @staticmethod
    def parse_marker_name(name: str, line_number: int = None) -> Tuple[str, int, int, int]:
        """Split a marker name into scaffold, start, width and marker count."""
        match = MARKER_NAME_RE.match(name)
        if not match:
            raise ParseError(
                f"Marker name `{name}` is not scaffold_start:width:markers or scaffold_start",
                line_number=line_number
            )
        scaffold, start, width, count = match.groups()
        start = int(start)
        width = int(width) if width is not None else 1
        count = int(count) if count is not None else 1

        if start < 1 or width < 1 or count < 1:
            raise ParseError(
                "Start, width and count must be >= 1",
                line_number=line_number,
                marker=name
            )
        return scaffold, start, width, count


class MarkerMatrixWriter:
    """Writer for tab-separated marker matrices."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.rows_written = 0

    def write_title(self, title: Optional[str]) -> None:
        if title is not None:
            self.stream.write(f"{title}\n")

    def write_marker(self, marker: Marker) -> None:
        self.stream.write(format_marker(marker) + "\n")
        self.rows_written += 1

    def write(self, data: ScaffoldGroup, title: Optional[str] = None) -> int:
        """Write every scaffold in display order; return the number of rows."""
        self.write_title(title)
        for scaffold in scaffold_sort(data.keys()):
            for marker in scaffold_index(data[scaffold]):
                self.write_marker(marker)
        return self.rows_written


def format_marker(marker: Marker) -> str:
    """Render a marker as one matrix row (without newline)."""
    return "\t".join([marker.name] + [gt.value for gt in marker.genotypes])


def scaffold_index(markers: Dict[int, Marker]) -> List[Marker]:
    """A scaffold's markers in ascending start order."""
    return [markers[start] for start in sorted(markers)]


def scaffold_sort(scaffolds: Iterable[str]) -> List[str]:
    """
    Order scaffold names for output.

    If every name is letters followed by digits (``scaffold2``, ``chr10``) the
    names are sorted by prefix and then numerically; otherwise lexically.
    """
    scaffolds = list(scaffolds)
    keys = {}
    for scaffold in scaffolds:
        match = SCAFFOLD_NUMBER_RE.match(scaffold)
        if not match:
            return sorted(scaffolds)
        keys[scaffold] = (match.group(1), int(match.group(2)))
    return sorted(scaffolds, key=lambda s: keys[s])


def load_markers(source: Union[Path, str, TextIO], title: bool = False) -> Tuple[ScaffoldGroup, Optional[str]]:
    """Read a marker matrix; return the scaffold group and the title row."""
    parser = MarkerMatrixParser(source, title=title)
    data = parser.parse()
    logger.debug(f"Loaded {parser.marker_count} markers on {len(data)} scaffolds from {parser.source_name}")
    return data, parser.title_line


def write_markers(data: ScaffoldGroup, stream: TextIO, title: Optional[str] = None) -> int:
    """Write a scaffold group as a marker matrix; return the number of rows."""
    return MarkerMatrixWriter(stream).write(data, title=title)
