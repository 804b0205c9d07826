#!/usr/bin/env python3
"""
Main pipeline module for binmarkers.

This module provides the command-line entry point and chains the
processing passes over a loaded marker matrix.
"""

import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from .config import PassConfig, PassMode, PipelineConfig
from .core.parser import load_markers, scaffold_index, scaffold_sort, write_markers
from .exceptions import BinMarkersError
from .models import ScaffoldGroup
from .passes import Binner, BreakpointFiller, Corrector, Filler, Merger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}"


def setup_logging(log_level: str = "INFO") -> None:
    """Setup logging configuration; standard output is kept for the matrix."""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper(), format=LOG_FORMAT)


def count_markers(data: ScaffoldGroup) -> int:
    return sum(len(markers) for markers in data.values())


def run_pass(data: ScaffoldGroup, config: PassConfig) -> ScaffoldGroup:
    """
    Apply one processing pass to every scaffold.

    Fill, fill2 and correct modify the markers in place and return ``data``;
    bin and merge return a new scaffold group of aggregate markers.

    Args:
        data: Markers grouped by scaffold and start
        config: Pass settings

    Returns:
        The processed scaffold group
    """
    logger.info(f"{config.label} Processing {count_markers(data)} markers ...")

    if config.mode in (PassMode.BIN, PassMode.MERGE):
        processor = Binner(config.window) if config.mode is PassMode.BIN else Merger()
        result: ScaffoldGroup = {}
        for scaffold in scaffold_sort(data.keys()):
            markers = processor.process(scaffold_index(data[scaffold]))
            result[scaffold] = {marker.start: marker for marker in markers}
        logger.info(f"{config.label} Results: {count_markers(result)} markers!")
        return result

    if config.mode is PassMode.FILL:
        processor = Filler(config.window, config.minimum, config.skip_edges)
        message = "missing genotypes were filled!"
    elif config.mode is PassMode.FILL2:
        processor = BreakpointFiller(config.window)
        message = "missing genotypes were filled!"
    elif config.mode is PassMode.CORRECT:
        processor = Corrector(config.window, config.minimum, config.skip_edges)
        message = "misscored genotypes were corrected!"
    else:
        raise BinMarkersError(f"Undefined mode `{config.mode}`")

    changed = 0
    for scaffold in scaffold_sort(data.keys()):
        changed += processor.process(scaffold_index(data[scaffold]))
    logger.info(f"{config.label} {changed} {message}")
    return data


def run_stages(data: ScaffoldGroup, stages: Iterable[PassConfig]) -> ScaffoldGroup:
    """Apply passes in order, each to the previous pass's output."""
    for stage in stages:
        data = run_pass(data, stage)
    return data


def run_pipeline(config: PipelineConfig) -> ScaffoldGroup:
    """
    Load the input matrix, run the configured passes and write the result.

    Args:
        config: Pipeline configuration

    Returns:
        The final scaffold group
    """
    stages = config.stages
    logger.info(f"Running {len(stages)} pass(es): " + " -> ".join(stage.label for stage in stages))

    source = config.input_file if config.input_file is not None else sys.stdin
    logger.info(f"Loading data from `{config.input_file or 'STDIN'}` ...")
    data, title = load_markers(source, title=config.title)
    logger.info(f"{count_markers(data)} markers were loaded!")

    data = run_stages(data, stages)

    if config.output_file is not None:
        config.output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config.output_file, 'w') as out:
            rows = write_markers(data, out, title=title)
        logger.info(f"Wrote {rows} markers to {config.output_file}")
    else:
        write_markers(data, sys.stdout, title=title)
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "binmarkers - bin genotype markers, fill missing genotypes, "
            "correct misscored genotypes and merge identical markers"
        ),
        epilog=(
            "Default pipeline: bin (-w 10000), fill (-w 3, 5, 7), fill2 (-w 3), "
            "correct (-w 5), merge"
        ),
    )

    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        help="Tab-separated marker matrix (default: stdin)"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (default: stdout)"
    )

    parser.add_argument(
        "-t", "--title",
        action="store_true",
        help="Treat first line as title"
    )

    parser.add_argument(
        "-m", "--mode",
        help="bin, fill, fill2, correct or merge (or 1-5)"
    )

    parser.add_argument(
        "-w", "--window",
        type=int,
        help="Window size (default: bin 10000, fill 3, fill2 3, correct 5)"
    )

    parser.add_argument(
        "--minimum",
        type=int,
        help="Minimum block size for fill and correct (default: 2 * window + 1)"
    )

    parser.add_argument(
        "--no-edge",
        action="store_true",
        help="Do not process the first and last [window] markers (fill and correct)"
    )

    parser.add_argument(
        "--pipeline",
        action="store_true",
        help="Run all passes of the default pipeline in one command"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file (overrides the other options)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )
    return parser


def main(argv: Optional[list] = None) -> None:
    """Main entry point for command line interface."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.log_level)

    try:
        if args.config is not None:
            config = PipelineConfig.from_yaml(args.config)
            setup_logging(config.log_level)
        else:
            config = PipelineConfig.from_args(vars(args))
        run_pipeline(config)
    except BinMarkersError as e:
        logger.error(f"binmarkers failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("binmarkers interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
