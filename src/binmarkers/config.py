"""Configuration management for binmarkers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import yaml

from .exceptions import ConfigurationError


class PassMode(Enum):
    """Processing pass selector."""
    BIN = "bin"
    FILL = "fill"
    FILL2 = "fill2"
    CORRECT = "correct"
    MERGE = "merge"

    @classmethod
    def parse(cls, value: Union[str, int, "PassMode"]) -> "PassMode":
        """Resolve a mode name or its legacy numeric alias (1-5)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in NUMERIC_MODES:
            return NUMERIC_MODES[key]
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(f"Undefined mode `{value}`", parameter="mode") from None

    @property
    def default_window(self) -> Optional[int]:
        """Window used when none is given; merge takes no window."""
        return DEFAULT_WINDOWS[self]

    @property
    def uses_minimum(self) -> bool:
        return self in (PassMode.FILL, PassMode.CORRECT)


NUMERIC_MODES = {
    "1": PassMode.BIN,
    "2": PassMode.FILL,
    "3": PassMode.FILL2,
    "4": PassMode.CORRECT,
    "5": PassMode.MERGE,
}

DEFAULT_WINDOWS = {
    PassMode.BIN: 10_000,
    PassMode.FILL: 3,
    PassMode.FILL2: 3,
    PassMode.CORRECT: 5,
    PassMode.MERGE: None,
}


@dataclass(frozen=True)
class PassConfig:
    """Settings of a single processing pass.

    ``window`` is a size in bp for the bin pass and a half-window in markers
    for the fill, fill2 and correct passes. ``minimum`` is the smallest
    evidence block (target included) a fill or correct pass acts on and
    defaults to ``2 * window + 1``.
    """

    mode: PassMode
    window: Optional[int] = None
    minimum: Optional[int] = None
    skip_edges: bool = False

    def __post_init__(self):
        """Validate and resolve defaults after initialization."""
        mode = PassMode.parse(self.mode)
        object.__setattr__(self, 'mode', mode)

        if self.window is not None and self.window <= 0:
            raise ConfigurationError(f"must be > 0, got {self.window}", parameter="window")
        if self.minimum is not None and self.minimum < 2:
            raise ConfigurationError(f"must be >= 2, got {self.minimum}", parameter="minimum")

        if mode is PassMode.MERGE:
            object.__setattr__(self, 'window', None)
            return

        window = self.window if self.window is not None else mode.default_window
        object.__setattr__(self, 'window', window)
        if self.minimum is None:
            object.__setattr__(self, 'minimum', window * 2 + 1)

    @property
    def label(self) -> str:
        """Prefix for log messages of this pass."""
        if self.mode is PassMode.MERGE:
            return f"[Mode: {self.mode.value}]"
        return f"[Mode: {self.mode.value}; Window: {self.window}]"

    @classmethod
    def from_dict(cls, data: dict) -> "PassConfig":
        """Create from a mapping such as one YAML stage entry."""
        if 'mode' not in data:
            raise ConfigurationError("stage without a mode", parameter="mode")
        return cls(
            mode=data['mode'],
            window=data.get('window'),
            minimum=data.get('minimum'),
            skip_edges=bool(data.get('skip_edges', False)),
        )


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_PIPELINE = (
    PassConfig(PassMode.BIN, 10_000),
    PassConfig(PassMode.FILL, 3),
    PassConfig(PassMode.FILL, 5),
    PassConfig(PassMode.FILL, 7),
    PassConfig(PassMode.FILL2, 3),
    PassConfig(PassMode.CORRECT, 5),
    PassConfig(PassMode.MERGE),
)


@dataclass
class PipelineConfig:
    """Run configuration: where to read, where to write and which passes to run."""

    input_file: Optional[Path] = None
    output_file: Optional[Path] = None
    title: bool = False
    stages: List[PassConfig] = field(default_factory=lambda: list(DEFAULT_PIPELINE))
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        level = str(self.log_level).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                f"`{self.log_level}`, expected one of {', '.join(LOG_LEVELS)}", parameter="log_level"
            )
        self.log_level = level

        if self.input_file is not None:
            self.input_file = Path(self.input_file)
            if not self.input_file.exists():
                raise ConfigurationError(f"Input file not found: {self.input_file}")
        if self.output_file is not None:
            self.output_file = Path(self.output_file)

        self.stages = [
            stage if isinstance(stage, PassConfig) else PassConfig.from_dict(stage)
            for stage in self.stages
        ]
        if not self.stages:
            raise ConfigurationError("no processing stages configured", parameter="stages")

    @classmethod
    def from_yaml(cls, yaml_file: Path) -> "PipelineConfig":
        """Load configuration from YAML file."""
        yaml_file = Path(yaml_file)
        if not yaml_file.exists():
            raise ConfigurationError(f"Config file not found: {yaml_file}")

        try:
            with open(yaml_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            if 'input_file' in data and data['input_file'] is not None:
                data['input_file'] = Path(data['input_file'])
            if 'output_file' in data and data['output_file'] is not None:
                data['output_file'] = Path(data['output_file'])

            return cls(**data)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML config: {e}", config_file=str(yaml_file))
        except TypeError as e:
            raise ConfigurationError(f"Invalid config parameters: {e}", config_file=str(yaml_file))

    @classmethod
    def from_args(cls, args: dict) -> "PipelineConfig":
        """Create configuration from command-line arguments."""
        config_args = {}
        if args.get('input') is not None:
            config_args['input_file'] = args['input']
        if args.get('output') is not None:
            config_args['output_file'] = args['output']
        if args.get('log_level') is not None:
            config_args['log_level'] = args['log_level']
        config_args['title'] = bool(args.get('title'))

        if not args.get('pipeline'):
            if args.get('mode') is None:
                raise ConfigurationError(
                    "Please select a mode using -m or --mode, or use --pipeline"
                )
            config_args['stages'] = [
                PassConfig(
                    mode=args['mode'],
                    window=args.get('window'),
                    minimum=args.get('minimum'),
                    skip_edges=bool(args.get('no_edge')),
                )
            ]

        return cls(**config_args)
