"""
Run configuration.

One ``WeaveConfig`` is built per run (usually from the command line) and
passed to each stage, instead of process-wide settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
import os
import tempfile

from config2py import process_path

from .errors import ConfigurationError, MissingOutputError
from .util import slice_length_seconds, split_colon_list

DFLT_SAMPLE_RATE = 44100
DFLT_PART_SIZE = 500
DFLT_EXT = "wav"
DFLT_BACKEND = "ffmpeg"
DFLT_TMP_DIR = os.path.join(tempfile.gettempdir(), "weaving")

Pattern = tuple[int, ...]


def parse_pattern(pattern: str | list | tuple | None, n_inputs: int) -> Pattern:
    """
    Parse a ``n:n:n`` pattern and check it against the number of inputs.

    With no pattern, every input gets weight 1.

    >>> parse_pattern("2:1", 2)
    (2, 1)
    >>> parse_pattern(None, 3)
    (1, 1, 1)
    >>> parse_pattern("1:1", 3)
    Traceback (most recent call last):
      ...
    weaving.errors.ConfigurationError: Pattern 1:1 has 2 entries but there are 3 inputs
    """
    if pattern is None or pattern == "":
        return (1,) * n_inputs
    items = split_colon_list(pattern) if isinstance(pattern, str) else list(pattern)
    try:
        weights = tuple(int(item) for item in items)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Pattern must be integers, got {pattern!r}") from e
    if any(w < 1 for w in weights):
        raise ConfigurationError(f"Pattern weights must be positive, got {weights}")
    if len(weights) != n_inputs:
        raise ConfigurationError(
            f"Pattern {':'.join(map(str, weights))} has {len(weights)} entries "
            f"but there are {n_inputs} inputs"
        )
    return weights


@dataclass
class WeaveConfig:
    """
    Everything one weaving run needs to know.

    Attributes:
        inputs: Source audio paths, in input order
        output: Path of the rendered track
        pattern: One positive weight per input
        slice_length: Slice duration in seconds
        realtime: Drop slices periodically so the output keeps source pacing
        random: Shuffle slices instead of interleaving them
        seed: Seed for the shuffle (None = unseeded)
        sample_rate: Rate every slice is resampled to
        tmp_dir: Staging directory (wiped at start and end of the run)
        ext: Audio format of staged slices
        part_size: Largest number of files concatenated in one tool call
        backend: Audio tool, 'ffmpeg' or 'pydub'
        timeout: Seconds to wait on one tool call (None = no limit)
        verbose: Print progress lines
    """

    inputs: list[str]
    output: str
    pattern: Pattern = ()
    slice_length: float = field(default_factory=slice_length_seconds)
    realtime: bool = False
    random: bool = False
    seed: int | None = None
    sample_rate: int = DFLT_SAMPLE_RATE
    tmp_dir: str = DFLT_TMP_DIR
    ext: str = DFLT_EXT
    part_size: int = DFLT_PART_SIZE
    backend: str = DFLT_BACKEND
    timeout: float | None = None
    verbose: bool = True

    def __post_init__(self):
        self.inputs = [str(p) for p in self.inputs]
        if len(self.inputs) < 2:
            raise ConfigurationError(
                f"At least two inputs are required, got {len(self.inputs)}"
            )
        if not self.output:
            raise MissingOutputError("An output path is required")
        self.pattern = parse_pattern(self.pattern or None, len(self.inputs))
        if self.slice_length <= 0:
            raise ConfigurationError(
                f"slice_length must be positive, got {self.slice_length}"
            )
        if self.sample_rate <= 0:
            raise ConfigurationError(
                f"sample_rate must be positive, got {self.sample_rate}"
            )
        if self.part_size < 2:
            raise ConfigurationError(f"part_size must be at least 2, got {self.part_size}")
        self.ext = self.ext.lstrip(".")
        self.tmp_dir = process_path(self.tmp_dir)

    @property
    def output_path(self) -> Path:
        return Path(process_path(self.output))

    @classmethod
    def from_cli(
        cls,
        input: str | None,
        output: str | None,
        *,
        pattern: str | None = None,
        fps: float | None = None,
        ms: float | None = None,
        **kwargs,
    ) -> "WeaveConfig":
        """
        Build a config from raw command line values.

        ``input`` and ``pattern`` are colon-separated; ``ms`` overrides ``fps``.

        >>> cfg = WeaveConfig.from_cli("a.wav:b.wav", "out.wav", pattern="2:1", ms=50)
        >>> cfg.pattern, cfg.slice_length
        ((2, 1), 0.05)
        """
        try:
            slice_length = slice_length_seconds(fps=fps, ms=ms)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(
            inputs=split_colon_list(input),
            output=output or "",
            pattern=pattern,
            slice_length=slice_length,
            **{k: v for k, v in kwargs.items() if v is not None},
        )
