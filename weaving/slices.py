"""
Cutting sources into uniform slices.

A source of duration ``d`` cut into slices of length ``s`` yields
``floor(d / s)`` slices at offsets ``0, s, 2s, ...``. The trailing fragment
shorter than ``s`` is dropped. Durations are compared in whole milliseconds so
float noise can't add or lose a slice.

Examples:
    >>> [(s.index, s.offset) for s in derive_slices(1.0, 0.25)]
    [(0, 0.0), (1, 0.25), (2, 0.5), (3, 0.75)]
    >>> len(derive_slices(1.1, 0.25))  # the last 0.1s is dropped
    4
"""

from dataclasses import dataclass
import math
from pathlib import Path
from typing import Iterable

from .audio.tools import AudioTool
from .errors import ExtractionPhaseError
from .util import log, to_milliseconds
from .workspace import Workspace

# absorbs float error in ratios like 2000 / (1000 / 24)
_EPSILON = 1e-9


@dataclass(frozen=True)
class Source:
    """An input file, its duration in seconds, and its position in the input list."""

    path: str
    duration: float
    index: int


@dataclass(frozen=True)
class SliceSpec:
    """
    One window to extract from a source.

    ``length`` is always the nominal slice length, even for the last slice;
    the audio tool clamps windows that run past the end of the source.
    """

    source_index: int
    index: int
    offset: float
    length: float


def slice_count(duration: float, slice_length: float) -> int:
    """
    Number of whole slices of ``slice_length`` that fit in ``duration``.

    >>> slice_count(2.0, 1 / 24)
    48
    >>> slice_count(0.3, 0.1)
    3
    >>> slice_count(0.05, 0.1)
    0
    """
    if slice_length <= 0:
        raise ValueError(f"slice_length must be positive, got {slice_length}")
    duration_ms = max(to_milliseconds(duration), 0)
    return math.floor(duration_ms / (slice_length * 1000) + _EPSILON)


def derive_slices(
    duration: float, slice_length: float, *, source_index: int = 0
) -> list[SliceSpec]:
    """
    The ordered extraction windows for a source of ``duration`` seconds.

    Args:
        duration: Source duration in seconds
        slice_length: Slice length in seconds (must be positive)
        source_index: Index of the source these windows belong to

    Returns:
        ``slice_count(duration, slice_length)`` contiguous, non-overlapping specs
    """
    if slice_length <= 0:
        raise ValueError(f"slice_length must be positive, got {slice_length}")
    return [
        SliceSpec(
            source_index=source_index,
            index=i,
            offset=i * slice_length,
            length=slice_length,
        )
        for i in range(slice_count(duration, slice_length))
    ]


def probe_sources(paths: Iterable[str | Path], tool: AudioTool) -> list[Source]:
    """Probe the duration of every input, keeping input order as source index."""
    sources = []
    for index, path in enumerate(paths):
        path = str(path)
        if not Path(path).is_file():
            raise ExtractionPhaseError(f"Input not found: {path}")
        sources.append(Source(path=path, duration=tool.probe_duration(path), index=index))
    return sources


def extract_slices(
    source: Source,
    tool: AudioTool,
    workspace: Workspace,
    *,
    slice_length: float,
    sample_rate: int,
    verbose: bool = True,
) -> list[Path]:
    """
    Extract every slice of ``source`` into ``workspace``.

    Returns the paths written, in slice order.
    """
    specs = derive_slices(source.duration, slice_length, source_index=source.index)
    log(
        f"Slicing {source.path} ({source.duration:.2f}s) into {len(specs)} slices...",
        verbose=verbose,
    )
    paths = []
    for spec in specs:
        dst = workspace.export_path(spec.index, spec.source_index)
        try:
            paths.append(
                tool.extract_slice(
                    source.path,
                    dst,
                    sample_rate=sample_rate,
                    offset=spec.offset,
                    length=spec.length,
                )
            )
        except OSError as e:
            raise ExtractionPhaseError(f"Could not extract {dst.name}: {e}") from e
    return paths
