"""
Rendering a woven sequence into one output file.

Audio tools take their inputs on the command line, so one concatenation call
is limited to ``part_size`` files. Longer plans are rendered in two levels:
each run of ``part_size`` slices is joined into ``render_part_NNNNN``, then
the parts are joined into the output. Two levels cover ``part_size ** 2``
slices (250,000 with the default of 500).

Examples:
    >>> [len(chunk) for chunk in chunked(range(1200), 500)]
    [500, 500, 200]
"""

from typing import Iterable, Iterator, Sequence, TypeVar
from pathlib import Path

from .audio.tools import AudioTool
from .config import DFLT_PART_SIZE
from .errors import RenderError, WeaveError
from .util import log
from .workspace import Workspace

T = TypeVar("T")


def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Consecutive lists of ``size`` items (the last one may be shorter)."""
    if size < 1:
        raise ValueError(f"size must be at least 1, got {size}")
    chunk = []
    for item in items:
        chunk.append(item)
        if len(chunk) == size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def _concatenate(tool: AudioTool, paths: Sequence[Path], dst: Path) -> Path:
    try:
        return tool.concatenate(paths, dst)
    except (WeaveError, OSError) as e:
        raise RenderError(f"Could not render {dst}: {e}") from e


def render(
    plan: Sequence[str | Path],
    output: str | Path,
    tool: AudioTool,
    workspace: Workspace,
    *,
    part_size: int = DFLT_PART_SIZE,
    verbose: bool = True,
) -> Path:
    """
    Concatenate ``plan`` into ``output``, in order.

    Args:
        plan: Slice paths in render order
        output: Output file path (its directory is created if needed)
        tool: Audio tool doing the concatenation
        workspace: Where intermediate parts are written
        part_size: Largest number of files joined in one tool call

    Returns:
        Path to the output file

    Raises:
        RenderError: empty or oversized plan, or the tool failed
    """
    plan = [Path(p) for p in plan]
    output = Path(output)
    if not plan:
        raise RenderError("Nothing to render: the woven sequence is empty")
    if len(plan) > part_size**2:
        raise RenderError(
            f"Cannot render {len(plan)} slices in two levels of {part_size}; "
            f"use a larger part size"
        )
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RenderError(f"Could not create output directory {output.parent}: {e}") from e

    if len(plan) <= part_size:
        log(f"Rendering {len(plan)} slices...", verbose=verbose)
        result = _concatenate(tool, plan, output)
    else:
        parts = []
        for index, chunk in enumerate(chunked(plan, part_size)):
            log(
                f"Rendering part {index} ({len(chunk)} slices)...",
                verbose=verbose,
            )
            parts.append(_concatenate(tool, chunk, workspace.part_path(index)))
        log(f"Joining {len(parts)} parts...", verbose=verbose)
        result = _concatenate(tool, parts, output)

    log(f"Saved audio to: {result}", verbose=verbose)
    return result
