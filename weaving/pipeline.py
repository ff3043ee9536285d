"""
One complete weaving run: probe, slice, weave, render, clean up.

Examples:
    >>> cfg = WeaveConfig(["drums.wav", "voice.wav"], "woven.wav", pattern="2:1")  # doctest: +SKIP
    >>> weave_audio(cfg)  # doctest: +SKIP
    PosixPath('woven.wav')
"""

from pathlib import Path
import random as _random

from .audio.tools import AudioTool, get_tool
from .config import WeaveConfig
from .errors import ExtractionPhaseError, WorkspaceError
from .renderer import render
from .sequencer import weave
from .slices import extract_slices, probe_sources
from .util import log, warn
from .workspace import Workspace


def weave_audio(
    config: WeaveConfig,
    *,
    tool: AudioTool | None = None,
    rng: _random.Random | None = None,
) -> Path:
    """
    Run the whole pipeline described by ``config``.

    Tool and probe problems surface before anything is written. Once slicing
    has started, any failure aborts the run (no partial output is rendered)
    after a best-effort wipe of the workspace.

    Args:
        config: The run configuration
        tool: Audio tool to use (default: made from ``config.backend``)
        rng: Random generator for the random strategy (default: seeded from
            ``config.seed``)

    Returns:
        Path to the rendered output
    """
    if tool is None:
        tool = get_tool(config.backend, timeout=config.timeout)
    if rng is None:
        rng = _random.Random(config.seed)

    sources = probe_sources(config.inputs, tool)

    workspace = Workspace(config.tmp_dir, ext=config.ext)
    try:
        workspace.reset()
    except WorkspaceError as e:
        raise ExtractionPhaseError(str(e)) from e

    try:
        for source in sources:
            extract_slices(
                source,
                tool,
                workspace,
                slice_length=config.slice_length,
                sample_rate=config.sample_rate,
                verbose=config.verbose,
            )
        plan = weave(
            workspace,
            config.pattern,
            realtime=config.realtime,
            random=config.random,
            rng=rng,
            verbose=config.verbose,
        )
        output = render(
            plan,
            config.output_path,
            tool,
            workspace,
            part_size=config.part_size,
            verbose=config.verbose,
        )
    except Exception:
        _cleanup_after_failure(workspace)
        raise

    log(f"Cleaning up {workspace.root}...", verbose=config.verbose)
    workspace.reset()
    return output


def _cleanup_after_failure(workspace: Workspace) -> None:
    try:
        workspace.reset()
    except WorkspaceError as e:
        warn(str(e))
