"""Shared fixtures: a fake audio tool that never needs ffmpeg."""

from pathlib import Path

import pytest

from weaving.errors import ExtractionError, ProbeError, AudioToolError
from weaving.workspace import Workspace


class FakeAudioTool:
    """
    Records calls and writes small text files instead of audio.

    Each extracted slice contains ``<source name>@<offset>``; a concatenation
    contains the lines of its inputs, in order, so the content of a rendered
    file spells out the slice order.
    """

    def __init__(self, durations=None, *, fail_probe=(), fail_extract_after=None,
                 fail_concatenate=False):
        self.durations = {str(k): v for k, v in (durations or {}).items()}
        self.fail_probe = {str(p) for p in fail_probe}
        self.fail_extract_after = fail_extract_after
        self.fail_concatenate = fail_concatenate
        self.extract_calls = []
        self.concatenate_calls = []

    def probe_duration(self, path):
        if str(path) in self.fail_probe:
            raise ProbeError(f"cannot probe {path}", stderr="boom")
        return self.durations[str(path)]

    def extract_slice(self, src, dst, *, sample_rate, offset, length):
        if (
            self.fail_extract_after is not None
            and len(self.extract_calls) >= self.fail_extract_after
        ):
            raise ExtractionError(f"cannot extract from {src}")
        self.extract_calls.append((str(src), Path(dst).name, sample_rate, offset, length))
        Path(dst).write_text(f"{Path(src).stem}@{offset:.3f}\n")
        return Path(dst)

    def concatenate(self, paths, dst):
        paths = [Path(p) for p in paths]
        if self.fail_concatenate:
            raise AudioToolError(f"cannot concatenate into {dst}")
        self.concatenate_calls.append(([p.name for p in paths], Path(dst)))
        Path(dst).write_text("".join(p.read_text() for p in paths))
        return Path(dst)


@pytest.fixture
def fake_tool_factory():
    return FakeAudioTool


@pytest.fixture
def workspace(tmp_path):
    ws = Workspace(tmp_path / "staging", ext="wav")
    ws.reset()
    return ws


@pytest.fixture
def make_sources(tmp_path):
    """Create placeholder input files; returns their paths as strings."""

    def _make(*names):
        paths = []
        for name in names:
            path = tmp_path / "inputs" / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("not really audio")
            paths.append(str(path))
        return paths

    return _make


def stage_slices(workspace, counts):
    """Write ``counts[i]`` export files for source ``i``; returns the sorted inventory."""
    for source_index, count in enumerate(counts):
        for index in range(count):
            workspace.export_path(index, source_index).write_text(
                f"s{source_index}@{index}\n"
            )
    return workspace.inventory()


@pytest.fixture
def stage(workspace):
    """Stage export files in the ``workspace`` fixture; see ``stage_slices``."""
    return lambda counts: stage_slices(workspace, counts)
