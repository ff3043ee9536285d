"""
Audio tools that do the actual decoding, trimming and joining.

Weaving only decides which ranges of which inputs go where. Everything that
touches samples goes through an ``AudioTool``:

- ``probe_duration(path)``: duration of a file, in seconds
- ``extract_slice(src, dst, sample_rate=, offset=, length=)``: write one
  resampled range of ``src`` to ``dst``
- ``concatenate(paths, dst)``: write ``paths`` back to back into ``dst``

Two backends ship with the package:

- ``FFmpegTool``: shells out to ``ffprobe`` / ``ffmpeg`` (the default)
- ``PydubTool``: does the same in-process with pydub

Examples:
    >>> tool = get_tool("ffmpeg")  # doctest: +SKIP
    >>> tool.probe_duration("song.mp3")  # doctest: +SKIP
    183.24
    >>> tool.extract_slice("song.mp3", "slice.wav", sample_rate=44100,
    ...                    offset=10.0, length=0.5)  # doctest: +SKIP
    PosixPath('slice.wav')
"""

from typing import Protocol, Iterable, TYPE_CHECKING, runtime_checkable
from pathlib import Path
import shutil
import subprocess

from ..errors import (
    AudioToolError,
    ConfigurationError,
    ExtractionError,
    ExtractionPhaseError,
    ProbeError,
    ToolNotInstalledError,
)
from ..util import require_package, to_milliseconds

if TYPE_CHECKING:
    from pydub import AudioSegment


@runtime_checkable
class AudioTool(Protocol):
    """What weaving needs from an audio-processing backend."""

    def probe_duration(self, path: str | Path) -> float: ...

    def extract_slice(
        self,
        src: str | Path,
        dst: str | Path,
        *,
        sample_rate: int,
        offset: float,
        length: float,
    ) -> Path: ...

    def concatenate(self, paths: Iterable[str | Path], dst: str | Path) -> Path: ...


def ensure_tool(name: str) -> str:
    """
    Return the full path of executable ``name``, or raise if it isn't installed.

    >>> ensure_tool("definitely-not-an-audio-tool-xyz")
    Traceback (most recent call last):
      ...
    weaving.errors.ToolNotInstalledError: 'definitely-not-an-audio-tool-xyz' is required but was not found on PATH
    """
    path = shutil.which(name)
    if path is None:
        raise ToolNotInstalledError(f"'{name}' is required but was not found on PATH")
    return path


class FFmpegTool:
    """
    Audio tool backed by the ``ffmpeg`` and ``ffprobe`` executables.

    Args:
        ffmpeg: Name or path of the ffmpeg executable
        ffprobe: Name or path of the ffprobe executable
        timeout: Seconds to wait for one invocation (None = wait forever)

    Raises ``ToolNotInstalledError`` at construction if either executable is
    missing, so a run fails before it touches the disk.
    """

    def __init__(
        self,
        *,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        timeout: float | None = None,
    ):
        self.ffmpeg = ensure_tool(ffmpeg)
        self.ffprobe = ensure_tool(ffprobe)
        self.timeout = timeout

    def _run(self, cmd: list[str], *, error_cls=AudioToolError) -> str:
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=False, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise error_cls(
                f"{Path(cmd[0]).name} timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise error_cls(f"Could not run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            raise error_cls(
                f"{Path(cmd[0]).name} failed with return code {result.returncode}",
                stderr=result.stderr,
            )
        return result.stdout

    def probe_duration(self, path: str | Path) -> float:
        cmd = [
            self.ffprobe,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
        out = self._run(cmd, error_cls=ProbeError).strip()
        try:
            return float(out.splitlines()[0])
        except (IndexError, ValueError) as e:
            raise ExtractionPhaseError(
                f"Could not read a duration for {path} from ffprobe output: {out!r}"
            ) from e

    def extract_slice(
        self,
        src: str | Path,
        dst: str | Path,
        *,
        sample_rate: int,
        offset: float,
        length: float,
    ) -> Path:
        cmd = [
            self.ffmpeg,
            "-v",
            "error",
            "-y",
            "-ss",
            f"{offset:.6f}",
            "-t",
            f"{length:.6f}",
            "-i",
            str(src),
            "-vn",
            "-ar",
            str(sample_rate),
            str(dst),
        ]
        self._run(cmd, error_cls=ExtractionError)
        return Path(dst)

    def concatenate(self, paths: Iterable[str | Path], dst: str | Path) -> Path:
        paths = [str(p) for p in paths]
        if not paths:
            raise AudioToolError("Nothing to concatenate")
        cmd = [self.ffmpeg, "-v", "error", "-y"]
        for p in paths:
            cmd += ["-i", p]
        streams = "".join(f"[{i}:a]" for i in range(len(paths)))
        cmd += [
            "-filter_complex",
            f"{streams}concat=n={len(paths)}:v=0:a=1[out]",
            "-map",
            "[out]",
            str(dst),
        ]
        self._run(cmd)
        return Path(dst)


class PydubTool:
    """
    Audio tool that works in-process with pydub.

    pydub still needs ffmpeg to decode compressed formats, but wav in and
    wav out works without it.

    Slices are extracted source by source, so the last decoded source is kept
    and reused until ``extract_slice`` is asked for a different one.

    Args:
        format: Export format for written files (None = from the extension)
    """

    def __init__(self, *, format: str | None = None):
        self._AudioSegment = require_package("pydub").AudioSegment
        self.format = format
        self._source = None  # (path, decoded segment)

    def _load_source(self, src: str | Path) -> "AudioSegment":
        key = str(src)
        if self._source is None or self._source[0] != key:
            self._source = (key, self._load(src, ExtractionError))
        return self._source[1]

    def _load(self, path: str | Path, error_cls) -> "AudioSegment":
        try:
            return self._AudioSegment.from_file(str(path))
        except Exception as e:
            raise error_cls(f"Could not decode {path}: {e}") from e

    def _export(self, segment: "AudioSegment", dst: str | Path, error_cls) -> Path:
        dst = Path(dst)
        format = self.format or (dst.suffix[1:] if dst.suffix else "wav")
        try:
            segment.export(str(dst), format=format)
        except Exception as e:
            raise error_cls(f"Could not write {dst}: {e}") from e
        return dst

    def probe_duration(self, path: str | Path) -> float:
        return len(self._load(path, ProbeError)) / 1000.0

    def extract_slice(
        self,
        src: str | Path,
        dst: str | Path,
        *,
        sample_rate: int,
        offset: float,
        length: float,
    ) -> Path:
        audio = self._load_source(src)
        start_ms = to_milliseconds(offset)
        # pydub clamps slices running past the end, like ffmpeg does
        segment = audio[start_ms : start_ms + to_milliseconds(length)]
        if segment.frame_rate != sample_rate:
            segment = segment.set_frame_rate(sample_rate)
        return self._export(segment, dst, ExtractionError)

    def concatenate(self, paths: Iterable[str | Path], dst: str | Path) -> Path:
        segments = [self._load(p, AudioToolError) for p in paths]
        if not segments:
            raise AudioToolError("Nothing to concatenate")
        combined = segments[0]
        for segment in segments[1:]:
            combined = combined + segment
        return self._export(combined, dst, AudioToolError)


_BACKENDS = {
    "ffmpeg": FFmpegTool,
    "pydub": PydubTool,
}


def get_tool(name: str = "ffmpeg", *, timeout: float | None = None) -> AudioTool:
    """
    Make the audio tool called ``name`` ('ffmpeg' or 'pydub').

    >>> get_tool("sox")
    Traceback (most recent call last):
      ...
    weaving.errors.ConfigurationError: Unknown audio backend 'sox'. Choose from: ffmpeg, pydub
    """
    if name not in _BACKENDS:
        raise ConfigurationError(
            f"Unknown audio backend '{name}'. Choose from: {', '.join(_BACKENDS)}"
        )
    if name == "ffmpeg":
        return FFmpegTool(timeout=timeout)
    try:
        return PydubTool()
    except ImportError as e:
        raise ToolNotInstalledError(str(e)) from e
