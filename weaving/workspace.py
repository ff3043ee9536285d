"""
Staging directory for one weaving run.

All intermediate files live flat in one directory:

- ``export-00012_1.wav``: slice 12 of input 1, as extracted
- ``render_00034.wav``: position 34 of the woven sequence
- ``render_part_00002.wav``: third intermediate render chunk

Zero padding keeps a plain sorted listing in slice order.
"""

from pathlib import Path
import shutil

from .errors import ExtractionPhaseError, RenameError, WorkspaceError
from .util import warn

EXPORT_PREFIX = "export-"
RENDER_PREFIX = "render_"
PART_PREFIX = "render_part_"
INDEX_WIDTH = 5


class Workspace:
    """
    A flat staging directory and the names of the files in it.

    Args:
        root: Directory path (created by ``reset``)
        ext: Audio format extension of staged files

    Examples:
        >>> ws = Workspace("/tmp/weaving", ext="wav")
        >>> ws.export_path(12, 1).name
        'export-00012_1.wav'
        >>> ws.render_path(34).name
        'render_00034.wav'
        >>> ws.part_path(2).name
        'render_part_00002.wav'
    """

    def __init__(self, root: str | Path, *, ext: str = "wav"):
        self.root = Path(root)
        self.ext = ext.lstrip(".")

    @property
    def suffix(self) -> str:
        return f".{self.ext}"

    def export_path(self, index: int, source_index: int) -> Path:
        # wider indexes would sort out of slice order
        if index >= 10**INDEX_WIDTH:
            raise ExtractionPhaseError(
                f"Slice {index} of input {source_index} does not fit in "
                f"{INDEX_WIDTH} digits; use longer slices or shorter inputs"
            )
        return self.root / f"{EXPORT_PREFIX}{index:0{INDEX_WIDTH}d}_{source_index}{self.suffix}"

    def render_path(self, index: int) -> Path:
        return self.root / f"{RENDER_PREFIX}{index:0{INDEX_WIDTH}d}{self.suffix}"

    def part_path(self, index: int) -> Path:
        return self.root / f"{PART_PREFIX}{index:0{INDEX_WIDTH}d}{self.suffix}"

    def reset(self) -> Path:
        """
        Wipe the directory if it exists, then (re)create it.

        Failing to remove old content only prints a warning; failing to
        create the directory raises ``WorkspaceError``.
        """
        if self.root.exists():
            try:
                shutil.rmtree(self.root)
            except OSError as e:
                warn(f"Could not remove workspace {self.root}: {e}")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(f"Could not create workspace {self.root}: {e}") from e
        return self.root

    def inventory(self) -> list[Path]:
        """
        Sorted list of extracted slices.

        Anything that isn't named like an extracted slice with this
        workspace's extension is left out.
        """
        return sorted(
            p
            for p in self.root.iterdir()
            if p.is_file()
            and p.name.startswith(EXPORT_PREFIX)
            and p.suffix == self.suffix
        )

    def discard(self, path: str | Path) -> None:
        """Delete a staged file. Failure is reported, not raised."""
        try:
            Path(path).unlink()
        except OSError as e:
            warn(f"Could not delete {path}: {e}")

    def promote(self, path: str | Path, index: int) -> Path:
        """Rename a kept slice to position ``index`` of the render sequence."""
        target = self.render_path(index)
        try:
            Path(path).rename(target)
        except OSError as e:
            raise RenameError(f"Could not move {path} to {target}: {e}") from e
        return target

    def __repr__(self) -> str:
        return f"Workspace('{self.root}', ext='{self.ext}')"
