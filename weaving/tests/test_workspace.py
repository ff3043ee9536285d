"""
Tests for the staging directory.

These tests verify:
- reset wipes and recreates the directory
- file naming for exports, renders and parts
- inventory filtering and ordering
- discard is best-effort, promote raises RenameError
"""

import pytest

from weaving.errors import ExtractionPhaseError, RenameError, WorkspaceError
from weaving.workspace import Workspace


class TestReset:
    def test_creates_missing_directory(self, tmp_path):
        ws = Workspace(tmp_path / "a" / "b")
        assert ws.reset().is_dir()

    def test_wipes_existing_content(self, tmp_path):
        ws = Workspace(tmp_path / "staging")
        ws.reset()
        (ws.root / "old.wav").write_text("stale")
        (ws.root / "sub").mkdir()

        ws.reset()

        assert ws.root.is_dir()
        assert list(ws.root.iterdir()) == []

    def test_removal_failure_is_not_fatal(self, tmp_path, monkeypatch, capsys):
        ws = Workspace(tmp_path / "staging")
        ws.reset()

        def fail(path):
            raise PermissionError("busy")

        monkeypatch.setattr("weaving.workspace.shutil.rmtree", fail)
        ws.reset()

        assert "Warning: Could not remove workspace" in capsys.readouterr().out

    def test_creation_failure_is_fatal(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("I am not a directory")
        with pytest.raises(WorkspaceError):
            Workspace(blocker / "staging").reset()


class TestNames:
    def test_paths(self, tmp_path):
        ws = Workspace(tmp_path, ext=".mp3")
        assert ws.export_path(7, 2).name == "export-00007_2.mp3"
        assert ws.render_path(123).name == "render_00123.mp3"
        assert ws.part_path(0).name == "render_part_00000.mp3"

    def test_zero_padding_sorts_numerically(self, tmp_path):
        ws = Workspace(tmp_path)
        names = [ws.export_path(i, 0).name for i in (10, 9, 100, 1)]
        assert sorted(names) == [ws.export_path(i, 0).name for i in (1, 9, 10, 100)]

    def test_index_too_wide_for_padding(self, tmp_path):
        ws = Workspace(tmp_path)
        assert ws.export_path(99999, 0).name == "export-99999_0.wav"
        with pytest.raises(ExtractionPhaseError) as exc_info:
            ws.export_path(100000, 0)
        assert exc_info.value.exit_code == 4


class TestInventory:
    def test_filters_and_sorts(self, workspace):
        for name in [
            "export-00001_0.wav",
            "export-00000_1.wav",
            "export-00000_0.wav",
            "render_00000.wav",
            "export-00002_0.mp3",
            "readme.txt",
        ]:
            (workspace.root / name).write_text("x")
        (workspace.root / "export-00003_0.wav").mkdir()

        assert [p.name for p in workspace.inventory()] == [
            "export-00000_0.wav",
            "export-00000_1.wav",
            "export-00001_0.wav",
        ]


class TestDiscardAndPromote:
    def test_discard(self, workspace):
        path = workspace.export_path(0, 0)
        path.write_text("x")
        workspace.discard(path)
        assert not path.exists()

    def test_discard_missing_file_warns(self, workspace, capsys):
        workspace.discard(workspace.export_path(0, 0))
        assert "Warning: Could not delete" in capsys.readouterr().out

    def test_promote(self, workspace):
        path = workspace.export_path(4, 1)
        path.write_text("x")
        target = workspace.promote(path, 2)
        assert target.name == "render_00002.wav"
        assert target.read_text() == "x"
        assert not path.exists()

    def test_promote_missing_file(self, workspace):
        with pytest.raises(RenameError):
            workspace.promote(workspace.export_path(0, 0), 0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
