"""
Tests for chunked rendering.

These tests verify:
- Plans up to part_size are joined in one call
- Longer plans are joined in parts, then the parts are joined
- Order is preserved across parts
- Failures surface as RenderError
"""

import pytest

from weaving.errors import RenderError
from weaving.renderer import chunked, render


def _plan(workspace, n):
    paths = []
    for i in range(n):
        path = workspace.render_path(i)
        path.write_text(f"{i}\n")
        paths.append(path)
    return paths


class TestChunked:
    def test_sizes(self):
        assert [len(c) for c in chunked(range(1200), 500)] == [500, 500, 200]
        assert [len(c) for c in chunked(range(1000), 500)] == [500, 500]
        assert list(chunked([], 3)) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            list(chunked([1, 2], 0))


class TestRender:
    def test_direct_concatenation(self, workspace, tmp_path, fake_tool_factory):
        tool = fake_tool_factory()
        plan = _plan(workspace, 400)
        output = tmp_path / "out" / "woven.wav"

        result = render(plan, output, tool, workspace, part_size=500, verbose=False)

        assert result == output
        assert len(tool.concatenate_calls) == 1
        names, dst = tool.concatenate_calls[0]
        assert dst == output
        assert len(names) == 400
        assert not list(workspace.root.glob("render_part_*"))

    def test_two_level_concatenation(self, workspace, tmp_path, fake_tool_factory):
        tool = fake_tool_factory()
        plan = _plan(workspace, 1200)
        output = tmp_path / "woven.wav"

        render(plan, output, tool, workspace, part_size=500, verbose=False)

        assert [len(names) for names, _ in tool.concatenate_calls] == [500, 500, 200, 3]
        assert [dst.name for _, dst in tool.concatenate_calls[:3]] == [
            "render_part_00000.wav",
            "render_part_00001.wav",
            "render_part_00002.wav",
        ]
        final_names, final_dst = tool.concatenate_calls[-1]
        assert final_dst == output
        assert final_names == [
            "render_part_00000.wav",
            "render_part_00001.wav",
            "render_part_00002.wav",
        ]
        assert output.read_text().split() == [str(i) for i in range(1200)]

    def test_exactly_part_size_is_direct(self, workspace, tmp_path, fake_tool_factory):
        tool = fake_tool_factory()
        render(_plan(workspace, 5), tmp_path / "o.wav", tool, workspace,
               part_size=5, verbose=False)
        assert len(tool.concatenate_calls) == 1

    def test_empty_plan(self, workspace, tmp_path, fake_tool_factory):
        with pytest.raises(RenderError):
            render([], tmp_path / "o.wav", fake_tool_factory(), workspace)

    def test_plan_too_long_for_two_levels(self, workspace, tmp_path, fake_tool_factory):
        tool = fake_tool_factory()
        plan = _plan(workspace, 10)
        with pytest.raises(RenderError):
            render(plan, tmp_path / "o.wav", tool, workspace, part_size=3, verbose=False)
        assert tool.concatenate_calls == []

    def test_tool_failure(self, workspace, tmp_path, fake_tool_factory):
        tool = fake_tool_factory(fail_concatenate=True)
        with pytest.raises(RenderError) as exc_info:
            render(_plan(workspace, 3), tmp_path / "o.wav", tool, workspace, verbose=False)
        assert exc_info.value.exit_code == 6


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
