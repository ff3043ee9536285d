"""Audio tools weaving delegates decoding, trimming and joining to.

Main exports:
- AudioTool: the protocol every backend implements
- FFmpegTool: ffprobe/ffmpeg subprocess backend
- PydubTool: in-process pydub backend
- get_tool: make a backend by name
"""

from .tools import (
    AudioTool,
    FFmpegTool,
    PydubTool,
    ensure_tool,
    get_tool,
)

__all__ = [
    "AudioTool",
    "FFmpegTool",
    "PydubTool",
    "ensure_tool",
    "get_tool",
]
