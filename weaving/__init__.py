"""
Slice audio sources, interleave the slices by pattern, render one track.
"""

from weaving.config import WeaveConfig, parse_pattern
from weaving.errors import WeaveError
from weaving.pipeline import weave_audio
from weaving.renderer import render
from weaving.sequencer import SequenceStrategy, select_strategy, weave, weave_order
from weaving.slices import SliceSpec, Source, derive_slices, extract_slices
from weaving.workspace import Workspace
