"""
Command line interface.

    python -m weaving --input drums.wav:voice.wav --output woven.wav --pattern 2:1

Errors are printed and turned into the exit codes listed in ``weaving.errors``.
"""

import sys

import argh

from .config import (
    DFLT_BACKEND,
    DFLT_EXT,
    DFLT_PART_SIZE,
    DFLT_SAMPLE_RATE,
    DFLT_TMP_DIR,
    WeaveConfig,
)
from .errors import AudioToolError, WeaveError
from .pipeline import weave_audio


@argh.arg("--input", help="Colon-separated input audio paths (at least two)")
@argh.arg("--output", help="Path of the rendered track")
@argh.arg("--pattern", help="Colon-separated weights, one per input (default all 1)")
@argh.arg("--realtime", help="Drop slices periodically to keep source pacing")
@argh.arg("--tmp", help="Staging directory, wiped at start and end")
@argh.arg("--fps", type=float, help="Slices per second (default 24)")
@argh.arg("--ms", type=float, help="Slice length in milliseconds (overrides --fps)")
@argh.arg("--random", help="Shuffle slices instead of interleaving")
@argh.arg("--seed", type=int, help="Seed for --random")
@argh.arg("--timeout", type=float, help="Seconds to wait on one audio tool call")
@argh.arg("--backend", choices=["ffmpeg", "pydub"], help="Audio tool")
@argh.arg("--quiet", help="Only print errors and warnings")
def weave_files(
    *,
    input=None,
    output=None,
    pattern=None,
    realtime=False,
    tmp=DFLT_TMP_DIR,
    fps=None,
    ms=None,
    random=False,
    seed=None,
    sample_rate=DFLT_SAMPLE_RATE,
    ext=DFLT_EXT,
    part_size=DFLT_PART_SIZE,
    backend=DFLT_BACKEND,
    timeout=None,
    quiet=False,
):
    """Slice the inputs, interleave the slices by pattern and render one track."""
    try:
        config = WeaveConfig.from_cli(
            input,
            output,
            pattern=pattern,
            fps=fps,
            ms=ms,
            realtime=realtime,
            random=random,
            seed=seed,
            sample_rate=sample_rate,
            tmp_dir=tmp,
            ext=ext,
            part_size=part_size,
            backend=backend,
            timeout=timeout,
            verbose=not quiet,
        )
        weave_audio(config)
    except WeaveError as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, AudioToolError) and e.stderr:
            print(e.stderr, file=sys.stderr)
        sys.exit(e.exit_code)


def main():
    argh.dispatch_command(weave_files)


if __name__ == "__main__":
    main()
