"""
Errors raised while weaving audio.

Every error carries the process exit code the command line reports it with,
so library code raises and only ``weaving.__main__`` exits.

Exit codes:
    1   fewer than two inputs, or any other bad option
    2   missing output
    3   slice extraction or post-render cleanup failure
    4   duration probe or extraction-phase failure
    5   weave failure
    6   render failure
    7   final cleanup failure
    10  rename failure while weaving
    11  duration-probe tool failure
    12  audio tool not installed
"""


class WeaveError(RuntimeError):
    """Base exception for a failed weaving run."""

    exit_code = 1


class ConfigurationError(WeaveError, ValueError):
    """Bad options, detected before anything touches the disk."""

    exit_code = 1


class MissingOutputError(ConfigurationError):
    exit_code = 2


class ToolNotInstalledError(WeaveError):
    """The audio tool (or one of its executables) can't be found."""

    exit_code = 12


class AudioToolError(WeaveError):
    """The audio tool was invoked and failed.

    ``stderr`` holds whatever the tool reported, when there is something.
    """

    exit_code = 3

    def __init__(self, message: str, *, stderr: str | None = None):
        super().__init__(message)
        self.stderr = stderr


class ProbeError(AudioToolError):
    exit_code = 11


class ExtractionError(AudioToolError):
    exit_code = 3


class ExtractionPhaseError(WeaveError):
    """Anything else that goes wrong between probing and weaving."""

    exit_code = 4


class SequencingError(WeaveError):
    exit_code = 5


class RenameError(SequencingError):
    exit_code = 10


class RenderError(WeaveError):
    exit_code = 6


class WorkspaceError(WeaveError):
    """The staging directory can't be (re)created."""

    exit_code = 7
