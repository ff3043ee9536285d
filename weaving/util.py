"""General utilities for weaving audio slices."""

from typing import Literal, Iterable
import importlib

TimeUnit = Literal["seconds", "frames", "milliseconds"]

DFLT_FPS = 24


def require_package(package_name: str):
    """
    Import a package, raising an informative error if not installed.

    >>> math = require_package('math')
    >>> math.pi
    3.141592653589793
    """
    try:
        return importlib.import_module(package_name)
    except ImportError as e:
        raise ImportError(
            f"Package '{package_name}' is required for this functionality. "
            f"Please install it via 'pip install {package_name}'."
        ) from e


def to_seconds(value: float, *, unit: TimeUnit, rate: float = DFLT_FPS) -> float:
    """
    Convert time value to seconds based on unit.

    Args:
        value: Time value to convert
        unit: Unit of the value ('seconds', 'frames', 'milliseconds')
        rate: Frame rate (fps), only used for 'frames'

    Returns:
        Time in seconds

    Examples:
        >>> to_seconds(10, unit="seconds")
        10
        >>> to_seconds(240, unit="frames", rate=24)
        10.0
        >>> to_seconds(250, unit="milliseconds")
        0.25
    """
    if unit == "seconds":
        return value
    elif unit == "frames":
        return value / rate
    elif unit == "milliseconds":
        return value / 1000.0
    else:
        raise ValueError(f"Invalid time unit: {unit}")


def to_milliseconds(seconds: float) -> int:
    """
    Quantize a duration in seconds to whole milliseconds.

    Used wherever durations are compared or divided, so that values like
    ``0.1 * 3`` don't drift away from ``0.3``.

    >>> to_milliseconds(0.3)
    300
    >>> to_milliseconds(0.1 * 3)
    300
    """
    return int(round(seconds * 1000))


def slice_length_seconds(*, fps: float | None = None, ms: float | None = None) -> float:
    """
    Length of one slice, in seconds, from a frame rate or a millisecond count.

    ``ms`` overrides ``fps``. With neither, slices are one frame at 24 fps.

    >>> slice_length_seconds(fps=25)
    0.04
    >>> slice_length_seconds(fps=25, ms=100)
    0.1
    >>> round(slice_length_seconds(), 6)
    0.041667
    """
    if ms is not None:
        if ms <= 0:
            raise ValueError(f"ms must be positive, got {ms}")
        return to_seconds(ms, unit="milliseconds")
    if fps is None:
        fps = DFLT_FPS
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    return to_seconds(1, unit="frames", rate=fps)


def split_colon_list(value: str | Iterable[str] | None) -> list[str]:
    """
    Split a colon-separated CLI value into its non-empty items.

    >>> split_colon_list("a.wav:b.wav:c.wav")
    ['a.wav', 'b.wav', 'c.wav']
    >>> split_colon_list("a.wav::b.wav:")
    ['a.wav', 'b.wav']
    >>> split_colon_list(['x.wav', 'y.wav'])
    ['x.wav', 'y.wav']
    >>> split_colon_list(None)
    []
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(":")
    return [item.strip() for item in value if item and item.strip()]


def log(*args, verbose: bool = True, **kwargs) -> None:
    """Print a progress line when ``verbose`` is on."""
    if verbose:
        print(*args, **kwargs)


def warn(message: str) -> None:
    """Report a non-fatal problem. Always printed."""
    print(f"Warning: {message}")
