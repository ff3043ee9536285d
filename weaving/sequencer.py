"""
Weaving: deciding the order slices are rendered in, and which are dropped.

The sequencer works on the sorted inventory of extracted slices
(``export-00000_0``, ``export-00000_1``, ``export-00001_0``, ...). One of three
strategies is picked per run:

- ``STANDARD`` (pattern of all 1s): keep the sorted order.
- ``WEIGHTED_GROUPED`` (any weight other than 1): deal the inventory into
  ``len(pattern)`` groups by position, then draw ``pattern[g]`` slices from
  group ``g`` in turn, cycling until the inventory is used up.
- ``RANDOM`` (``random=True``, overrides the pattern): shuffle.

With ``realtime``, the first two strategies alternately keep and drop runs of
slices, and the random strategy keeps only ``total // len(pattern)`` slices.
That thins the output back towards the playing time of one source.

Ordering is pure (``weave_order``) and tested without any files; ``weave``
applies it to a workspace: dropped slices are deleted and kept ones renamed
to ``render_00000``, ``render_00001``, ...

Examples:
    >>> kept, dropped = weave_order(["a0", "b0", "a1", "b1", "a2", "b2"], (2, 1))
    >>> kept
    ['a0', 'a1', 'b0', 'a2', 'b1']
    >>> dropped
    ['b2']
    >>> weave_order(list("abcdef"), (1, 1), realtime=True)
    (['a', 'b', 'e', 'f'], ['c', 'd'])
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Sequence, TypeVar
import math
import random as _random

from .errors import SequencingError, WeaveError
from .util import log
from .workspace import Workspace

T = TypeVar("T")
Pattern = Sequence[int]


class SequenceStrategy(Enum):
    STANDARD = "standard"
    WEIGHTED_GROUPED = "weighted_grouped"
    RANDOM = "random"


def select_strategy(pattern: Pattern, *, random: bool = False) -> SequenceStrategy:
    """
    Pick the strategy for a run. ``random`` wins over the pattern.

    >>> select_strategy((1, 1)).name
    'STANDARD'
    >>> select_strategy((2, 1)).name
    'WEIGHTED_GROUPED'
    >>> select_strategy((2, 1), random=True).name
    'RANDOM'
    """
    if random:
        return SequenceStrategy.RANDOM
    if any(weight != 1 for weight in pattern):
        return SequenceStrategy.WEIGHTED_GROUPED
    return SequenceStrategy.STANDARD


class Dropout:
    """
    Realtime keep/drop cadence.

    Calling the instance consumes one slice and returns True if that slice
    should be dropped. A countdown starts at ``first_period``; when it reaches
    zero the skip flag toggles and the countdown restarts at ``period``. The
    slice that triggers a toggle already gets the new flag.

    With ``enabled=False`` nothing is ever dropped.

    >>> drop = Dropout(period=2, first_period=3)
    >>> [drop() for _ in range(9)]
    [False, False, True, True, False, False, True, True, False]
    """

    def __init__(self, *, period: int, first_period: int, enabled: bool = True):
        self.period = period
        self.countdown = first_period
        self.enabled = enabled
        self.skip = False

    def __call__(self) -> bool:
        if not self.enabled:
            return False
        self.countdown -= 1
        if self.countdown == 0:
            self.skip = not self.skip
            self.countdown = self.period
        return self.skip


def pattern_indexes(pattern: Pattern) -> list[int]:
    """
    Group indexes in drawing order: group ``g`` repeated ``pattern[g]`` times.

    >>> pattern_indexes((2, 1, 3))
    [0, 0, 1, 2, 2, 2]
    """
    return [group for group, weight in enumerate(pattern) for _ in range(weight)]


def standard_order(
    items: Sequence[T], pattern: Pattern, *, realtime: bool = False
) -> tuple[list[T], list[T]]:
    """Keep sorted order, dropping periodic runs when ``realtime``."""
    dropout = Dropout(
        period=len(pattern), first_period=len(pattern) + 1, enabled=realtime
    )
    kept, dropped = [], []
    for item in items:
        (dropped if dropout() else kept).append(item)
    return kept, dropped


def weighted_grouped_order(
    items: Sequence[T], pattern: Pattern, *, realtime: bool = False
) -> tuple[list[T], list[T]]:
    """
    Draw from position-dealt groups according to the pattern weights.

    Groups are made by position (``i % len(pattern)``), not by source. Drawing
    from an exhausted group is skipped silently. Slices the loop never reaches
    (uneven weights can leave some behind) end up in ``dropped``.

    >>> weighted_grouped_order(list("abcd"), (1, 3))
    (['a', 'b', 'd'], ['c'])
    """
    n_groups = len(pattern)
    groups = [list(items[g::n_groups]) for g in range(n_groups)]
    cursors = [0] * n_groups
    indexes = pattern_indexes(pattern)
    n_loops = math.ceil(len(items) / len(indexes)) if indexes else 0
    dropout = Dropout(period=n_groups, first_period=len(indexes) + 1, enabled=realtime)

    kept, dropped = [], []
    for _ in range(n_loops):
        for group in indexes:
            if cursors[group] >= len(groups[group]):
                continue
            item = groups[group][cursors[group]]
            cursors[group] += 1
            (dropped if dropout() else kept).append(item)

    for group, cursor in zip(groups, cursors):
        dropped.extend(group[cursor:])
    return kept, dropped


def random_order(
    items: Sequence[T],
    pattern: Pattern,
    *,
    realtime: bool = False,
    rng: _random.Random | None = None,
) -> tuple[list[T], list[T]]:
    """
    Shuffle, keeping ``len(items) // len(pattern)`` slices when ``realtime``.

    >>> kept, dropped = random_order(list(range(10)), (1, 1), realtime=True,
    ...                              rng=_random.Random(0))
    >>> len(kept), len(dropped), sorted(kept + dropped) == list(range(10))
    (5, 5, True)
    """
    rng = rng or _random.Random()
    shuffled = list(items)
    rng.shuffle(shuffled)
    n_keep = len(shuffled) // len(pattern) if realtime else len(shuffled)
    return shuffled[:n_keep], shuffled[n_keep:]


_ORDERS: dict[SequenceStrategy, Callable] = {
    SequenceStrategy.STANDARD: standard_order,
    SequenceStrategy.WEIGHTED_GROUPED: weighted_grouped_order,
    SequenceStrategy.RANDOM: random_order,
}


def weave_order(
    items: Sequence[T],
    pattern: Pattern,
    *,
    realtime: bool = False,
    random: bool = False,
    rng: _random.Random | None = None,
) -> tuple[list[T], list[T]]:
    """
    Split ``items`` into the render order and the dropped remainder.

    Every item ends up in exactly one of the two lists.
    """
    if not pattern:
        raise ValueError("pattern must have at least one weight")
    strategy = select_strategy(pattern, random=random)
    kwargs = {"rng": rng} if strategy is SequenceStrategy.RANDOM else {}
    return _ORDERS[strategy](items, pattern, realtime=realtime, **kwargs)


def weave(
    workspace: Workspace,
    pattern: Pattern,
    *,
    realtime: bool = False,
    random: bool = False,
    rng: _random.Random | None = None,
    verbose: bool = True,
) -> list[Path]:
    """
    Weave the slices extracted into ``workspace``.

    Dropped slices are deleted, kept slices are renamed into the render
    sequence.

    Returns:
        The render sequence paths, in order

    Raises:
        RenameError: a kept slice couldn't be renamed
        SequencingError: anything else went wrong
    """
    try:
        items = workspace.inventory()
        kept, dropped = weave_order(
            items, pattern, realtime=realtime, random=random, rng=rng
        )
    except WeaveError:
        raise
    except (OSError, ValueError) as e:
        raise SequencingError(f"Could not weave slices in {workspace.root}: {e}") from e

    strategy = select_strategy(pattern, random=random)
    log(
        f"Weaving {len(items)} slices ({strategy.value}): "
        f"keeping {len(kept)}, dropping {len(dropped)}",
        verbose=verbose,
    )
    for path in dropped:
        workspace.discard(path)
    return [workspace.promote(path, index) for index, path in enumerate(kept)]
