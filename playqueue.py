#!/usr/bin/env python3
# playqueue.py – rev-q5  (2026-10-14)
"""
Play queue bookkeeping.

``QueueState`` is immutable; every change goes through one of the functions
below and yields a new state.  Two parallel queues are kept: ``linear``
(library / context order) and ``shuffled`` (a permutation of the same songs).
``index`` is -1 or a valid index into whichever queue ``shuffle`` selects.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, replace
from typing  import Optional, Sequence, Tuple

from models import RepeatMode, Song

# ────────────────────────── shuffle ──────────────────────────
def shuffle(queue: Sequence[Song], pinned_path: Optional[str] = None,
            rng: Optional[random.Random] = None) -> Tuple[Song, ...]:
    """Fisher–Yates over a copy of *queue*; *pinned_path* (if present) goes first."""
    rng = rng or random
    out = list(queue)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    if pinned_path:
        pos = next((i for i, s in enumerate(out) if s.path == pinned_path), -1)
        if pos != -1:
            out.insert(0, out.pop(pos))
    return tuple(out)


def find_path(queue: Sequence[Song], path: Optional[str]) -> int:
    if path is None:
        return -1
    return next((i for i, s in enumerate(queue) if s.path == path), -1)

# ────────────────────────── state ────────────────────────────
@dataclass(frozen=True)
class QueueState:
    linear:   Tuple[Song, ...] = ()
    shuffled: Tuple[Song, ...] = ()
    index:    int = -1
    shuffle:  bool = False
    repeat:   RepeatMode = RepeatMode.OFF

    @property
    def active(self) -> Tuple[Song, ...]:
        return self.shuffled if self.shuffle else self.linear

    @property
    def current(self) -> Optional[Song]:
        q = self.active
        return q[self.index] if 0 <= self.index < len(q) else None

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.active) - 1

# ────────────────────────── transitions ──────────────────────
def select(state: QueueState, song: Song, context: Sequence[Song],
           rng: Optional[random.Random] = None) -> Optional[QueueState]:
    """Make *context* the linear queue and point at *song*.  None if absent."""
    linear = tuple(context)
    if state.shuffle:
        shuffled = shuffle(linear, song.path, rng)
        if not shuffled or shuffled[0].path != song.path:
            return None
        return replace(state, linear=linear, shuffled=shuffled, index=0)
    idx = find_path(linear, song.path)
    if idx == -1:
        return None
    return replace(state, linear=linear, index=idx)


def step_forward(state: QueueState) -> Optional[QueueState]:
    """Next position, wrapping under repeat-all.  None means stop here."""
    if not state.active:
        return None
    if not state.is_last:
        return replace(state, index=state.index + 1)
    if state.repeat == RepeatMode.ALL:
        return replace(state, index=0)
    return None


def step_back(state: QueueState) -> Optional[QueueState]:
    """Previous position, wrapping under repeat-all.  None means stay."""
    if not state.active:
        return None
    if state.index > 0:
        return replace(state, index=state.index - 1)
    if state.repeat == RepeatMode.ALL:
        return replace(state, index=len(state.active) - 1)
    return None


def toggle_shuffle(state: QueueState, catalog: Sequence[Song],
                   rng: Optional[random.Random] = None) -> QueueState:
    if not state.shuffle:
        base = state.linear or tuple(catalog)
        cur  = state.current or (catalog[0] if catalog else None)
        shuffled = shuffle(base, cur.path if cur else None, rng)
        return replace(state, linear=base, shuffled=shuffled, shuffle=True,
                       index=0 if shuffled else -1)
    cur = state.current
    if cur is None:
        return replace(state, shuffle=False,
                       index=state.index if state.index < len(state.linear) else -1)
    idx = find_path(state.linear, cur.path)
    return replace(state, shuffle=False, index=idx if idx != -1 else 0)


def cycle_repeat(state: QueueState) -> QueueState:
    return replace(state, repeat=state.repeat.cycled())
