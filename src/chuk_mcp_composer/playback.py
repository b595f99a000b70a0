"""
Playback contract - how a pattern grid reaches a sound source.

The engine never makes sound. A transport hands each sounding step to a
PlaybackTarget with its time offset and velocity class; what the target
does with it (synthesize, send MIDI, log) is outside this package.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from chuk_mcp_composer.constants import VelocityClass

logger = logging.getLogger(__name__)

STEPS_PER_BEAT = 4


@runtime_checkable
class PlaybackTarget(Protocol):
    """Receives one trigger per sounding step."""

    def trigger(
        self,
        track_index: int,
        time: float,
        velocity_class: VelocityClass,
        step_index: int,
    ) -> None:
        """
        Play one step.

        Args:
            track_index: Bank position of the track (0-6)
            time: Seconds from the start of the pattern
            velocity_class: NORMAL, ACCENT or ROLL
            step_index: Step within the pattern
        """
        ...


def step_duration(bpm: float) -> float:
    """Length of one 16th-note step in seconds."""
    if bpm <= 0:
        raise ValueError(f"BPM must be positive, got {bpm}")
    return 60.0 / bpm / STEPS_PER_BEAT


def dispatch_steps(
    tracks: list[list[int]],
    target: PlaybackTarget,
    bpm: float,
    start_time: float = 0.0,
    muted: set[int] | None = None,
) -> int:
    """
    Trigger every sounding step of a grid in time order.

    Args:
        tracks: Patterns in bank order
        target: Receiver of the triggers
        bpm: Tempo
        start_time: Time offset of step 0
        muted: Track indexes to skip

    Returns:
        Number of triggers sent
    """
    duration = step_duration(bpm)
    skip = muted or set()
    steps = max((len(t) for t in tracks), default=0)
    sent = 0
    for step in range(steps):
        time = start_time + step * duration
        for index, pattern in enumerate(tracks):
            if index in skip or step >= len(pattern) or not pattern[step]:
                continue
            target.trigger(index, time, VelocityClass(pattern[step]), step)
            sent += 1
    logger.debug("Dispatched %d triggers over %d steps", sent, steps)
    return sent
