"""
Pattern bank - the seven-track step grid and its snapshot pool.

A bank holds one pattern per TrackRole in bank order. Snapshots are deep
copies of the grid stored in a fixed number of slots, chosen by the
SnapshotMode. Nothing outside the bank ever holds a reference to its
internal lists: saving copies in, loading copies out.
"""

from __future__ import annotations

import copy
import logging

from chuk_mcp_composer.constants import (
    DRUM_TRACK_COUNT,
    STEP_COUNT,
    TRACK_ORDER,
    ErrorMessages,
    SectionLevel,
    SnapshotMode,
    TrackRole,
    VelocityClass,
)
from chuk_mcp_composer.core.rng import RandomSource
from chuk_mcp_composer.generators.rhythm import fit_to_steps, generate_euclidean

logger = logging.getLogger(__name__)

Grid = list[list[int]]

MUTATION_THRESHOLD = 0.85


def empty_grid(steps: int = STEP_COUNT) -> Grid:
    """Seven silent tracks."""
    return [[0] * steps for _ in TRACK_ORDER]


class PatternBank:
    """
    Seven track patterns plus a snapshot pool.

    Example:
        bank = PatternBank.empty(SnapshotMode.EPIC)
        bank.compose_melodic_section("high", motif, rng=rng)
        bank.save_snapshot(0)
    """

    def __init__(
        self,
        tracks: Grid | None = None,
        mode: SnapshotMode | str = SnapshotMode.CLASSIC,
        steps: int = STEP_COUNT,
    ):
        """
        Initialize the bank.

        Args:
            tracks: Initial grid (copied); defaults to silence
            mode: Snapshot pool layout
            steps: Steps per pattern
        """
        if steps <= 0:
            raise ValueError(ErrorMessages.NEGATIVE_STEPS.format(steps=steps))
        self.steps = steps
        self.mode = SnapshotMode(mode)
        self.tracks: Grid = empty_grid(steps)
        self.snapshots: list[Grid | None] = [None] * self.mode.slot_count
        if tracks is not None:
            for index, pattern in enumerate(tracks):
                self.set_track(index, pattern)

    @classmethod
    def empty(
        cls, mode: SnapshotMode | str = SnapshotMode.CLASSIC, steps: int = STEP_COUNT
    ) -> PatternBank:
        """A silent bank."""
        return cls(mode=mode, steps=steps)

    @property
    def slot_count(self) -> int:
        return len(self.snapshots)

    def _index(self, track: int | TrackRole | str) -> int:
        if isinstance(track, int):
            index = track
        else:
            index = TrackRole(track).index
        if not 0 <= index < len(TRACK_ORDER):
            raise ValueError(
                ErrorMessages.INVALID_TRACK.format(last=len(TRACK_ORDER) - 1, index=index)
            )
        return index

    def _slot(self, slot: int) -> int:
        if not 0 <= slot < self.slot_count:
            raise ValueError(ErrorMessages.INVALID_SLOT.format(last=self.slot_count - 1, slot=slot))
        return slot

    def track(self, track: int | TrackRole | str) -> list[int]:
        """Copy of one track's pattern."""
        return list(self.tracks[self._index(track)])

    def set_track(self, track: int | TrackRole | str, pattern: list[int]) -> None:
        """
        Replace one track's pattern.

        Raises:
            ValueError: If the pattern is not exactly `steps` long
        """
        if len(pattern) != self.steps:
            raise ValueError(
                ErrorMessages.PATTERN_LENGTH.format(steps=self.steps, length=len(pattern))
            )
        self.tracks[self._index(track)] = [int(v) for v in pattern]

    def set_drums(self, matrix: Grid) -> None:
        """Replace the four drum tracks from a kick/snare/clap/hihat matrix."""
        for index, pattern in enumerate(matrix[:DRUM_TRACK_COUNT]):
            self.set_track(index, pattern)

    def clear(self) -> None:
        """Silence every track; snapshots are kept."""
        self.tracks = empty_grid(self.steps)

    def to_grid(self) -> Grid:
        """Deep copy of the current grid."""
        return copy.deepcopy(self.tracks)

    def compose_melodic_section(
        self,
        level: SectionLevel,
        motif: list[int] | None = None,
        *,
        rng: RandomSource,
    ) -> PatternBank:
        """
        Layer bass, lead and pad over the drums already in the bank.

        high: bass on every off-8th and on half of the kicks, pad on both
        bars. low: bass and pad on the bar downbeats only. A motif replaces
        the lead outright (clamped to velocity values); without one the
        lead is an 11- or 6-pulse Euclidean line.

        Args:
            level: "low" or "high"
            motif: Optional lead line
            rng: Random source

        Returns:
            self
        """
        high = level == "high"
        kick = self.tracks[TrackRole.KICK.index]
        bass = self.tracks[TrackRole.BASS.index]
        pad = self.tracks[TrackRole.PAD.index]

        if high:
            for i in range(self.steps):
                if i % 4 == 2 or (kick[i] == VelocityClass.NORMAL and rng.next() > 0.5):
                    bass[i] = VelocityClass.NORMAL
        else:
            bass[0] = VelocityClass.NORMAL
            if self.steps > 16:
                bass[16] = VelocityClass.NORMAL

        if motif:
            lead = [min(max(v, 0), VelocityClass.ROLL) for v in fit_to_steps(motif, self.steps)]
            if high:
                for i in range(0, self.steps, 2):
                    if rng.next() > 0.8:
                        lead[i] = VelocityClass.NORMAL
        else:
            lead = generate_euclidean(11 if high else 6, self.steps, 0)
        self.tracks[TrackRole.LEAD.index] = [int(v) for v in lead]

        pad[0] = VelocityClass.NORMAL
        if high and self.steps > 16:
            pad[16] = VelocityClass.NORMAL

        return self

    def mutate_track(self, track: int | TrackRole | str, *, rng: RandomSource) -> list[int]:
        """
        Mutate one track in place.

        Each step changes with 15% probability: rests become hits (drums
        have a 20% chance of a roll instead), hits either clear or become
        accents.

        Returns:
            Copy of the mutated pattern
        """
        index = self._index(track)
        is_drum = index < DRUM_TRACK_COUNT
        pattern = self.tracks[index]
        for i in range(self.steps):
            if rng.next() > MUTATION_THRESHOLD:
                if pattern[i] == VelocityClass.SILENT:
                    roll = is_drum and rng.next() > 0.8
                    pattern[i] = VelocityClass.ROLL if roll else VelocityClass.NORMAL
                else:
                    pattern[i] = VelocityClass.SILENT if rng.next() > 0.5 else VelocityClass.ACCENT
        return list(pattern)

    def randomize_all(self, *, rng: RandomSource) -> PatternBank:
        """
        Replace every track with a random Euclidean rhythm.

        Drums get 2-11 pulses, melodic tracks 1-6, each with a random
        rotation.
        """
        for index in range(len(TRACK_ORDER)):
            is_drum = index < DRUM_TRACK_COUNT
            pulses = int(rng.next() * (10 if is_drum else 6)) + (2 if is_drum else 1)
            rotation = int(rng.next() * self.steps)
            self.tracks[index] = generate_euclidean(pulses, self.steps, rotation)
        logger.debug("Randomized bank")
        return self

    def save_snapshot(self, slot: int) -> None:
        """Store a deep copy of the grid in a slot."""
        self.snapshots[self._slot(slot)] = copy.deepcopy(self.tracks)

    def load_snapshot(self, slot: int) -> Grid | None:
        """
        Load a slot into the bank.

        Returns:
            Deep copy of the loaded grid, or None if the slot is empty
            (the bank is left unchanged)
        """
        stored = self.snapshots[self._slot(slot)]
        if stored is None:
            logger.debug(ErrorMessages.EMPTY_SLOT.format(slot=slot))
            return None
        self.tracks = copy.deepcopy(stored)
        return copy.deepcopy(stored)

    def snapshot(self, slot: int) -> Grid | None:
        """Deep copy of a slot without loading it."""
        stored = self.snapshots[self._slot(slot)]
        return copy.deepcopy(stored) if stored is not None else None

    def filled_slots(self) -> list[int]:
        return [i for i, s in enumerate(self.snapshots) if s is not None]

    def to_dict(self) -> dict[str, list[int]]:
        """Tracks keyed by role name."""
        return {role.value: list(self.tracks[role.index]) for role in TRACK_ORDER}
