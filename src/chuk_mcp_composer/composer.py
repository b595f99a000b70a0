"""
Song composer - drives the generators, the pattern bank and the scheduler
to produce a complete song.

Two recipes:
- Full song: four snapshots (low verse, high drop, hat-only breakdown,
  hook) sharing one Euclidean song motif, arranged from the genre's song
  template.
- Epic song: five snapshots climbing in intensity, each with thinned
  drums, style-driven bass and lead, a developing lead motif and pads on
  the chord changes, arranged from the genre's epic template.

Both recipes take a RandomSource, so a seed reproduces the whole song.
"""

from __future__ import annotations

import logging
from typing import Literal

from chuk_mcp_composer.arrangement import ArrangementScheduler
from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.constants import (
    STEP_COUNT,
    MotifVariation,
    SnapshotMode,
    StyleFamily,
    TrackRole,
    VelocityClass,
)
from chuk_mcp_composer.core.rng import RandomSource, chance, choose, rand_int
from chuk_mcp_composer.generators import (
    ChordProgressionGenerator,
    MarkovMelodyGenerator,
    add_drum_fills,
    chords_to_pattern,
    develop_motif,
    generate_drum_pattern,
    generate_euclidean,
    generate_motif,
    humanize_drums,
    thin_drum_matrix,
)
from chuk_mcp_composer.models import Composition, CompositionState, Genre, Structure
from chuk_mcp_composer.patterns import PatternBank, generate_track_pattern

logger = logging.getLogger(__name__)

SongMode = Literal["full", "epic"]

# Full song: drum intensity multipliers for the low, high and hook snapshots
FULL_SONG_DRUM_SCALES = (0.8, 1.2, 1.0)
BREAKDOWN_HAT_PULSES = 16
HOOK_PAD_PULSES = 4

# Epic song
EPIC_DRUM_INTENSITIES = (0.25, 0.5, 0.75, 0.95, 1.0)
EPIC_DROP_FILL_PROBABILITY = 0.8
EPIC_INTENSITIES = (0.15, 0.35, 0.55, 0.8, 1.0)
EPIC_LEAD_VARIATIONS: tuple[MotifVariation, ...] = (
    "repeat",
    "repeat",
    "transpose-up",
    "call-response",
    "extension",
)
EPIC_LEAD_MOTIF_LENGTH = 8
# Snapshots from this index on let the developed motif push lead hits
EPIC_LEAD_INFLUENCE_FROM = 2
EPIC_LEAD_INFLUENCE_DEGREE = 2


class SongComposer:
    """
    Composes whole songs from a genre.

    Example:
        composer = SongComposer()
        song = composer.compose_epic_song("TECHNO", rng=SeededRandom(7))
        song.timeline.total_bars
    """

    def __init__(
        self,
        catalog: CatalogLoader | None = None,
        scheduler: ArrangementScheduler | None = None,
    ):
        """
        Initialize the composer.

        Args:
            catalog: Scale, chord-quality and genre catalog
            scheduler: Arrangement scheduler
        """
        self.catalog = catalog or CatalogLoader()
        self.scheduler = scheduler or ArrangementScheduler()
        self._chords: ChordProgressionGenerator | None = None
        self._melody: MarkovMelodyGenerator | None = None

    @property
    def chords(self) -> ChordProgressionGenerator:
        if self._chords is None:
            self._chords = ChordProgressionGenerator(
                self.catalog.curated_progressions(), self.catalog.qualities
            )
        return self._chords

    @property
    def melody(self) -> MarkovMelodyGenerator:
        if self._melody is None:
            self._melody = MarkovMelodyGenerator(self.catalog.melody_rules())
        return self._melody

    @staticmethod
    def choose_bpm(genre: Genre, *, rng: RandomSource) -> int:
        """Uniform integer tempo within the genre's range, inclusive."""
        span = genre.tempo.max_bpm - genre.tempo.min_bpm + 1
        return genre.tempo.min_bpm + rand_int(rng, span)

    def compose(self, genre: str, mode: SongMode = "epic", *, rng: RandomSource) -> Composition:
        """Compose a song with either recipe."""
        if mode == "full":
            return self.compose_full_song(genre, rng=rng)
        return self.compose_epic_song(genre, rng=rng)

    def compose_full_song(self, genre: str, *, rng: RandomSource) -> Composition:
        """
        Four-snapshot song arranged from the genre's song template.

        Snapshots:
            0: template drums pulled back, low melodic section with the motif
            1: template drums pushed, high melodic section with the motif
            2: 16-pulse hats only, low melodic section without a motif
            3: template drums, high section with the motif, 4-pulse pads

        Args:
            genre: Genre id; unknown genres fall back with a warning
            rng: Random source

        Returns:
            The composition
        """
        warnings: list[str] = []
        definition = self.catalog.resolve_genre(genre, warnings)
        scale = self.catalog.get_scale(definition.scale)
        profile = definition.profile
        progression = list(choose(rng, definition.progressions))

        song_motif = generate_euclidean(rand_int(rng, 4) + 4, STEP_COUNT, rand_int(rng, 8))
        low_drums, high_drums, hook_drums = (
            humanize_drums(
                generate_drum_pattern(definition.drums, profile.energy * scale_by, rng=rng),
                profile,
                rng=rng,
            )
            for scale_by in FULL_SONG_DRUM_SCALES
        )

        bank = PatternBank.empty(SnapshotMode.CLASSIC)

        bank.set_drums(low_drums)
        bank.compose_melodic_section("low", song_motif, rng=rng)
        bank.save_snapshot(0)

        bank.clear()
        bank.set_drums(high_drums)
        bank.compose_melodic_section("high", song_motif, rng=rng)
        bank.save_snapshot(1)

        bank.clear()
        bank.set_track(TrackRole.HIHAT, generate_euclidean(BREAKDOWN_HAT_PULSES, STEP_COUNT))
        bank.compose_melodic_section("low", None, rng=rng)
        bank.save_snapshot(2)

        bank.clear()
        bank.set_drums(hook_drums)
        bank.compose_melodic_section("high", song_motif, rng=rng)
        bank.set_track(TrackRole.PAD, generate_euclidean(HOOK_PAD_PULSES, STEP_COUNT))
        bank.save_snapshot(3)

        structure = self.scheduler.generate_song_structure(
            definition.id, profile.energy, rng=rng
        )
        state = CompositionState(
            genre=definition.id,
            scale=scale.name,
            progression=progression,
            energy=profile.energy,
        )
        return self._finish(state, bank, structure, warnings, rng=rng)

    def compose_epic_song(self, genre: str, *, rng: RandomSource) -> Composition:
        """
        Five-snapshot song arranged from the genre's epic template.

        Each snapshot i uses drums thinned to EPIC_DRUM_INTENSITIES[i] (the
        last with drop fills), bass and lead rendered from the genre styles
        at EPIC_INTENSITIES[i], and pads on the curated progression. From
        snapshot 2 on, lead steps under high motif degrees may be forced on.

        Args:
            genre: Genre id; unknown genres fall back with a warning
            rng: Random source

        Returns:
            The composition
        """
        warnings: list[str] = []
        definition = self.catalog.resolve_genre(genre, warnings)
        scale = self.catalog.get_scale(definition.scale)
        scale_length = len(scale)
        progression = self.chords.get_progression(definition.id, rng=rng)

        drums = [
            thin_drum_matrix(definition.drums, intensity, rng=rng)
            for intensity in EPIC_DRUM_INTENSITIES
        ]
        add_drum_fills(drums[-1], EPIC_DROP_FILL_PROBABILITY, rng=rng)

        lead_motif = generate_motif(scale_length, EPIC_LEAD_MOTIF_LENGTH, rng=rng)
        pad = chords_to_pattern(progression, STEP_COUNT)

        bank = PatternBank.empty(SnapshotMode.EPIC)
        levels = zip(EPIC_INTENSITIES, EPIC_LEAD_VARIATIONS, drums)
        for slot, (intensity, variation, matrix) in enumerate(levels):
            bank.clear()
            bank.set_drums(matrix)
            bank.set_track(
                TrackRole.BASS,
                generate_track_pattern(
                    definition, StyleFamily.BASS, intensity, rng=rng, scale_length=scale_length
                ),
            )

            developed = develop_motif(lead_motif, variation, scale_length, rng=rng)
            lead = generate_track_pattern(
                definition, StyleFamily.LEAD, intensity, rng=rng, scale_length=scale_length
            )
            if slot >= EPIC_LEAD_INFLUENCE_FROM and developed:
                for step in range(STEP_COUNT):
                    degree = developed[step % len(developed)]
                    if degree > EPIC_LEAD_INFLUENCE_DEGREE and chance(rng, intensity):
                        lead[step] = VelocityClass.NORMAL
            bank.set_track(TrackRole.LEAD, lead)
            bank.set_track(TrackRole.PAD, pad)
            bank.save_snapshot(slot)

        structure = self.scheduler.generate_epic_structure(definition.id)
        state = CompositionState(
            genre=definition.id,
            scale=scale.name,
            progression=progression,
            energy=definition.profile.energy,
        )
        return self._finish(state, bank, structure, warnings, rng=rng)

    def _finish(
        self,
        state: CompositionState,
        bank: PatternBank,
        structure: Structure,
        warnings: list[str],
        *,
        rng: RandomSource,
    ) -> Composition:
        definition = self.catalog.resolve_genre(state.genre)
        bpm = self.choose_bpm(definition, rng=rng)
        timeline = self.scheduler.schedule(
            structure,
            bpm,
            slot_count=bank.slot_count,
            filled_slots=set(bank.filled_slots()),
            warnings=warnings,
        )
        logger.info(
            "Composed %s: %d sections, %d bars at %d BPM",
            state.genre,
            len(structure.sections),
            timeline.total_bars,
            bpm,
        )
        return Composition(
            state=state,
            bpm=bpm,
            snapshots=[bank.snapshot(slot) for slot in range(bank.slot_count)],
            structure=structure,
            timeline=timeline,
            warnings=warnings,
        )
