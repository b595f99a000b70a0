#!/usr/bin/env python3
"""
Example: Composing a Song.

This walks the engine bottom-up: a motif and its developments, a Markov
melody, a chord progression, Euclidean drums, and finally a whole epic
song with its scheduled timeline played into a printing target.

Usage:
    python examples/generate_song.py [GENRE] [SEED]
"""

import sys

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.composer import SongComposer
from chuk_mcp_composer.constants import TRACK_ORDER, VelocityClass
from chuk_mcp_composer.core.rng import SeededRandom
from chuk_mcp_composer.generators import develop_motif, generate_euclidean, generate_motif
from chuk_mcp_composer.playback import dispatch_steps

SYMBOLS = {0: ".", 1: "x", 2: "X", 3: "r"}


class PrintingTarget:
    """Counts triggers per track instead of making sound."""

    def __init__(self) -> None:
        self.counts = [0] * len(TRACK_ORDER)

    def trigger(
        self, track_index: int, time: float, velocity_class: VelocityClass, step_index: int
    ) -> None:
        self.counts[track_index] += 1


def render(pattern: list[int]) -> str:
    return "".join(SYMBOLS[v] for v in pattern)


def main() -> None:
    """Compose and print a song."""
    genre = sys.argv[1] if len(sys.argv) > 1 else "TECHNO"
    seed = int(sys.argv[2]) if len(sys.argv) > 2 else 7
    rng = SeededRandom(seed)

    print("CHUK Composer Demo")
    print("=" * 40)
    print()

    catalog = CatalogLoader()
    composer = SongComposer(catalog)
    definition = catalog.resolve_genre(genre)
    scale = catalog.get_scale(definition.scale)
    print(f"Genre: {definition.id} ({definition.description})")
    print(f"Scale: {scale.name} {' '.join(scale.notes)}")
    print()

    # Motifs
    motif = generate_motif(len(scale), rng=rng)
    print(f"Motif:          {motif}  {[scale.note_at(d) for d in motif]}")
    for variation in ("retrograde", "inversion", "call-response"):
        developed = develop_motif(motif, variation, len(scale), rng=rng)
        print(f"  {variation:<14}{developed}")
    print()

    # Melody and harmony
    melody = composer.melody.generate_melody(len(scale), definition.id, 4, rng=rng)
    print(f"Markov melody:  {melody}")
    progression = composer.chords.get_progression(definition.id, rng=rng)
    chords = composer.chords.get_chord_sequence(
        progression, list(scale.notes), scale.name, definition.id
    )
    print("Progression:    " + "  ".join(f"{c.degree}:{'-'.join(c.notes)}" for c in chords))
    print(f"Euclid (5,16):  {render(generate_euclidean(5, 16))}")
    print()

    # Whole song
    song = composer.compose_epic_song(definition.id, rng=rng)
    print(f"Epic song at {song.bpm} BPM, {song.timeline.total_bars} bars")
    for event in song.timeline.events:
        tempo = event.tempo.kind if event.tempo else "-"
        print(
            f"  bar {event.at_bar:>3}  {event.section:<10} "
            f"snapshot={event.load_snapshot}  tempo={tempo}"
            f"{'  sweep' if event.filter_sweep else ''}"
        )
    print()

    drop = song.snapshots[-1]
    print("Peak snapshot:")
    for role in TRACK_ORDER:
        print(f"  {role.value:<6} {render(drop[role.index])}")

    target = PrintingTarget()
    sent = dispatch_steps(drop, target, song.bpm)
    print()
    print(f"One bar pair of the peak sends {sent} triggers: {target.counts}")


if __name__ == "__main__":
    main()
