"""
Pitch primitives - PitchClass.

Scales in the catalog are written as pitch symbols ("C", "Eb", "F#").
PitchClass turns those symbols into semitone offsets so scales and chords
can be compared chromatically.
"""

from __future__ import annotations

from enum import IntEnum

# Display name mappings (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]
_FLAT_NAMES: list[str] = [
    "C",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
]


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def semitones_above(self, root: PitchClass) -> int:
        """Ascending distance from root to this pitch class (0-11)."""
        return (self.value - root.value) % 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """Parse a pitch class from a string like 'C', 'C#', 'Db'."""
        name = name.strip()

        if name in _SHARP_NAMES:
            return cls(_SHARP_NAMES.index(name))

        if name in _FLAT_NAMES:
            return cls(_FLAT_NAMES.index(name))

        # Enum names (C, Cs, D, Ds, etc.)
        name_upper = name.upper()
        for member in cls:
            if member.name.upper() == name_upper:
                return member

        raise ValueError(f"Unknown pitch class: {name}")


def symbols_to_offsets(symbols: list[str]) -> list[int]:
    """
    Convert a scale's pitch symbols to semitone offsets above its first note.

    Offsets rise monotonically, so a symbol that wraps past the octave
    (the trailing "C" of a pentatonic spelling) lands 12 semitones higher.

    Args:
        symbols: Pitch symbols in scale order

    Returns:
        Semitone offsets, first element 0
    """
    if not symbols:
        return []

    root = PitchClass.parse(symbols[0])
    offsets: list[int] = []
    octave = 0
    previous = -1
    for symbol in symbols:
        semitones = PitchClass.parse(symbol).semitones_above(root) + octave
        if semitones <= previous:
            octave += 12
            semitones += 12
        offsets.append(semitones)
        previous = semitones
    return offsets
