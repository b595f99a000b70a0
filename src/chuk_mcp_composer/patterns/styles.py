"""
Style registry - named bass, lead and pad pattern strategies.

Every style is a plain function with one signature:

    style(steps, density, intensity, rng, *, change_rate=4) -> pattern

and is registered under one or more names in a family. Genres refer to
styles by name; unknown names fall back to the family default with a
warning. New styles only need to match the signature and be registered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from chuk_mcp_composer.constants import (
    STEP_COUNT,
    ErrorMessages,
    StyleFamily,
    VelocityClass,
    WarningMessages,
)
from chuk_mcp_composer.core.rng import RandomSource, chance
from chuk_mcp_composer.models.genre import Genre

logger = logging.getLogger(__name__)

NORMAL = int(VelocityClass.NORMAL)
ACCENT = int(VelocityClass.ACCENT)

# Leads below this intensity are thinned out
LEAD_STRIP_INTENSITY = 0.3


class PatternStyle(Protocol):
    """A named pattern strategy."""

    def __call__(
        self,
        steps: int,
        density: float,
        intensity: float,
        rng: RandomSource,
        *,
        change_rate: int = 4,
    ) -> list[int]: ...


class StyleRegistry:
    """
    Name-keyed strategies per family.

    Each family has one default style used for unknown names.
    """

    def __init__(self) -> None:
        self._styles: dict[StyleFamily, dict[str, PatternStyle]] = {f: {} for f in StyleFamily}
        self._defaults: dict[StyleFamily, str] = {}

    def register(
        self,
        family: StyleFamily,
        *names: str,
        default: bool = False,
    ) -> Callable[[PatternStyle], PatternStyle]:
        """
        Decorator registering a style under one or more names.

        Args:
            family: Style family
            names: Names (the first is canonical)
            default: Make this the family fallback

        Returns:
            Decorator returning the function unchanged
        """

        def decorator(func: PatternStyle) -> PatternStyle:
            styles = self._styles[family]
            for name in names:
                if name in styles:
                    raise ValueError(
                        ErrorMessages.DUPLICATE_STYLE.format(name=name, family=family.value)
                    )
                styles[name] = func
            if default:
                self._defaults[family] = names[0]
            return func

        return decorator

    def get(self, family: StyleFamily | str, name: str) -> PatternStyle:
        """
        Look up a style, falling back to the family default.

        Args:
            family: Style family
            name: Style name

        Returns:
            The style function
        """
        family = self._family(family)
        styles = self._styles[family]
        if name in styles:
            return styles[name]

        fallback = self._defaults[family]
        logger.warning(
            WarningMessages.UNKNOWN_STYLE.format(family=family.value, name=name, fallback=fallback)
        )
        return styles[fallback]

    def names(self, family: StyleFamily | str) -> list[str]:
        """Sorted style names in a family."""
        return sorted(self._styles[self._family(family)])

    def default_name(self, family: StyleFamily | str) -> str:
        """Name of the family fallback."""
        return self._defaults[self._family(family)]

    def has(self, family: StyleFamily | str, name: str) -> bool:
        """Whether a name is registered in a family."""
        return name in self._styles[self._family(family)]

    def __len__(self) -> int:
        return sum(len(styles) for styles in self._styles.values())

    def render(
        self,
        family: StyleFamily | str,
        name: str,
        steps: int,
        density: float,
        intensity: float,
        rng: RandomSource,
        *,
        change_rate: int = 4,
    ) -> list[int]:
        """
        Run a style and apply family post-processing.

        Leads are stripped back at low intensity: below 0.3 each plain hit
        survives with probability intensity * 2.
        """
        family = self._family(family)
        if steps <= 0:
            raise ValueError(ErrorMessages.NEGATIVE_STEPS.format(steps=steps))

        pattern = self.get(family, name)(steps, density, intensity, rng, change_rate=change_rate)

        if family is StyleFamily.LEAD and intensity < LEAD_STRIP_INTENSITY:
            for i in range(steps):
                if pattern[i] == NORMAL and rng.next() > intensity * 2:
                    pattern[i] = 0
        return pattern

    @staticmethod
    def _family(family: StyleFamily | str) -> StyleFamily:
        try:
            return StyleFamily(family)
        except ValueError as e:
            raise ValueError(ErrorMessages.UNKNOWN_FAMILY.format(family=family)) from e


STYLES = StyleRegistry()


def _cycle(motif: list[int], steps: int) -> list[int]:
    return [motif[i % len(motif)] for i in range(steps)]


# Bass


@STYLES.register(StyleFamily.BASS, "root-pulse", "orchestral", "medieval", default=True)
def root_pulse(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 4 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "octave-pulse", "vintage-pulse", "duty-cycle")
def octave_pulse(steps, density, intensity, rng, *, change_rate=4):
    """Root on the beat, octave on the off-8th with probability density."""
    pattern = [0] * steps
    for i in range(steps):
        if i % 4 == 0:
            pattern[i] = NORMAL
        elif i % 4 == 2 and chance(rng, density):
            pattern[i] = NORMAL
    return pattern


@STYLES.register(StyleFamily.BASS, "minimal-pulse")
def minimal_pulse(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 8 == 0:
            pattern[i] = NORMAL
        elif i % 8 == 4 and chance(rng, density * 0.5):
            pattern[i] = NORMAL
    return pattern


@STYLES.register(StyleFamily.BASS, "808-slides")
def slides_808(steps, density, intensity, rng, *, change_rate=4):
    """Long 808 hits with two slide notes."""
    pattern = [0] * steps
    for i in range(steps):
        if i % 8 == 0:
            pattern[i] = NORMAL
        elif i in (4, 20):
            pattern[i] = ACCENT
    return pattern


@STYLES.register(StyleFamily.BASS, "sidechain-pulse")
def sidechain_pulse(steps, density, intensity, rng, *, change_rate=4):
    offbeats = density > 0.6
    return [
        NORMAL if i % 4 == 0 or (i % 4 == 2 and offbeats) else 0 for i in range(steps)
    ]


@STYLES.register(StyleFamily.BASS, "reece", "distorted")
def reece(steps, density, intensity, rng, *, change_rate=4):
    """Driving 8ths, each kept with probability density."""
    return [NORMAL if i % 2 == 0 and chance(rng, density) else 0 for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "distorted-heavy")
def distorted_heavy(steps, density, intensity, rng, *, change_rate=4):
    return [ACCENT if i % 8 == 0 else NORMAL if i % 2 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "rolling", "offbeat")
def rolling(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 2 == 1 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "warm-sustain")
def warm_sustain(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    pattern[0] = NORMAL
    if density > 0.5 and steps > 16:
        pattern[16] = NORMAL
    return pattern


@STYLES.register(StyleFamily.BASS, "drone")
def drone(steps, density, intensity, rng, *, change_rate=4):
    """One held root for the whole pattern."""
    pattern = [0] * steps
    pattern[0] = NORMAL
    return pattern


@STYLES.register(StyleFamily.BASS, "floating")
def floating(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 16 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "wobble")
def wobble(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 4 == 0:
            pattern[i] = NORMAL
        elif i % 4 == 2 and chance(rng, 0.3):
            pattern[i] = ACCENT
    return pattern


GROOVE = [1, 0, 0, 1, 0, 0, 1, 0, 0, 1, 0, 1, 0, 0, 1, 0]


@STYLES.register(StyleFamily.BASS, "groove")
def groove(steps, density, intensity, rng, *, change_rate=4):
    """Funk figure; each step is gated with probability density + 0.2."""
    return [GROOVE[i % 16] * (1 if chance(rng, density + 0.2) else 0) for i in range(steps)]


@STYLES.register(StyleFamily.BASS, "offbeat-bounce")
def offbeat_bounce(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 4 == 0:
            pattern[i] = NORMAL
        elif i % 4 == 2:
            pattern[i] = ACCENT
        elif i % 8 == 6 and chance(rng, 0.6):
            pattern[i] = NORMAL
    return pattern


# Lead


@STYLES.register(StyleFamily.LEAD, "basic", default=True)
def basic_lead(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 4 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "arpeggiated", "vintage-arp", "arpeggio-fast")
def arpeggiated(steps, density, intensity, rng, *, change_rate=4):
    """Every 16th when dense enough, otherwise every 8th."""
    return [NORMAL if density > 0.4 or i % 2 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "stabs")
def lead_stabs(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 8 == 0:
            pattern[i] = NORMAL
        elif i % 8 == 4 and chance(rng, 0.3):
            pattern[i] = NORMAL
    return pattern


@STYLES.register(StyleFamily.LEAD, "dark-melody")
def dark_melody(steps, density, intensity, rng, *, change_rate=4):
    return _cycle([1, 0, 0, 1, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0, 0], steps)


@STYLES.register(StyleFamily.LEAD, "hook")
def hook(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 4 == 0:
            pattern[i] = NORMAL
        elif i % 8 == 6 and chance(rng, 0.5):
            pattern[i] = NORMAL
    return pattern


@STYLES.register(StyleFamily.LEAD, "fast-arp")
def fast_arp(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if chance(rng, 0.7) else 0 for _ in range(steps)]


@STYLES.register(StyleFamily.LEAD, "nostalgic")
def nostalgic(steps, density, intensity, rng, *, change_rate=4):
    return _cycle([1, 0, 0, 1, 0, 0, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0], steps)


@STYLES.register(StyleFamily.LEAD, "supersaw", "supersaw-arp")
def supersaw(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 2 == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "padscape", "shimmer")
def padscape(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 16 == 0 and i < 32 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "glitchy")
def glitchy(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if chance(rng, 0.3) else 0 for _ in range(steps)]


@STYLES.register(StyleFamily.LEAD, "metallic")
def metallic(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 4 == 0 or chance(rng, 0.15) else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "epic-melody")
def epic_melody(steps, density, intensity, rng, *, change_rate=4):
    """Quarter notes, each with a 30% chance of a pickup two steps later."""
    pattern = [0] * steps
    for i in range(0, steps, 4):
        pattern[i] = NORMAL
        if chance(rng, 0.3) and i + 2 < steps:
            pattern[i + 2] = NORMAL
    return pattern


@STYLES.register(StyleFamily.LEAD, "renaissance")
def renaissance(steps, density, intensity, rng, *, change_rate=4):
    return _cycle([1, 0, 0, 1, 0, 1, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0], steps)


@STYLES.register(StyleFamily.LEAD, "catchy")
def catchy(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 2 == 0 or chance(rng, 0.2) else 0 for i in range(steps)]


@STYLES.register(StyleFamily.LEAD, "euphoric-hook")
def euphoric_hook(steps, density, intensity, rng, *, change_rate=4):
    return _cycle([1, 1, 0, 1, 1, 0, 1, 0, 1, 1, 0, 1, 1, 0, 0, 1], steps)


@STYLES.register(StyleFamily.LEAD, "rave-stab")
def rave_stab(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(steps):
        if i % 4 == 0:
            pattern[i] = NORMAL
        elif i % 8 == 5 and chance(rng, 0.7):
            pattern[i] = NORMAL
    return pattern


# Pad


@STYLES.register(StyleFamily.PAD, "sustain", default=True)
def sustain(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 16 == 0 else 0 for i in range(steps)]


@STYLES.register(
    StyleFamily.PAD, "sustain-chords", "lush", "warm", "warm-chords", "layered", "duty-chords"
)
def sustain_chords(steps, density, intensity, rng, *, change_rate=4):
    """One chord every `change_rate` steps."""
    rate = max(change_rate, 1)
    return [NORMAL if i % rate == 0 else 0 for i in range(steps)]


@STYLES.register(StyleFamily.PAD, "stabs")
def pad_stabs(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    for i in range(0, steps, 8):
        pattern[i] = NORMAL
        if chance(rng, 0.3) and i + 4 < steps:
            pattern[i + 4] = NORMAL
    return pattern


@STYLES.register(StyleFamily.PAD, "evolving")
def evolving(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    pattern[0] = NORMAL
    if change_rate <= 2 and steps > 16:
        pattern[16] = NORMAL
    return pattern


@STYLES.register(StyleFamily.PAD, "minimal")
def minimal(steps, density, intensity, rng, *, change_rate=4):
    pattern = [0] * steps
    if intensity > 0.5:
        pattern[0] = NORMAL
    return pattern


@STYLES.register(StyleFamily.PAD, "atmospheric", "dungeon", "industrial", "dark")
def atmospheric(steps, density, intensity, rng, *, change_rate=4):
    """Downbeat chord plus a late swell with probability intensity."""
    pattern = [0] * steps
    pattern[0] = NORMAL
    if chance(rng, intensity) and steps > 24:
        pattern[24] = NORMAL
    return pattern


@STYLES.register(StyleFamily.PAD, "strings")
def strings(steps, density, intensity, rng, *, change_rate=4):
    hits = [0, 8, 16, 24] if intensity > 0.7 else [0, 8]
    return [NORMAL if i in hits else 0 for i in range(steps)]


@STYLES.register(StyleFamily.PAD, "noise")
def noise(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if chance(rng, 0.1 * intensity) else 0 for _ in range(steps)]


@STYLES.register(StyleFamily.PAD, "emotional-pads")
def emotional_pads(steps, density, intensity, rng, *, change_rate=4):
    hits = {0, 8, 16, 24}
    if intensity > 0.6:
        hits |= {4, 20}
    return [NORMAL if i in hits else 0 for i in range(steps)]


@STYLES.register(StyleFamily.PAD, "euphoric-strings")
def euphoric_strings(steps, density, intensity, rng, *, change_rate=4):
    return [NORMAL if i % 4 == 0 else 0 for i in range(steps)]


def generate_track_pattern(
    genre: Genre,
    family: StyleFamily | str,
    intensity: float,
    *,
    rng: RandomSource,
    scale_length: int = 7,
    steps: int = STEP_COUNT,
    registry: StyleRegistry = STYLES,
) -> list[int]:
    """
    Render a genre's configured style for one melodic track.

    Bass and lead densities are the genre's configured density scaled by
    intensity; pads use the genre's chord change rate.

    Args:
        genre: Genre definition
        family: bass, lead or pad
        intensity: 0-1 energy
        rng: Random source
        scale_length: Scale size; an empty scale yields silence
        steps: Pattern length
        registry: Style registry to draw from

    Returns:
        Pattern, exactly `steps` long
    """
    family = StyleFamily(family)
    if scale_length <= 0:
        return [0] * steps

    config = genre.styles
    if family is StyleFamily.BASS:
        name, density = config.bass_style, config.bass_density * intensity
    elif family is StyleFamily.LEAD:
        name, density = config.lead_style, config.lead_density * intensity
    else:
        name, density = config.pad_style, 0.0

    return registry.render(
        family,
        name,
        steps,
        density,
        intensity,
        rng,
        change_rate=config.pad_change_rate,
    )
