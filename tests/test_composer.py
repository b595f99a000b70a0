"""
Tests for whole-song composition.
"""

import pytest

from chuk_mcp_composer.arrangement import ArrangementScheduler
from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.composer import SongComposer
from chuk_mcp_composer.constants import TrackRole
from chuk_mcp_composer.core.rng import SeededRandom
from chuk_mcp_composer.generators import chords_to_pattern, generate_euclidean
from chuk_mcp_composer.models import CompositionState


@pytest.fixture
def composer(catalog: CatalogLoader, scheduler: ArrangementScheduler) -> SongComposer:
    """Composer over the built-in libraries."""
    return SongComposer(catalog, scheduler)


class TestFullSong:
    """Tests for the four-snapshot recipe."""

    def test_snapshots(self, composer: SongComposer):
        """All four slots are filled with seven 32-step tracks."""
        song = composer.compose_full_song("SYNTHWAVE", rng=SeededRandom(5))
        assert song.filled_slots == [0, 1, 2, 3]
        for grid in song.snapshots:
            assert grid is not None
            assert len(grid) == 7
            assert all(len(track) == 32 for track in grid)

    def test_breakdown_is_hats_only(self, composer: SongComposer):
        """Snapshot 2 drops the kit to 16-pulse hats."""
        song = composer.compose_full_song("SYNTHWAVE", rng=SeededRandom(5))
        breakdown = song.snapshots[2]
        assert breakdown[TrackRole.HIHAT.index] == generate_euclidean(16, 32)
        assert breakdown[TrackRole.KICK.index] == [0] * 32
        assert breakdown[TrackRole.SNARE.index] == [0] * 32

    def test_hook_pads(self, composer: SongComposer):
        """Snapshot 3 carries 4-pulse pads."""
        song = composer.compose_full_song("SYNTHWAVE", rng=SeededRandom(5))
        assert song.snapshots[3][TrackRole.PAD.index] == generate_euclidean(4, 32)

    def test_breakdown_lead(self, composer: SongComposer):
        """The breakdown lead is the motif-free 6-pulse line."""
        song = composer.compose_full_song("SYNTHWAVE", rng=SeededRandom(9))
        assert song.snapshots[2][TrackRole.LEAD.index] == generate_euclidean(6, 32)

    def test_tempo_and_timeline(self, composer: SongComposer, catalog: CatalogLoader):
        """The tempo sits in the genre range and the timeline covers the structure."""
        song = composer.compose_full_song("SYNTHWAVE", rng=SeededRandom(5))
        assert catalog.get_genre("SYNTHWAVE").tempo.contains(song.bpm)
        assert song.timeline.total_bars == song.structure.total_bars
        assert song.timeline.bpm == song.bpm
        assert all(
            e.load_snapshot is None or e.load_snapshot in song.filled_slots
            for e in song.timeline.events
        )


class TestEpicSong:
    """Tests for the five-snapshot recipe."""

    def test_techno(self, composer: SongComposer, catalog: CatalogLoader):
        """TECHNO gets five snapshots and its 160-bar epic structure."""
        song = composer.compose_epic_song("TECHNO", rng=SeededRandom(7))
        assert song.filled_slots == [0, 1, 2, 3, 4]
        assert song.structure.total_bars == 160
        assert song.timeline.total_bars == 160
        assert song.state.progression in catalog.get_genre("TECHNO").curated_progressions

    def test_pads_follow_progression(self, composer: SongComposer):
        """Every snapshot's pad hits on the chord changes."""
        song = composer.compose_epic_song("TECHNO", rng=SeededRandom(7))
        pad = chords_to_pattern(song.state.progression, 32)
        for grid in song.snapshots:
            assert grid[TrackRole.PAD.index] == pad

    def test_every_genre(self, composer: SongComposer, catalog: CatalogLoader):
        """Every library genre composes in both modes."""
        for genre in catalog.list_genres():
            for mode in ("full", "epic"):
                song = composer.compose(genre.id, mode, rng=SeededRandom(11))
                assert song.structure.sections
                assert song.timeline.total_bars == song.structure.total_bars


class TestComposer:
    """Tests for shared composer behaviour."""

    def test_unknown_genre_falls_back(self, composer: SongComposer):
        """Unknown genres compose as the default genre with a warning."""
        song = composer.compose("POLKA", "epic", rng=SeededRandom(1))
        assert song.state.genre == "SYNTHWAVE"
        assert any("POLKA" in w for w in song.warnings)

    def test_same_seed_same_song(self, composer: SongComposer):
        """A seed reproduces the whole song."""
        first = composer.compose("TRANCE", "epic", rng=SeededRandom(21)).to_dict()
        second = composer.compose("TRANCE", "epic", rng=SeededRandom(21)).to_dict()
        assert first == second

    def test_to_dict(self, composer: SongComposer):
        """Snapshots serialize keyed by role; empty slots are None."""
        data = composer.compose("SYNTHWAVE", "full", rng=SeededRandom(2)).to_dict()
        assert len(data["snapshots"]) == 4
        assert set(data["snapshots"][0]) == {
            "kick",
            "snare",
            "clap",
            "hihat",
            "bass",
            "lead",
            "pad",
        }
        assert data["timeline"]["stop_bar"] == data["structure"]["total_bars"]


class TestCompositionState:
    """Tests for progression rotation."""

    def test_rotation(self):
        """Rotating moves the progression on one chord and wraps."""
        state = CompositionState(genre="HOUSE", scale="minor", progression=[0, 5, 3, 4])
        assert state.current_chord() == 0
        assert state.rotate_progression() == 1
        assert state.rotated_progression() == [5, 3, 4, 0]
        assert state.current_chord(2) == 4
        for _ in range(3):
            state.rotate_progression()
        assert state.rotation_offset == 0

    def test_empty_progression(self):
        """No progression means no current chord."""
        state = CompositionState(genre="HOUSE", scale="minor")
        assert state.rotate_progression() == 0
        assert state.current_chord(3) is None
