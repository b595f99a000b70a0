"""
Tests for the playback contract.
"""

import pytest

from chuk_mcp_composer.constants import VelocityClass
from chuk_mcp_composer.playback import PlaybackTarget, dispatch_steps, step_duration


class RecordingTarget:
    """Playback target that records every trigger."""

    def __init__(self):
        self.triggers: list[tuple[int, float, VelocityClass, int]] = []

    def trigger(self, track_index, time, velocity_class, step_index):
        self.triggers.append((track_index, time, velocity_class, step_index))


class TestStepDuration:
    """Tests for step_duration."""

    def test_sixteenth_notes(self):
        """One step is a sixteenth note."""
        assert step_duration(120) == pytest.approx(0.125)
        assert step_duration(60) == pytest.approx(0.25)

    @pytest.mark.parametrize("bpm", [0, -120])
    def test_non_positive_bpm(self, bpm: float):
        """Tempo must be positive."""
        with pytest.raises(ValueError, match="BPM must be positive"):
            step_duration(bpm)


class TestDispatchSteps:
    """Tests for dispatch_steps."""

    def test_protocol(self):
        """Any object with trigger() is a target."""
        assert isinstance(RecordingTarget(), PlaybackTarget)

    def test_triggers_in_time_order(self):
        """Sounding steps are sent step by step with their velocity class."""
        target = RecordingTarget()
        tracks = [[1, 0, 0, 0], [0, 0, 2, 0], [3, 0, 1, 0]]
        sent = dispatch_steps(tracks, target, 120)
        assert sent == 4
        assert target.triggers == [
            (0, 0.0, VelocityClass.NORMAL, 0),
            (2, 0.0, VelocityClass.ROLL, 0),
            (1, 0.25, VelocityClass.ACCENT, 2),
            (2, 0.25, VelocityClass.NORMAL, 2),
        ]

    def test_start_time_offset(self):
        """Times are offset by the start time."""
        target = RecordingTarget()
        dispatch_steps([[0, 1]], target, 120, start_time=4.0)
        assert target.triggers[0][1] == pytest.approx(4.125)

    def test_muted_tracks(self):
        """Muted tracks send nothing."""
        target = RecordingTarget()
        sent = dispatch_steps([[1, 1], [1, 1]], target, 100, muted={0})
        assert sent == 2
        assert {t[0] for t in target.triggers} == {1}

    def test_silence(self):
        """An empty grid sends nothing."""
        target = RecordingTarget()
        assert dispatch_steps([], target, 120) == 0
        assert dispatch_steps([[0] * 32], target, 120) == 0
        assert target.triggers == []
