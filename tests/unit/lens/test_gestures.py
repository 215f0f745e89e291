"""Unit tests for GestureDisambiguator."""

import pytest

from precision_lens.lens.gestures import GestureDisambiguator
from precision_lens.lens.state import ClickPolicy, GestureAction
from tests.infrastructure.mocks.lens_mocks import ManualScheduler


def make_gestures(policy=ClickPolicy.DOUBLE_CLICK, window=0.35):
    scheduler = ManualScheduler()
    actions = []
    gestures = GestureDisambiguator(
        actions.append,
        scheduler,
        policy=policy,
        window=window,
        clock=scheduler.clock,
    )
    return gestures, scheduler, actions


class TestSingleOnlyPolicy:
    """Every press is an immediate SINGLE."""

    def test_press_emits_single_immediately(self):
        gestures, scheduler, actions = make_gestures(ClickPolicy.SINGLE_ONLY)
        gestures.press()
        assert actions == [GestureAction.SINGLE]
        assert scheduler.armed == 0
        assert gestures.pending is False

    def test_fast_presses_are_never_merged(self):
        gestures, scheduler, actions = make_gestures(ClickPolicy.SINGLE_ONLY)
        gestures.press()
        scheduler.advance(0.05)
        gestures.press()
        assert actions == [GestureAction.SINGLE, GestureAction.SINGLE]


class TestDoubleClickPolicy:
    """Window-based disambiguation."""

    def test_two_presses_inside_window_make_one_double(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press()
        scheduler.advance(0.1)
        gestures.press()
        scheduler.advance(1.0)
        assert actions == [GestureAction.DOUBLE]
        assert gestures.pending is False

    def test_two_presses_outside_window_make_two_singles(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press()
        scheduler.advance(0.5)
        gestures.press()
        scheduler.advance(0.5)
        assert actions == [GestureAction.SINGLE, GestureAction.SINGLE]

    def test_single_waits_for_window(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press()
        assert actions == []
        assert gestures.pending is True

        scheduler.advance(0.34)
        assert actions == []

        scheduler.advance(0.02)
        assert actions == [GestureAction.SINGLE]
        assert gestures.pending is False

    def test_third_press_starts_a_new_window(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press()
        scheduler.advance(0.1)
        gestures.press()
        scheduler.advance(0.1)
        gestures.press()
        scheduler.advance(1.0)
        assert actions == [GestureAction.DOUBLE, GestureAction.SINGLE]

    def test_late_timer_emits_pending_single_first(self):
        """A press after the window whose timer has not run yet resolves the old press."""
        gestures, scheduler, actions = make_gestures()
        gestures.press(timestamp=0.0)
        gestures.press(timestamp=0.5)
        assert actions == [GestureAction.SINGLE]
        assert gestures.pending is True

        scheduler.advance(1.0)
        assert actions == [GestureAction.SINGLE, GestureAction.SINGLE]

    def test_explicit_timestamps_override_clock(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press(timestamp=10.0)
        gestures.press(timestamp=10.2)
        assert actions == [GestureAction.DOUBLE]

    def test_at_most_one_timer_armed(self):
        gestures, scheduler, actions = make_gestures()
        for _ in range(5):
            gestures.press()
            assert scheduler.armed <= 1
            scheduler.advance(0.2)

    def test_reset_drops_pending_press(self):
        gestures, scheduler, actions = make_gestures()
        gestures.press()
        gestures.reset()
        scheduler.advance(1.0)
        assert actions == []
        assert scheduler.armed == 0

    @pytest.mark.parametrize("gap", [0.0, 0.1, 0.349])
    def test_gaps_below_window_are_double(self, gap):
        gestures, scheduler, actions = make_gestures()
        gestures.press(timestamp=0.0)
        gestures.press(timestamp=gap)
        assert actions == [GestureAction.DOUBLE]
