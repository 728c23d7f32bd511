from __future__ import annotations

import pytest

from falling_blocks.game import HoldRepeater


def test_first_held_frame_does_not_fire():
    repeater = HoldRepeater(["left", "right"], delay=0.2, interval=0.05)
    assert repeater.update(["left"], 1.0) == []


def test_repeats_after_delay_then_every_interval():
    repeater = HoldRepeater(["left"], delay=0.2, interval=0.05)
    repeater.update(["left"], 0.0)
    assert repeater.update(["left"], 0.15) == []
    assert repeater.update(["left"], 0.06) == ["left"]
    assert repeater.update(["left"], 0.03) == []
    assert repeater.update(["left"], 0.03) == ["left"]


def test_long_frame_fires_once_and_skips_missed_repeats():
    repeater = HoldRepeater(["down"], delay=0.1, interval=0.1)
    repeater.update(["down"], 0.0)
    assert repeater.update(["down"], 0.35) == ["down"]
    # The schedule moved past the stall: next repeat is due at 0.4
    assert repeater.update(["down"], 0.03) == []
    assert repeater.update(["down"], 0.03) == ["down"]


def test_hour_long_stall_fires_a_single_repeat():
    repeater = HoldRepeater(["left"], delay=0.1, interval=0.1)
    repeater.update(["left"], 0.0)
    assert repeater.update(["left"], 3600.0) == ["left"]


@pytest.mark.parametrize("elapsed", [float("inf"), float("nan"), -1.0])
def test_non_finite_or_negative_elapsed_counts_as_zero(elapsed):
    repeater = HoldRepeater(["left"], delay=0.1, interval=0.1)
    repeater.update(["left"], 0.0)
    assert repeater.update(["left"], elapsed) == []
    assert repeater.update(["left"], 0.11) == ["left"]


def test_release_resets_timer():
    repeater = HoldRepeater(["left"], delay=0.1, interval=0.1)
    repeater.update(["left"], 0.0)
    repeater.update(["left"], 0.08)
    repeater.update([], 0.01)
    repeater.update(["left"], 0.0)
    assert repeater.update(["left"], 0.05) == []


def test_keys_are_timed_independently():
    repeater = HoldRepeater(["left", "down"], delay=0.1, interval=0.1)
    repeater.update(["left"], 0.0)
    repeater.update(["left", "down"], 0.05)
    assert repeater.update(["left", "down"], 0.06) == ["left"]
    assert repeater.update(["left", "down"], 0.05) == ["down"]


def test_unknown_keys_are_ignored():
    repeater = HoldRepeater(["left"], delay=0.0, interval=0.1)
    repeater.update(["rotate"], 0.0)
    assert repeater.update(["rotate"], 1.0) == []


@pytest.mark.parametrize("delay, interval", [(-0.1, 0.1), (0.1, 0.0)])
def test_invalid_timings_are_rejected(delay, interval):
    with pytest.raises(ValueError):
        HoldRepeater(["left"], delay=delay, interval=interval)
