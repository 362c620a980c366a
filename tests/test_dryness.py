"""
Dryness state machine: three-hour threshold, initial state and the
transitions driven by ticks and observed events.
"""

from datetime import datetime, timedelta, timezone

import pytest

from flower.modules.watering.domain.models.dryness import DrynessModel, DrynessState

NOW = datetime(2026, 5, 4, 12, 0, tzinfo=timezone.utc)


def test_initially_dry():
    model = DrynessModel()

    assert model.state == DrynessState.DRY
    assert model.is_dry(NOW)


def test_watered_two_hours_fifty_nine_minutes_ago_is_fresh():
    model = DrynessModel()
    model.observe(NOW - timedelta(hours=2, minutes=59), NOW)

    assert not model.is_dry(NOW)
    assert model.state == DrynessState.FRESH


def test_watered_three_hours_one_minute_ago_is_dry():
    model = DrynessModel()
    model.observe(NOW - timedelta(hours=3, minutes=1), NOW)

    assert model.is_dry(NOW)
    assert model.state == DrynessState.DRY


def test_exactly_at_threshold_is_still_fresh():
    model = DrynessModel()
    model.observe(NOW - timedelta(hours=3), NOW)

    assert model.state == DrynessState.FRESH


def test_tick_moves_fresh_to_dry():
    model = DrynessModel()
    model.observe(NOW, NOW)

    assert model.tick(NOW + timedelta(hours=2)) == DrynessState.FRESH
    assert model.tick(NOW + timedelta(hours=3, seconds=1)) == DrynessState.DRY


def test_new_watering_makes_it_fresh_without_a_tick():
    model = DrynessModel()
    model.observe(NOW - timedelta(hours=5), NOW)
    assert model.state == DrynessState.DRY

    model.observe(NOW, NOW)

    assert model.state == DrynessState.FRESH


def test_forgetting_the_last_watering_is_dry():
    model = DrynessModel()
    model.observe(NOW, NOW)

    assert model.observe(None, NOW) == DrynessState.DRY


def test_configurable_threshold():
    model = DrynessModel(threshold=timedelta(minutes=30))
    model.observe(NOW - timedelta(minutes=31), NOW)

    assert model.state == DrynessState.DRY


def test_threshold_must_be_positive():
    with pytest.raises(ValueError):
        DrynessModel(threshold=timedelta(0))
