"""
Watering view state: today-count partition, optimistic events merged with
confirmed snapshots by id, rollback and day rollover.
"""

from datetime import timedelta

from flower.modules.watering.application.projection import WateringViewState
from flower.modules.watering.domain.models.dryness import DrynessState
from flower.modules.watering.domain.models.watering_event import WateringEvent
from flower.shared.utils.helpers import start_of_local_day

from tests.fakes import FakeClock

COUPLE = "test-couple"


def make_state(uid: str, clock: FakeClock) -> WateringViewState:
    return WateringViewState(my_uid=uid, start_of_day=start_of_local_day(clock()))


def event(user_id: str, timestamp, pending: bool = False) -> WateringEvent:
    return WateringEvent(couple_id=COUPLE, user_id=user_id, timestamp=timestamp, pending=pending)


def morning_events(start):
    return [
        event("A", start + timedelta(hours=9)),
        event("B", start + timedelta(hours=9, minutes=5)),
        event("A", start + timedelta(hours=9, minutes=10)),
    ]


def test_today_count_partition():
    clock = FakeClock()
    start = start_of_local_day(clock())
    clock.now = start + timedelta(hours=10)
    events = morning_events(start)

    for_a = make_state("A", clock)
    for_a.apply_today_snapshot(events, clock())
    for_b = make_state("B", clock)
    for_b.apply_today_snapshot(events, clock())

    assert (for_a.my_today_count, for_a.partner_today_count) == (2, 1)
    assert (for_b.my_today_count, for_b.partner_today_count) == (1, 2)


def test_events_before_start_of_day_are_not_counted():
    clock = FakeClock()
    start = start_of_local_day(clock())
    clock.now = start + timedelta(hours=10)
    state = make_state("A", clock)

    state.apply_today_snapshot([event("A", start - timedelta(minutes=1)), event("A", start)], clock())

    assert state.my_today_count == 1


def test_optimistic_event_is_not_double_counted_after_confirmation():
    clock = FakeClock()
    state = make_state("A", clock)
    state.apply_today_snapshot([], clock())
    state.apply_most_recent(None, clock())
    assert state.dryness_state == DrynessState.DRY

    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())

    assert state.my_today_count == 1
    assert state.dryness_state == DrynessState.FRESH
    assert state.most_recent_event == local

    confirmed = local.confirmed(clock() + timedelta(seconds=1))
    state.apply_today_snapshot([confirmed], clock())
    state.apply_most_recent(confirmed, clock())

    assert state.my_today_count == 1
    assert state.pending_count == 0
    assert state.most_recent_event == confirmed


def test_confirmation_may_arrive_before_the_local_event():
    clock = FakeClock()
    state = make_state("A", clock)
    local = event("A", clock(), pending=True)

    state.apply_today_snapshot([local.confirmed(clock())], clock())
    state.apply_local_event(local, clock())

    assert state.my_today_count == 1
    assert state.pending_count == 0


def test_most_recent_feed_lagging_behind_keeps_plant_fresh():
    clock = FakeClock()
    state = make_state("A", clock)
    old = event("B", clock() - timedelta(hours=5))
    state.apply_most_recent(old, clock())
    assert state.dryness_state == DrynessState.DRY

    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())
    state.apply_today_snapshot([local.confirmed(clock())], clock())

    assert state.dryness_state == DrynessState.FRESH
    assert state.most_recent_event.event_id == local.event_id


def test_discarding_a_failed_optimistic_event():
    clock = FakeClock()
    state = make_state("A", clock)
    state.apply_most_recent(None, clock())
    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())

    state.discard_local_event(local.event_id, clock())

    assert state.my_today_count == 0
    assert state.most_recent_event is None
    assert state.dryness_state == DrynessState.DRY


def test_tick_dries_the_plant():
    clock = FakeClock()
    state = make_state("A", clock)
    state.apply_most_recent(event("B", clock()), clock())
    assert state.dryness_state == DrynessState.FRESH

    assert state.tick(clock.advance(hours=3, minutes=1)) == DrynessState.DRY


def test_reset_day_drops_yesterday():
    clock = FakeClock()
    start = start_of_local_day(clock())
    clock.now = start + timedelta(hours=23, minutes=50)
    state = make_state("A", clock)
    state.apply_today_snapshot([event("A", clock())], clock())

    clock.advance(minutes=20)
    state.reset_day(start_of_local_day(clock()), clock())

    assert state.my_today_count == 0
    assert state.start_of_day == start_of_local_day(clock())


def test_listener_is_notified():
    clock = FakeClock()
    seen = []
    state = WateringViewState(my_uid="A", start_of_day=start_of_local_day(clock()), listener=seen.append)

    state.apply_most_recent(None, clock())

    assert seen == [state]
    assert state.has_loaded_recent


def test_stored_copy_before_start_of_day_is_dropped():
    clock = FakeClock()
    start = start_of_local_day(clock())
    clock.now = start + timedelta(minutes=1)
    state = make_state("A", clock)
    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())
    state.apply_today_snapshot([], clock())
    assert state.my_today_count == 1

    state.settle_local_event(local.confirmed(start - timedelta(seconds=30)), clock())

    assert state.my_today_count == 0
    assert state.pending_count == 0


def test_most_recent_confirmation_settles_pending_event():
    clock = FakeClock()
    start = start_of_local_day(clock())
    clock.now = start + timedelta(minutes=1)
    state = make_state("A", clock)
    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())

    stored = local.confirmed(start - timedelta(seconds=30))
    state.apply_most_recent(stored, clock())

    assert state.pending_count == 0
    assert state.my_today_count == 0
    assert state.most_recent_event == stored


def test_settling_an_already_confirmed_event_changes_nothing():
    clock = FakeClock()
    state = make_state("A", clock)
    local = event("A", clock(), pending=True)
    state.apply_local_event(local, clock())
    confirmed = local.confirmed(clock())
    state.apply_today_snapshot([confirmed], clock())

    state.settle_local_event(confirmed, clock())

    assert state.my_today_count == 1
    assert state.pending_count == 0
