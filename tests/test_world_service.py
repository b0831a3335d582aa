from typing import List

import pytest

from soulforge.core.calendar import minutes_since_epoch
from soulforge.core.rng import RNG
from soulforge.services.errors import InvariantViolation
from soulforge.services.world_service import BASE_EVENT_CHANCE, nexus_state_for_corruption


class ScriptedRNG(RNG):
    """Serves queued ``random()`` draws first, then falls back to the seeded stream."""

    def __init__(self, seed: int, randoms: List[float] | None = None) -> None:
        super().__init__(seed)
        self.randoms = list(randoms or [])

    def random(self) -> float:
        if self.randoms:
            return self.randoms.pop(0)
        return super().random()


@pytest.mark.parametrize(
    "corruption, expected",
    [
        (0.0, "stable_flux"),
        (0.2, "stable_flux"),
        (0.21, "unstable_resonance"),
        (0.5, "unstable_resonance"),
        (0.51, "corrupted_bleed"),
    ],
)
def test_nexus_state_thresholds(corruption: float, expected: str) -> None:
    assert nexus_state_for_corruption(corruption) == expected


def test_update_world_state_shifts_nexus_and_decays(make_session) -> None:
    session = make_session(rng=ScriptedRNG(1, [0.99]))
    session.store.set_corruption_level(0.6)

    assert session.world.update_world_state() == "corrupted_bleed"

    assert session.store.world.corruption_level == pytest.approx(0.599)
    assert session.store.player.journal[-1].title == "Nexus Shift: Corrupted Bleed"


def test_update_world_state_without_change_writes_nothing(make_session) -> None:
    session = make_session(rng=ScriptedRNG(1, [0.99]))
    journal_size = len(session.store.player.journal)

    assert session.world.update_world_state() == "stable_flux"
    assert len(session.store.player.journal) == journal_size
    assert session.store.world.corruption_level == 0.0


def test_event_chance_scales_with_nexus_type(make_session) -> None:
    session = make_session()
    assert session.world.event_chance() == pytest.approx(BASE_EVENT_CHANCE)

    session.store.set_nexus_state("unstable_resonance")
    assert session.world.event_chance() == pytest.approx(BASE_EVENT_CHANCE * 2)

    session.store.set_nexus_state("corrupted_bleed")
    assert session.world.event_chance() == pytest.approx(BASE_EVENT_CHANCE * 3)


def test_triggered_event_adds_corruption_and_expires(make_session) -> None:
    session = make_session()
    start = minutes_since_epoch(session.store.world.time)

    event = session.world.trigger_random_event("echo_spike")

    assert event is not None
    assert event.started_at == start
    assert event.ends_at == start + 720
    assert session.world.active_events() == [event]
    assert session.store.world.corruption_level == pytest.approx(0.02)
    assert session.store.player.journal[-1].title == "World Event: Echo Spike"

    session.store.advance_time(719)
    assert session.world.expire_events() == []
    session.store.advance_time(1)
    assert session.world.expire_events() == [event.event_id]
    assert session.world.active_events() == []
    assert session.store.player.journal[-1].title == "World Event Ended: Echo Spike"


def test_trigger_unknown_event_returns_none(make_session) -> None:
    session = make_session()

    assert session.world.trigger_random_event("meteor_shower") is None
    assert session.world.active_events() == []


def test_change_season_wraps_and_journals(make_session) -> None:
    session = make_session()

    assert session.world.change_season() == "summer"
    assert session.store.player.journal[-1].title == "Season Change: Summer"
    for _ in range(3):
        session.world.change_season()
    assert session.store.world.time.season == "spring"


def test_corruption_controls(make_session) -> None:
    session = make_session()

    assert session.world.add_corruption(0.4) == pytest.approx(0.4)
    assert session.world.reduce_corruption(1.0) == 0.0
    assert session.world.set_corruption_level(7.0) == 1.0
    with pytest.raises(InvariantViolation):
        session.world.add_corruption(-0.1)
    with pytest.raises(InvariantViolation):
        session.world.reduce_corruption(-0.1)


def test_simulate_world_step_advances_one_minute(make_session) -> None:
    session = make_session(rng=ScriptedRNG(1, [0.99] * 10))
    session.store.update_region("TheShatteredPeaks", corruption_level=0.1)

    session.world.simulate_world_step()

    time = session.store.world.time
    assert (time.hour, time.minute) == (12, 1)
    assert session.store.world.regions["TheShatteredPeaks"].corruption_level == pytest.approx(0.0995)
    assert session.world.active_events() == []


def test_region_resource_discovery_writes_journal(make_session) -> None:
    region_count = len(make_session().store.world.regions)
    session = make_session(rng=ScriptedRNG(1, [0.0] * region_count))

    session.world.update_regions()

    discoveries = [entry for entry in session.store.player.journal if entry.title == "Resource Discovery"]
    assert len(discoveries) == region_count
