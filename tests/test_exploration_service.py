from typing import List

import pytest

from soulforge.core.rng import RNG
from soulforge.services.exploration_service import encounter_chance


class ScriptedRNG(RNG):
    """Serves queued ``random()`` draws first, then falls back to the seeded stream."""

    def __init__(self, seed: int, randoms: List[float] | None = None) -> None:
        super().__init__(seed)
        self.randoms = list(randoms or [])

    def random(self) -> float:
        if self.randoms:
            return self.randoms.pop(0)
        return super().random()


def _make_session(make_session):
    return make_session(rng=ScriptedRNG(11))


def _force_encounter(session):
    session.rng.randoms = [0.0]
    travel = session.exploration.travel_to_region("TheLuminousPlains")
    assert travel.payload.encounter is not None
    return travel.payload.encounter


def test_encounter_chance_scales_with_threat_and_night() -> None:
    assert encounter_chance(1, 12) == pytest.approx(0.1)
    assert encounter_chance(4, 20) == pytest.approx(0.6)
    assert encounter_chance(0, 2) == 0


def test_travel_moves_player_and_passes_time(make_session) -> None:
    session = _make_session(make_session)
    session.quests.accept_quest("quest_explore_region", {"region_id": "TheLuminousPlains"})
    session.rng.randoms = [0.99]

    result = session.exploration.travel_to_region("TheLuminousPlains")

    assert result.success
    assert result.payload.encounter is None
    player = session.store.player
    assert player.location == "TheLuminousPlains"
    assert "TheLuminousPlains" in player.discovered_regions
    assert (session.store.world.time.hour, session.store.world.time.minute) == (12, 30)
    assert session.quests.is_quest_completed("quest_explore_region")


def test_travel_requires_adjacent_known_region(make_session) -> None:
    session = _make_session(make_session)

    assert session.exploration.travel_to_region("Atlantis").reason == "region_not_found"
    assert session.exploration.travel_to_region("TheCrimsonDesert").reason == "region_not_adjacent"
    assert session.exploration.travel_to_region("TheCentralNexus").reason == "region_not_adjacent"
    assert session.store.player.location == "TheCentralNexus"


def test_nearby_regions_follow_neighbors(make_session) -> None:
    session = _make_session(make_session)

    names = {region.id for region in session.exploration.nearby_regions()}

    assert names == {"TheLuminousPlains", "TheWhisperingReaches", "TheShatteredPeaks"}


def test_observe_success_grants_experience(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)
    session.rng.randoms = [0.1]

    result = session.exploration.handle_encounter_choice(encounter.encounter_id, "observe")

    assert result.payload.action == "observation_success"
    assert 5 <= result.payload.experience <= 14
    assert session.store.player.experience == result.payload.experience


def test_failed_observation_can_turn_into_combat(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)
    session.rng.randoms = [0.9, 0.1]

    result = session.exploration.handle_encounter_choice(encounter.encounter_id, "observe")

    assert result.payload.action == "start_combat"
    assert result.payload.combat.enemy_type == encounter.creature_id


def test_flee_from_encounter(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)
    session.rng.randoms = [0.1]

    result = session.exploration.handle_encounter_choice(encounter.encounter_id, "flee")

    assert result.payload.action == "flee_success"
    assert session.exploration.get_encounter(encounter.encounter_id) is None


def test_failed_flee_starts_combat(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)
    session.rng.randoms = [0.95]

    result = session.exploration.handle_encounter_choice(encounter.encounter_id, "flee")

    assert result.payload.action == "start_combat"
    assert session.combat.is_in_combat()


def test_encounter_choices_are_validated(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)

    assert session.exploration.handle_encounter_choice(encounter.encounter_id, "dance").reason == "invalid_choice"
    assert session.exploration.handle_encounter_choice("encounter_0", "fight").reason == "encounter_not_found"


def test_explore_landmark_can_find_artifact(make_session) -> None:
    session = _make_session(make_session)
    session.rng.randoms = [0.1]

    result = session.exploration.explore_landmark("ancient_nexus_tower")

    assert result.success
    assert result.payload.items_found == ["ancient_artifact"]
    assert session.exploration.is_landmark_discovered("ancient_nexus_tower")
    assert session.inventory.count_item("ancient_artifact") == 1
    assert session.store.player.journal[-1].title == "Explored: Ancient Nexus Tower"
    assert session.store.world.time.hour == 13


def test_explore_landmark_checks_region(make_session) -> None:
    session = _make_session(make_session)

    assert session.exploration.explore_landmark("whispering_forest_grove").reason == "wrong_region"
    assert session.exploration.explore_landmark("moon_gate").reason == "landmark_not_found"


def test_gather_resources_from_region(make_session) -> None:
    session = _make_session(make_session)

    result = session.exploration.gather_resources()

    assert result.success
    gathered = result.payload
    assert gathered.item_id in ("essence_crystal", "rare_minerals", "mana_crystal")
    assert 1 <= gathered.quantity <= 3
    assert session.inventory.count_item(gathered.item_id) == gathered.quantity
    assert session.store.world.time.minute == 30


def test_survival_skill_boosts_gathering(make_session) -> None:
    session = _make_session(make_session)
    session.store.player.skills["wilderness_survival"].level = 10

    result = session.exploration.gather_resources()

    assert result.payload.quantity in (2, 4, 6)


def test_landmarks_in_region(make_session) -> None:
    session = _make_session(make_session)

    landmarks = session.exploration.landmarks_in_region("TheCentralNexus")

    assert "ancient_nexus_tower" in [landmark.id for landmark in landmarks]
    assert all(landmark.region_id == "TheCentralNexus" for landmark in landmarks)


def test_travel_abandons_pending_encounter(make_session) -> None:
    session = _make_session(make_session)
    encounter = _force_encounter(session)
    session.rng.randoms = [0.99]

    assert session.exploration.travel_to_region("TheCentralNexus").success

    assert session.exploration.get_encounter(encounter.encounter_id) is None
    assert session.exploration.handle_encounter_choice(encounter.encounter_id, "fight").reason == "encounter_not_found"
