"""Factory for a brand new game state."""
from __future__ import annotations

from soulforge.core.rng import RNG
from soulforge.core.types import PLAYER_ROLES, PlayerRole
from soulforge.data.repositories import RegionsRepository, SkillsRepository
from soulforge.domain.state import (
    DEFAULT_LOCATION_ID,
    GameState,
    PlayerState,
    RegionState,
    SkillState,
    WorldState,
)
from soulforge.services.errors import FactoryError

from .id_factory import make_instance_id

DEFAULT_PLAYER_NAME = "Wanderer"


def create_new_game(
    rng: RNG,
    *,
    skills_repo: SkillsRepository,
    regions_repo: RegionsRepository,
    player_name: str = DEFAULT_PLAYER_NAME,
    role: PlayerRole = "wanderer",
) -> GameState:
    """Seed the player, skill tree and region table for a fresh session."""
    if role not in PLAYER_ROLES:
        raise FactoryError(f"Unknown player role '{role}'.")
    player = PlayerState(
        player_id=make_instance_id("player", rng),
        name=player_name,
        role=role,
        skills={skill.id: SkillState() for skill in skills_repo.all()},
        location=DEFAULT_LOCATION_ID,
        discovered_regions=[DEFAULT_LOCATION_ID],
    )
    regions = {
        region.id: RegionState(region_id=region.id, name=region.name, population=region.initial_population)
        for region in regions_repo.all()
    }
    return GameState(player=player, world=WorldState(regions=regions))
