"""Factory for simulated townsfolk."""
from __future__ import annotations

from typing import Container, List, Sequence

from soulforge.core.rng import RNG
from soulforge.domain.defs import NpcRoleDef
from soulforge.domain.state import Attributes, NpcGoal, NpcState

from .id_factory import make_instance_id

FIRST_NAMES: tuple[str, ...] = (
    "Aldric",
    "Bryn",
    "Cedric",
    "Darian",
    "Eldrin",
    "Fenris",
    "Gareth",
    "Hadrian",
    "Ivor",
    "Jorah",
)
PERSONALITY_TRAITS: tuple[str, ...] = (
    "optimistic",
    "pessimistic",
    "curious",
    "cautious",
    "brave",
    "cowardly",
    "generous",
    "selfish",
    "honest",
    "deceitful",
    "loyal",
    "treacherous",
    "kind",
    "cruel",
    "patient",
    "impatient",
    "wise",
    "foolish",
)
PHYSICAL_TRAITS: tuple[str, ...] = (
    "scar",
    "tattoo",
    "accent",
    "limp",
    "glasses",
    "beard",
    "piercing",
    "nervous_habit",
    "distinctive_clothing",
    "unique_scent",
    "memorable_voice",
)


def _pick_distinct(pool: Sequence[str], low: int, high: int, rng: RNG) -> List[str]:
    count = min(len(pool), rng.randint(low, high))
    picks = list(pool)
    rng.shuffle(picks)
    return picks[:count]


def create_npc(role: NpcRoleDef, settlement_id: str, rng: RNG, taken: Container[str] = ()) -> NpcState:
    """Roll a name, personality, traits and one or two goals from ``role``."""
    goal_ids = _pick_distinct(sorted(role.goals), 1, 2, rng) if role.goals else []
    attributes = Attributes(**{name: rng.randint(6, 14) for name in Attributes().to_dict()})
    return NpcState(
        npc_id=make_instance_id("npc", rng, taken),
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(role.names)}",
        role=role.id,
        settlement_id=settlement_id,
        attributes=attributes,
        personality=_pick_distinct(PERSONALITY_TRAITS, 3, 5, rng),
        traits=_pick_distinct(PHYSICAL_TRAITS, 1, 3, rng),
        goals=[NpcGoal(goal_id=goal_id, description=role.goals[goal_id]) for goal_id in goal_ids],
        schedule=list(role.schedule),
    )
