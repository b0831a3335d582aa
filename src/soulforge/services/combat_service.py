"""Turn-based combat between the player and a single enemy."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from soulforge.core.rng import RNG
from soulforge.data.repositories import CreaturesRepository, LootTablesRepository
from soulforge.domain.combat_models import COMBAT_ACTIONS, Combatant, CombatSession
from soulforge.domain.defs import DamageRange
from soulforge.domain.enemy_scaling import roll_enemy_level, scale_enemy_stats
from soulforge.domain.loot import roll_loot
from soulforge.services.factories import make_instance_id
from soulforge.services.inventory_service import InventoryService
from soulforge.services.quest_service import QuestService
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

logger = logging.getLogger(__name__)

DEFEND_BOOST = 2
SPECIAL_ATTACK_POWER = 1.5
FLEE_CHANCE = 0.7
ENEMY_DEFEND_CHANCE = 0.2
EXPERIENCE_PER_ENEMY_LEVEL = 10
ESSENCE_PER_ENEMY_LEVEL = 2
DEFEAT_HEALTH_LOSS = 0.2
ANALYZE_SKILL_ID = "wilderness_survival"
ANALYZE_SKILL_LEVEL = 3


def calculate_damage(base_roll: int, defense: int) -> int:
    """Damage after defense; a hit always deals at least 1."""
    return max(1, base_roll - defense)


@dataclass(slots=True)
class CombatRewards:
    experience: int
    essence: int
    items: List[Tuple[str, int]] = field(default_factory=list)


@dataclass(slots=True)
class TurnOutcome:
    """What one call did; ``session`` reflects the fight after the call."""

    session: CombatSession
    messages: List[str]
    damage: int = 0
    rewards: CombatRewards | None = None
    revealed: Dict[str, int] | None = None

    @property
    def combat_ended(self) -> bool:
        return self.session.is_over

    @property
    def victory(self) -> bool:
        return self.session.status == "player_win"


class CombatService:
    """Runs duels; the store only sees the outcome once a fight ends."""

    def __init__(
        self,
        store: StateStore,
        *,
        creatures_repo: CreaturesRepository,
        loot_tables_repo: LootTablesRepository,
        inventory_service: InventoryService,
        rng: RNG,
        quest_service: QuestService | None = None,
    ) -> None:
        self._store = store
        self._creatures_repo = creatures_repo
        self._loot_tables_repo = loot_tables_repo
        self._inventory = inventory_service
        self._rng = rng
        self._quest_service = quest_service
        self._sessions: Dict[str, CombatSession] = {}

    # ------------------------------------------------------------------ Views
    def get_combat(self, combat_id: str) -> CombatSession | None:
        return self._sessions.get(combat_id)

    def active_combat(self) -> CombatSession | None:
        for session in self._sessions.values():
            if not session.is_over:
                return session
        return None

    def is_in_combat(self) -> bool:
        return self.active_combat() is not None

    def available_actions(self) -> List[str]:
        player = self._store.player
        actions = ["attack", "defend"]
        if "weapon" in player.equipment:
            actions.append("special_attack")
        skill = player.skills.get(ANALYZE_SKILL_ID)
        if skill is not None and skill.level >= ANALYZE_SKILL_LEVEL:
            actions.append("analyze_weakness")
        return [action for action in COMBAT_ACTIONS if action in actions]

    # --------------------------------------------------------------- Lifecycle
    def start_combat(self, enemy_type: str) -> OperationResult[CombatSession]:
        try:
            creature = self._creatures_repo.get(enemy_type)
        except KeyError:
            return OperationResult.not_found("Creature not found.", "creature_not_found")

        player_state = self._store.player
        stats = self._inventory.player_stats_with_equipment()
        enemy_level = roll_enemy_level(player_state.level, self._rng)
        enemy_stats = scale_enemy_stats(creature, enemy_level=enemy_level)
        session = CombatSession(
            combat_id=make_instance_id("combat", self._rng, self._sessions),
            enemy_type=enemy_type,
            player=Combatant(
                name=player_state.name,
                health=player_state.health,
                max_health=player_state.max_health,
                defense=stats.defense,
                damage=stats.damage,
                level=player_state.level,
                strength=stats.attributes.strength,
            ),
            enemy=Combatant(
                name=creature.name,
                health=enemy_stats.max_health,
                max_health=enemy_stats.max_health,
                defense=enemy_stats.defense,
                damage=enemy_stats.damage,
                level=enemy_stats.level,
                strength=enemy_stats.strength,
            ),
            actions=self.available_actions(),
            loot_table_id=creature.loot_table_id,
        )
        session.log.append(f"Combat begins against {creature.name}!")
        self._sessions[session.combat_id] = session
        logger.debug("Combat %s started against %s (level %d)", session.combat_id, enemy_type, enemy_level)
        return OperationResult.ok(f"Combat begins against {creature.name}!", session)

    def player_turn(self, combat_id: str, action: str) -> OperationResult[TurnOutcome]:
        """Resolve the player's action; control passes to the enemy unless the fight ended."""
        session, failure = self._require_turn(combat_id, "player")
        if session is None:
            return failure  # type: ignore[return-value]
        if action not in session.actions:
            return OperationResult.precondition_failed("That action is not available.", "action_unavailable")

        outcome = TurnOutcome(session=session, messages=[])
        if action == "attack":
            outcome.damage = self._attack(session.player, session.enemy, outcome.messages)
        elif action == "special_attack":
            outcome.damage = self._attack(
                session.player, session.enemy, outcome.messages, power=SPECIAL_ATTACK_POWER
            )
        elif action == "defend":
            self._defend(session.player, outcome.messages)
        else:
            enemy = session.enemy
            outcome.revealed = {
                "level": enemy.level,
                "health": enemy.health,
                "max_health": enemy.max_health,
                "strength": enemy.strength,
            }
            outcome.messages.append(
                f"Analyzed {enemy.name}: level {enemy.level}, HP {enemy.health}/{enemy.max_health}, "
                f"strength {enemy.strength}"
            )
        session.log.extend(outcome.messages)

        if not session.enemy.is_alive:
            outcome.rewards = self._end_combat(session, "player_win", outcome.messages)
        else:
            session.turn = "enemy"
        return OperationResult.ok(" ".join(outcome.messages), outcome)

    def enemy_turn(self, combat_id: str) -> OperationResult[TurnOutcome]:
        session, failure = self._require_turn(combat_id, "enemy")
        if session is None:
            return failure  # type: ignore[return-value]
        outcome = TurnOutcome(session=session, messages=[])
        if self._rng.random() > ENEMY_DEFEND_CHANCE:
            outcome.damage = self._attack(session.enemy, session.player, outcome.messages)
        else:
            self._defend(session.enemy, outcome.messages)
        session.log.extend(outcome.messages)

        if not session.player.is_alive:
            self._end_combat(session, "enemy_win", outcome.messages)
        else:
            session.turn = "player"
        return OperationResult.ok(" ".join(outcome.messages), outcome)

    def resolve_round(self, combat_id: str, action: str) -> OperationResult[TurnOutcome]:
        """Player action followed by the enemy's reply when the fight is still on."""
        player_result = self.player_turn(combat_id, action)
        if not player_result.success or player_result.payload is None or player_result.payload.combat_ended:
            return player_result
        enemy_result = self.enemy_turn(combat_id)
        assert enemy_result.payload is not None
        merged = TurnOutcome(
            session=enemy_result.payload.session,
            messages=player_result.payload.messages + enemy_result.payload.messages,
            damage=player_result.payload.damage,
            revealed=player_result.payload.revealed,
        )
        return OperationResult.ok(" ".join(merged.messages), merged)

    def flee(self, combat_id: str) -> OperationResult[TurnOutcome]:
        """70% escape; on failure the enemy gets one free attack that ignores defend boosts."""
        session, failure = self._require_turn(combat_id, "player")
        if session is None:
            return failure  # type: ignore[return-value]
        outcome = TurnOutcome(session=session, messages=[])
        if self._rng.random() < FLEE_CHANCE:
            outcome.messages.append("You escaped from combat!")
            session.log.extend(outcome.messages)
            self._end_combat(session, "fled", outcome.messages)
            return OperationResult.ok("You escaped from combat!", outcome)

        roll = self._rng.roll_range(session.enemy.damage.min, session.enemy.damage.max)
        damage = calculate_damage(roll, session.player.defense)
        session.player.health = max(0, session.player.health - damage)
        outcome.damage = damage
        outcome.messages.append(f"Failed to flee! {session.enemy.name} strikes you for {damage} damage!")
        session.log.extend(outcome.messages)
        if not session.player.is_alive:
            self._end_combat(session, "enemy_win", outcome.messages)
        return OperationResult(success=False, message=" ".join(outcome.messages), payload=outcome, reason="flee_failed")

    # --------------------------------------------------------------- Helpers
    def _require_turn(
        self, combat_id: str, turn: str
    ) -> tuple[CombatSession | None, OperationResult[TurnOutcome] | None]:
        session = self._sessions.get(combat_id)
        if session is None:
            return None, OperationResult.not_found("Combat not found.", "combat_not_found")
        if session.is_over:
            return None, OperationResult.precondition_failed("Combat is already over.", "combat_over")
        if session.turn != turn:
            reason = "not_player_turn" if turn == "player" else "not_enemy_turn"
            return None, OperationResult.precondition_failed(f"It is not the {turn}'s turn.", reason)
        return session, None

    def _attack(self, attacker: Combatant, defender: Combatant, messages: List[str], *, power: float = 1.0) -> int:
        damage_range: DamageRange = attacker.damage
        roll = self._rng.roll_range(damage_range.min, damage_range.max)
        if power != 1.0:
            roll = math.floor(roll * power)
        damage = calculate_damage(roll, defender.effective_defense)
        defender.health = max(0, defender.health - damage)
        verb = "unleashes a special attack on" if power != 1.0 else "attacks"
        messages.append(f"{attacker.name} {verb} {defender.name} for {damage} damage!")
        return damage

    @staticmethod
    def _defend(combatant: Combatant, messages: List[str]) -> None:
        combatant.defense_boost += DEFEND_BOOST
        messages.append(f"{combatant.name} takes a defensive stance, raising their defense!")

    def _end_combat(self, session: CombatSession, status: str, messages: List[str]) -> CombatRewards | None:
        session.status = status  # type: ignore[assignment]
        logger.debug("Combat %s ended: %s", session.combat_id, status)
        first_new = len(messages)
        rewards = None
        if status == "player_win":
            # Combat health is written back before rewards; a level-up heal must not be overwritten.
            self._store.set_health(session.player.health)
            rewards = self._grant_victory(session, messages)
        elif status == "enemy_win":
            player = self._store.player
            loss = math.floor(player.max_health * DEFEAT_HEALTH_LOSS)
            self._store.set_health(max(1, player.health - loss))
            messages.append(f"{session.enemy.name} defeated you! You lose {loss} health.")
        else:
            self._store.set_health(session.player.health)
        session.log.extend(messages[first_new:])
        self._prune_finished(keep=session.combat_id)
        return rewards

    def _prune_finished(self, *, keep: str) -> None:
        """Drop every ended session except ``keep``, which stays to answer ``combat_over``."""
        for combat_id in [key for key, other in self._sessions.items() if other.is_over and key != keep]:
            del self._sessions[combat_id]

    def _grant_victory(self, session: CombatSession, messages: List[str]) -> CombatRewards:
        enemy = session.enemy
        rewards = CombatRewards(
            experience=enemy.level * EXPERIENCE_PER_ENEMY_LEVEL,
            essence=enemy.level * ESSENCE_PER_ENEMY_LEVEL,
        )
        messages.append(f"You defeated {enemy.name}!")
        self._store.add_player_experience(rewards.experience)

        currency = 0
        if session.loot_table_id is not None and self._loot_tables_repo.has(session.loot_table_id):
            loot = roll_loot(self._loot_tables_repo.get(session.loot_table_id), self._rng)
            currency = loot.currency
            for item_id, quantity in loot.items:
                added = self._inventory.add_item(item_id, quantity)
                if added.success:
                    rewards.items.append((item_id, quantity))
                else:
                    messages.append(f"Left {item_id} x{quantity} behind: {added.message}")
        rewards.essence += currency
        self._store.adjust_essence(rewards.essence)
        messages.append(f"Gained {rewards.experience} EXP and {rewards.essence} essence!")
        if rewards.items:
            messages.append("Loot: " + ", ".join(f"{item_id} x{quantity}" for item_id, quantity in rewards.items))

        if self._quest_service is not None:
            self._quest_service.track_quest_progress("enemy_defeated", {"enemy_type": session.enemy_type})
        return rewards
