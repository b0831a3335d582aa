"""Quest ledger: acceptance, progress tracking, completion and rewards."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from soulforge.core.rng import RNG
from soulforge.data.repositories import ItemsRepository, QuestChainsRepository, QuestsRepository
from soulforge.domain.defs import COUNTED_OBJECTIVE_TYPES, QuestDef, QuestPrereqDef
from soulforge.domain.state import INVENTORY_CAPACITY, PlayerState, QuestInstance, QuestObjective
from soulforge.services.errors import FactoryError, InvariantViolation
from soulforge.services.factories import create_item_instance
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

logger = logging.getLogger(__name__)

# Objective type -> (progress event type, event data key holding the target id).
OBJECTIVE_EVENTS: Dict[str, tuple[str, str]] = {
    "gather_item": ("item_collected", "item_id"),
    "defeat_enemy": ("enemy_defeated", "enemy_type"),
    "visit_location": ("location_visited", "location_id"),
    "find_item": ("item_found", "item_id"),
    "use_forger_tool": ("forger_tool_used", "tool_id"),
    "interact_with_object": ("object_interacted", "object_id"),
}
ACHIEVEMENT_QUEST_TYPES = ("lore", "forger")
_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")


class MissingQuestParameter(KeyError):
    """A quest template placeholder had no value among the accept parameters."""


@dataclass(slots=True)
class RewardGrant:
    reward_type: str
    amount: int = 0
    item_id: str | None = None
    skill_id: str | None = None


@dataclass(slots=True)
class QuestProgressUpdate:
    quest_id: str
    objective_id: str
    current: int
    required: int
    objective_completed: bool
    quest_completed: bool = False
    rewards: List[RewardGrant] = field(default_factory=list)


class QuestService:
    """Centralized quest logic (accept, progress, complete, fail)."""

    def __init__(
        self,
        store: StateStore,
        *,
        quests_repo: QuestsRepository,
        quest_chains_repo: QuestChainsRepository,
        items_repo: ItemsRepository,
        rng: RNG,
    ) -> None:
        self._store = store
        self._quests_repo = quests_repo
        self._quest_chains_repo = quest_chains_repo
        self._items_repo = items_repo
        self._rng = rng

    # ------------------------------------------------------------------ Views
    def active_quests(self) -> List[QuestInstance]:
        return [quest for quest in self._store.player.quests if quest.status == "active"]

    def completed_quests(self) -> List[QuestInstance]:
        return [quest for quest in self._store.player.quests if quest.status == "completed"]

    def has_quest(self, quest_id: str) -> bool:
        return self._store.player.find_quest(quest_id) is not None

    def is_quest_completed(self, quest_id: str) -> bool:
        return self._store.player.find_quest(quest_id, status="completed") is not None

    def available_quests(self) -> List[QuestDef]:
        player = self._store.player
        return [
            quest_def
            for quest_def in self._quests_repo.all()
            if not self.has_quest(quest_def.quest_id)
            and not self.is_quest_completed(quest_def.quest_id)
            and self._prerequisites_met(quest_def.prerequisites, player)
        ]

    # ------------------------------------------------------------- Lifecycle
    def accept_quest(
        self,
        quest_id: str,
        parameters: Mapping[str, object] | None = None,
    ) -> OperationResult[QuestInstance]:
        """Instantiate a quest template with every objective reset.

        ``parameters`` fill ``{name}`` placeholders in objective targets,
        quantities and descriptions.
        """
        try:
            quest_def = self._quests_repo.get(quest_id)
        except KeyError:
            return OperationResult.not_found("Quest not found.", "quest_not_found")
        if self.has_quest(quest_id):
            return OperationResult.precondition_failed("Quest already active.", "quest_already_active")
        if self.is_quest_completed(quest_id):
            return OperationResult.precondition_failed("Quest already completed.", "quest_already_completed")
        if not self._prerequisites_met(quest_def.prerequisites, self._store.player):
            return OperationResult.precondition_failed(
                "You do not meet the prerequisites for this quest.", "prerequisites_not_met"
            )
        try:
            quest = self._instantiate(quest_def, parameters or {})
        except MissingQuestParameter as exc:
            return OperationResult.precondition_failed(
                f"Quest parameter '{exc.args[0]}' is required.", "missing_quest_parameter"
            )

        self._store.add_quest(quest)
        self._store.add_journal_entry(
            f"Quest Accepted: {quest.name}",
            quest.description,
            category="Quest",
            icon="clipboard-list",
        )
        return OperationResult.ok(f"You accepted the quest: {quest.name}", quest)

    def start_quest_chain(
        self,
        chain_id: str,
        parameters: Mapping[str, object] | None = None,
    ) -> OperationResult[QuestInstance]:
        """Accept the first quest of a chain, filling its placeholders from ``parameters``."""
        try:
            chain = self._quest_chains_repo.get(chain_id)
        except KeyError:
            return OperationResult.not_found("Quest chain not found.", "chain_not_found")
        if not chain.quest_ids:
            return OperationResult.precondition_failed("Quest chain is empty.", "chain_empty")
        return self.accept_quest(chain.quest_ids[0], parameters)

    def track_quest_progress(self, event_type: str, event_data: Mapping[str, object]) -> List[QuestProgressUpdate]:
        """Apply a gameplay event to every matching objective of every active quest."""
        updates: List[QuestProgressUpdate] = []
        for quest in self.active_quests():
            for objective in list(quest.objectives):
                if objective.completed or quest.status != "active":
                    continue
                progress = self._progress_for(objective, event_type, event_data)
                if progress <= 0:
                    continue
                result = self.update_quest_objective(quest.quest_id, objective.objective_id, progress)
                if result.success and result.payload is not None:
                    updates.append(result.payload)
        return updates

    def update_quest_objective(
        self,
        quest_id: str,
        objective_id: str,
        progress: int = 1,
    ) -> OperationResult[QuestProgressUpdate]:
        """Counted objectives accumulate toward their threshold; any other objective completes at once."""
        if progress < 0:
            raise InvariantViolation("Quest progress cannot be negative.")
        quest = self._store.player.find_quest(quest_id)
        if quest is None:
            return OperationResult.not_found("Quest not found.", "quest_not_found")
        objective = quest.find_objective(objective_id)
        if objective is None:
            return OperationResult.not_found("Quest objective not found.", "quest_not_found")

        if objective.objective_type in COUNTED_OBJECTIVE_TYPES:
            current = min(objective.required_quantity, objective.current_quantity + progress)
            reached = current >= objective.required_quantity
        else:
            current = objective.required_quantity
            reached = True
        self._store.update_quest_objective(quest_id, objective_id, current_quantity=current, completed=reached)

        update = QuestProgressUpdate(
            quest_id=quest_id,
            objective_id=objective_id,
            current=objective.current_quantity,
            required=objective.required_quantity,
            objective_completed=objective.completed,
        )
        if quest.all_objectives_completed():
            completion = self.complete_quest(quest_id)
            if completion.success:
                update.quest_completed = True
                update.rewards = completion.payload or []
                return OperationResult.ok(completion.message, update)
        return OperationResult.ok("Quest progress updated.", update)

    def complete_quest(self, quest_id: str) -> OperationResult[List[RewardGrant]]:
        quest = self._store.player.find_quest(quest_id)
        if quest is None:
            return OperationResult.not_found("Quest not found.", "quest_not_found")
        if not quest.all_objectives_completed():
            return OperationResult.precondition_failed(
                "Not all quest objectives are complete.", "objectives_incomplete"
            )

        self._store.update_quest_status(quest_id, "completed")
        rewards = self._award_rewards(quest)
        self._store.add_journal_entry(
            f"Quest Completed: {quest.name}",
            f'You completed the quest "{quest.name}".',
            category="Quest",
            icon="check-square",
        )
        if quest.quest_type in ACHIEVEMENT_QUEST_TYPES:
            self._store.add_achievement(
                f"quest_{quest_id}_completed",
                "Quest Explorer",
                description=f"Completed the quest: {quest.name}",
                rarity="uncommon",
            )
        return OperationResult.ok(f'Quest "{quest.name}" completed!', rewards)

    def fail_quest(self, quest_id: str) -> OperationResult[QuestInstance]:
        quest = self._store.player.find_quest(quest_id)
        if quest is None:
            return OperationResult.not_found("Quest not found.", "quest_not_found")
        self._store.update_quest_status(quest_id, "failed")
        self._store.add_journal_entry(
            f"Quest Failed: {quest.name}",
            f'You failed the quest "{quest.name}".',
            category="Quest",
            icon="x-circle",
        )
        return OperationResult.ok(f'Quest "{quest.name}" failed!', quest)

    # --------------------------------------------------------------- Helpers
    def _award_rewards(self, quest: QuestInstance) -> List[RewardGrant]:
        """Grant experience, essence, items, skill experience, then forger essence.

        Reward items that do not fit the inventory are skipped.
        """
        rewards = quest.rewards
        player = self._store.player
        granted: List[RewardGrant] = []
        if rewards.experience:
            self._store.add_player_experience(rewards.experience)
            granted.append(RewardGrant("experience", amount=rewards.experience))
        if rewards.essence:
            self._store.adjust_essence(rewards.essence)
            granted.append(RewardGrant("essence", amount=rewards.essence))
        for reward_item in rewards.items:
            if len(player.inventory) >= INVENTORY_CAPACITY:
                logger.warning(
                    "Inventory full; quest %s reward %s x%d was not granted",
                    quest.quest_id,
                    reward_item.item_id,
                    reward_item.quantity,
                )
                continue
            try:
                instance = create_item_instance(
                    reward_item.item_id,
                    reward_item.quantity,
                    self._items_repo,
                    self._rng,
                    taken={item.instance_id for item in player.inventory},
                )
            except FactoryError as exc:
                raise InvariantViolation(str(exc)) from exc
            self._store.add_to_inventory(instance)
            granted.append(RewardGrant("item", amount=reward_item.quantity, item_id=reward_item.item_id))
        for skill_id, amount in rewards.skill_experience.items():
            if self._store.add_skill_experience(skill_id, amount):
                granted.append(RewardGrant("skill_experience", amount=amount, skill_id=skill_id))
        if rewards.forger_essence and player.role == "forger":
            self._store.adjust_forger_essence(rewards.forger_essence)
            granted.append(RewardGrant("forger_essence", amount=rewards.forger_essence))
        return granted

    def _prerequisites_met(self, prerequisites: tuple[QuestPrereqDef, ...], player: PlayerState) -> bool:
        for prereq in prerequisites:
            if prereq.skill is not None:
                skill = player.skills.get(prereq.skill)
                if skill is None or skill.level < prereq.level:
                    return False
            if prereq.role is not None and player.role != prereq.role:
                return False
            if prereq.quest is not None and not self.is_quest_completed(prereq.quest):
                return False
        return True

    @staticmethod
    def _progress_for(objective: QuestObjective, event_type: str, event_data: Mapping[str, object]) -> int:
        expected = OBJECTIVE_EVENTS.get(objective.objective_type)
        if expected is None or expected[0] != event_type:
            return 0
        if event_data.get(expected[1]) != objective.target:
            return 0
        if objective.objective_type == "gather_item":
            quantity = event_data.get("quantity", 1)
            return quantity if isinstance(quantity, int) else 1
        return 1

    def _instantiate(self, quest_def: QuestDef, parameters: Mapping[str, object]) -> QuestInstance:
        objectives: List[QuestObjective] = []
        for objective_def in quest_def.objectives:
            required = objective_def.required_quantity
            if isinstance(required, str):
                required = self._coerce_quantity(_fill(required, parameters))
            objectives.append(
                QuestObjective(
                    objective_id=objective_def.id,
                    description=_fill(objective_def.description, parameters),
                    objective_type=objective_def.objective_type,
                    target=_fill(objective_def.target, parameters) if objective_def.target is not None else None,
                    required_quantity=required,
                )
            )
        return QuestInstance(
            quest_id=quest_def.quest_id,
            name=_fill(quest_def.name, parameters),
            description=_fill(quest_def.description, parameters),
            quest_type=quest_def.quest_type,
            objectives=objectives,
            rewards=quest_def.rewards,
            accepted_day=self._store.world.time.day,
        )

    @staticmethod
    def _coerce_quantity(value: str) -> int:
        try:
            quantity = int(value)
        except ValueError as exc:
            raise InvariantViolation(f"Quest quantity '{value}' is not a whole number.") from exc
        if quantity <= 0:
            raise InvariantViolation("Quest quantities must be positive.")
        return quantity


def _fill(template: str, parameters: Mapping[str, object]) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in parameters:
            raise MissingQuestParameter(name)
        return str(parameters[name])

    return _PLACEHOLDER.sub(replace, template)
