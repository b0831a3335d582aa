"""Forger-only tools and reality-shaping abilities paid from the forger essence pool."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List

from soulforge.core.rng import RNG
from soulforge.data.repositories import ForgerToolsRepository, NexusStatesRepository, RegionsRepository
from soulforge.domain.defs import (
    AnalysisEffect,
    CreationEffect,
    ForgerToolDef,
    InterventionEffect,
    PurificationEffect,
    TemporalEffect,
)
from soulforge.domain.state import Creation, Intervention
from soulforge.services.errors import InvariantViolation
from soulforge.services.factories import make_instance_id
from soulforge.services.quest_service import QuestService
from soulforge.services.results import OperationResult
from soulforge.services.state_store import StateStore

FORGER_ROLE = "forger"
UPGRADE_COST_FACTOR = 0.9
LANDMARK_COST = 100
REGION_MANIPULATION_COST = 50
DEFAULT_NEXUS_STATE_ID = "stable_flux"


@dataclass(slots=True)
class ToolStatus:
    tool: ForgerToolDef
    power_level: int
    essence_cost: int


@dataclass(slots=True)
class ToolEffectReport:
    message: str
    details: Dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class ToolUseOutcome:
    tool_id: str
    target: str
    essence_cost: int
    essence_remaining: int
    effect: ToolEffectReport


@dataclass(slots=True)
class CreationOutcome:
    creation: Creation
    essence_cost: int
    essence_remaining: int


def upgraded_cost(base_cost: int, upgrades: int) -> int:
    """Apply the 10% discount once per upgrade level, flooring each step, never below 1."""
    cost = base_cost
    for _ in range(upgrades):
        cost = max(1, math.floor(cost * UPGRADE_COST_FACTOR))
    return cost


class ForgerService:
    def __init__(
        self,
        store: StateStore,
        *,
        forger_tools_repo: ForgerToolsRepository,
        nexus_states_repo: NexusStatesRepository,
        regions_repo: RegionsRepository,
        rng: RNG,
        quest_service: QuestService | None = None,
    ) -> None:
        self._store = store
        self._tools_repo = forger_tools_repo
        self._nexus_repo = nexus_states_repo
        self._regions_repo = regions_repo
        self._rng = rng
        self._quest_service = quest_service

    # ------------------------------------------------------------------ Views
    def is_forger(self) -> bool:
        return self._store.player.role == FORGER_ROLE

    def essence(self) -> int:
        return self._store.forger.essence

    def tool_status(self, tool_id: str) -> ToolStatus | None:
        if not self._tools_repo.has(tool_id):
            return None
        tool = self._tools_repo.get(tool_id)
        upgrades = self._store.forger.tool_upgrades.get(tool_id, 0)
        return ToolStatus(
            tool=tool,
            power_level=tool.power_level + upgrades,
            essence_cost=upgraded_cost(tool.essence_cost, upgrades),
        )

    def available_tools(self) -> List[ToolStatus]:
        """Every tool with its upgraded power and cost; empty for non-forgers."""
        if not self.is_forger():
            return []
        statuses = (self.tool_status(tool.id) for tool in self._tools_repo.all())
        return [status for status in statuses if status is not None]

    def interventions(self) -> List[Intervention]:
        return list(self._store.forger.interventions)

    # ------------------------------------------------------------------ Tools
    def use_tool(self, tool_id: str, target: str = "nexus") -> OperationResult[ToolUseOutcome]:
        status = self.tool_status(tool_id)
        if status is None:
            return OperationResult.not_found("Tool not found.", "tool_not_found")
        if not self.is_forger():
            return OperationResult.precondition_failed("Only a Forger can use this tool.", "forger_only")
        shortfall = self._check_essence(status.essence_cost)
        if shortfall is not None:
            return shortfall

        self._store.adjust_forger_essence(-status.essence_cost)
        report = self._apply_effect(status.tool, target)
        time = self._store.world.time
        self._store.record_intervention(
            Intervention(
                tool_id=tool_id,
                tool_name=status.tool.name,
                target=target,
                message=report.message,
                day=time.day,
            )
        )
        if self._quest_service is not None:
            self._quest_service.track_quest_progress("forger_tool_used", {"tool_id": tool_id})
        outcome = ToolUseOutcome(
            tool_id=tool_id,
            target=target,
            essence_cost=status.essence_cost,
            essence_remaining=self._store.forger.essence,
            effect=report,
        )
        return OperationResult.ok(f"Used {status.tool.name}: {report.message}", outcome)

    def _apply_effect(self, tool: ForgerToolDef, target: str) -> ToolEffectReport:
        match tool.effect:
            case AnalysisEffect():
                return self._analyze(target)
            case InterventionEffect(corruption_reduction=reduction, purity_achievement_id=achievement_id):
                if target != "nexus":
                    return ToolEffectReport("The intervention finds nothing to stabilize.")
                level = self._store.set_corruption_level(self._store.world.corruption_level - reduction)
                if level == 0.0:
                    self._store.add_achievement(
                        achievement_id,
                        "Pure Nexus",
                        description="Purified the nexus completely.",
                        rarity="rare",
                    )
                return ToolEffectReport(
                    f"The nexus steadies. Corruption reduced by {reduction:.0%}.",
                    {"corruption_reduced": reduction, "corruption_level": level},
                )
            case PurificationEffect(corruption_reduction=reduction, experience=experience):
                region_id = self._store.player.location
                region = self._store.world.regions.get(region_id)
                if region is None:
                    return ToolEffectReport("There is nothing here to purify.")
                updated = self._store.update_region(region_id, corruption_level=region.corruption_level - reduction)
                self._store.add_player_experience(experience)
                return ToolEffectReport(
                    f"{region.name} is purified. Corruption reduced by {reduction:.0%}.",
                    {
                        "region_id": region_id,
                        "corruption_reduced": reduction,
                        "corruption_level": updated.corruption_level if updated is not None else 0.0,
                    },
                )
            case CreationEffect(essence_gain=gain, achievement_id=achievement_id):
                total = self._store.adjust_forger_essence(gain)
                self._record_creation("dimensional", f"{tool.name} creation", self._store.player.location)
                self._store.add_achievement(
                    achievement_id,
                    "First Creation",
                    description="Performed a first creation with a dimensional tool.",
                    rarity="uncommon",
                )
                return ToolEffectReport(
                    "Creation succeeds! Creative energy flows back to you.",
                    {"essence_gained": gain, "essence_total": total},
                )
            case TemporalEffect(minutes=minutes, experience=experience):
                self._store.advance_time(minutes)
                self._store.add_player_experience(experience)
                return ToolEffectReport(
                    f"The flow of time bends. Time leaps forward {minutes // 60} hours.",
                    {"time_advanced": minutes},
                )
        raise InvariantViolation(f"Tool '{tool.id}' has an unsupported effect.")

    def _analyze(self, target: str) -> ToolEffectReport:
        world = self._store.world
        if target == "nexus":
            nexus_id = world.nexus_state if self._nexus_repo.has(world.nexus_state) else DEFAULT_NEXUS_STATE_ID
            nexus = self._nexus_repo.get(nexus_id)
            return ToolEffectReport(
                f"Nexus analysis: {nexus.name} - {nexus.description}",
                {"stability": nexus.stability_modifier, "corruption": world.corruption_level},
            )
        if target == "region":
            region_id = self._store.player.location
            region = self._regions_repo.get(region_id)
            state = world.regions.get(region_id)
            return ToolEffectReport(
                f"Region analysis: {region.name}",
                {
                    "threat_level": region.threat_level,
                    "corruption_level": state.corruption_level if state is not None else 0.0,
                    "resources": list(region.resources),
                },
            )
        return ToolEffectReport("Analysis complete.")

    def upgrade_tool(self, tool_id: str) -> OperationResult[ToolStatus]:
        if not self._tools_repo.has(tool_id):
            return OperationResult.not_found("Tool not found.", "tool_not_found")
        self._store.record_tool_upgrade(tool_id)
        status = self.tool_status(tool_id)
        assert status is not None
        return OperationResult.ok(f"{status.tool.name} upgraded to power level {status.power_level}.", status)

    # -------------------------------------------------------------- Abilities
    def generate_essence(self, amount: int) -> OperationResult[int]:
        if amount <= 0:
            raise InvariantViolation("Generated essence must be positive.")
        total = self._store.adjust_forger_essence(amount)
        return OperationResult.ok(f"Gained {amount} forger essence.", total)

    def create_landmark(self, name: str, region_id: str, description: str = "") -> OperationResult[CreationOutcome]:
        if not self.is_forger():
            return OperationResult.precondition_failed("Only a Forger can create landmarks.", "forger_only")
        if region_id not in self._store.world.regions:
            return OperationResult.not_found("Region not found.", "region_not_found")
        if region_id != self._store.player.location:
            return OperationResult.precondition_failed(
                "You must be in that region to create a landmark there.", "wrong_region"
            )
        shortfall = self._check_essence(LANDMARK_COST)
        if shortfall is not None:
            return shortfall

        remaining = self._store.adjust_forger_essence(-LANDMARK_COST)
        creation = self._record_creation("landmark", name, region_id)
        self._store.add_journal_entry(
            f"Landmark Created: {name}",
            description or f"A new landmark rises in {self._store.world.regions[region_id].name}.",
            category="Forger",
            icon="landmark",
        )
        self._store.add_achievement(
            "landmark_creator",
            "Landmark Creator",
            description="Created a new landmark in the world.",
            rarity="rare",
        )
        return OperationResult.ok(
            f'Landmark "{name}" created!',
            CreationOutcome(creation=creation, essence_cost=LANDMARK_COST, essence_remaining=remaining),
        )

    def manipulate_region(
        self,
        region_id: str,
        *,
        population: int | None = None,
        corruption_level: float | None = None,
    ) -> OperationResult[int]:
        """Rewrite a region's population and/or corruption for a flat essence cost."""
        if not self.is_forger():
            return OperationResult.precondition_failed("Only a Forger can manipulate regions.", "forger_only")
        if region_id not in self._store.world.regions:
            return OperationResult.not_found("Region not found.", "region_not_found")
        shortfall = self._check_essence(REGION_MANIPULATION_COST)
        if shortfall is not None:
            return shortfall

        remaining = self._store.adjust_forger_essence(-REGION_MANIPULATION_COST)
        changes: Dict[str, object] = {}
        if population is not None:
            changes["population"] = population
        if corruption_level is not None:
            changes["corruption_level"] = corruption_level
        if changes:
            self._store.update_region(region_id, **changes)
        return OperationResult.ok(f"Region {region_id} reshaped.", remaining)

    def _check_essence(self, cost: int) -> OperationResult | None:
        available = self._store.forger.essence
        if available < cost:
            return OperationResult.precondition_failed(
                f"Not enough forger essence. Need {cost}, have {available}.",
                "insufficient_forger_essence",
            )
        return None

    def _record_creation(self, kind: str, name: str, region_id: str | None) -> Creation:
        taken = {creation.creation_id for creation in self._store.forger.creations}
        creation = Creation(
            creation_id=make_instance_id("creation", self._rng, taken),
            kind=kind,
            name=name,
            region_id=region_id,
            day=self._store.world.time.day,
        )
        self._store.record_creation(creation)
        return creation
