"""Repository for quest chains."""
from __future__ import annotations

from typing import Dict

from soulforge.data.errors import DataReferenceError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.data.repositories.quests_repo import QuestsRepository
from soulforge.domain.defs import QuestChainDef


class QuestChainsRepository(RepositoryBase[QuestChainDef]):
    """Loads ordered quest chains; every member must be a known quest."""

    def __init__(self, *, quests_repo: QuestsRepository, base_path=None) -> None:
        super().__init__("quest_chains.json", base_path)
        self._quests_repo = quests_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, QuestChainDef]:
        chains: Dict[str, QuestChainDef] = {}
        for chain_id, payload in raw.items():
            context = f"quest chain '{chain_id}'"
            data = self._require_mapping(payload, context)
            self._assert_allowed_fields(data, {"name", "description", "quests"}, set(), context)
            quest_ids = self._require_str_list(data["quests"], f"{context} quests")
            for quest_id in quest_ids:
                if not self._quests_repo.has(quest_id):
                    raise DataReferenceError(f"{context} references unknown quest '{quest_id}'.")
            chains[chain_id] = QuestChainDef(
                chain_id=chain_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                quest_ids=tuple(quest_ids),
            )
        return chains
