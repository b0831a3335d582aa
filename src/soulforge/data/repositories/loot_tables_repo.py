"""Repository for creature loot tables."""
from __future__ import annotations

from typing import Dict, Tuple

from soulforge.data.errors import DataValidationError
from soulforge.data.repositories.base import RepositoryBase
from soulforge.domain.defs import LootDropDef, LootTableDef


class LootTablesRepository(RepositoryBase[LootTableDef]):
    """Loot tables are stored as a list; each entry carries its own ``id``."""

    container = list

    def __init__(self, base_path=None) -> None:
        super().__init__("loot_tables.json", base_path)

    def _build(self, raw: list[object]) -> Dict[str, LootTableDef]:
        tables: Dict[str, LootTableDef] = {}
        for index, entry in enumerate(raw):
            context = f"loot_tables[{index}]"
            data = self._require_mapping(entry, context)
            self._assert_allowed_fields(data, {"id", "drops"}, {"name", "currency"}, context)
            table_id = self._require_str(data["id"], f"{context}.id")
            if table_id in tables:
                raise DataValidationError(f"{context}.id '{table_id}' is duplicated.")
            currency_min, currency_max = self._parse_currency(data.get("currency"), context)
            tables[table_id] = LootTableDef(
                id=table_id,
                name=self._require_str(data.get("name", table_id), f"{context}.name"),
                drops=[
                    self._parse_drop(drop, f"{context}.drops[{drop_index}]")
                    for drop_index, drop in enumerate(self._require_list(data["drops"], f"{context}.drops"))
                ],
                currency_min=currency_min,
                currency_max=currency_max,
            )
        return tables

    def _parse_drop(self, value: object, context: str) -> LootDropDef:
        data = self._require_mapping(value, context)
        self._assert_allowed_fields(data, {"item_id", "chance"}, {"min_qty", "max_qty"}, context)
        chance = self._require_float(data["chance"], f"{context}.chance")
        if not 0.0 <= chance <= 1.0:
            raise DataValidationError(f"{context}.chance must be between 0 and 1.")
        min_qty = self._require_int(data.get("min_qty", 1), f"{context}.min_qty")
        max_qty = self._require_int(data.get("max_qty", min_qty), f"{context}.max_qty")
        if min_qty <= 0 or max_qty < min_qty:
            raise DataValidationError(f"{context} quantity range invalid.")
        return LootDropDef(
            item_id=self._require_str(data["item_id"], f"{context}.item_id"),
            chance=chance,
            min_qty=min_qty,
            max_qty=max_qty,
        )

    def _parse_currency(self, value: object, context: str) -> Tuple[int, int]:
        if value is None:
            return 0, 0
        data = self._require_mapping(value, f"{context}.currency")
        low = self._require_int(data.get("min", 0), f"{context}.currency.min")
        high = self._require_int(data.get("max", low), f"{context}.currency.max")
        if low < 0 or high < low:
            raise DataValidationError(f"{context}.currency range invalid.")
        return low, high
