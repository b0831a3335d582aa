"""Shared type aliases for the core and domain layers."""
from typing import Literal

PlayerRole = Literal["wanderer", "forger"]
QuestStatus = Literal["active", "completed", "failed"]
CombatStatus = Literal["active", "player_win", "enemy_win", "fled"]
CombatTurn = Literal["player", "enemy"]
Season = Literal["spring", "summer", "autumn", "winter"]

SEASONS: tuple[Season, ...] = ("spring", "summer", "autumn", "winter")
PLAYER_ROLES: tuple[PlayerRole, ...] = ("wanderer", "forger")

__all__ = [
    "CombatStatus",
    "CombatTurn",
    "PLAYER_ROLES",
    "PlayerRole",
    "QuestStatus",
    "SEASONS",
    "Season",
]
