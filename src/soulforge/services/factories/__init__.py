"""Factory helpers for runtime entities."""

from .game_factory import create_new_game
from .id_factory import make_instance_id
from .item_factory import copy_item_instance, create_item_instance
from .npc_factory import create_npc

__all__ = [
    "copy_item_instance",
    "create_item_instance",
    "create_new_game",
    "create_npc",
    "make_instance_id",
]
