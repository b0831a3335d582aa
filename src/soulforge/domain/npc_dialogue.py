"""Canned NPC lines keyed by role, personality and mood."""
from __future__ import annotations

from typing import Dict, List, Tuple

from soulforge.core.rng import RNG
from soulforge.domain.state import NpcState

# Interaction type -> relationship change with the player.
INTERACTION_EFFECTS: Dict[str, int] = {
    "greet": 1,
    "trade": 2,
    "quest": 3,
    "chat": 1,
    "help": 2,
}
FRIEND_THRESHOLD = 50
ACQUAINTANCE_THRESHOLD = 25

GENERIC_GREETINGS: Tuple[str, ...] = (
    "Well met, adventurer. How fares your journey?",
    "Greetings! It's not often we see new faces in these parts.",
    "Ah, welcome! You look like someone with stories to tell.",
    "Good day to you! How may I be of service?",
)

ROLE_GREETINGS: Dict[str, str] = {
    "merchant": "Welcome to my shop! See anything that catches your eye?",
    "guard": "Greetings, citizen. All seems well in our fair settlement.",
    "craftsman": "Ah, a new face! Do you have need of my services?",
    "scholar": "Welcome, seeker of knowledge. What would you like to discuss?",
    "priest": "Peace be with you, child. May the divine light your path.",
    "farmer": "Good day! Fresh produce available if you're hungry.",
    "child": "Hi there! Want to play a game?",
    "elder": "Welcome, young one. Come, sit and listen to an old tale.",
}

PERSONALITY_LINES: Dict[str, Tuple[str, ...]] = {
    "optimistic": (
        "The future looks bright, doesn't it?",
        "I always believe that good things are just around the corner.",
    ),
    "pessimistic": (
        "Things seem to be getting worse, if you ask me.",
        "Hope is a luxury we can't always afford.",
    ),
    "curious": (
        "Tell me, where have you traveled recently?",
        "What fascinating things have you seen in your journeys?",
    ),
    "cautious": (
        "It's important to be careful in these uncertain times.",
        "One can never be too careful, especially with strangers.",
    ),
}

MOOD_LINES: Dict[str, Tuple[str, ...]] = {
    "happy": ("I haven't felt this good in ages!", "Life is truly wonderful when you stop to appreciate it."),
    "sad": ("Some days it feels like nothing goes right.", "I've been feeling a bit down lately."),
    "angry": ("I'm not in the mood for idle chatter.", "I'd rather be left alone right now."),
    "excited": ("I can barely contain my excitement!", "Something wonderful is about to happen, I just know it!"),
}

ROLE_LINES: Dict[str, Tuple[str, ...]] = {
    "merchant": ("Business has been good lately, thanks for asking.", "The trade routes have been stable."),
    "guard": ("Things have been quiet, which is how we like it.", "Stay out of trouble and we'll get along fine."),
    "craftsman": ("I'm working on something special right now.", "I've been perfecting a new technique."),
    "scholar": ("I've made a fascinating discovery in my research.", "Knowledge is the greatest treasure of all."),
    "priest": ("The divine has been especially present lately.", "I've been helping many souls find peace."),
    "farmer": ("The crops are coming along nicely this season.", "Weather's been cooperating, thankfully."),
    "child": ("I found the coolest thing today!", "Can you teach me something new?"),
    "elder": ("In my long years, I've seen many changes.", "There's wisdom in every experience, young one."),
}

HELP_LINES: Dict[str, str] = {
    "merchant": "I can offer you goods and information about trade routes.",
    "guard": "I can tell you about safety concerns and wanted criminals.",
    "craftsman": "I can repair your equipment or craft special items.",
    "scholar": "I can share knowledge and research findings.",
    "priest": "I can heal your wounds and provide spiritual guidance.",
    "farmer": "I can sell you food and tell you about the land.",
    "child": "I might know secret places adults don't!",
    "elder": "I can share wisdom from my many years of experience.",
}


def greeting(npc: NpcState, player_name: str, relationship: int, rng: RNG) -> str:
    if relationship > FRIEND_THRESHOLD:
        return f"Ah, {player_name}! Good to see you again. How have you been?"
    if relationship > ACQUAINTANCE_THRESHOLD:
        return f"Hello again, {player_name}. What brings you back?"
    if npc.role in ROLE_GREETINGS:
        return ROLE_GREETINGS[npc.role]
    return rng.choice(GENERIC_GREETINGS)


def trade_line(npc: NpcState) -> str:
    if npc.role != "merchant":
        return f'{npc.name} chuckles. "I\'m afraid I\'m not a merchant, but perhaps we can trade stories instead?"'
    return "Ah, a customer! I have many fine wares. What are you looking for today?"


def quest_line(npc: NpcState, region_corruption: float) -> str:
    if region_corruption > 0.2:
        return (
            "Actually, now that you mention it, a creeping corruption has been spreading around here. "
            "Think you could help?"
        )
    return f'{npc.name} thinks for a moment. "I don\'t have any specific tasks, but there\'s always work to be found."'


def chat_line(npc: NpcState, rng: RNG) -> str:
    """Pick from every line matching the NPC's personality, current mood and role."""
    lines: List[str] = []
    for trait in npc.personality:
        lines.extend(PERSONALITY_LINES.get(trait, ()))
    lines.extend(MOOD_LINES.get(npc.mood, ()))
    lines.extend(ROLE_LINES.get(npc.role, ()))
    if not lines:
        return "It's a fine day, isn't it?"
    return rng.choice(lines)


def help_line(npc: NpcState) -> str:
    return HELP_LINES.get(npc.role, f'{npc.name} considers your request. "I\'ll do what I can to help."')
