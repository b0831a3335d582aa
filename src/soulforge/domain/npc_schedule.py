"""Schedule lookup and mood tables for simulated NPCs."""
from __future__ import annotations

from typing import Dict, Sequence, Tuple

from soulforge.domain.defs import ScheduleEntryDef

ACTIVITY_MOODS: Dict[str, str] = {
    "open_shop": "businesslike",
    "lunch_break": "relaxed",
    "close_shop": "tired",
    "socialize": "happy",
    "rest": "peaceful",
    "patrol_start": "alert",
    "shift_change": "relieved",
    "evening_patrol": "vigilant",
    "night_watch": "watchful",
    "work_start": "focused",
    "work_end": "satisfied",
    "research_start": "curious",
    "teach": "helpful",
    "study": "concentrated",
    "prayer": "reverent",
    "service": "devout",
    "heal": "compassionate",
    "visit_sick": "concerned",
    "evening_service": "peaceful",
    "farm_work": "industrious",
    "farm_end": "accomplished",
    "family_time": "content",
    "play": "joyful",
    "school": "attentive",
    "bedtime": "sleepy",
    "morning_walk": "refreshed",
    "storytelling": "entertaining",
    "reflection": "thoughtful",
}

RANDOM_MOODS: Tuple[str, ...] = ("happy", "sad", "angry", "excited", "bored", "anxious", "calm", "curious")

LIFE_EVENTS: Dict[str, str] = {
    "found_item": "Found a mysterious object while going about their day",
    "lost_item": "Realized they've misplaced something important",
    "received_gift": "Received an unexpected present from someone",
    "had_dream": "Had a vivid dream that felt significant",
    "met_stranger": "Encountered an unfamiliar face in town",
    "remembered_past": "Recalled a long-forgotten memory",
    "felt_lonely": "Felt isolated despite being surrounded by people",
    "felt_grateful": "Experienced deep appreciation for their life",
}

LIFE_EVENT_MOODS: Dict[str, str] = {
    "found_item": "curious",
    "lost_item": "worried",
    "received_gift": "happy",
    "had_dream": "thoughtful",
    "met_stranger": "cautious",
    "remembered_past": "nostalgic",
    "felt_lonely": "sad",
    "felt_grateful": "content",
}


def current_entry(schedule: Sequence[ScheduleEntryDef], hour: int) -> ScheduleEntryDef | None:
    """Latest entry whose hour is at or before ``hour``; the first entry when none is.

    Entries are compared from the highest hour down so an unsorted schedule
    still resolves to the most recent slot of the day.
    """
    if not schedule:
        return None
    for entry in sorted(schedule, key=lambda item: item.hour, reverse=True):
        if entry.hour <= hour:
            return entry
    return schedule[0]


def mood_for_activity(activity: str) -> str | None:
    return ACTIVITY_MOODS.get(activity)
