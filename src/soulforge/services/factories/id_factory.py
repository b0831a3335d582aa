"""Utilities for creating deterministic instance identifiers."""
from __future__ import annotations

from typing import Container

from soulforge.core.rng import RNG


def make_instance_id(prefix: str, rng: RNG, taken: Container[str] = ()) -> str:
    """Generate a deterministic identifier using the provided RNG, avoiding ``taken``."""
    while True:
        suffix = rng.randint(100000, 999999)
        candidate = f"{prefix}_{suffix}"
        if candidate not in taken:
            return candidate
