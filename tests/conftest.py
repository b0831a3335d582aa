from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from soulforge.config import SessionConfig
from soulforge.core.rng import RNG
from soulforge.core.types import PlayerRole
from soulforge.services.game_session import GameSession, Repositories, build_repositories


@pytest.fixture(scope="session")
def repos() -> Repositories:
    return build_repositories()


@pytest.fixture
def make_session(repos: Repositories, tmp_path: Path) -> Callable[..., GameSession]:
    """Build an unstarted session whose saves land under ``tmp_path``."""

    def factory(seed: int = 42, role: PlayerRole = "wanderer", rng: RNG | None = None) -> GameSession:
        config = SessionConfig(save_dir=str(tmp_path / "saves"))
        return GameSession(rng or RNG(seed), repositories=repos, config=config, role=role, player_name="Tester")

    return factory
