"""Entry-point for running a headless simulation session."""
from __future__ import annotations

import argparse
import logging
import secrets
from pathlib import Path
from typing import List, Sequence

from soulforge.config import load_config
from soulforge.core.rng import RNG
from soulforge.core.types import PLAYER_ROLES
from soulforge.services.game_session import GameSession

_MAX_RANDOM_SEED = 2**31 - 1
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="soulforge-sim", description="Run the Soulforge Saga world simulation.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed; random when omitted")
    parser.add_argument("--ticks", type=int, default=60, help="number of scheduler ticks (game minutes) to run")
    parser.add_argument("--name", default="Wanderer", help="player name")
    parser.add_argument("--role", choices=PLAYER_ROLES, default="wanderer")
    parser.add_argument("--config", type=Path, default=None, help="path to a session config JSON file")
    parser.add_argument("--no-autosave", action="store_true", help="disable the autosave task")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def format_journal(session: GameSession) -> List[str]:
    lines = []
    for entry in session.store.player.journal:
        lines.append(f"[Day {entry.day} {entry.hour:02d}:{entry.minute:02d}] ({entry.category}) {entry.title}")
        lines.append(f"    {entry.content}")
    return lines


def main(argv: Sequence[str] | None = None) -> None:
    """Run a seeded session for the requested number of ticks and print the journal."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    if args.ticks < 0:
        raise SystemExit("--ticks must not be negative")
    config = load_config(args.config)
    if args.no_autosave:
        config.autosave_enabled = False
    seed = args.seed if args.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED) + 1
    logger.info("Starting session with seed %d", seed)
    session = GameSession(RNG(seed), config=config, player_name=args.name, role=args.role)
    session.start()
    session.run(args.ticks)

    world = session.store.world
    time = world.time
    print(f"=== Soulforge Saga: day {time.day}, {time.hour:02d}:{time.minute:02d} ({time.season}, year {time.year}) ===")
    npc_count = len(session.store.get_state().npcs)
    print(f"Nexus: {world.nexus_state}  Corruption: {world.corruption_level:.3f}  NPCs: {npc_count}")
    for line in format_journal(session):
        print(line)


if __name__ == "__main__":
    main()
