from pathlib import Path

from soulforge.config import SessionConfig
from soulforge.core.rng import RNG
from soulforge.main import main
from soulforge.services.game_session import AUTOSAVE_NAME, GameSession


def test_start_populates_and_registers_tasks(make_session) -> None:
    session = make_session()

    session.start()

    names = [task.name for task in session.scheduler.tasks()]
    assert names == [
        "npc_activities",
        "npc_moods",
        "npc_events",
        "world_step",
        "consciousness_reflection",
        "consciousness_emotion",
        "autosave",
    ]
    assert session.store.get_state().npcs
    assert session.consciousness.awake


def test_autosave_can_be_disabled(repos, tmp_path: Path) -> None:
    config = SessionConfig(autosave_enabled=False, save_dir=str(tmp_path))
    session = GameSession(RNG(1), repositories=repos, config=config)

    session.start()

    assert "autosave" not in {task.name for task in session.scheduler.tasks()}


def test_run_advances_one_minute_per_tick(make_session) -> None:
    session = make_session()
    session.start()

    session.run(90)

    time = session.store.world.time
    assert (time.day, time.hour, time.minute) == (1, 13, 30)
    assert session.scheduler.current_tick == 90


def test_same_seed_gives_same_world(make_session) -> None:
    first = make_session(seed=99)
    second = make_session(seed=99)
    for session in (first, second):
        session.start()
        session.run(240)

    assert first.store.get_state() == second.store.get_state()


def test_autosave_writes_slot(make_session) -> None:
    session = make_session()
    session.start()

    session.run(session.config.autosave_interval)

    saves = session.saves.list_saves()
    assert [entry.name for entry in saves] == [AUTOSAVE_NAME]


def test_save_and_load_restore_state(make_session) -> None:
    session = make_session()
    session.start()
    key = session.save("Before Travel").payload
    session.store.set_location("TheShatteredPeaks")

    result = session.load(key)

    assert result.success
    assert session.store.player.location == "TheCentralNexus"
    assert session.consciousness.memories[-1].player_location == "TheCentralNexus"
    assert session.load("missing").reason == "save_not_found"


def test_main_prints_summary(tmp_path: Path, capsys) -> None:
    main(["--seed", "7", "--ticks", "30", "--no-autosave", "--config", str(tmp_path / "config.json")])

    out = capsys.readouterr().out
    assert "=== Soulforge Saga: day 1, 12:30 (spring, year 1) ===" in out
    assert "Nexus: " in out
