"""Session configuration persistence."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "SoulforgeSaga"
        return Path.home() / "SoulforgeSaga"
    return Path.home() / ".config" / "soulforge_saga"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


@dataclass(slots=True)
class SessionConfig:
    """Scheduler intervals are measured in ticks."""

    npc_activity_interval: int = 60
    npc_mood_interval: int = 120
    npc_event_interval: int = 180
    world_step_interval: int = 1
    reflection_interval: int = 30
    emotion_drift_interval: int = 5
    autosave_interval: int = 300
    autosave_enabled: bool = True
    save_dir: str | None = None

    def resolved_save_dir(self) -> Path:
        return Path(self.save_dir) if self.save_dir else get_save_dir()


_INTERVAL_FIELDS = tuple(item.name for item in fields(SessionConfig) if item.name.endswith("_interval"))


def _normalize(raw: dict) -> SessionConfig:
    defaults = SessionConfig()
    config = SessionConfig()
    for name in _INTERVAL_FIELDS:
        value = raw.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            setattr(config, name, value)
        else:
            setattr(config, name, getattr(defaults, name))
    autosave = raw.get("autosave_enabled")
    config.autosave_enabled = autosave if isinstance(autosave, bool) else defaults.autosave_enabled
    save_dir = raw.get("save_dir")
    config.save_dir = save_dir if isinstance(save_dir, str) and save_dir else None
    return config


def load_config(path: Path | None = None) -> SessionConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return SessionConfig()
    except (OSError, ValueError):
        return SessionConfig()
    if not isinstance(raw, dict):
        return SessionConfig()
    return _normalize(raw)


def save_config(config: SessionConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
