"""Global engine configuration (exit synonyms, reward defaults, seeding)."""

import json
from pathlib import Path
from typing import Any

from puzzle_engine.matching import DEFAULT_EXIT_SYNONYMS

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "exit_synonyms": DEFAULT_EXIT_SYNONYMS,
    "default_skill_boost": 1,
    "auto_activate_root_puzzles": True,
}


def _config_path() -> Path:
    return data_dir() / "config.json"


def _valid_boost(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = {
        "exit_synonyms": json.loads(json.dumps(_CONFIG_DEFAULTS["exit_synonyms"])),
        "default_skill_boost": _CONFIG_DEFAULTS["default_skill_boost"],
        "auto_activate_root_puzzles": _CONFIG_DEFAULTS["auto_activate_root_puzzles"],
    }
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if isinstance(stored.get("exit_synonyms"), dict):
            config["exit_synonyms"] = stored["exit_synonyms"]
        if _valid_boost(stored.get("default_skill_boost")):
            config["default_skill_boost"] = stored["default_skill_boost"]
        if "auto_activate_root_puzzles" in stored:
            config["auto_activate_root_puzzles"] = bool(stored["auto_activate_root_puzzles"])
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config.

    exit_synonyms is replaced wholesale, scalars are overwritten, unknown
    keys are ignored. default_skill_boost below 1 is rejected.
    """
    config = get_config()
    if isinstance(fields.get("exit_synonyms"), dict):
        config["exit_synonyms"] = {
            str(word).lower(): [str(s).lower() for s in synonyms]
            for word, synonyms in fields["exit_synonyms"].items()
            if isinstance(synonyms, list)
        }
    if _valid_boost(fields.get("default_skill_boost")):
        config["default_skill_boost"] = fields["default_skill_boost"]
    if "auto_activate_root_puzzles" in fields:
        config["auto_activate_root_puzzles"] = bool(fields["auto_activate_root_puzzles"])
    _config_path().write_text(json.dumps(config, indent=2))
    return config
